"""Analytics commands: reports, export, realtime dashboard, event tracking, dashboards, funnels, segments.

Registered as ``analytics`` and as the short ``stats``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import click
from rich.markup import escape
from rich.table import Table

from ..config import coerce_value
from ..polling import REALTIME_INTERVAL, refresh_every
from ..services import AnalyticsService
from ._common import authenticated, console, detail, emit, format_option, heading, number, signed


def pick(data: Any, path: str) -> Any:
    """Follow a dotted path through nested dicts; None when any step is missing."""
    for part in path.split("."):
        if not isinstance(data, dict):
            return None
        data = data.get(part)
    return data


def _section(title: str) -> None:
    console.print(f"\n  [cyan]{escape(title)}[/]")


def _parse_properties(ctx, param, values) -> dict:
    props = {}
    for item in values:
        key, sep, raw = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {item!r}")
        props[key] = coerce_value(raw)
    return props


_period = click.option("-p", "--period", default="week", show_default=True, help="day, week, or month.")
_game = click.option("-g", "--game", "game_id", default=None, help="Filter by game ID.")


def register_analytics_commands(main: click.Group) -> None:
    """Register the analytics command group and its ``stats`` alias."""

    @click.group()
    def analytics():
        """Player, revenue, and event analytics."""

    main.add_command(analytics, "analytics")
    main.add_command(analytics, "stats")

    def report(state, kind, period, game_id, event_type=None):
        return state.service(AnalyticsService).get_report(kind, period, game_id, event_type)

    @analytics.command("overview")
    @_period
    @_game
    @format_option()
    @authenticated
    def analytics_overview(state, period, game_id, fmt):
        """Players, revenue, engagement, and growth at a glance."""
        o = report(state, "overview", period, game_id)
        if fmt != "table":
            emit(o, fmt)
            return

        heading(f"Analytics Overview ({period})")
        _section("Players:")
        detail("Total Active Users", number(pick(o, "players.total")), indent=4)
        detail("New Users", number(pick(o, "players.new")), indent=4)
        detail("Returning Users", number(pick(o, "players.returning")), indent=4)
        _section("Revenue:")
        detail("Total Revenue", f"${number(pick(o, 'revenue.total'))}", indent=4)
        detail("In-App Purchases", f"${number(pick(o, 'revenue.iap'))}", indent=4)
        detail("Ad Revenue", f"${number(pick(o, 'revenue.ads'))}", indent=4)
        _section("Engagement:")
        detail("Average Session Duration", f"{pick(o, 'engagement.avgSessionDuration')} min", indent=4)
        detail("Sessions per User", pick(o, "engagement.sessionsPerUser"), indent=4)
        detail("Retention Rate", f"{pick(o, 'engagement.retentionRate')}%", indent=4)
        _section("Growth:")
        detail("User Growth", f"{signed(pick(o, 'growth.userGrowth'))}%", indent=4)
        detail("Revenue Growth", f"{signed(pick(o, 'growth.revenueGrowth'))}%", indent=4)
        console.print()

    @analytics.command("players")
    @_period
    @_game
    @format_option()
    @authenticated
    def analytics_players(state, period, game_id, fmt):
        """Acquisition, demographics, and player behavior."""
        p = report(state, "players", period, game_id)
        if fmt != "table":
            emit(p, fmt)
            return

        heading(f"Player Analytics ({period})")
        _section("User Acquisition:")
        detail("New Users", number(pick(p, "acquisition.newUsers")), indent=4)
        detail("Organic", number(pick(p, "acquisition.organic")), indent=4)
        detail("Paid", number(pick(p, "acquisition.paid")), indent=4)
        _section("Demographics:")
        detail("Average Age", f"{pick(p, 'demographics.avgAge')} years", indent=4)
        for country in pick(p, "demographics.topCountries") or []:
            detail(str(country.get("name")), f"{country.get('percentage')}%", indent=6)
        _section("Behavior:")
        detail("Daily Active Users", number(pick(p, "behavior.dau")), indent=4)
        detail("Weekly Active Users", number(pick(p, "behavior.wau")), indent=4)
        detail("Monthly Active Users", number(pick(p, "behavior.mau")), indent=4)
        detail("Average Playtime", f"{pick(p, 'behavior.avgPlaytime')} min/day", indent=4)
        console.print()

    @analytics.command("revenue")
    @click.option("-p", "--period", default="month", show_default=True, help="day, week, or month.")
    @_game
    @format_option()
    @authenticated
    def analytics_revenue(state, period, game_id, fmt):
        """Revenue by source, per-user metrics, and top products."""
        r = report(state, "revenue", period, game_id)
        if fmt != "table":
            emit(r, fmt)
            return

        heading(f"Revenue Analytics ({period})")
        console.print(f"  [cyan]Total Revenue:[/] [green]${number(r.get('total'))}[/]")
        _section("Revenue Sources:")
        for label, key in (
            ("In-App Purchases", "iap"),
            ("Advertisements", "ads"),
            ("Subscriptions", "subscriptions"),
        ):
            amount = number(pick(r, f"sources.{key}"))
            share = pick(r, f"sources.{key}Percentage")
            detail(label, f"${amount} ({share}%)", indent=4)
        _section("Metrics:")
        detail("ARPU", f"${pick(r, 'metrics.arpu')}", indent=4)
        detail("ARPPU", f"${pick(r, 'metrics.arppu')}", indent=4)
        detail("Conversion Rate", f"{pick(r, 'metrics.conversionRate')}%", indent=4)

        products = r.get("topProducts") or []
        if products:
            _section("Top Products:")
            for i, product in enumerate(products, 1):
                detail(f"{i}. {product.get('name')}", f"${number(product.get('revenue'))}", indent=4)
        console.print()

    @analytics.command("events")
    @click.option("-e", "--event", default=None, help="Specific event type.")
    @_period
    @_game
    @format_option()
    @authenticated
    def analytics_events(state, event, period, game_id, fmt):
        """Top events, or the numbers for one event with -e."""
        e = report(state, "events", period, game_id, event)
        if fmt != "table":
            emit(e, fmt)
            return

        heading(f"Event Analytics ({period})")
        if event:
            _section(f"Event: {event}")
            detail("Total Occurrences", number(pick(e, "specific.total")), indent=4)
            detail("Unique Users", number(pick(e, "specific.uniqueUsers")), indent=4)
            detail("Average per User", pick(e, "specific.avgPerUser"), indent=4)
        else:
            _section("Top Events:")
            for i, ev in enumerate(e.get("topEvents") or [], 1):
                detail(f"{i}. {ev.get('name')}", f"{number(ev.get('count'))} occurrences", indent=4)
            _section("Event Categories:")
            for category, count in (e.get("categories") or {}).items():
                detail(category, number(count), indent=4)
        console.print()

    @analytics.command("retention")
    @_period
    @_game
    @format_option()
    @authenticated
    def analytics_retention(state, period, game_id, fmt):
        """Retention rates, cohorts, and churn."""
        r = report(state, "retention", period, game_id)
        if fmt != "table":
            emit(r, fmt)
            return

        heading(f"Retention Analysis ({period})")
        _section("Retention Rates:")
        for day in (1, 7, 30):
            detail(f"Day {day}", f"{r.get(f'day{day}')}%", indent=4)

        cohorts = r.get("cohorts") or []
        if cohorts:
            _section("Cohort Analysis:")
            for c in cohorts:
                detail(str(c.get("period")), f"{c.get('retention')}% ({number(c.get('users'))} users)", indent=4)

        _section("Churn Analysis:")
        detail("Churn Rate", f"{pick(r, 'churn.rate')}%", indent=4)
        for reason in pick(r, "churn.reasons") or []:
            detail(str(reason.get("name")), f"{reason.get('percentage')}%", indent=6)
        console.print()

    @analytics.command("export")
    @click.option("-t", "--type", "data_type", default="players", show_default=True,
                  help="Data type (players, revenue, events).")
    @click.option("-f", "--format", "fmt", type=click.Choice(["csv", "json"]), default="csv", show_default=True)
    @click.option("-p", "--period", default="month", show_default=True, help="day, week, or month.")
    @authenticated
    def analytics_export(state, data_type, fmt, period):
        """Request a server-side export of analytics data."""
        heading("Exporting analytics data...")
        result = state.service(AnalyticsService).export_data(data_type, fmt, period)
        console.print("  [green]Data exported successfully![/]")
        detail("File", result.get("filename"), indent=4)
        detail("Format", fmt.upper(), indent=4)
        detail("Records", number(result.get("recordCount")), indent=4)
        detail("Download URL", result.get("downloadUrl"), indent=4)
        console.print()

    @analytics.command("realtime")
    @_game
    @click.option("--interval", default=REALTIME_INTERVAL, show_default=True, type=click.FloatRange(min=1),
                  help="Seconds between refreshes.")
    @authenticated
    def analytics_realtime(state, game_id, interval):
        """Live dashboard, refreshed until Ctrl+C."""
        service = state.service(AnalyticsService)

        def render() -> None:
            data = service.get_realtime(game_id)
            console.clear()
            heading("Real-time Analytics Dashboard")
            console.print(f"  [dim]Last updated: {datetime.now():%H:%M:%S}  (Ctrl+C to exit)[/]")
            _section("Live Metrics:")
            detail("Active Users", number(data.get("activeUsers")), indent=4)
            detail("Sessions", number(data.get("activeSessions")), indent=4)
            detail("Revenue (Today)", f"${number(data.get('todayRevenue'))}", indent=4)
            _section("Recent Activity (last 5 min):")
            detail("New Users", number(pick(data, "recent.newUsers")), indent=4)
            detail("Events", number(pick(data, "recent.events")), indent=4)
            detail("Purchases", number(pick(data, "recent.purchases")), indent=4)
            pages = data.get("topPages") or []
            if pages:
                _section("Most Active Areas:")
                for i, page in enumerate(pages, 1):
                    detail(f"{i}. {page.get('name')}", f"{number(page.get('users'))} users", indent=4)

        def report_error(exc) -> None:
            console.print(f"  [red]Error updating dashboard:[/] {escape(str(exc))}")

        try:
            refresh_every(render, report_error, interval=interval)
        except KeyboardInterrupt:
            console.print("\n  [yellow]Exiting real-time dashboard...[/]\n")

    @analytics.command("track")
    @click.argument("event")
    @click.option("-P", "--property", "properties", multiple=True, callback=_parse_properties,
                  metavar="KEY=VALUE", help="Event property (repeatable).")
    @authenticated
    def analytics_track(state, event, properties):
        """Record a custom event."""
        state.service(AnalyticsService).track_event(event, properties or None)
        console.print(f'  [green]Event "{escape(event)}" tracked.[/]')

    @analytics.command("dashboards")
    @click.option("--create", "create_name", default=None, metavar="NAME", help="Create an empty dashboard.")
    @format_option()
    @authenticated
    def analytics_dashboards(state, create_name, fmt):
        """List custom dashboards, or create one."""
        service = state.service(AnalyticsService)
        if create_name:
            d = service.create_dashboard(create_name, [])
            console.print("  [green]Dashboard created![/]")
            detail("Dashboard ID", d.get("id"), indent=4)
            detail("URL", d.get("url"), indent=4)
            return

        dashboards = service.list_dashboards()
        if fmt != "table":
            emit(dashboards, fmt)
            return
        if not dashboards:
            console.print("\n  [yellow]No dashboards found.[/]\n")
            return

        table = Table(title="Dashboards")
        table.add_column("Name", style="cyan")
        table.add_column("ID", style="dim")
        table.add_column("Widgets", justify="right")
        for d in dashboards:
            table.add_row(
                escape(str(d.get("name", ""))),
                escape(str(d.get("id", ""))),
                str(len(d.get("widgets") or [])),
            )
        console.print()
        console.print(table)
        console.print()

    @analytics.command("funnel")
    @click.argument("funnel_id")
    @_period
    @authenticated
    def analytics_funnel(state, funnel_id, period):
        """Step-by-step conversion through a funnel."""
        f = state.service(AnalyticsService).get_funnel(funnel_id, period)
        heading(f"Funnel Analysis: {f.get('name') or funnel_id} ({period})")

        table = Table()
        table.add_column("#", justify="right", style="dim")
        table.add_column("Step", style="cyan")
        table.add_column("Users", justify="right")
        table.add_column("Conversion", justify="right")
        for i, step in enumerate(f.get("steps") or [], 1):
            table.add_row(
                str(i),
                escape(str(step.get("name", ""))),
                number(step.get("users")),
                f"{step.get('conversionRate', step.get('conversion', 0))}%",
            )
        console.print(table)
        if f.get("overallConversion") is not None:
            detail("Overall Conversion", f"{f.get('overallConversion')}%")
        console.print()

    @analytics.command("segments")
    @click.argument("segment_type")
    @_period
    @authenticated
    def analytics_segments(state, segment_type, period):
        """Players split by SEGMENT_TYPE (e.g. country, platform, spend)."""
        s = state.service(AnalyticsService).get_segmentation(segment_type, period)
        heading(f"Segmentation: {segment_type} ({period})")

        segments = s.get("segments") or []
        if not segments:
            console.print("  [yellow]No segment data.[/]\n")
            return
        table = Table()
        table.add_column("Segment", style="cyan")
        table.add_column("Users", justify="right")
        table.add_column("Share", justify="right")
        for seg in segments:
            table.add_row(
                escape(str(seg.get("name", ""))),
                number(seg.get("users")),
                f"{seg.get('percentage', 0)}%",
            )
        console.print(table)
        console.print()
