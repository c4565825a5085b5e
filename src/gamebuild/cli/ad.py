"""Ad commands: campaigns, placements, and ad revenue."""

from __future__ import annotations

import click
from rich.markup import escape
from rich.table import Table

from ..prompts import ask_choice, ask_number, ask_text, confirm
from ..services import AdService
from ..services.ad import AD_TYPES
from ._common import (
    CAMPAIGN_STATUS,
    authenticated,
    console,
    detail,
    emit,
    format_date,
    format_option,
    heading,
    number,
    status_label,
)

TYPE_CHOICES = [
    ("banner", "Banner - display banner ads"),
    ("video", "Video - video advertisements"),
    ("interstitial", "Interstitial - full-screen ads"),
    ("rewarded", "Rewarded - reward-based ads"),
]

DURATION_CHOICES = [
    (7, "1 week"),
    (14, "2 weeks"),
    (30, "1 month"),
    (90, "3 months"),
    (None, "Custom"),
]

_budget_type = click.FloatRange(min=0, min_open=True)


def _money(value) -> str:
    return f"${number(value or 0)}"


def register_ad_commands(main: click.Group) -> None:
    """Register the ad command group."""

    @main.group()
    def ad():
        """Run ad campaigns and track ad revenue."""

    @ad.command("create")
    @click.option("-n", "--name", default=None, help="Campaign name.")
    @click.option("-t", "--type", "ad_type", type=click.Choice(AD_TYPES), default=None, help="Ad type.")
    @click.option("-b", "--budget", type=_budget_type, default=None, help="Campaign budget (USD).")
    @authenticated
    def ad_create(state, name, ad_type, budget):
        """Create an advertisement campaign."""
        heading("Creating advertisement campaign...")
        target_audience = duration = None

        if not (name and ad_type and budget):
            if not name:
                name = ask_text("Campaign name")
            if not ad_type:
                ad_type = ask_choice("Advertisement type:", TYPE_CHOICES)
            if not budget:
                budget = ask_number("Campaign budget (USD)")
            target_audience = ask_text("Target audience (optional)", required=False) or None
            duration = ask_choice("Campaign duration:", DURATION_CHOICES)
            if duration is None:
                duration = click.prompt("  Duration in days", type=click.IntRange(min=1))

        c = state.service(AdService).create_campaign(name, ad_type, budget, target_audience, duration)

        console.print("  [green]Advertisement campaign created successfully![/]")
        detail("Campaign ID", c.get("id"), indent=4)
        detail("Name", c.get("name"), indent=4)
        detail("Type", c.get("type"), indent=4)
        detail("Budget", _money(c.get("budget")), indent=4)
        console.print(f"    [dim]Status:[/] {status_label(c.get('status'), CAMPAIGN_STATUS)}")
        console.print()

    @ad.command("list")
    @click.option("-s", "--status", default=None, help="Filter by status (active, paused, completed).")
    @format_option()
    @authenticated
    def ad_list(state, status, fmt):
        """List campaigns."""
        campaigns = state.service(AdService).list_campaigns(status)
        if fmt != "table":
            emit(campaigns, fmt)
            return
        if not campaigns:
            console.print("\n  [yellow]No advertisement campaigns found.[/]\n")
            return

        table = Table(title="Advertisement Campaigns")
        table.add_column("Name", style="cyan")
        table.add_column("ID", style="dim")
        table.add_column("Type")
        table.add_column("Budget", justify="right")
        table.add_column("Status")
        table.add_column("Impressions", justify="right")
        table.add_column("Clicks", justify="right")
        for c in campaigns:
            table.add_row(
                escape(str(c.get("name", ""))),
                escape(str(c.get("id", ""))),
                escape(str(c.get("type", ""))),
                _money(c.get("budget")),
                status_label(c.get("status"), CAMPAIGN_STATUS),
                number(c.get("impressions") or 0),
                number(c.get("clicks") or 0),
            )
        console.print()
        console.print(table)
        console.print()

    @ad.command("info")
    @click.argument("campaign_id")
    @authenticated
    def ad_info(state, campaign_id):
        """Show a campaign and its performance."""
        c = state.service(AdService).get_campaign(campaign_id)

        heading("Campaign Information")
        detail("Name", c.get("name"))
        detail("ID", c.get("id"))
        detail("Type", c.get("type"))
        detail("Budget", _money(c.get("budget")))
        detail("Spent", _money(c.get("spent")))
        console.print(f"  [dim]Status:[/] {status_label(c.get('status'), CAMPAIGN_STATUS)}")
        detail("Created", format_date(c.get("createdAt")))
        if c.get("targetAudience"):
            detail("Target Audience", c.get("targetAudience"))

        console.print("\n  [cyan]Performance:[/]")
        detail("Impressions", number(c.get("impressions") or 0), indent=4)
        detail("Clicks", number(c.get("clicks") or 0), indent=4)
        detail("CTR", f"{c.get('ctr') or 0}%", indent=4)
        detail("Conversions", number(c.get("conversions") or 0), indent=4)
        console.print()

    @ad.command("start")
    @click.argument("campaign_id")
    @authenticated
    def ad_start(state, campaign_id):
        """Start a campaign."""
        state.service(AdService).start_campaign(campaign_id)
        console.print("  [green]Campaign started successfully![/]")

    @ad.command("pause")
    @click.argument("campaign_id")
    @authenticated
    def ad_pause(state, campaign_id):
        """Pause a campaign."""
        state.service(AdService).pause_campaign(campaign_id)
        console.print("  [green]Campaign paused successfully![/]")

    @ad.command("stats")
    @click.argument("campaign_id")
    @click.option("-p", "--period", default="week", show_default=True, help="day, week, or month.")
    @authenticated
    def ad_stats(state, campaign_id, period):
        """Show campaign statistics for a period."""
        s = state.service(AdService).get_campaign_stats(campaign_id, period)

        heading(f"Campaign Statistics ({period})")
        detail("Impressions", number(s.get("impressions")))
        detail("Clicks", number(s.get("clicks")))
        detail("CTR", f"{s.get('ctr') or 0}%")
        detail("Conversions", number(s.get("conversions")))
        detail("Revenue", _money(s.get("revenue")))
        detail("ROI", f"{s.get('roi') or 0}%")
        console.print()

    @ad.command("placements")
    @click.option("-l", "--list", "list_only", is_flag=True, help="List placements (default).")
    @click.option("-c", "--create", is_flag=True, help="Create a placement.")
    @authenticated
    def ad_placements(state, list_only, create):
        """List ad placements, or create one with -c."""
        service = state.service(AdService)

        if create:
            heading("Creating new ad placement...")
            placement = service.create_placement({
                "name": ask_text("Placement name"),
                "type": ask_choice("Placement type:", TYPE_CHOICES),
                "gameId": ask_text("Game ID"),
                "revenueShare": click.prompt("  Revenue share (%)", type=click.FloatRange(0, 100)),
            })
            console.print("  [green]Placement created successfully![/]")
            detail("Placement ID", placement.get("id"), indent=4)
            detail("Name", placement.get("name"), indent=4)
            console.print()
            return

        placements = service.list_placements()
        if not placements:
            console.print("\n  [yellow]No ad placements found.[/]\n")
            return

        table = Table(title="Available Ad Placements")
        table.add_column("Name", style="cyan")
        table.add_column("ID", style="dim")
        table.add_column("Type")
        table.add_column("Game")
        table.add_column("Revenue Share", justify="right")
        for p in placements:
            table.add_row(
                escape(str(p.get("name", ""))),
                escape(str(p.get("id", ""))),
                escape(str(p.get("type", ""))),
                escape(str(p.get("gameName") or p.get("gameId") or "")),
                f"{p.get('revenueShare', 0)}%",
            )
        console.print()
        console.print(table)
        console.print()

    @ad.command("revenue")
    @click.option("-p", "--period", default="month", show_default=True, help="day, week, or month.")
    @click.option("-g", "--game", "game_id", default=None, help="Filter by game ID.")
    @authenticated
    def ad_revenue(state, period, game_id):
        """Show advertisement revenue."""
        r = state.service(AdService).get_revenue(period, game_id)

        heading(f"Advertisement Revenue ({period})")
        detail("Total Revenue", _money(r.get("total")))
        detail("Ad Impressions", _money(r.get("impressions")), indent=4)
        detail("Ad Clicks", _money(r.get("clicks")), indent=4)
        detail("Conversions", _money(r.get("conversions")), indent=4)

        by_game = r.get("byGame") or []
        if by_game:
            console.print("\n  [cyan]Revenue by Game:[/]")
            for g in by_game:
                detail(str(g.get("name")), _money(g.get("revenue")), indent=4)
        console.print()

    @ad.command("update")
    @click.argument("campaign_id")
    @click.option("--name", default=None, help="New campaign name.")
    @click.option("--budget", type=_budget_type, default=None, help="New budget (USD).")
    @click.option("--target-audience", default=None, help="New target audience.")
    @authenticated
    def ad_update(state, campaign_id, name, budget, target_audience):
        """Change a campaign's name, budget, or audience."""
        updates = {
            k: v for k, v in
            (("name", name), ("budget", budget), ("targetAudience", target_audience))
            if v is not None
        }
        if not updates:
            console.print("  [yellow]Nothing to update.[/] Pass --name, --budget, or --target-audience.")
            return
        state.service(AdService).update_campaign(campaign_id, updates)
        console.print("  [green]Campaign updated successfully![/]")

    @ad.command("delete")
    @click.argument("campaign_id")
    @click.option("-f", "--force", is_flag=True, help="Skip confirmation.")
    @authenticated
    def ad_delete(state, campaign_id, force):
        """Delete a campaign."""
        if not force and not confirm(f'Are you sure you want to delete campaign "{campaign_id}"?'):
            console.print("  [yellow]Operation cancelled.[/]")
            return
        state.service(AdService).delete_campaign(campaign_id)
        console.print("  [green]Campaign deleted successfully![/]")
