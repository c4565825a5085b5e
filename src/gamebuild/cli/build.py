"""Build commands: start (also the bare ``build``), status, list, logs, download."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape
from rich.table import Table

from ..errors import ApiError
from ..polling import BUILD_LOG_INTERVAL, follow_logs, watch_and_rebuild
from ..project import SOURCE_DIRS
from ..services import BuildService
from ..services.build import BUILDING
from ._common import (
    BUILD_STATUS,
    authenticated,
    console,
    detail,
    emit,
    format_datetime,
    format_option,
    heading,
    require_project,
    status_label,
)

NO_BUILDS = '\n  [yellow]No builds found.[/] Start your first build with "gamebuild build start"\n'

_env_option = click.option(
    "-e", "--env", default="dev", show_default=True,
    help="Target environment (dev, staging, prod).",
)
_platform_option = click.option("-p", "--platform", default=None, help="Target platform override.")
_watch_option = click.option("-w", "--watch", is_flag=True, help="Watch for changes and rebuild.")


def _print_started(build: dict) -> None:
    console.print("  [green]Build started![/]")
    detail("Build ID", build.get("id"), indent=4)
    console.print(f"    [dim]Status:[/] {status_label(build.get('status'), BUILD_STATUS)}")
    detail("Environment", build.get("environment"), indent=4)
    if build.get("status") == BUILDING:
        console.print(
            '  [yellow]Build in progress...[/] Use "gamebuild build status" to check progress.'
        )


def register_build_commands(main: click.Group) -> None:
    """Register the build command group."""

    @main.group(invoke_without_command=True)
    @_env_option
    @_platform_option
    @_watch_option
    @click.pass_context
    def build(ctx, env, platform, watch):
        """Build the linked project. Bare ``build`` runs ``build start``."""
        if ctx.invoked_subcommand is None:
            ctx.invoke(build_start, env=env, platform=platform, watch=watch)

    @build.command("start")
    @_env_option
    @_platform_option
    @_watch_option
    @authenticated
    def build_start(state, env, platform, watch):
        """Upload the project and start a build."""
        project = require_project()
        if project is None:
            return

        service = state.service(BuildService)

        def run_build() -> dict:
            files = service.prepare_upload()
            console.print(f"  [dim]Uploading {len(files)} project files...[/]")
            return service.start_build(project.gameId, env, platform)

        heading("Starting build...")
        _print_started(run_build())
        if not watch:
            console.print()
            return

        def rebuild() -> None:
            console.print("\n  [cyan]Changes detected, rebuilding...[/]")
            _print_started(run_build())

        def report(exc) -> None:
            console.print(f"  [red]Rebuild failed:[/] {escape(str(exc))}")

        console.print("\n  [bold]Watching for changes...[/] Press Ctrl+C to stop.\n")
        try:
            watch_and_rebuild([Path.cwd() / name for name in SOURCE_DIRS], rebuild, report)
        except KeyboardInterrupt:
            console.print("\n  [dim]Stopped watching.[/]\n")

    @build.command("status")
    @click.argument("build_id", required=False)
    @authenticated
    def build_status(state, build_id):
        """Show a build, or the latest one for this project."""
        service = state.service(BuildService)
        if build_id:
            b = service.get_build(build_id)
        else:
            project = require_project()
            if project is None:
                return
            b = service.get_latest_build(project.gameId)

        if not b:
            console.print(NO_BUILDS)
            return

        heading("Build Status")
        detail("Build ID", b.get("id"))
        console.print(f"  [dim]Status:[/] {status_label(b.get('status'), BUILD_STATUS)}")
        detail("Environment", b.get("environment"))
        detail("Platform", b.get("platform"))
        detail("Started", format_datetime(b.get("startedAt")))
        if b.get("completedAt"):
            detail("Completed", format_datetime(b.get("completedAt")))
            detail("Duration", f"{b.get('duration')}s")
        if b.get("downloadUrl"):
            detail("Download", b.get("downloadUrl"))
        console.print()

    @build.command("list")
    @click.option("-l", "--limit", default=10, show_default=True, type=int, help="Number of builds.")
    @format_option()
    @authenticated
    def build_list(state, limit, fmt):
        """List recent builds of this project."""
        project = require_project()
        if project is None:
            return

        builds = state.service(BuildService).list_builds(project.gameId, limit=limit)
        if fmt != "table":
            emit(builds, fmt)
            return
        if not builds:
            console.print(NO_BUILDS)
            return

        table = Table(title="Recent Builds")
        table.add_column("Build ID", style="cyan")
        table.add_column("Status")
        table.add_column("Environment")
        table.add_column("Started")
        for b in builds:
            table.add_row(
                escape(str(b.get("id", ""))),
                status_label(b.get("status"), BUILD_STATUS),
                escape(str(b.get("environment", ""))),
                format_datetime(b.get("startedAt")),
            )
        console.print()
        console.print(table)
        console.print()

    @build.command("logs")
    @click.argument("build_id")
    @click.option("-f", "--follow", is_flag=True, help="Keep printing new output while building.")
    @authenticated
    def build_logs(state, build_id, follow):
        """Print a build's log."""
        service = state.service(BuildService)
        heading(f"Build Logs ({build_id})")

        if not follow:
            click.echo(service.get_logs(build_id))
            return

        try:
            final = follow_logs(
                lambda: service.get_logs(build_id),
                lambda: service.get_status(build_id),
                BUILDING,
                lambda text: click.echo(text, nl=False),
                interval=BUILD_LOG_INTERVAL,
            )
        except ApiError as exc:
            console.print(f"\n  [red]Error following logs:[/] {escape(str(exc))}\n")
            return
        except KeyboardInterrupt:
            console.print("\n  [dim]Stopped following logs.[/]\n")
            return
        console.print(f"\n  Build finished: {status_label(final, BUILD_STATUS)}\n")

    @build.command("download")
    @click.argument("build_id")
    @click.option(
        "-o", "--output", default="./downloads", show_default=True,
        type=click.Path(file_okay=False, path_type=Path), help="Output directory.",
    )
    @authenticated
    def build_download(state, build_id, output):
        """Download a build artifact."""
        heading(f"Downloading build {build_id}...")
        dest = state.service(BuildService).download_build(build_id, output)
        console.print("  [green]Build downloaded successfully![/]")
        detail("Location", dest, indent=4)
        console.print()
