"""Deployment commands: start (also the bare ``deploy``), status, list, rollback, logs."""

from __future__ import annotations

import click
from rich.markup import escape
from rich.table import Table

from ..errors import ApiError
from ..polling import DEPLOY_LOG_INTERVAL, follow_logs
from ..prompts import ask_choice, confirm
from ..services import DeployService, GameService
from ..services.deploy import DEPLOYING, available_platforms
from ._common import (
    DEPLOY_STATUS,
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

NO_DEPLOYMENTS = (
    "\n  [yellow]No deployments found.[/] "
    'Start your first deployment with "gamebuild deploy start"\n'
)

_build_option = click.option("-b", "--build-id", default=None, help="Build to deploy (default: latest successful).")
_env_option = click.option(
    "-e", "--env", default="staging", show_default=True,
    help="Target environment (staging, prod).",
)
_platform_option = click.option("-p", "--platform", default=None, help="Deployment platform.")


def register_deploy_commands(main: click.Group) -> None:
    """Register the deploy command group."""

    @main.group(invoke_without_command=True)
    @_build_option
    @_env_option
    @_platform_option
    @click.pass_context
    def deploy(ctx, build_id, env, platform):
        """Ship builds. Bare ``deploy`` runs ``deploy start``."""
        if ctx.invoked_subcommand is None:
            ctx.invoke(deploy_start, build_id=build_id, env=env, platform=platform)

    @deploy.command("start")
    @_build_option
    @_env_option
    @_platform_option
    @authenticated
    def deploy_start(state, build_id, env, platform):
        """Deploy a build of this project."""
        project = require_project()
        if project is None:
            return

        service = state.service(DeployService)
        heading("Starting deployment...")

        if not build_id:
            latest = service.get_latest_successful_build(project.gameId)
            if not latest:
                console.print(
                    '  [red]No successful builds found.[/] Run "gamebuild build start" first.\n'
                )
                return
            build_id = latest.get("id")
            detail("Using latest build", build_id)

        if not platform:
            game = state.service(GameService).get_game(project.gameId)
            options = available_platforms(game.get("platform"))
            if len(options) == 1:
                platform = options[0].value
                detail("Using platform", platform)
            else:
                platform = ask_choice(
                    "Select deployment platform:",
                    [(o.value, f"{o.name} [dim]- {o.description}[/]") for o in options],
                )

        d = service.start_deployment(build_id, env, platform)

        console.print("\n  [green]Deployment started![/]")
        detail("Deployment ID", d.get("id"), indent=4)
        detail("Environment", d.get("environment"), indent=4)
        detail("Platform", d.get("platform"), indent=4)
        console.print(f"    [dim]Status:[/] {status_label(d.get('status'), DEPLOY_STATUS)}")
        if d.get("url"):
            console.print(f"    [cyan]Live URL:[/] {escape(str(d['url']))}")
        console.print()

    @deploy.command("status")
    @click.argument("deployment_id", required=False)
    @authenticated
    def deploy_status(state, deployment_id):
        """Show a deployment, or the latest one for this project."""
        service = state.service(DeployService)
        if deployment_id:
            d = service.get_deployment(deployment_id)
        else:
            project = require_project()
            if project is None:
                return
            d = service.get_latest_deployment(project.gameId)

        if not d:
            console.print(NO_DEPLOYMENTS)
            return

        heading("Deployment Status")
        detail("Deployment ID", d.get("id"))
        console.print(f"  [dim]Status:[/] {status_label(d.get('status'), DEPLOY_STATUS)}")
        detail("Environment", d.get("environment"))
        detail("Platform", d.get("platform"))
        detail("Build ID", d.get("buildId"))
        detail("Started", format_datetime(d.get("startedAt")))
        if d.get("completedAt"):
            detail("Completed", format_datetime(d.get("completedAt")))
        if d.get("url"):
            console.print(f"  [cyan]Live URL:[/] {escape(str(d['url']))}")
        console.print()

    @deploy.command("list")
    @click.option("-l", "--limit", default=10, show_default=True, type=int, help="Number of deployments.")
    @format_option()
    @authenticated
    def deploy_list(state, limit, fmt):
        """List recent deployments of this project."""
        project = require_project()
        if project is None:
            return

        deployments = state.service(DeployService).list_deployments(project.gameId, limit=limit)
        if fmt != "table":
            emit(deployments, fmt)
            return
        if not deployments:
            console.print(NO_DEPLOYMENTS)
            return

        table = Table(title="Recent Deployments")
        table.add_column("Deployment ID", style="cyan")
        table.add_column("Status")
        table.add_column("Environment")
        table.add_column("Platform")
        table.add_column("Started")
        table.add_column("URL", style="dim")
        for d in deployments:
            table.add_row(
                escape(str(d.get("id", ""))),
                status_label(d.get("status"), DEPLOY_STATUS),
                escape(str(d.get("environment", ""))),
                escape(str(d.get("platform", ""))),
                format_datetime(d.get("startedAt")),
                escape(str(d.get("url") or "")),
            )
        console.print()
        console.print(table)
        console.print()

    @deploy.command("rollback")
    @click.argument("deployment_id")
    @click.option("-f", "--force", is_flag=True, help="Skip confirmation.")
    @authenticated
    def deploy_rollback(state, deployment_id, force):
        """Roll back to a previous deployment."""
        if not force and not confirm(
            f'Are you sure you want to rollback to deployment "{deployment_id}"?'
        ):
            console.print("  [yellow]Operation cancelled.[/]")
            return

        heading("Rolling back deployment...")
        r = state.service(DeployService).rollback_deployment(deployment_id)
        console.print("  [green]Rollback initiated![/]")
        detail("Rollback ID", r.get("id"), indent=4)
        console.print(f"    [dim]Status:[/] {status_label(r.get('status'), DEPLOY_STATUS)}")
        console.print()

    @deploy.command("logs")
    @click.argument("deployment_id")
    @click.option("-f", "--follow", is_flag=True, help="Keep printing new output while deploying.")
    @authenticated
    def deploy_logs(state, deployment_id, follow):
        """Print a deployment's log."""
        service = state.service(DeployService)
        heading(f"Deployment Logs ({deployment_id})")

        if not follow:
            click.echo(service.get_logs(deployment_id))
            return

        try:
            final = follow_logs(
                lambda: service.get_logs(deployment_id),
                lambda: service.get_status(deployment_id),
                DEPLOYING,
                lambda text: click.echo(text, nl=False),
                interval=DEPLOY_LOG_INTERVAL,
            )
        except ApiError as exc:
            console.print(f"\n  [red]Error following logs:[/] {escape(str(exc))}\n")
            return
        except KeyboardInterrupt:
            console.print("\n  [dim]Stopped following logs.[/]\n")
            return
        console.print(f"\n  Deployment finished: {status_label(final, DEPLOY_STATUS)}\n")
