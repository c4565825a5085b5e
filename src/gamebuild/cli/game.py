"""Game commands: create, list, info, delete, init."""

from __future__ import annotations

import click
from rich.markup import escape
from rich.table import Table

from ..models import GamePlatform
from ..project import scaffold_project, write_project
from ..prompts import ask_choice, ask_text, confirm
from ..services import GameService
from ._common import (
    authenticated,
    console,
    detail,
    emit,
    format_date,
    format_option,
    heading,
)

PLATFORM_CHOICES = [
    (GamePlatform.WEB.value, "Web (HTML5)"),
    (GamePlatform.MOBILE.value, "Mobile (iOS/Android)"),
    (GamePlatform.DESKTOP.value, "Desktop (Windows/Mac/Linux)"),
    (GamePlatform.CONSOLE.value, "Console"),
]

TEMPLATE_CHOICES = [
    ("basic", "Basic game template"),
    ("platformer", "Platformer template"),
    ("racing", "Racing game template"),
    ("puzzle", "Puzzle game template"),
    ("rpg", "RPG template"),
    ("empty", "Empty project"),
]


def register_game_commands(main: click.Group) -> None:
    """Register the game command group."""

    @main.group()
    def game():
        """Create, inspect, and link games."""

    @game.command("create")
    @click.option("-n", "--name", default=None, help="Game name.")
    @click.option(
        "-p", "--platform", type=click.Choice([p.value for p in GamePlatform]),
        default=None, help="Target platform.",
    )
    @click.option("-t", "--template", default=None, help="Project template.")
    @authenticated
    def game_create(state, name, platform, template):
        """Create a new game."""
        heading("Creating new game project...")
        if not name:
            name = ask_text("Game name")
        if not platform:
            platform = ask_choice("Target platform:", PLATFORM_CHOICES)
        if not template:
            template = ask_choice("Project template:", TEMPLATE_CHOICES)

        created = state.service(GameService).create_game(name, platform, template)

        console.print("\n  [green]Game created successfully![/]")
        detail("Game ID", created.get("id"), indent=4)
        detail("Name", created.get("name"), indent=4)
        detail("Platform", created.get("platform"), indent=4)
        detail("Dashboard", created.get("dashboardUrl"), indent=4)
        console.print()

    @game.command("list")
    @format_option()
    @authenticated
    def game_list(state, fmt):
        """List your games."""
        games = state.service(GameService).list_games()

        if fmt != "table":
            emit(games, fmt)
            return

        if not games:
            console.print(
                '\n  [yellow]No games found.[/] Create your first game with "gamebuild game create"\n'
            )
            return

        table = Table(title="Your Games")
        table.add_column("Name", style="cyan")
        table.add_column("ID", style="dim")
        table.add_column("Platform")
        table.add_column("Status")
        table.add_column("Created")
        for g in games:
            table.add_row(
                escape(str(g.get("name", ""))),
                escape(str(g.get("id", ""))),
                escape(str(g.get("platform", ""))),
                escape(str(g.get("status", ""))),
                format_date(g.get("createdAt")),
            )

        console.print()
        console.print(table)
        console.print()

    @game.command("info")
    @click.argument("game_id")
    @authenticated
    def game_info(state, game_id):
        """Show one game."""
        g = state.service(GameService).get_game(game_id)

        heading("Game Information")
        detail("Name", g.get("name"))
        detail("ID", g.get("id"))
        detail("Platform", g.get("platform"))
        detail("Status", g.get("status"))
        detail("Template", g.get("template"))
        detail("Created", format_date(g.get("createdAt")))
        detail("Last Build", format_date(g.get("lastBuild")) if g.get("lastBuild") else "Never")
        detail("Dashboard", g.get("dashboardUrl"))
        console.print()

    @game.command("delete")
    @click.argument("game_id")
    @click.option("-f", "--force", is_flag=True, help="Skip confirmation.")
    @authenticated
    def game_delete(state, game_id, force):
        """Delete a game."""
        if not force and not confirm(
            f'Are you sure you want to delete game "{game_id}"? This action cannot be undone.'
        ):
            console.print("  [yellow]Operation cancelled.[/]")
            return

        state.service(GameService).delete_game(game_id)
        console.print("\n  [green]Game deleted successfully![/]\n")

    @game.command("init")
    @click.option("-g", "--game-id", default=None, help="Existing game ID to link.")
    @authenticated
    def game_init(state, game_id):
        """Link the current directory to a game and scaffold it."""
        service = state.service(GameService)
        heading("Initializing GameBuild project...")

        if not game_id:
            games = service.list_games()
            if not games:
                console.print(
                    '  [yellow]No games found.[/] Create a game first with "gamebuild game create"\n'
                )
                return
            game_id = ask_choice(
                "Select a game to link:",
                [(g.get("id"), escape(f"{g.get('name')} ({g.get('platform')})")) for g in games],
            )

        linked = service.get_game(game_id)
        write_project(game_id, platform=linked.get("platform") or GamePlatform.WEB.value)
        state.config.set("project.gameId", game_id)
        state.config.set("project.name", linked.get("name"))
        state.config.save()

        for path in scaffold_project():
            console.print(f"  [dim]created[/] {escape(str(path.name))}")

        console.print("\n  [green]Project initialized successfully![/]")
        console.print('  [dim]Run "gamebuild build" to start building your game.[/]\n')
