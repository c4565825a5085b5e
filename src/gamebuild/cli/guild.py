"""Guild commands: create, list, info, join, leave."""

from __future__ import annotations

import click
from rich.markup import escape
from rich.table import Table

from ..prompts import ask_text
from ..services import GuildService
from ._common import authenticated, console, detail, emit, format_option, heading


def register_guild_commands(main: click.Group) -> None:
    """Register the guild command group."""

    @main.group()
    def guild():
        """Create and join guilds."""

    @guild.command("create")
    @click.option("-n", "--name", default=None, help="Guild name.")
    @click.option("-d", "--description", default=None, help="Guild description.")
    @authenticated
    def guild_create(state, name, description):
        """Create a guild."""
        if not name:
            name = ask_text("Guild name")
            if description is None:
                description = ask_text("Guild description", required=False) or None

        g = state.service(GuildService).create_guild(name, description)
        console.print("\n  [green]Guild created successfully![/]")
        detail("Guild ID", g.get("id"), indent=4)
        detail("Name", g.get("name"), indent=4)
        detail("Description", g.get("description"), indent=4)
        console.print()

    @guild.command("list")
    @format_option()
    @authenticated
    def guild_list(state, fmt):
        """List guilds."""
        guilds = state.service(GuildService).list_guilds()
        if fmt != "table":
            emit(guilds, fmt)
            return
        if not guilds:
            console.print("\n  [yellow]No guilds found.[/]\n")
            return

        table = Table(title="Guilds")
        table.add_column("Name", style="cyan")
        table.add_column("ID", style="dim")
        table.add_column("Description")
        for g in guilds:
            table.add_row(
                escape(str(g.get("name", ""))),
                escape(str(g.get("id", ""))),
                escape(str(g.get("description") or "")),
            )
        console.print()
        console.print(table)
        console.print()

    @guild.command("info")
    @click.argument("guild_id")
    @authenticated
    def guild_info(state, guild_id):
        """Show a guild and its members."""
        g = state.service(GuildService).get_guild(guild_id)
        members = g.get("members") or []

        heading("Guild Information")
        detail("Name", g.get("name"))
        detail("ID", g.get("id"))
        detail("Description", g.get("description"))
        detail("Members", len(members))
        for m in members:
            console.print(f"    - {escape(str(m.get('displayName')))} [dim]({escape(str(m.get('id')))})[/]")
        console.print()

    @guild.command("join")
    @click.argument("guild_id")
    @authenticated
    def guild_join(state, guild_id):
        """Join a guild."""
        state.service(GuildService).join_guild(guild_id)
        console.print("  [green]Joined guild successfully![/]")

    @guild.command("leave")
    @click.argument("guild_id")
    @authenticated
    def guild_leave(state, guild_id):
        """Leave a guild."""
        state.service(GuildService).leave_guild(guild_id)
        console.print("  [green]Left guild successfully![/]")
