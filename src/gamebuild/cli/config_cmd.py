"""Config commands: set, get, list, delete, reset, edit."""

from __future__ import annotations

import json
import os
import shlex
import subprocess
import sys

import click
from rich.markup import escape
from rich.table import Table

from ..config import coerce_value, flatten, mask_value
from ..prompts import confirm
from ._common import console, emit, format_option, heading, state_command


def _editor() -> str:
    """EDITOR, then VISUAL, then the platform's basic editor."""
    fallback = "notepad" if sys.platform == "win32" else "nano"
    return os.environ.get("EDITOR") or os.environ.get("VISUAL") or fallback


def register_config_commands(main: click.Group) -> None:
    """Register the config command group."""

    @main.group("config")
    def config_group():
        """Read and change the local configuration."""

    @config_group.command("set")
    @click.argument("key")
    @click.argument("value")
    @state_command
    def config_set(state, key, value):
        """Set KEY (dotted path) to VALUE.

        true/false, numbers, and JSON objects or arrays are stored typed;
        anything else is stored as text.
        """
        parsed = coerce_value(value)
        state.config.set(key, parsed)
        state.config.save()
        console.print("  [green]Configuration updated![/]")
        console.print(f"  [dim]{escape(key)} = {escape(json.dumps(parsed))}[/]")

    @config_group.command("get")
    @click.argument("key")
    @state_command
    def config_get(state, key):
        """Print the value stored at KEY."""
        value = state.config.get(key)
        if value is None:
            console.print(f'  [yellow]Configuration key "{escape(key)}" not found.[/]')
            return
        console.print(f"  [cyan]{escape(key)}[/]")
        click.echo(json.dumps(value, indent=2))

    @config_group.command("list")
    @format_option()
    @state_command
    def config_list(state, fmt):
        """Show the whole configuration (secrets masked in the table)."""
        data = state.config.all()
        if fmt != "table":
            emit(data, fmt)
            return
        if not data:
            console.print("\n  [yellow]No configuration found.[/]\n")
            return

        table = Table(title="Configuration")
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        for key, value in flatten(data):
            table.add_row(escape(key), escape(json.dumps(mask_value(key, value))))
        console.print()
        console.print(table)
        console.print()

    @config_group.command("delete")
    @click.argument("key")
    @click.option("-f", "--force", is_flag=True, help="Skip confirmation.")
    @state_command
    def config_delete(state, key, force):
        """Remove KEY from the configuration."""
        if state.config.get(key) is None:
            console.print(f'  [yellow]Configuration key "{escape(key)}" not found.[/]')
            return
        if not force and not confirm(f'Are you sure you want to delete "{key}"?'):
            console.print("  [yellow]Operation cancelled.[/]")
            return
        state.config.delete(key)
        state.config.save()
        console.print("  [green]Configuration key deleted![/]")

    @config_group.command("reset")
    @click.option("-f", "--force", is_flag=True, help="Skip confirmation.")
    @state_command
    def config_reset(state, force):
        """Remove every setting, including the login."""
        if not force and not confirm(
            "Are you sure you want to reset all configuration? "
            "This will remove all saved settings including authentication."
        ):
            console.print("  [yellow]Operation cancelled.[/]")
            return
        state.config.clear()
        state.config.save()
        console.print("  [green]Configuration reset to defaults![/]")
        console.print("  [dim]You will need to login again: gamebuild auth login[/]")

    @config_group.command("edit")
    @state_command
    def config_edit(state):
        """Open the config file in $EDITOR."""
        path = state.config.path
        if not path.exists():
            state.config.save()

        editor = _editor()
        heading(f"Opening configuration file in {editor}...")
        console.print(f"  [dim]File: {escape(str(path))}[/]")

        try:
            result = subprocess.run([*shlex.split(editor), str(path)])
        except OSError as exc:
            console.print(f"  [red]Failed to open editor:[/] {escape(str(exc))}")
            console.print("  [dim]Try setting the EDITOR environment variable, e.g. export EDITOR=code[/]")
            sys.exit(1)

        if result.returncode != 0:
            console.print("  [red]Editor closed with error.[/]")
            sys.exit(1)
        state.config.load()
        console.print("  [green]Configuration file saved![/]")
