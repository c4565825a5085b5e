"""Authentication commands: login, logout, status."""

from __future__ import annotations

import sys

import click

from .. import DEFAULT_BASE_URL
from ..services import AuthService
from ._common import console, detail, state_command


def register_auth_commands(main: click.Group) -> None:
    """Register the auth command group."""

    @main.group()
    def auth():
        """Log in to the GameBuild API and inspect the session."""

    @auth.command("login")
    @click.option("-t", "--token", default=None, help="API token.")
    @click.option("-u", "--url", default=None, help="API base URL.")
    @state_command
    def auth_login(state, token, url):
        """Store an API token after checking it against the server."""
        if not token:
            token = click.prompt("  Enter your API token", hide_input=True)
            url = click.prompt("  API base URL", default=url or DEFAULT_BASE_URL)
        base_url = url or DEFAULT_BASE_URL

        console.print("\n  [dim]Validating token...[/]")
        if not AuthService(state.client).validate_token(token, base_url):
            console.print("  [red]Invalid token.[/] Please check your token and try again.\n")
            sys.exit(1)

        state.config.set("auth.token", token)
        state.config.set("auth.baseUrl", base_url)
        state.config.save()
        console.print("  [green]Successfully logged in![/]\n")

    @auth.command("logout")
    @state_command
    def auth_logout(state):
        """Forget the stored token and API URL."""
        state.config.delete("auth.token")
        state.config.delete("auth.baseUrl")
        state.config.save()
        console.print("\n  [green]Successfully logged out.[/]\n")

    @auth.command("status")
    @state_command
    def auth_status(state):
        """Show who is logged in."""
        token = state.config.token
        if not token:
            console.print("\n  [yellow]Not logged in.[/] Run: gamebuild auth login\n")
            return

        base_url = state.config.get("auth.baseUrl") or DEFAULT_BASE_URL
        service = state.service(AuthService)
        if not service.validate_token(token, base_url):
            console.print("\n  [red]Token is invalid or expired.[/] Run: gamebuild auth login\n")
            return

        user = service.get_user_info()
        console.print("\n  [green]Logged in[/]")
        detail("User", user.get("email") or user.get("username") or user.get("id"))
        detail("API URL", base_url)
        console.print()
