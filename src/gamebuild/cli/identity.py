"""Identity commands: Web3 identities, wallets, reputation, permissions, signing.

The group is registered twice, as ``identity`` and as the short ``id``.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..prompts import ask_choice, ask_text, is_email, is_eth_address
from ..services import IdentityService
from ..services.identity import IDENTITY_TYPES, sign_message, verify_signature, wallet_address
from ._common import (
    authenticated,
    console,
    detail,
    emit,
    format_date,
    format_option,
    heading,
)

TYPE_CHOICES = [
    ("player", "Player - gaming identity for players"),
    ("developer", "Developer - developer identity"),
    ("guild", "Guild - guild/organization identity"),
    ("moderator", "Moderator - community moderator"),
]


def register_identity_commands(main: click.Group) -> None:
    """Register the identity command group and its ``id`` alias."""

    @click.group()
    def identity():
        """Web3 identity and wallet management."""

    main.add_command(identity, "identity")
    main.add_command(identity, "id")

    @identity.command("create")
    @click.option("-t", "--type", "identity_type", type=click.Choice(IDENTITY_TYPES), default=None,
                  help="Identity type.")
    @click.option("-w", "--wallet", default=None, help="Existing wallet address.")
    @authenticated
    def identity_create(state, identity_type, wallet):
        """Create a Web3 identity, generating a wallet if none is given."""
        heading("Creating Web3 identity...")
        display_name = email = None

        if not wallet:
            if not identity_type:
                identity_type = ask_choice("Identity type:", TYPE_CHOICES)
            wallet = ask_text(
                "Wallet address (Enter to generate)", required=False,
                check=is_eth_address, error="Please enter a valid Ethereum address",
            ) or None
            display_name = ask_text("Display name")
            email = ask_text(
                "Email (optional)", required=False,
                check=is_email, error="Please enter a valid email",
            ) or None
        elif not is_eth_address(wallet):
            console.print("  [red]Please enter a valid Ethereum address.[/]")
            sys.exit(1)

        created = state.service(IdentityService).create_identity(
            identity_type or "player", wallet, display_name, email,
        )

        console.print("  [green]Identity created successfully![/]")
        detail("Identity ID", created.get("id"), indent=4)
        detail("Type", created.get("type"), indent=4)
        detail("Wallet", created.get("walletAddress"), indent=4)
        detail("Display Name", created.get("displayName"), indent=4)
        if created.get("privateKey"):
            console.print()
            console.print(
                Panel(
                    f"[bold red]{escape(created['privateKey'])}[/]\n"
                    "[dim]Shown once. It was not sent to GameBuild.[/]",
                    title="New wallet: save your private key",
                    border_style="yellow",
                    padding=(1, 2),
                )
            )
        console.print()

    @identity.command("link")
    @click.argument("identity_id")
    @click.argument("address")
    @click.option("-n", "--network", default="ethereum", show_default=True, help="Blockchain network.")
    @authenticated
    def identity_link(state, identity_id, address, network):
        """Link a wallet to an identity."""
        heading("Linking wallet to identity...")
        state.service(IdentityService).link_wallet(identity_id, address, network)
        console.print("  [green]Wallet linked successfully![/]")
        detail("Identity", identity_id, indent=4)
        detail("Wallet", address, indent=4)
        detail("Network", network, indent=4)
        console.print()

    @identity.command("verify")
    @click.argument("identity_id")
    @click.option("-s", "--signature", default=None, help="Verification signature.")
    @authenticated
    def identity_verify(state, identity_id, signature):
        """Prove ownership of an identity with a signature."""
        heading("Verifying identity...")
        if not signature:
            signature = ask_text("Enter verification signature")

        result = state.service(IdentityService).verify_identity(identity_id, signature)
        if result.get("verified"):
            console.print("  [green]Identity verified successfully![/]")
            detail("Verification Level", result.get("level"), indent=4)
            detail("Trust Score", result.get("trustScore"), indent=4)
        else:
            console.print("  [red]Identity verification failed[/]")
            detail("Reason", result.get("reason"), indent=4)
        console.print()

    @identity.command("profile")
    @click.argument("identity_id", required=False)
    @click.option("-u", "--update", is_flag=True, help="Edit the profile interactively.")
    @authenticated
    def identity_profile(state, identity_id, update):
        """Show (or with -u, edit) a profile; defaults to your own."""
        service = state.service(IdentityService)
        profile = service.get_profile(identity_id)

        if update:
            changes = {
                "displayName": ask_text("Display name", default=profile.get("displayName") or "", required=False),
                "bio": ask_text("Bio", default=profile.get("bio") or "", required=False),
                "avatar": ask_text("Avatar URL", default=profile.get("avatar") or "", required=False),
            }
            service.update_profile(identity_id, changes)
            console.print("\n  [green]Profile updated successfully![/]\n")
            return

        heading("Identity Profile")
        detail("Name", profile.get("displayName"))
        detail("ID", profile.get("id"))
        detail("Type", profile.get("type"))
        detail("Status", profile.get("status"))
        detail("Reputation", f"{profile.get('reputation')}/100")
        detail("Level", profile.get("level"))
        detail("Created", format_date(profile.get("createdAt")))

        achievements = profile.get("achievements") or []
        if achievements:
            console.print("\n  [cyan]Achievements:[/]")
            for a in achievements:
                console.print(f"    - {escape(str(a.get('name')))} [dim]{escape(str(a.get('description', '')))}[/]")
        wallets = profile.get("wallets") or []
        if wallets:
            console.print("\n  [cyan]Linked Wallets:[/]")
            for w in wallets:
                console.print(f"    - {escape(str(w.get('address')))} [dim]({escape(str(w.get('network')))})[/]")
        console.print()

    @identity.command("list")
    @click.option("-t", "--type", "identity_type", default=None, help="Filter by identity type.")
    @format_option()
    @authenticated
    def identity_list(state, identity_type, fmt):
        """List identities."""
        identities = state.service(IdentityService).list_identities(identity_type)
        if fmt != "table":
            emit(identities, fmt)
            return
        if not identities:
            console.print("\n  [yellow]No identities found.[/]\n")
            return

        table = Table(title="Identities")
        table.add_column("Name", style="cyan")
        table.add_column("ID", style="dim")
        table.add_column("Type")
        table.add_column("Status")
        table.add_column("Reputation", justify="right")
        for i in identities:
            table.add_row(
                escape(str(i.get("displayName", ""))),
                escape(str(i.get("id", ""))),
                escape(str(i.get("type", ""))),
                escape(str(i.get("status", ""))),
                f"{i.get('reputation', 0)}/100",
            )
        console.print()
        console.print(table)
        console.print()

    @identity.command("reputation")
    @click.argument("identity_id")
    @authenticated
    def identity_reputation(state, identity_id):
        """Show reputation score, metrics, and achievements."""
        rep = state.service(IdentityService).get_reputation(identity_id)

        heading("Identity Reputation")
        detail("Overall Score", f"{rep.get('score')}/100")
        detail("Level", rep.get("level"))
        detail("Rank", rep.get("rank"))

        metrics = rep.get("metrics") or {}
        if metrics:
            console.print("\n  [cyan]Metrics:[/]")
            for name, value in metrics.items():
                detail(name, value, indent=4)
        achievements = rep.get("achievements") or []
        if achievements:
            console.print("\n  [cyan]Achievements:[/]")
            for a in achievements:
                console.print(f"    - {escape(str(a.get('name')))} [green](+{a.get('points', 0)} points)[/]")
        console.print()

    @identity.command("permissions")
    @click.argument("identity_id")
    @click.option("-a", "--add", "to_add", default=None, help="Permission to grant.")
    @click.option("-r", "--remove", "to_remove", default=None, help="Permission to revoke.")
    @click.option("-l", "--list", "list_only", is_flag=True, help="List permissions (default).")
    @authenticated
    def identity_permissions(state, identity_id, to_add, to_remove, list_only):
        """Grant, revoke, or list an identity's permissions."""
        service = state.service(IdentityService)
        if to_add:
            service.add_permission(identity_id, to_add)
            console.print(f'  [green]Permission "{escape(to_add)}" added[/]')
            return
        if to_remove:
            service.remove_permission(identity_id, to_remove)
            console.print(f'  [green]Permission "{escape(to_remove)}" removed[/]')
            return

        permissions = service.get_permissions(identity_id)
        heading("Identity Permissions")
        if not permissions:
            console.print("  [yellow]No permissions assigned.[/]\n")
            return
        for p in permissions:
            console.print(f"    - {escape(str(p))}")
        console.print()

    @identity.command("sign")
    @click.argument("message")
    @click.option(
        "--key-file", required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="File holding the wallet's hex private key.",
    )
    def identity_sign(message, key_file):
        """Sign MESSAGE locally for use with ``identity verify``."""
        key = key_file.read_text(encoding="utf-8").strip()
        try:
            signature = sign_message(key, message)
            signer = wallet_address(key)
        except Exception as exc:  # eth-keys validation errors are not ValueErrors
            console.print(f"  [red]Invalid private key:[/] {escape(str(exc))}")
            sys.exit(1)
        detail("Signer", signer)
        click.echo(signature)

    @identity.command("check")
    @click.argument("message")
    @click.argument("signature")
    @click.argument("address")
    def identity_check(message, signature, address):
        """Check locally that SIGNATURE over MESSAGE was made by ADDRESS."""
        if verify_signature(message, signature, address):
            console.print(f"  [green]Valid signature[/] from {escape(address)}")
            return
        console.print(f"  [red]Signature does not match[/] {escape(address)}")
        sys.exit(1)
