"""Asset commands: NFT mint/list/info/transfer/burn and ERC-20/ERC-721 token contracts."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape
from rich.table import Table

from ..prompts import ask_text, confirm, is_eth_address
from ..services import AssetService
from ._common import authenticated, console, detail, emit, fail, format_option, heading, number


def _assets(state) -> AssetService:
    return AssetService(state.client, ipfs_api_url=state.config.get("ipfs.apiUrl"))


def _check_address(address: str) -> None:
    if not is_eth_address(address):
        fail(f"Not a valid Ethereum address: {address}")


def register_asset_commands(main: click.Group) -> None:
    """Register the asset command group."""

    @main.group()
    def asset():
        """Mint and manage NFT assets and token contracts."""

    @asset.command("mint")
    @click.option("-n", "--name", default=None, help="Asset name.")
    @click.option("-d", "--description", default=None, help="Asset description.")
    @click.option("-f", "--file", "file_path", default=None, help="Asset file (image, model, ...).")
    @authenticated
    def asset_mint(state, name, description, file_path):
        """Pin a file on IPFS and mint it as an NFT."""
        if not name:
            name = ask_text("Asset name")
        if description is None and not file_path:
            description = ask_text("Asset description", required=False) or None
        if not file_path:
            file_path = ask_text("Asset file path")

        heading("Minting asset...")
        minted = _assets(state).mint_asset(name, Path(file_path), description)

        console.print("  [green]Asset minted successfully![/]")
        detail("Asset ID", minted.get("id"), indent=4)
        detail("Name", minted.get("name"), indent=4)
        detail("Description", minted.get("description"), indent=4)
        detail("Token", minted.get("tokenId"), indent=4)
        detail("Owner", minted.get("owner"), indent=4)
        detail("IPFS", minted.get("ipfsUrl"), indent=4)
        console.print()

    @asset.command("list")
    @format_option()
    @authenticated
    def asset_list(state, fmt):
        """List your assets."""
        assets = _assets(state).list_assets()
        if fmt != "table":
            emit(assets, fmt)
            return
        if not assets:
            console.print("\n  [yellow]No assets found.[/]\n")
            return

        table = Table(title="Assets")
        table.add_column("Name", style="cyan")
        table.add_column("ID", style="dim")
        table.add_column("Token")
        table.add_column("Owner")
        table.add_column("IPFS", style="dim")
        for a in assets:
            table.add_row(*(escape(str(a.get(k) or "")) for k in ("name", "id", "tokenId", "owner", "ipfsUrl")))
        console.print()
        console.print(table)
        console.print()

    @asset.command("info")
    @click.argument("asset_id")
    @authenticated
    def asset_info(state, asset_id):
        """Show one asset."""
        a = _assets(state).get_asset(asset_id)
        heading("Asset Information")
        detail("Name", a.get("name"))
        detail("ID", a.get("id"))
        detail("Token", a.get("tokenId"))
        detail("Owner", a.get("owner"))
        detail("IPFS", a.get("ipfsUrl"))
        detail("Description", a.get("description"))
        console.print()

    @asset.command("transfer")
    @click.argument("asset_id")
    @click.argument("to_address")
    @authenticated
    def asset_transfer(state, asset_id, to_address):
        """Transfer an asset to another wallet."""
        _check_address(to_address)
        _assets(state).transfer_asset(asset_id, to_address)
        console.print("  [green]Asset transferred successfully![/]")

    @asset.command("burn")
    @click.argument("asset_id")
    @click.option("-f", "--force", is_flag=True, help="Skip confirmation.")
    @authenticated
    def asset_burn(state, asset_id, force):
        """Destroy an asset."""
        if not force and not confirm(
            f'Are you sure you want to burn asset "{asset_id}"? This cannot be undone.'
        ):
            console.print("  [yellow]Operation cancelled.[/]")
            return
        _assets(state).burn_asset(asset_id)
        console.print("  [green]Asset burned successfully![/]")

    # -- token contracts ----------------------------------------------------

    @asset.group("token")
    def token():
        """Issue and inspect ERC-20 tokens and ERC-721 collections."""

    @token.command("erc20-issue")
    @click.option("-n", "--name", required=True, help="Token name.")
    @click.option("-s", "--symbol", required=True, help="Ticker symbol.")
    @click.option("-d", "--decimals", default=18, show_default=True, type=click.IntRange(0, 36))
    @click.option("--supply", "total_supply", required=True, help="Total supply, in whole tokens.")
    @authenticated
    def token_erc20_issue(state, name, symbol, decimals, total_supply):
        """Deploy a new ERC-20 token."""
        t = _assets(state).issue_erc20(name, symbol, decimals, total_supply)
        console.print("\n  [green]ERC20 token issued![/]")
        detail("Contract", t.get("contractAddress"), indent=4)
        detail("Name", t.get("name"), indent=4)
        detail("Symbol", t.get("symbol"), indent=4)
        detail("Total Supply", t.get("totalSupply"), indent=4)
        console.print()

    @token.command("erc721-issue")
    @click.option("-n", "--name", required=True, help="Collection name.")
    @click.option("-s", "--symbol", required=True, help="Ticker symbol.")
    @click.option("--base-uri", default=None, help="Metadata base URI.")
    @authenticated
    def token_erc721_issue(state, name, symbol, base_uri):
        """Deploy a new ERC-721 collection."""
        c = _assets(state).issue_erc721(name, symbol, base_uri)
        console.print("\n  [green]ERC721 collection issued![/]")
        detail("Contract", c.get("contractAddress"), indent=4)
        detail("Name", c.get("name"), indent=4)
        detail("Symbol", c.get("symbol"), indent=4)
        console.print()

    @token.command("erc721-mint")
    @click.argument("contract_address")
    @click.argument("to_address")
    @click.option("--metadata-uri", default=None, help="Token metadata URI.")
    @authenticated
    def token_erc721_mint(state, contract_address, to_address, metadata_uri):
        """Mint an NFT from a collection to TO_ADDRESS."""
        _check_address(to_address)
        n = _assets(state).mint_erc721(contract_address, to_address, metadata_uri)
        console.print("\n  [green]NFT minted![/]")
        detail("Token ID", n.get("tokenId"), indent=4)
        detail("Owner", n.get("owner") or to_address, indent=4)
        detail("Transaction", n.get("transactionHash"), indent=4)
        console.print()

    @token.command("erc20-info")
    @click.argument("contract_address")
    @authenticated
    def token_erc20_info(state, contract_address):
        """Show an ERC-20 token."""
        t = _assets(state).get_erc20_token(contract_address)
        heading("ERC20 Token")
        detail("Name", t.get("name"))
        detail("Symbol", t.get("symbol"))
        detail("Decimals", t.get("decimals"))
        detail("Total Supply", number(t.get("totalSupply")))
        detail("Contract", t.get("contractAddress") or contract_address)
        console.print()

    @token.command("erc721-info")
    @click.argument("contract_address")
    @authenticated
    def token_erc721_info(state, contract_address):
        """Show an ERC-721 collection."""
        c = _assets(state).get_erc721_collection(contract_address)
        heading("ERC721 Collection")
        detail("Name", c.get("name"))
        detail("Symbol", c.get("symbol"))
        detail("Total Minted", c.get("totalSupply"))
        detail("Base URI", c.get("baseUri"))
        detail("Contract", c.get("contractAddress") or contract_address)
        console.print()

    @token.command("erc721-token")
    @click.argument("contract_address")
    @click.argument("token_id")
    @authenticated
    def token_erc721_token(state, contract_address, token_id):
        """Show one NFT of a collection."""
        n = _assets(state).get_erc721_token(contract_address, token_id)
        heading(f"Token #{token_id}")
        detail("Owner", n.get("owner"))
        detail("Metadata URI", n.get("metadataUri") or n.get("tokenUri"))
        console.print()

    @token.command("list")
    @click.option(
        "-t", "--type", "kind", type=click.Choice(["erc20", "erc721", "all"]),
        default="all", show_default=True,
    )
    @format_option()
    @authenticated
    def token_list(state, kind, fmt):
        """List your ERC-20 tokens and ERC-721 collections."""
        service = _assets(state)
        rows = []
        if kind in ("erc20", "all"):
            rows += [{"standard": "ERC20", **t} for t in service.list_erc20_tokens()]
        if kind in ("erc721", "all"):
            rows += [{"standard": "ERC721", **c} for c in service.list_erc721_collections()]

        if fmt != "table":
            emit(rows, fmt)
            return
        if not rows:
            console.print("\n  [yellow]No token contracts found.[/]\n")
            return

        table = Table(title="Token Contracts")
        table.add_column("Standard", style="bold")
        table.add_column("Name", style="cyan")
        table.add_column("Symbol")
        table.add_column("Contract", style="dim")
        for r in rows:
            table.add_row(*(escape(str(r.get(k) or "")) for k in ("standard", "name", "symbol", "contractAddress")))
        console.print()
        console.print(table)
        console.print()
