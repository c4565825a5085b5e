"""
GameBuild CLI — game development from the command line.

This package organizes the CLI into modular command groups.
Each group lives in its own module; the main Click group is defined
here and every subcommand is registered via a register function.

Entry point: gamebuild.cli:main
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click

from .. import __version__
from ._common import CliState


@click.group()
@click.version_option(version=__version__, prog_name="gamebuild")
@click.option("-v", "--verbose", is_flag=True, help="Log API calls and internals to stderr.")
@click.option(
    "--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
    default=None, help="Config file to use instead of ~/.gamebuild/config.json.",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Optional[Path]):
    """GameBuild — build, deploy, and run your games.

    Games, builds, and deployments, plus Web3 identities, guilds,
    assets, ads, and analytics.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )
    ctx.obj = CliState(config_path)


# ---------------------------------------------------------------------------
# Register all command groups/commands from modular files
# ---------------------------------------------------------------------------

from .auth import register_auth_commands
from .game import register_game_commands
from .build import register_build_commands
from .deploy import register_deploy_commands
from .config_cmd import register_config_commands
from .identity import register_identity_commands
from .guild import register_guild_commands
from .asset import register_asset_commands
from .ad import register_ad_commands
from .analytics import register_analytics_commands

register_auth_commands(main)
register_game_commands(main)
register_build_commands(main)
register_deploy_commands(main)
register_config_commands(main)
register_identity_commands(main)
register_guild_commands(main)
register_asset_commands(main)
register_ad_commands(main)
register_analytics_commands(main)
