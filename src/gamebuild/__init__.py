"""
GameBuild — command line interface for game development.

Create games, run builds, ship deployments, and manage the platform's
identity, guild, asset, ad, and analytics services from the terminal.
"""

import os

__version__ = "1.0.0"
__author__ = "GameBuild"

GAMEBUILD_HOME = os.environ.get("GAMEBUILD_HOME", "~/.gamebuild")
DEFAULT_BASE_URL = "https://api.gamebuild.com"
PROJECT_FILE = ".gamebuild.json"
