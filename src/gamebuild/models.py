"""
Pydantic models for the data the CLI owns locally.

Everything the backend returns is passed through as plain dicts; only
the project marker and the static deployment platform table live here.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class GamePlatform(str, Enum):
    """Platforms a game can target."""

    WEB = "web"
    MOBILE = "mobile"
    DESKTOP = "desktop"
    CONSOLE = "console"


class ProjectMarker(BaseModel):
    """Contents of ``.gamebuild.json``, linking a directory to a remote game."""

    gameId: str
    createdAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    buildPath: str = "./dist"
    platform: str = GamePlatform.WEB.value


class PlatformOption(BaseModel):
    """A deployment target offered for a game type."""

    name: str
    value: str
    description: str
