"""Guild membership."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .base import BaseService


class GuildService(BaseService):
    """Calls behind ``gamebuild guild``."""

    def create_guild(self, name: str, description: Optional[str] = None) -> Dict[str, Any]:
        return self.client.post(
            "/v1/guilds", "create guild",
            json={"name": name, "description": description},
        )

    def list_guilds(self) -> List[Dict[str, Any]]:
        return self.client.get_field("/v1/guilds", "list guilds", "guilds", [])

    def get_guild(self, guild_id: str) -> Dict[str, Any]:
        return self.client.get(f"/v1/guilds/{guild_id}", "get guild")

    def join_guild(self, guild_id: str) -> None:
        self.client.post(f"/v1/guilds/{guild_id}/join", "join guild")

    def leave_guild(self, guild_id: str) -> None:
        self.client.post(f"/v1/guilds/{guild_id}/leave", "leave guild")
