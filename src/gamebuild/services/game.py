"""Game CRUD."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .base import BaseService


class GameService(BaseService):
    """Calls behind ``gamebuild game``."""

    def create_game(self, name: str, platform: str, template: Optional[str]) -> Dict[str, Any]:
        return self.client.post(
            "/v1/games", "create game",
            json={"name": name, "platform": platform, "template": template},
        )

    def list_games(self) -> List[Dict[str, Any]]:
        return self.client.get_field("/v1/games", "list games", "games", [])

    def get_game(self, game_id: str) -> Dict[str, Any]:
        return self.client.get(f"/v1/games/{game_id}", "get game")

    def delete_game(self, game_id: str) -> None:
        self.client.delete(f"/v1/games/{game_id}", "delete game")
