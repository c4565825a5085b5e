"""Deployments and the per-game-type platform table."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..models import PlatformOption
from .base import BaseService

DEPLOYING = "deploying"

_PLATFORMS: Dict[str, List[tuple[str, str, str]]] = {
    "web": [
        ("GameBuild Hosting", "gamebuild", "Built-in hosting platform"),
        ("Netlify", "netlify", "Deploy to Netlify"),
        ("Vercel", "vercel", "Deploy to Vercel"),
        ("Firebase", "firebase", "Deploy to Firebase Hosting"),
        ("GitHub Pages", "github-pages", "Deploy to GitHub Pages"),
    ],
    "mobile": [
        ("App Store", "app-store", "Deploy to Apple App Store"),
        ("Google Play", "google-play", "Deploy to Google Play Store"),
        ("TestFlight", "testflight", "Deploy to TestFlight (iOS)"),
        ("Internal Testing", "internal-testing", "Internal testing track"),
    ],
    "desktop": [
        ("Steam", "steam", "Deploy to Steam"),
        ("Itch.io", "itch", "Deploy to Itch.io"),
        ("Microsoft Store", "microsoft-store", "Deploy to Microsoft Store"),
        ("Direct Download", "direct", "Generate downloadable packages"),
    ],
    "console": [
        ("Nintendo eShop", "nintendo-eshop", "Deploy to Nintendo eShop"),
        ("PlayStation Store", "playstation-store", "Deploy to PlayStation Store"),
        ("Xbox Store", "xbox-store", "Deploy to Xbox Store"),
    ],
}
_DEFAULT_PLATFORM = ("GameBuild Hosting", "gamebuild", "Built-in hosting platform")


def available_platforms(game_type: Optional[str]) -> List[PlatformOption]:
    """Deployment targets for a game platform; unknown types get hosting only."""
    rows = _PLATFORMS.get(game_type or "", [_DEFAULT_PLATFORM])
    return [PlatformOption(name=n, value=v, description=d) for n, v, d in rows]


class DeployService(BaseService):
    """Calls behind ``gamebuild deploy``."""

    def start_deployment(self, build_id: str, environment: str, platform: str) -> Dict[str, Any]:
        return self.client.post(
            "/v1/deployments", "start deployment",
            json={"buildId": build_id, "environment": environment, "platform": platform},
        )

    def get_deployment(self, deployment_id: str) -> Dict[str, Any]:
        return self.client.get(f"/v1/deployments/{deployment_id}", "get deployment")

    def list_deployments(self, game_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        return self.client.get_field(
            f"/v1/games/{game_id}/deployments", "list deployments", "deployments", [],
            params={"limit": limit},
        )

    def get_latest_deployment(self, game_id: str) -> Optional[Dict[str, Any]]:
        deployments = self.list_deployments(game_id, limit=1)
        return deployments[0] if deployments else None

    def rollback_deployment(self, deployment_id: str) -> Dict[str, Any]:
        return self.client.post(f"/v1/deployments/{deployment_id}/rollback", "rollback deployment")

    def get_logs(self, deployment_id: str) -> str:
        return self.client.get_field(
            f"/v1/deployments/{deployment_id}/logs", "get logs", "logs", "",
        )

    def get_status(self, deployment_id: str) -> str:
        return self.client.get_field(
            f"/v1/deployments/{deployment_id}", "get deployment", "status", "",
        )

    def get_latest_successful_build(self, game_id: str) -> Optional[Dict[str, Any]]:
        builds = self.client.get_field(
            f"/v1/games/{game_id}/builds", "get latest build", "builds", [],
            params={"status": "success", "limit": 1},
        )
        return builds[0] if builds else None
