"""Ad campaigns, placements, and ad revenue."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .base import BaseService

AD_TYPES = ("banner", "video", "interstitial", "rewarded")


class AdService(BaseService):
    """Calls behind ``gamebuild ad``."""

    def create_campaign(
        self,
        name: str,
        ad_type: str,
        budget: float,
        target_audience: Optional[str] = None,
        duration: Optional[int] = None,
    ) -> Dict[str, Any]:
        return self.client.post(
            "/v1/ads/campaigns", "create campaign",
            json={
                "name": name,
                "type": ad_type,
                "budget": budget,
                "targetAudience": target_audience,
                "duration": duration,
            },
        )

    def list_campaigns(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        return self.client.get_field(
            "/v1/ads/campaigns", "list campaigns", "campaigns", [], params={"status": status},
        )

    def get_campaign(self, campaign_id: str) -> Dict[str, Any]:
        return self.client.get(f"/v1/ads/campaigns/{campaign_id}", "get campaign")

    def start_campaign(self, campaign_id: str) -> None:
        self.client.post(f"/v1/ads/campaigns/{campaign_id}/start", "start campaign")

    def pause_campaign(self, campaign_id: str) -> None:
        self.client.post(f"/v1/ads/campaigns/{campaign_id}/pause", "pause campaign")

    def get_campaign_stats(self, campaign_id: str, period: str) -> Dict[str, Any]:
        return self.client.get(
            f"/v1/ads/campaigns/{campaign_id}/stats", "get campaign stats",
            params={"period": period},
        )

    def update_campaign(self, campaign_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.patch(
            f"/v1/ads/campaigns/{campaign_id}", "update campaign", json=updates,
        )

    def delete_campaign(self, campaign_id: str) -> None:
        self.client.delete(f"/v1/ads/campaigns/{campaign_id}", "delete campaign")

    def list_placements(self) -> List[Dict[str, Any]]:
        return self.client.get_field("/v1/ads/placements", "list placements", "placements", [])

    def create_placement(self, placement: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.post("/v1/ads/placements", "create placement", json=placement)

    def get_revenue(self, period: str, game_id: Optional[str] = None) -> Dict[str, Any]:
        return self.client.get(
            "/v1/ads/revenue", "get revenue data",
            params={"period": period, "gameId": game_id},
        )
