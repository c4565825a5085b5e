"""Analytics reports, exports, realtime metrics, and event tracking."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .base import BaseService

REPORTS = {
    "overview": "get analytics overview",
    "players": "get player analytics",
    "revenue": "get revenue analytics",
    "events": "get event analytics",
    "retention": "get retention analytics",
}


class AnalyticsService(BaseService):
    """Calls behind ``gamebuild analytics``."""

    def get_report(
        self,
        kind: str,
        period: str,
        game_id: Optional[str] = None,
        event_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Fetch one of the aggregate reports named in :data:`REPORTS`."""
        return self.client.get(
            f"/v1/analytics/{kind}", REPORTS[kind],
            params={"period": period, "gameId": game_id, "eventType": event_type},
        )

    def export_data(self, data_type: str, fmt: str, period: str) -> Dict[str, Any]:
        return self.client.post(
            "/v1/analytics/export", "export data",
            json={"type": data_type, "format": fmt, "period": period},
        )

    def get_realtime(self, game_id: Optional[str] = None) -> Dict[str, Any]:
        return self.client.get(
            "/v1/analytics/realtime", "get real-time data", params={"gameId": game_id},
        )

    def track_event(self, event: str, properties: Optional[Dict[str, Any]] = None) -> None:
        self.client.post(
            "/v1/analytics/track", "track event",
            json={"event": event, "properties": properties},
        )

    def create_dashboard(self, name: str, widgets: List[Any]) -> Dict[str, Any]:
        return self.client.post(
            "/v1/analytics/dashboards", "create dashboard",
            json={"name": name, "widgets": widgets},
        )

    def list_dashboards(self) -> List[Dict[str, Any]]:
        return self.client.get_field("/v1/analytics/dashboards", "get dashboards", "dashboards", [])

    def get_funnel(self, funnel_id: str, period: str) -> Dict[str, Any]:
        return self.client.get(
            f"/v1/analytics/funnels/{funnel_id}", "get funnel analysis",
            params={"period": period},
        )

    def get_segmentation(self, segment_type: str, period: str) -> Dict[str, Any]:
        return self.client.get(
            "/v1/analytics/segmentation", "get segmentation data",
            params={"segmentType": segment_type, "period": period},
        )
