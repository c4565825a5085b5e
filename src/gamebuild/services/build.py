"""Builds: start, inspect, list, logs, and artifact download."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..errors import ProjectError
from ..project import collect_project_files
from .base import BaseService

logger = logging.getLogger(__name__)

BUILDING = "building"


class BuildService(BaseService):
    """Calls behind ``gamebuild build``."""

    def prepare_upload(self, root: Optional[Path] = None) -> List[str]:
        """Collect the project files a build would upload.

        Raises:
            ProjectError: If there is nothing to upload.
        """
        files = collect_project_files(root)
        if not files:
            raise ProjectError("Failed to start build: No project files found to upload")
        logger.info("Prepared %d project files for upload", len(files))
        return files

    def start_build(
        self, game_id: str, environment: str, platform: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self.client.post(
            "/v1/builds", "start build",
            json={"gameId": game_id, "environment": environment, "platform": platform},
        )

    def get_build(self, build_id: str) -> Dict[str, Any]:
        return self.client.get(f"/v1/builds/{build_id}", "get build")

    def list_builds(
        self, game_id: str, limit: int = 10, status: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        return self.client.get_field(
            f"/v1/games/{game_id}/builds", "list builds", "builds", [],
            params={"limit": limit, "status": status},
        )

    def get_latest_build(self, game_id: str) -> Optional[Dict[str, Any]]:
        builds = self.list_builds(game_id, limit=1)
        return builds[0] if builds else None

    def get_logs(self, build_id: str) -> str:
        return self.client.get_field(f"/v1/builds/{build_id}/logs", "get logs", "logs", "")

    def get_status(self, build_id: str) -> str:
        return self.client.get_field(f"/v1/builds/{build_id}", "get build", "status", "")

    def download_build(self, build_id: str, output_dir: Path) -> Path:
        """Save the build artifact as ``build-<id>.zip`` under ``output_dir``."""
        dest = Path(output_dir) / f"build-{build_id}.zip"
        return self.client.download(f"/v1/builds/{build_id}/download", dest, "download build")
