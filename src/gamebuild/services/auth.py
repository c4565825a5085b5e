"""Token validation and the current user."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from ..errors import ApiError
from .base import ApiClient, BaseService

logger = logging.getLogger(__name__)


class AuthService(BaseService):
    """Calls behind ``gamebuild auth``."""

    def validate_token(
        self, token: str, base_url: str, session: Optional[requests.Session] = None,
    ) -> bool:
        """Check a token against ``/v1/user/me`` without touching stored config.

        Returns:
            True when the server answers 200, False on any failure.
        """
        probe = ApiClient(base_url=base_url, token=token, session=session)
        try:
            probe.get("/v1/user/me", "validate token")
        except ApiError as exc:
            logger.debug("Token validation failed: %s", exc)
            return False
        return True

    def get_user_info(self) -> Dict[str, Any]:
        """Profile of the logged-in user."""
        return self.client.get("/v1/user/me", "get user info")
