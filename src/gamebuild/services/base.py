"""
Authenticated HTTP client shared by every domain service.

One ``requests.Session`` per client carries the bearer token and the
CLI's User-Agent. Every failure is turned into an :class:`ApiError`
whose message names the action and, when the server sent one, the
server's own ``message`` field.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from .. import DEFAULT_BASE_URL, __version__
from ..errors import ApiError

logger = logging.getLogger(__name__)

USER_AGENT = f"GameBuild-CLI/{__version__}"
DEFAULT_TIMEOUT = 30


def error_message(exc: requests.RequestException) -> str:
    """Pick the most useful text out of a failed request.

    Prefers the JSON body's ``message`` field, then the transport
    error's own text.
    """
    response = getattr(exc, "response", None)
    if response is not None:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
    return str(exc)


class ApiClient:
    """Thin wrapper over ``requests`` for the ``/v1`` REST API.

    Args:
        base_url: API root, e.g. ``https://api.gamebuild.com``.
        token: Bearer token, or None for unauthenticated calls.
        session: Optional pre-built session (tests inject a mock).
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        })
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def request(
        self,
        method: str,
        path: str,
        action: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """Issue one API call and return the decoded JSON body.

        Args:
            method: HTTP verb.
            path: Path below the base URL, starting with ``/v1``.
            action: What the call does, used in error messages
                (``"list games"`` → ``"Failed to list games: ..."``).
            params: Query parameters; None values are dropped.
            json: Request body.

        Returns:
            Parsed JSON, or an empty dict for an empty body.

        Raises:
            ApiError: On transport errors and non-2xx responses.
        """
        query = {k: v for k, v in (params or {}).items() if v is not None}
        logger.debug("%s %s params=%s", method, path, query)
        try:
            resp = self.session.request(
                method, self._url(path), params=query or None, json=json,
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise ApiError(f"Failed to {action}: {error_message(exc)}", status) from exc

        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            raise ApiError(f"Failed to {action}: invalid JSON response") from exc

    def get(self, path: str, action: str, **kwargs: Any) -> Any:
        return self.request("GET", path, action, **kwargs)

    def post(self, path: str, action: str, **kwargs: Any) -> Any:
        return self.request("POST", path, action, **kwargs)

    def patch(self, path: str, action: str, **kwargs: Any) -> Any:
        return self.request("PATCH", path, action, **kwargs)

    def delete(self, path: str, action: str, **kwargs: Any) -> Any:
        return self.request("DELETE", path, action, **kwargs)

    def get_field(self, path: str, action: str, key: str, default: Any = None, **kwargs: Any) -> Any:
        """GET a JSON object and return one of its fields.

        A missing or empty field yields ``default``.

        Raises:
            ApiError: As :meth:`request`, or when the body is not an object.
        """
        data = self.get(path, action, **kwargs)
        if not isinstance(data, dict):
            raise ApiError(f"Failed to {action}: unexpected response")
        return data.get(key) or default

    def download(self, path: str, dest: Path, action: str, chunk_size: int = 65536) -> Path:
        """Stream a binary response body into ``dest``.

        The body is written to ``<dest>.part`` and renamed once complete,
        so a failed download never leaves a file at ``dest``.

        Raises:
            ApiError: On transport errors, non-2xx responses, or write failures.
        """
        logger.debug("GET %s -> %s", path, dest)
        partial = dest.with_name(dest.name + ".part")
        try:
            with self.session.get(self._url(path), stream=True, timeout=self.timeout) as resp:
                resp.raise_for_status()
                dest.parent.mkdir(parents=True, exist_ok=True)
                with partial.open("wb") as fh:
                    for chunk in resp.iter_content(chunk_size=chunk_size):
                        if chunk:
                            fh.write(chunk)
            partial.replace(dest)
        except requests.RequestException as exc:
            partial.unlink(missing_ok=True)
            status = exc.response.status_code if exc.response is not None else None
            raise ApiError(f"Failed to {action}: {error_message(exc)}", status) from exc
        except OSError as exc:
            partial.unlink(missing_ok=True)
            raise ApiError(f"Failed to {action}: {exc}") from exc
        return dest


class BaseService:
    """Common constructor for the domain services."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client
