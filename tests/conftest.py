"""Shared test fixtures for gamebuild."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlsplit

import pytest
import requests

from gamebuild.config import ConfigStore
from gamebuild.project import write_project


def make_response(
    status: int = 200, body: Any = None, url: str = "", raw: Optional[bytes] = None,
) -> requests.Response:
    """Build a real ``requests.Response`` without touching the network."""
    resp = requests.Response()
    resp.status_code = status
    resp.url = url
    resp.encoding = "utf-8"
    if raw is not None:
        resp._content = raw
    elif body is None:
        resp._content = b""
    else:
        resp._content = json.dumps(body).encode("utf-8")
    resp._content_consumed = True
    return resp


@dataclass
class Call:
    method: str
    path: str
    params: Optional[dict] = None
    json: Any = None
    files: Any = None


class FakeSession:
    """Stands in for ``requests.Session``: routes by (METHOD, path), records calls.

    A route may hold a list of responses; they are served in order and
    the last one repeats.
    """

    def __init__(self) -> None:
        self.headers: dict[str, str] = {}
        self.calls: list[Call] = []
        self.routes: dict[tuple[str, str], list[requests.Response]] = {}

    def add(self, method: str, path: str, body: Any = None, status: int = 200,
            raw: Optional[bytes] = None) -> None:
        self.routes.setdefault((method.upper(), path), []).append(
            make_response(status, body, url=path, raw=raw)
        )

    def paths(self, method: Optional[str] = None) -> list[str]:
        return [c.path for c in self.calls if method is None or c.method == method]

    def _respond(self, method: str, url: str) -> requests.Response:
        path = urlsplit(url).path
        queue = self.routes.get((method, path))
        if not queue:
            return make_response(404, {"message": f"No route for {method} {path}"}, url=url)
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def request(self, method, url, params=None, json=None, timeout=None, **kwargs):
        self.calls.append(Call(method, urlsplit(url).path, params, json))
        return self._respond(method, url)

    def get(self, url, stream=False, timeout=None, **kwargs):
        self.calls.append(Call("GET", urlsplit(url).path))
        return self._respond("GET", url)

    def post(self, url, files=None, timeout=None, **kwargs):
        self.calls.append(Call("POST", urlsplit(url).path, files=files))
        return self._respond("POST", url)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def gamebuild_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point GAMEBUILD_HOME at a temporary directory."""
    home = tmp_path / ".gamebuild"
    monkeypatch.setenv("GAMEBUILD_HOME", str(home))
    return home


@pytest.fixture
def store(gamebuild_home: Path) -> ConfigStore:
    """An empty config store inside the temporary home."""
    return ConfigStore()


@pytest.fixture
def logged_in(store: ConfigStore) -> ConfigStore:
    """Config store holding a token and a test API URL."""
    store.set("auth.token", "test-token-0123456789")
    store.set("auth.baseUrl", "https://api.test")
    store.save()
    return store


@pytest.fixture
def fake_api(monkeypatch: pytest.MonkeyPatch) -> FakeSession:
    """Replace every ``requests.Session()`` the code creates with one FakeSession."""
    session = FakeSession()
    monkeypatch.setattr(requests, "Session", lambda: session)
    return session


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A linked project with one source file, used as the working directory."""
    root = tmp_path / "mygame"
    (root / "src").mkdir(parents=True)
    (root / "src" / "index.js").write_text("console.log('hi');\n")
    write_project("game-1", root)
    monkeypatch.chdir(root)
    return root
