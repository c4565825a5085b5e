"""Tests for ApiClient: headers, query handling, error messages, downloads.

All HTTP is served by the FakeSession from conftest.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import requests

from gamebuild import __version__
from gamebuild.errors import ApiError
from gamebuild.services.base import ApiClient, error_message

from conftest import FakeSession, make_response


def _client(session: FakeSession, token: str | None = "tok") -> ApiClient:
    return ApiClient(base_url="https://api.test/", token=token, session=session)


class TestHeaders:
    """Session headers set once per client."""

    def test_bearer_and_user_agent(self):
        session = FakeSession()
        _client(session)
        assert session.headers["Authorization"] == "Bearer tok"
        assert session.headers["User-Agent"] == f"GameBuild-CLI/{__version__}"
        assert session.headers["Content-Type"] == "application/json"

    def test_no_token_no_authorization(self):
        session = FakeSession()
        _client(session, token=None)
        assert "Authorization" not in session.headers

    def test_default_base_url(self):
        assert ApiClient(session=FakeSession()).base_url == "https://api.gamebuild.com"


class TestRequest:
    """Successful calls."""

    def test_returns_json(self):
        session = FakeSession()
        session.add("GET", "/v1/games", {"games": [{"id": "g1"}]})
        assert _client(session).get("/v1/games", "list games") == {"games": [{"id": "g1"}]}

    def test_none_params_dropped(self):
        session = FakeSession()
        session.add("GET", "/v1/ads/campaigns", {"campaigns": []})
        _client(session).get("/v1/ads/campaigns", "list campaigns", params={"status": None, "limit": 5})
        assert session.calls[0].params == {"limit": 5}

    def test_all_none_params_sends_none(self):
        session = FakeSession()
        session.add("GET", "/v1/x", {})
        _client(session).get("/v1/x", "x", params={"a": None})
        assert session.calls[0].params is None

    def test_empty_body_is_empty_dict(self):
        session = FakeSession()
        session.add("DELETE", "/v1/games/g1", None, status=204)
        assert _client(session).delete("/v1/games/g1", "delete game") == {}

    def test_json_body_sent(self):
        session = FakeSession()
        session.add("POST", "/v1/guilds", {"id": "gd"})
        _client(session).post("/v1/guilds", "create guild", json={"name": "n"})
        assert session.calls[0].json == {"name": "n"}


class TestErrors:
    """Failure messages name the action and prefer the server's message."""

    def test_server_message_used(self):
        session = FakeSession()
        session.add("GET", "/v1/games", {"message": "Quota exceeded"}, status=429)
        with pytest.raises(ApiError) as exc_info:
            _client(session).get("/v1/games", "list games")
        assert str(exc_info.value) == "Failed to list games: Quota exceeded"
        assert exc_info.value.status_code == 429

    def test_non_json_error_falls_back_to_http_text(self):
        session = FakeSession()
        session.add("GET", "/v1/games/x", raw=b"<html>oops</html>", status=500)
        with pytest.raises(ApiError) as exc_info:
            _client(session).get("/v1/games/x", "get game")
        message = str(exc_info.value)
        assert message.startswith("Failed to get game: ")
        assert "500" in message

    def test_transport_error(self):
        session = FakeSession()

        def boom(*args, **kwargs):
            raise requests.ConnectionError("connection refused")

        session.request = boom
        with pytest.raises(ApiError) as exc_info:
            _client(session).get("/v1/games", "list games")
        assert str(exc_info.value) == "Failed to list games: connection refused"
        assert exc_info.value.status_code is None

    def test_invalid_json_success_body(self):
        session = FakeSession()
        session.add("GET", "/v1/games", raw=b"not json")
        with pytest.raises(ApiError, match="invalid JSON"):
            _client(session).get("/v1/games", "list games")

    def test_error_message_prefers_body(self):
        resp = make_response(400, {"message": "Bad name"})
        exc = requests.HTTPError("400 Client Error", response=resp)
        assert error_message(exc) == "Bad name"

    def test_error_message_without_message_field(self):
        resp = make_response(400, {"error": "x"})
        exc = requests.HTTPError("400 Client Error", response=resp)
        assert error_message(exc) == "400 Client Error"


class TestDownload:
    """Streaming a binary body to disk."""

    def test_writes_file(self, tmp_path: Path):
        session = FakeSession()
        session.add("GET", "/v1/builds/b1/download", raw=b"PK\x03\x04zipdata")
        dest = tmp_path / "out" / "build-b1.zip"
        result = _client(session).download("/v1/builds/b1/download", dest, "download build")
        assert result == dest
        assert dest.read_bytes() == b"PK\x03\x04zipdata"

    def test_http_error(self, tmp_path: Path):
        session = FakeSession()
        session.add("GET", "/v1/builds/b1/download", {"message": "Build not finished"}, status=409)
        with pytest.raises(ApiError, match="Failed to download build: Build not finished"):
            _client(session).download("/v1/builds/b1/download", tmp_path / "x.zip", "download build")

    def test_interrupted_stream_leaves_no_file(self, tmp_path: Path):
        def broken(chunk_size=None):
            yield b"partial"
            raise requests.ConnectionError("connection reset")

        resp = make_response(200, raw=b"")
        resp.iter_content = broken
        session = FakeSession()
        session.routes[("GET", "/v1/builds/b1/download")] = [resp]
        dest = tmp_path / "build-b1.zip"

        with pytest.raises(ApiError, match="Failed to download build: connection reset"):
            _client(session).download("/v1/builds/b1/download", dest, "download build")

        assert not dest.exists()
        assert list(tmp_path.iterdir()) == []

    def test_failure_keeps_previous_artifact(self, tmp_path: Path):
        dest = tmp_path / "build-b1.zip"
        dest.write_bytes(b"good")
        session = FakeSession()
        session.add("GET", "/v1/builds/b1/download", {"message": "gone"}, status=404)

        with pytest.raises(ApiError):
            _client(session).download("/v1/builds/b1/download", dest, "download build")

        assert dest.read_bytes() == b"good"


class TestGetField:
    """Unwrapping one field of an object body."""

    def test_returns_field(self):
        session = FakeSession()
        session.add("GET", "/v1/games", {"games": [{"id": "g1"}]})
        assert _client(session).get_field("/v1/games", "list games", "games", []) == [{"id": "g1"}]

    def test_missing_or_null_field_gives_default(self):
        session = FakeSession()
        session.add("GET", "/v1/games", {"games": None})
        assert _client(session).get_field("/v1/games", "list games", "games", []) == []

    def test_non_object_body(self):
        session = FakeSession()
        session.add("GET", "/v1/games", [{"id": "g1"}])
        with pytest.raises(ApiError, match="Failed to list games: unexpected response"):
            _client(session).get_field("/v1/games", "list games", "games", [])
