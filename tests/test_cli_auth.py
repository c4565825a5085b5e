"""CLI tests for login state: the auth commands and the login gate."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from gamebuild.cli import main
from gamebuild.config import ConfigStore


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


# ---------------------------------------------------------------------------
# Login gate
# ---------------------------------------------------------------------------


GATED = [
    ["game", "list"],
    ["game", "info", "g1"],
    ["game", "init", "-g", "g1"],
    ["build"],
    ["build", "status", "b1"],
    ["build", "list"],
    ["deploy"],
    ["deploy", "list"],
    ["deploy", "rollback", "d1", "-f"],
    ["identity", "list"],
    ["id", "reputation", "i1"],
    ["guild", "list"],
    ["asset", "list"],
    ["asset", "token", "list"],
    ["ad", "list"],
    ["ad", "revenue"],
    ["analytics", "overview"],
    ["stats", "retention"],
    ["analytics", "track", "level_up"],
]


class TestLoginGate:
    """Without a token every remote command prints the hint and calls nothing."""

    @pytest.mark.parametrize("args", GATED, ids=lambda a: " ".join(a))
    def test_gate(self, runner, gamebuild_home, fake_api, args):
        result = runner.invoke(main, args)
        assert result.exit_code == 0, result.output
        assert "Please login first" in result.output
        assert fake_api.calls == []

    def test_gate_runs_before_project_check(self, runner, gamebuild_home, fake_api, tmp_path,
                                            monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(main, ["build", "start"])
        assert "Please login first" in result.output
        assert "No GameBuild project found" not in result.output


# ---------------------------------------------------------------------------
# auth login / logout / status
# ---------------------------------------------------------------------------


class TestAuthLogin:
    """Token validation before anything is stored."""

    def test_login_with_token(self, runner, gamebuild_home, fake_api):
        fake_api.add("GET", "/v1/user/me", {"email": "dev@studio.test"})

        result = runner.invoke(main, ["auth", "login", "-t", "tok-123", "-u", "https://api.test"])

        assert result.exit_code == 0, result.output
        assert "Successfully logged in" in result.output
        assert fake_api.headers["Authorization"] == "Bearer tok-123"
        store = ConfigStore()
        assert store.get("auth.token") == "tok-123"
        assert store.get("auth.baseUrl") == "https://api.test"

    def test_login_default_url(self, runner, gamebuild_home, fake_api):
        fake_api.add("GET", "/v1/user/me", {"email": "dev@studio.test"})
        runner.invoke(main, ["auth", "login", "-t", "tok-123"])
        assert ConfigStore().get("auth.baseUrl") == "https://api.gamebuild.com"

    def test_login_prompts_for_token(self, runner, gamebuild_home, fake_api):
        fake_api.add("GET", "/v1/user/me", {"email": "dev@studio.test"})

        result = runner.invoke(main, ["auth", "login"], input="secret-tok\nhttps://api.test\n")

        assert result.exit_code == 0, result.output
        assert "secret-tok" not in result.output
        assert ConfigStore().get("auth.token") == "secret-tok"

    def test_invalid_token_not_stored(self, runner, gamebuild_home, fake_api):
        fake_api.add("GET", "/v1/user/me", {"message": "Unauthorized"}, status=401)

        result = runner.invoke(main, ["auth", "login", "-t", "bad"])

        assert result.exit_code == 1
        assert "Invalid token" in result.output
        assert ConfigStore().get("auth.token") is None


class TestAuthLogoutStatus:
    """Forgetting the session and reporting it."""

    def test_logout(self, runner, logged_in):
        result = runner.invoke(main, ["auth", "logout"])
        assert result.exit_code == 0
        assert "Successfully logged out" in result.output
        store = ConfigStore()
        assert store.token is None
        assert store.get("auth.baseUrl") is None

    def test_logout_keeps_other_keys(self, runner, logged_in):
        logged_in.set("project.gameId", "g1")
        logged_in.save()
        runner.invoke(main, ["auth", "logout"])
        assert json.loads(logged_in.path.read_text()) == {"auth": {}, "project": {"gameId": "g1"}}

    def test_status_not_logged_in(self, runner, gamebuild_home, fake_api):
        result = runner.invoke(main, ["auth", "status"])
        assert "Not logged in" in result.output
        assert fake_api.calls == []

    def test_status_logged_in(self, runner, logged_in, fake_api):
        fake_api.add("GET", "/v1/user/me", {"email": "dev@studio.test"})
        result = runner.invoke(main, ["auth", "status"])
        assert result.exit_code == 0
        assert "dev@studio.test" in result.output
        assert "https://api.test" in result.output

    def test_status_expired_token(self, runner, logged_in, fake_api):
        fake_api.add("GET", "/v1/user/me", {"message": "expired"}, status=401)
        result = runner.invoke(main, ["auth", "status"])
        assert "Token is invalid or expired" in result.output


class TestGlobalOptions:
    """Options on the root group."""

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "gamebuild" in result.output
        assert "1.0.0" in result.output

    def test_explicit_config_path(self, runner, gamebuild_home, tmp_path):
        custom = tmp_path / "other.json"
        result = runner.invoke(main, ["--config", str(custom), "config", "set", "ui.theme", "dark"])
        assert result.exit_code == 0
        assert json.loads(custom.read_text()) == {"ui": {"theme": "dark"}}
        assert not (gamebuild_home / "config.json").exists()
