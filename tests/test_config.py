"""Tests for the local config store, value coercion, and masking."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from gamebuild.config import (
    ConfigStore,
    coerce_value,
    default_config_path,
    flatten,
    is_sensitive,
    mask_value,
)
from gamebuild.errors import ConfigError


# ---------------------------------------------------------------------------
# ConfigStore
# ---------------------------------------------------------------------------


class TestConfigStore:
    """Dotted-path get/set/delete and persistence."""

    def test_default_path_follows_env(self, gamebuild_home: Path):
        assert default_config_path() == gamebuild_home / "config.json"

    def test_missing_file_is_empty(self, store: ConfigStore):
        assert store.all() == {}
        assert store.get("auth.token") is None

    def test_set_get_nested(self, store: ConfigStore):
        store.set("auth.token", "abc")
        store.set("auth.baseUrl", "https://api.test")
        assert store.get("auth.token") == "abc"
        assert store.get("auth") == {"token": "abc", "baseUrl": "https://api.test"}

    def test_set_replaces_scalar_parent(self, store: ConfigStore):
        store.set("ui", "dark")
        store.set("ui.theme", "light")
        assert store.get("ui") == {"theme": "light"}

    def test_get_through_scalar_is_none(self, store: ConfigStore):
        store.set("ui", "dark")
        assert store.get("ui.theme") is None

    def test_delete(self, store: ConfigStore):
        store.set("a.b", 1)
        store.set("a.c", 2)
        store.delete("a.b")
        assert store.get("a") == {"c": 2}

    def test_delete_missing_is_noop(self, store: ConfigStore):
        store.set("a", 1)
        store.delete("x.y.z")
        store.delete("a.b")
        assert store.all() == {"a": 1}

    def test_round_trip_through_disk(self, store: ConfigStore, gamebuild_home: Path):
        store.set("project.gameId", "g-1")
        store.set("flags.beta", True)
        store.save()

        reloaded = ConfigStore()
        assert reloaded.get("project.gameId") == "g-1"
        assert reloaded.get("flags.beta") is True
        on_disk = json.loads((gamebuild_home / "config.json").read_text())
        assert on_disk == {"project": {"gameId": "g-1"}, "flags": {"beta": True}}

    def test_all_is_a_copy(self, store: ConfigStore):
        store.set("a.b", 1)
        snapshot = store.all()
        snapshot["a"]["b"] = 99
        assert store.get("a.b") == 1

    def test_clear(self, store: ConfigStore):
        store.set("a", 1)
        store.clear()
        assert store.all() == {}

    def test_corrupt_file_loads_empty(self, gamebuild_home: Path):
        gamebuild_home.mkdir(parents=True)
        (gamebuild_home / "config.json").write_text("{not json")
        assert ConfigStore().all() == {}

    def test_non_object_file_loads_empty(self, gamebuild_home: Path):
        gamebuild_home.mkdir(parents=True)
        (gamebuild_home / "config.json").write_text("[1, 2]")
        assert ConfigStore().all() == {}

    def test_save_failure_raises_config_error(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = ConfigStore(blocker / "config.json")
        store.set("a", 1)
        with pytest.raises(ConfigError, match="Failed to save config"):
            store.save()

    def test_token_property(self, store: ConfigStore):
        assert store.token is None
        store.set("auth.token", "")
        assert store.token is None
        store.set("auth.token", "t")
        assert store.token == "t"


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------


class TestCoerceValue:
    """Typed storage for ``config set``."""

    @pytest.mark.parametrize("raw, expected", [
        ("true", True),
        ("FALSE", False),
        ("42", 42),
        ("-7", -7),
        ("3.5", 3.5),
        ("1e3", 1000.0),
        ('{"a": 1}', {"a": 1}),
        ("[1, 2]", [1, 2]),
    ])
    def test_typed_values(self, raw, expected):
        value = coerce_value(raw)
        assert value == expected
        assert type(value) is type(expected)

    @pytest.mark.parametrize("raw", [
        "hello", "", "inf", "nan", "{broken", "[1,", "1.2.3", "1_000", "\u0663", "1e5x",
    ])
    def test_stays_string(self, raw):
        assert coerce_value(raw) == raw


# ---------------------------------------------------------------------------
# Masking and flattening
# ---------------------------------------------------------------------------


class TestMasking:
    """Sensitive values in the config table."""

    @pytest.mark.parametrize("key", ["auth.token", "db.password", "aws.secretAccess", "stripe.apiKey", "KEY"])
    def test_sensitive_keys(self, key):
        assert is_sensitive(key)

    def test_plain_key(self):
        assert not is_sensitive("ui.theme")

    def test_long_value_keeps_ends(self):
        assert mask_value("auth.token", "abcdefghijkl") == "abcd...ijkl"

    def test_short_value_hidden(self):
        assert mask_value("auth.token", "short") == "***"
        assert mask_value("db.password", "12345678") == "***"

    def test_non_sensitive_untouched(self):
        assert mask_value("ui.theme", "a-very-long-theme-name") == "a-very-long-theme-name"

    def test_non_string_untouched(self):
        assert mask_value("api.apiKey", 123456789012) == 123456789012


class TestFlatten:
    """Dotted rows for the table view."""

    def test_nested(self):
        data = {"auth": {"token": "t", "baseUrl": "u"}, "n": 1, "empty": {}, "list": [1]}
        assert flatten(data) == [
            ("auth.token", "t"),
            ("auth.baseUrl", "u"),
            ("n", 1),
            ("empty", {}),
            ("list", [1]),
        ]
