"""
Local config store: a JSON file with dotted-path access.

The file lives at ``~/.gamebuild/config.json`` unless GAMEBUILD_HOME or
the global ``--config`` option points elsewhere. It holds the bearer
token and API base URL under ``auth.*``, the linked project under
``project.*``, and any other keys the user chooses to set.
"""

from __future__ import annotations

import copy
import json
import logging
import math
import os
import re
from pathlib import Path
from typing import Any, Optional

from . import GAMEBUILD_HOME
from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"
SENSITIVE_KEYS = ("token", "password", "secret", "key", "apikey")
NUMBER_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


def default_config_path() -> Path:
    """Resolve the config file path from GAMEBUILD_HOME.

    Returns:
        Path: ``<home>/config.json`` with ``~`` expanded.
    """
    home = os.environ.get("GAMEBUILD_HOME", GAMEBUILD_HOME)
    return Path(home).expanduser() / CONFIG_FILENAME


class ConfigStore:
    """Nested JSON key-value store backed by a single file.

    Args:
        path: Config file location. Defaults to :func:`default_config_path`.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path).expanduser() if path else default_config_path()
        self._data: dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """(Re)read the file. A missing or corrupt file yields an empty store."""
        self._data = {}
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable config %s: %s", self.path, exc)
            return
        if isinstance(data, dict):
            self._data = data
        else:
            logger.warning("Ignoring config %s: top level is not an object", self.path)

    def save(self) -> None:
        """Write the whole store back to disk.

        Raises:
            ConfigError: If the file cannot be written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Failed to save config: {exc}") from exc
        logger.debug("Saved config to %s", self.path)

    def get(self, key: str) -> Any:
        """Look up a dotted key such as ``auth.baseUrl``.

        Returns:
            The stored value, or None when any path segment is missing.
        """
        value: Any = self._data
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return None
        return value

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` at a dotted key, creating parent objects as needed."""
        parts = key.split(".")
        current = self._data
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]
        current[parts[-1]] = value

    def delete(self, key: str) -> None:
        """Remove a dotted key. Missing keys are ignored."""
        parts = key.split(".")
        current = self._data
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                return
            current = current[part]
        current.pop(parts[-1], None)

    def all(self) -> dict[str, Any]:
        """Return a copy of the whole store."""
        return copy.deepcopy(self._data)

    def clear(self) -> None:
        """Drop every key (call :meth:`save` to persist)."""
        self._data = {}

    @property
    def token(self) -> Optional[str]:
        """The stored bearer token, if any."""
        return self.get("auth.token") or None


def coerce_value(raw: str) -> Any:
    """Turn a command-line string into the value ``config set`` stores.

    ``true``/``false`` become booleans, numeric text becomes int or float,
    text opening with ``{`` or ``[`` is parsed as JSON when it is valid.
    Everything else stays a string.

    Args:
        raw: The value as typed by the user.

    Returns:
        The coerced value.
    """
    lowered = raw.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False

    number = _parse_number(raw)
    if number is not None:
        return number

    if raw.startswith(("{", "[")):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            pass
    return raw


def _parse_number(raw: str) -> int | float | None:
    """Parse finite int/float text, else None.

    Only plain ASCII decimal syntax counts; ``1_000`` or non-ASCII digits
    stay text.
    """
    text = raw.strip()
    if not NUMBER_RE.fullmatch(text):
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def is_sensitive(key: str) -> bool:
    """Whether a dotted key names a credential-like value."""
    lowered = key.lower()
    return any(marker in lowered for marker in SENSITIVE_KEYS)


def mask_value(key: str, value: Any) -> Any:
    """Mask string values stored under sensitive keys.

    Long secrets keep their first and last four characters so they stay
    recognisable; short ones are hidden entirely.
    """
    if isinstance(value, str) and is_sensitive(key):
        if len(value) > 8:
            return f"{value[:4]}...{value[-4:]}"
        return "***"
    return value


def flatten(data: dict[str, Any], prefix: str = "") -> list[tuple[str, Any]]:
    """Flatten nested objects into ``(dotted_key, leaf)`` pairs.

    Lists are leaves; empty objects are kept as leaves so they still show.
    """
    rows: list[tuple[str, Any]] = []
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict) and value:
            rows.extend(flatten(value, full_key))
        else:
            rows.append((full_key, value))
    return rows
