"""Shared utilities for all CLI command modules.

Provides the Rich console, the per-invocation state object, the
authentication/project gates, error handling, and the small
formatting helpers every command group uses.
"""

from __future__ import annotations

import functools
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

import click
import yaml
from rich.console import Console
from rich.markup import escape

from ..config import ConfigStore
from ..errors import GameBuildError
from ..models import ProjectMarker
from ..project import load_project
from ..services.base import ApiClient, BaseService

console = Console()

NOT_AUTHENTICATED = "[red]Please login first:[/] gamebuild auth login"
NO_PROJECT = '[red]No GameBuild project found.[/] Run "gamebuild game init" first.'

S = TypeVar("S", bound=BaseService)


class CliState:
    """Per-invocation state carried on ``click.Context.obj``.

    Args:
        config_path: Explicit config file, or None for the default.
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        self.config_path = config_path
        self._config: Optional[ConfigStore] = None
        self._client: Optional[ApiClient] = None

    @property
    def config(self) -> ConfigStore:
        if self._config is None:
            self._config = ConfigStore(self.config_path)
        return self._config

    @property
    def client(self) -> ApiClient:
        if self._client is None:
            self._client = ApiClient(
                base_url=self.config.get("auth.baseUrl"),
                token=self.config.token,
            )
        return self._client

    def service(self, cls: type[S]) -> S:
        """Instantiate a domain service over the shared client."""
        return cls(self.client)


def fail(message: str) -> None:
    """Print an error and exit non-zero."""
    console.print(f"[red]Error:[/] {escape(message)}")
    sys.exit(1)


F = TypeVar("F", bound=Callable[..., Any])


def handle_errors(func: F) -> F:
    """Turn GameBuildError into a printed message and exit code 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except GameBuildError as exc:
            fail(str(exc))

    return wrapper  # type: ignore[return-value]


def state_command(func: Callable[..., Any]) -> Callable[..., Any]:
    """Pass :class:`CliState` as the first argument and handle errors."""
    return click.pass_obj(handle_errors(func))


def authenticated(func: Callable[..., Any]) -> Callable[..., Any]:
    """Gate a command on a stored token.

    Without a token the fixed login hint is printed and the command
    returns before any service is built, so no request is made.
    """

    @functools.wraps(func)
    def wrapper(state: CliState, *args: Any, **kwargs: Any) -> Any:
        if not state.config.token:
            console.print(NOT_AUTHENTICATED)
            return None
        return func(state, *args, **kwargs)

    return state_command(wrapper)


def require_project(root: Optional[Path] = None) -> Optional[ProjectMarker]:
    """Load the project marker, printing the init hint when it is missing."""
    project = load_project(root)
    if project is None:
        console.print(NO_PROJECT)
    return project


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

FORMATS = ("table", "json", "yaml")


def format_option(default: str = "table") -> Callable[[F], F]:
    """The ``-f/--format`` option shared by list-style commands."""
    return click.option(
        "-f", "--format", "fmt", type=click.Choice(FORMATS), default=default,
        show_default=True, help="Output format.",
    )


def emit(data: Any, fmt: str) -> None:
    """Write structured data as JSON or YAML, without Rich markup."""
    if fmt == "yaml":
        click.echo(yaml.safe_dump(data, sort_keys=False, default_flow_style=False), nl=False)
    else:
        click.echo(json.dumps(data, indent=2, default=str))


def heading(text: str) -> None:
    console.print(f"\n  [bold cyan]{escape(text)}[/]\n")


def success(text: str) -> None:
    console.print(f"  [green]{escape(text)}[/]")


def warn(text: str) -> None:
    console.print(f"  [yellow]{escape(text)}[/]")


def detail(label: str, value: Any, indent: int = 2) -> None:
    """Print one ``label: value`` line with the value escaped."""
    pad = " " * indent
    console.print(f"{pad}[dim]{escape(label)}:[/] {escape(_text(value))}")


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def number(value: Any) -> str:
    """Thousands-separated numbers; anything else as text."""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        return f"{value:,}"
    return _text(value) or "0"


def signed(value: Any) -> str:
    """Prefix positive numbers with ``+``."""
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return f"+{value}"
    return _text(value)


def _parse_time(raw: Any) -> Optional[datetime]:
    if not isinstance(raw, str) or not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_date(raw: Any) -> str:
    """ISO timestamp → ``YYYY-MM-DD`` (raw text if unparseable)."""
    parsed = _parse_time(raw)
    return parsed.strftime("%Y-%m-%d") if parsed else _text(raw)


def format_datetime(raw: Any) -> str:
    """ISO timestamp → ``YYYY-MM-DD HH:MM:SS`` (raw text if unparseable)."""
    parsed = _parse_time(raw)
    return parsed.strftime("%Y-%m-%d %H:%M:%S") if parsed else _text(raw)


def status_label(status: Optional[str], palette: dict[str, str]) -> str:
    """Rich markup for a status word, colored from ``palette``."""
    word = status or "unknown"
    color = palette.get(word, "dim")
    return f"[{color}]{escape(word)}[/]"


BUILD_STATUS = {
    "success": "bold green",
    "failed": "bold red",
    "building": "bold yellow",
    "queued": "cyan",
}

DEPLOY_STATUS = {
    "deployed": "bold green",
    "success": "bold green",
    "failed": "bold red",
    "deploying": "bold yellow",
    "rolling-back": "magenta",
    "queued": "cyan",
}

CAMPAIGN_STATUS = {
    "active": "bold green",
    "paused": "yellow",
    "completed": "green",
    "draft": "dim",
}
