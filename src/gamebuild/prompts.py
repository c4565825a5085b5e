"""
Interactive prompts used to fill in missing command arguments.

Choices are shown as a numbered list and picked by number, the same
way the setup wizards do it.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Optional, Sequence

import click
from rich.console import Console

console = Console()

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
ETH_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def _validated(check: Callable[[str], bool], message: str) -> Callable[[str], str]:
    """Build a click value_proc that rejects values failing ``check``."""

    def proc(value: str) -> str:
        if not check(value):
            raise click.UsageError(message)
        return value

    return proc


def ask_text(
    label: str,
    default: Optional[str] = None,
    required: bool = True,
    check: Optional[Callable[[str], bool]] = None,
    error: str = "Invalid value",
) -> str:
    """Prompt for a line of text.

    Args:
        label: Prompt label.
        default: Value used on empty input.
        required: Re-ask on empty input when True and no default.
        check: Extra validation; failing values are re-asked.
        error: Message shown when ``check`` fails.

    Returns:
        The entered text ('' allowed when not required).
    """
    if default is None and not required:
        default = ""
    proc = None
    if check is not None:
        proc = _validated(lambda v: (not v and not required) or check(v), error)
    return click.prompt(
        f"  {label}", default=default, show_default=bool(default), value_proc=proc,
    )


def ask_number(label: str, minimum: float = 0.0) -> float:
    """Prompt for a number strictly greater than ``minimum``."""
    return click.prompt(
        f"  {label}",
        type=click.FloatRange(min=minimum, min_open=True),
    )


def ask_choice(label: str, options: Sequence[tuple[Any, str]], default: int = 1) -> Any:
    """Show a numbered list and return the value of the chosen row.

    Args:
        label: Heading printed above the list.
        options: ``(value, description)`` pairs.
        default: 1-based default row.
    """
    console.print(f"  [bold]{label}[/]")
    for i, (_, description) in enumerate(options, 1):
        console.print(f"    [cyan]{i}[/]  {description}")
    idx = click.prompt(
        "  Enter your choice",
        type=click.IntRange(1, len(options)),
        default=default,
    )
    return options[idx - 1][0]


def confirm(message: str, default: bool = False) -> bool:
    """Yes/no confirmation, defaulting to no."""
    return click.confirm(f"  {message}", default=default)


def is_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value))


def is_eth_address(value: str) -> bool:
    return bool(ETH_ADDRESS_RE.match(value))
