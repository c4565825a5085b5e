"""
Fixed-interval polling loops: log follow, watch-rebuild, periodic refresh.

Each loop runs in the foreground until its natural end or until the
user presses Ctrl+C; the caller handles ``KeyboardInterrupt``. There is
no backoff and no retry; a failed tick is reported.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

from .errors import GameBuildError

logger = logging.getLogger(__name__)

BUILD_LOG_INTERVAL = 2.0
DEPLOY_LOG_INTERVAL = 3.0
WATCH_INTERVAL = 2.0
WATCH_DEBOUNCE = 1.0
REALTIME_INTERVAL = 5.0


def follow_logs(
    fetch_logs: Callable[[], str],
    fetch_status: Callable[[], str],
    active_status: str,
    write: Callable[[str], None],
    interval: float = BUILD_LOG_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """Tail a remote log until the job leaves ``active_status``.

    The server always returns the whole log; only the part past what
    was already written is emitted on each tick.

    Args:
        fetch_logs: Returns the full log text so far.
        fetch_status: Returns the job's current status.
        active_status: Status meaning "still running".
        write: Sink for new log text.
        interval: Seconds between polls.
        sleep: Injected for tests.

    Returns:
        The final status.
    """
    seen = 0
    while True:
        logs = fetch_logs()
        if len(logs) > seen:
            write(logs[seen:])
            seen = len(logs)
        status = fetch_status()
        if status != active_status:
            return status
        sleep(interval)


def snapshot(paths: Iterable[Path]) -> Dict[str, int]:
    """Map every file under ``paths`` to its mtime in nanoseconds."""
    state: Dict[str, int] = {}
    for root in paths:
        if not root.exists():
            continue
        for path in root.rglob("*"):
            try:
                if path.is_file():
                    state[str(path)] = path.stat().st_mtime_ns
            except OSError:
                # Deleted between listing and stat.
                continue
    return state


def watch_and_rebuild(
    paths: Iterable[Path],
    rebuild: Callable[[], None],
    on_error: Callable[[GameBuildError], None],
    interval: float = WATCH_INTERVAL,
    debounce: float = WATCH_DEBOUNCE,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
    max_ticks: Optional[int] = None,
) -> int:
    """Poll source trees and rebuild after changes settle.

    A detected change (added, removed, or modified file) arms a
    debounce timer; the rebuild runs once no further change has been
    seen for ``debounce`` seconds. A burst of edits yields one rebuild.

    Args:
        paths: Directories to watch.
        rebuild: Called once per settled change set.
        on_error: Receives rebuild failures; watching continues.
        interval: Seconds between polls.
        debounce: Quiet period before rebuilding.
        sleep: Injected for tests.
        clock: Monotonic clock, injected for tests.
        max_ticks: Stop after this many polls (None = until interrupted).

    Returns:
        Number of rebuilds triggered.
    """
    roots = list(paths)
    previous = snapshot(roots)
    changed_at: Optional[float] = None
    rebuilds = 0
    ticks = 0

    while max_ticks is None or ticks < max_ticks:
        sleep(interval)
        ticks += 1

        current = snapshot(roots)
        if current != previous:
            logger.debug("Change detected under %s", ", ".join(str(r) for r in roots))
            previous = current
            changed_at = clock()
            continue

        if changed_at is not None and clock() - changed_at >= debounce:
            changed_at = None
            rebuilds += 1
            try:
                rebuild()
            except GameBuildError as exc:
                on_error(exc)

    return rebuilds


def refresh_every(
    render: Callable[[], None],
    on_error: Callable[[GameBuildError], None],
    interval: float = REALTIME_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
    max_ticks: Optional[int] = None,
) -> None:
    """Call ``render`` every ``interval`` seconds; failures don't stop the loop."""
    ticks = 0
    while max_ticks is None or ticks < max_ticks:
        ticks += 1
        try:
            render()
        except GameBuildError as exc:
            on_error(exc)
        sleep(interval)
