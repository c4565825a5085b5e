"""Tests for the polling loops: log follow, watch-rebuild debounce, refresh."""

from __future__ import annotations

from pathlib import Path

import pytest

from gamebuild.errors import ApiError, ProjectError
from gamebuild.polling import follow_logs, refresh_every, snapshot, watch_and_rebuild


class FakeTime:
    """Shared fake clock: each sleep advances time and runs a tick hook."""

    def __init__(self, on_tick=None):
        self.now = 0.0
        self.sleeps: list[float] = []
        self.on_tick = on_tick

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        if self.on_tick:
            self.on_tick(len(self.sleeps))

    def clock(self) -> float:
        return self.now


# ---------------------------------------------------------------------------
# follow_logs
# ---------------------------------------------------------------------------


class TestFollowLogs:
    """Only new log text is written; the loop ends when the job does."""

    def test_prints_only_new_suffix(self):
        logs = iter(["step 1\n", "step 1\nstep 2\n", "step 1\nstep 2\ndone\n"])
        statuses = iter(["building", "building", "success"])
        written: list[str] = []
        fake = FakeTime()

        final = follow_logs(
            lambda: next(logs), lambda: next(statuses), "building",
            written.append, interval=2.0, sleep=fake.sleep,
        )

        assert final == "success"
        assert written == ["step 1\n", "step 2\n", "done\n"]
        assert fake.sleeps == [2.0, 2.0]

    def test_unchanged_log_writes_nothing(self):
        logs = iter(["a", "a", "a"])
        statuses = iter(["deploying", "deploying", "deployed"])
        written: list[str] = []

        follow_logs(
            lambda: next(logs), lambda: next(statuses), "deploying",
            written.append, sleep=lambda s: None,
        )

        assert written == ["a"]

    def test_already_finished_job(self):
        written: list[str] = []
        final = follow_logs(lambda: "all\n", lambda: "failed", "building", written.append,
                            sleep=lambda s: None)
        assert final == "failed"
        assert written == ["all\n"]

    def test_fetch_error_ends_loop(self):
        def broken():
            raise ApiError("Failed to get logs: gone")

        with pytest.raises(ApiError, match="gone"):
            follow_logs(broken, lambda: "building", "building", print, sleep=lambda s: None)


# ---------------------------------------------------------------------------
# watch_and_rebuild
# ---------------------------------------------------------------------------


class TestWatchAndRebuild:
    """Changes arm a debounce timer; a quiet tree triggers one rebuild."""

    def _src(self, tmp_path: Path) -> Path:
        src = tmp_path / "src"
        src.mkdir()
        (src / "main.js").write_text("v0")
        return src

    def test_burst_yields_one_rebuild(self, tmp_path: Path):
        src = self._src(tmp_path)

        def edit(tick: int) -> None:
            if tick in (1, 2):
                (src / f"new{tick}.js").write_text("x")

        fake = FakeTime(edit)
        rebuilds: list[float] = []

        count = watch_and_rebuild(
            [src], lambda: rebuilds.append(fake.now), lambda e: None,
            interval=2.0, debounce=1.0, sleep=fake.sleep, clock=fake.clock, max_ticks=6,
        )

        assert count == 1
        assert rebuilds == [6.0]

    def test_waits_for_quiet_period(self, tmp_path: Path):
        src = self._src(tmp_path)

        def edit(tick: int) -> None:
            if tick == 1:
                (src / "a.js").write_text("x")

        fake = FakeTime(edit)
        rebuilds: list[float] = []

        watch_and_rebuild(
            [src], lambda: rebuilds.append(fake.now), lambda e: None,
            interval=2.0, debounce=5.0, sleep=fake.sleep, clock=fake.clock, max_ticks=5,
        )

        # change seen at t=2, quiet long enough at t=8
        assert rebuilds == [8.0]

    def test_no_changes_no_rebuild(self, tmp_path: Path):
        src = self._src(tmp_path)
        fake = FakeTime()
        count = watch_and_rebuild(
            [src], lambda: None, lambda e: None,
            sleep=fake.sleep, clock=fake.clock, max_ticks=4,
        )
        assert count == 0

    def test_deleted_file_counts_as_change(self, tmp_path: Path):
        src = self._src(tmp_path)

        def edit(tick: int) -> None:
            if tick == 1:
                (src / "main.js").unlink()

        fake = FakeTime(edit)
        count = watch_and_rebuild(
            [src], lambda: None, lambda e: None,
            sleep=fake.sleep, clock=fake.clock, max_ticks=3,
        )
        assert count == 1

    def test_rebuild_failure_is_reported_and_watch_continues(self, tmp_path: Path):
        src = self._src(tmp_path)

        def edit(tick: int) -> None:
            if tick in (1, 4):
                (src / f"f{tick}.js").write_text("x")

        fake = FakeTime(edit)
        errors: list[Exception] = []

        def rebuild() -> None:
            raise ProjectError("Failed to start build: No project files found to upload")

        count = watch_and_rebuild(
            [src], rebuild, errors.append,
            interval=2.0, debounce=1.0, sleep=fake.sleep, clock=fake.clock, max_ticks=6,
        )

        assert count == 2
        assert len(errors) == 2

    def test_snapshot_skips_missing_dirs(self, tmp_path: Path):
        src = self._src(tmp_path)
        state = snapshot([src, tmp_path / "assets"])
        assert list(state) == [str(src / "main.js")]


# ---------------------------------------------------------------------------
# refresh_every
# ---------------------------------------------------------------------------


class TestRefreshEvery:
    """Periodic rendering that survives failed ticks."""

    def test_renders_each_tick(self):
        calls: list[int] = []
        fake = FakeTime()
        refresh_every(lambda: calls.append(1), lambda e: None, interval=5.0,
                      sleep=fake.sleep, max_ticks=3)
        assert len(calls) == 3
        assert fake.sleeps == [5.0, 5.0, 5.0]

    def test_errors_do_not_stop_refresh(self):
        outcomes = iter([ApiError("Failed to get real-time data: down"), None, None])
        errors: list[Exception] = []

        def render() -> None:
            exc = next(outcomes)
            if exc:
                raise exc

        refresh_every(render, errors.append, sleep=lambda s: None, max_ticks=3)
        assert len(errors) == 1
