from __future__ import annotations

from typing import Iterator

import pytest


class FakeClock:
    """Monotonic clock whose time only moves when ``sleep`` is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeProcess:
    """Child process that exits on its own at ``exit_at`` (never when None)."""

    KILLED_STATUS = -9

    def __init__(
        self,
        name: str,
        clock: FakeClock,
        events: list[tuple[str, str]],
        exit_at: float | None = None,
        status: int = 0,
    ) -> None:
        self.name = name
        self.pid = 4242
        self._clock = clock
        self._events = events
        self._exit_at = exit_at
        self._status = status
        self.killed = False
        self.fail_on: set[str] = set()

    def _exited(self) -> bool:
        return self.killed or (self._exit_at is not None and self._clock.now >= self._exit_at)

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            from reaper_cli.runner.errors import PollIoError

            raise PollIoError(self.name, operation, OSError(5, "Input/output error"))

    def poll(self) -> int | None:
        self._maybe_fail("poll")
        if not self._exited():
            return None
        return self.KILLED_STATUS if self.killed else self._status

    def wait(self) -> int:
        self._maybe_fail("wait")
        self._events.append(("wait", self.name))
        if not self._exited():
            if self._exit_at is None:
                raise AssertionError(f"{self.name} would block forever")
            self._clock.now = max(self._clock.now, self._exit_at)
        return self.KILLED_STATUS if self.killed else self._status

    def kill(self) -> None:
        self._maybe_fail("kill")
        self._events.append(("kill", self.name))
        if not self._exited():
            self.killed = True


class ScriptedLocator:
    """Window locator reporting the window from ``found_at`` onwards."""

    def __init__(self, clock: FakeClock, found_at: float | None = None) -> None:
        self._clock = clock
        self._found_at = found_at
        self.calls: list[tuple[float, str]] = []

    def window_exists(self, title: str) -> bool:
        self.calls.append((self._clock.now, title))
        return self._found_at is not None and self._clock.now >= self._found_at


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def events() -> Iterator[list[tuple[str, str]]]:
    yield []


@pytest.fixture()
def make_process(clock: FakeClock, events: list[tuple[str, str]]):
    def _make(name: str, exit_at: float | None = None, status: int = 0) -> FakeProcess:
        return FakeProcess(name, clock, events, exit_at=exit_at, status=status)

    return _make
