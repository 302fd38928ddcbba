"""Data model for a single supervised REAPER run."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from reaper_cli.runner.errors import InvalidRunRequest

__all__ = [
    "DEFAULT_DISPLAY",
    "StdioPolicy",
    "StdioConfig",
    "RunRequest",
    "LifecycleState",
    "WindowSearch",
    "RunOutcome",
]

DEFAULT_DISPLAY = ":99"


class StdioPolicy(str, Enum):
    """How a child process stream is wired."""

    PIPED = "piped"
    INHERIT = "inherit"
    DISCARD = "null"

    def to_popen(self) -> int | None:
        """Return the value ``subprocess.Popen`` expects for this policy."""
        if self is StdioPolicy.PIPED:
            return subprocess.PIPE
        if self is StdioPolicy.DISCARD:
            return subprocess.DEVNULL
        return None


@dataclass(frozen=True)
class StdioConfig:
    """Stdio policy shared by every process spawned for a run."""

    stdin: StdioPolicy = StdioPolicy.INHERIT
    stdout: StdioPolicy = StdioPolicy.INHERIT
    stderr: StdioPolicy = StdioPolicy.INHERIT

    def popen_kwargs(self) -> dict[str, int | None]:
        return {
            "stdin": self.stdin.to_popen(),
            "stdout": self.stdout.to_popen(),
            "stderr": self.stderr.to_popen(),
        }


@dataclass(frozen=True)
class RunRequest:
    """Everything the engine needs to launch and supervise REAPER.

    Attributes:
        executable: Explicit REAPER executable, bypassing discovery.
        project: Project file forwarded to REAPER as a positional argument.
        headless: Run under a virtual display server.
        display: X display identifier used in headless mode.
        window_title: Window whose appearance marks REAPER as ready.
        keep_going: Keep running after the window was found.
        timeout: Seconds after which the run is terminated.
        stdio: Stdio policy for REAPER and the display server.
    """

    executable: Path | None = None
    project: Path | None = None
    headless: bool = False
    display: str = DEFAULT_DISPLAY
    window_title: str | None = None
    keep_going: bool = False
    timeout: float | None = None
    stdio: StdioConfig = field(default_factory=StdioConfig)

    def validate(self) -> None:
        """Reject option combinations the supervisor cannot honour."""
        if self.timeout is not None and self.timeout <= 0:
            raise InvalidRunRequest(f"Timeout must be positive, got {self.timeout}s")
        if self.window_title is not None and not self.headless:
            raise InvalidRunRequest("--locate-window requires --headless")
        if self.keep_going:
            missing = [
                flag
                for flag, present in (
                    ("--headless", self.headless),
                    ("--locate-window", self.window_title is not None),
                    ("--timeout", self.timeout is not None),
                )
                if not present
            ]
            if missing:
                raise InvalidRunRequest(f"--keep-going requires {', '.join(missing)}")
        if self.headless and not self.display:
            raise InvalidRunRequest("--display must not be empty in headless mode")


class LifecycleState(str, Enum):
    STARTING = "starting"
    RUNNING = "running"
    NATURAL_EXIT = "natural_exit"
    WINDOW_FOUND = "window_found"
    TIMED_OUT = "timed_out"
    TERMINATING = "terminating"
    EXITED = "exited"


class WindowSearch(str, Enum):
    """Progress of the readiness window search."""

    NOT_SEARCHED = "not_searched"
    NOT_FOUND = "not_found"
    FOUND = "found"

    def outcome_code(self, window_title: str | None) -> int:
        """Exit code of a forced termination given the search so far.

        Without a configured window there is nothing to fail, so the run
        counts as successful.
        """
        if window_title is None:
            return 0
        return 0 if self is WindowSearch.FOUND else 1


@dataclass(frozen=True)
class RunOutcome:
    """How a supervised run ended.

    A natural outcome carries REAPER's own status for reporting only; the
    tool does not surface it as its exit code. A forced outcome carries the
    exit code the tool must terminate with. ``reason`` is the state that
    ended the ``Running`` phase.
    """

    forced: bool
    code: int
    reason: LifecycleState = LifecycleState.NATURAL_EXIT

    @classmethod
    def natural(cls, status: int) -> "RunOutcome":
        return cls(forced=False, code=status, reason=LifecycleState.NATURAL_EXIT)

    @classmethod
    def forced_exit(cls, code: int, reason: LifecycleState) -> "RunOutcome":
        return cls(forced=True, code=code, reason=reason)
