"""Error taxonomy for the REAPER run engine.

Every error here is fatal: nothing is retried and nothing is downgraded
to a warning. The CLI maps all of them to the same non-zero exit code,
which is distinct from the 0/1 codes a forced termination produces.
"""

from __future__ import annotations

__all__ = [
    "RunnerError",
    "InvalidRunRequest",
    "ExecutableNotFound",
    "SpawnFailed",
    "PollIoError",
]


class RunnerError(RuntimeError):
    """Base class for run engine failures."""


class InvalidRunRequest(RunnerError):
    """Raised when a run request combines options that cannot work together."""


class ExecutableNotFound(RunnerError):
    """Raised when no override, PATH entry or platform default yields REAPER."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        self.hint = hint
        super().__init__(f"{message}\n\nTip: {hint}" if hint else message)


class SpawnFailed(RunnerError):
    """Raised when the target or the display server cannot be started."""

    def __init__(self, process_name: str, reason: str) -> None:
        self.process_name = process_name
        self.reason = reason
        super().__init__(f"Failed to spawn {process_name}: {reason}")


class PollIoError(RunnerError):
    """Raised when polling, killing or reaping a child process fails.

    The underlying ``OSError`` is chained as ``__cause__``.
    """

    def __init__(self, process_name: str, operation: str, error: OSError) -> None:
        self.process_name = process_name
        self.operation = operation
        super().__init__(f"Failed to {operation} {process_name}: {error}")
