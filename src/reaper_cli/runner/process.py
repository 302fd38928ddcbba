"""Owned handles over child processes spawned for a run."""

from __future__ import annotations

import logging
import subprocess
from typing import Protocol

from reaper_cli.runner.errors import PollIoError

__all__ = ["ChildProcess", "ProcessHandle"]

logger = logging.getLogger(__name__)


class ChildProcess(Protocol):
    """Operations the supervisor needs from a spawned process."""

    name: str

    def poll(self) -> int | None:
        ...

    def wait(self) -> int:
        ...

    def kill(self) -> None:
        ...


class ProcessHandle:
    """Wrap a ``subprocess.Popen`` so OS failures surface as ``PollIoError``.

    ``graceful`` handles are stopped with SIGTERM instead of SIGKILL. Xvfb
    needs this to remove its display lock file, otherwise the next run on
    the same display refuses to start.
    """

    def __init__(self, name: str, popen: subprocess.Popen, graceful: bool = False) -> None:
        self.name = name
        self.graceful = graceful
        self._popen = popen

    @property
    def pid(self) -> int:
        return self._popen.pid

    @property
    def returncode(self) -> int | None:
        return self._popen.returncode

    def poll(self) -> int | None:
        """Return the exit status if the process has exited, without blocking."""
        try:
            return self._popen.poll()
        except OSError as exc:
            raise PollIoError(self.name, "poll", exc) from exc

    def wait(self) -> int:
        """Block until the process exits and return its status."""
        try:
            return self._popen.wait()
        except OSError as exc:
            raise PollIoError(self.name, "wait for", exc) from exc

    def kill(self) -> None:
        """Stop the process; no-op once it has been reaped."""
        if self._popen.returncode is not None:
            return
        logger.debug("Killing %s (pid %s)", self.name, self._popen.pid)
        try:
            if self.graceful:
                self._popen.terminate()
            else:
                self._popen.kill()
        except OSError as exc:
            raise PollIoError(self.name, "kill", exc) from exc

    def __repr__(self) -> str:
        return f"ProcessHandle(name={self.name!r}, pid={self._popen.pid})"
