"""Ordered teardown of REAPER and its display server.

REAPER is always killed and reaped before the display server: stopping
the display first can leave REAPER hung against a vanished X surface.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from reaper_cli.runner.errors import PollIoError
from reaper_cli.runner.models import LifecycleState, RunOutcome
from reaper_cli.runner.process import ChildProcess

__all__ = ["release", "owned", "kill_and_exit"]

logger = logging.getLogger(__name__)


def _kill_and_reap(handle: ChildProcess) -> int:
    handle.kill()
    status = handle.wait()
    logger.debug("%s reaped with status %s", handle.name, status)
    return status


def release(handle: ChildProcess | None) -> None:
    """Kill and reap ``handle`` if it is still running.

    A handle whose state cannot be polled is treated as running.
    """
    if handle is None:
        return
    try:
        running = handle.poll() is None
    except PollIoError as exc:
        logger.debug("Could not poll %s before release: %s", handle.name, exc)
        running = True
    if running:
        _kill_and_reap(handle)


@contextmanager
def owned(handle: ChildProcess | None) -> Iterator[ChildProcess | None]:
    """Scope ``handle`` so it is released however the block is left.

    Nest the display server scope outside the REAPER scope; unwinding then
    releases REAPER first.
    """
    try:
        yield handle
    finally:
        release(handle)


def kill_and_exit(
    target: ChildProcess,
    display_server: ChildProcess | None,
    code: int,
    reason: LifecycleState,
) -> RunOutcome:
    """Kill REAPER, then the display server, and produce a forced outcome.

    Any ``PollIoError`` raised while killing or reaping propagates; no
    outcome is produced in that case.
    """
    logger.debug("Terminating run (%s) with exit code %s", reason.value, code)
    _kill_and_reap(target)
    if display_server is not None:
        _kill_and_reap(display_server)
    return RunOutcome.forced_exit(code, reason)
