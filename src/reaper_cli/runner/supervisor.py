"""Lifecycle supervision of a running REAPER instance.

The supervisor arbitrates between three ways a run can end: REAPER exiting
on its own, the readiness window appearing, and the timeout expiring.
Without a timeout it simply waits. With a timeout it polls once per
interval, so detection and timeout latency are bounded by one interval.

Forced outcomes (anything that kills processes) carry the exit code the
tool must terminate with: 0 when no window was requested or the window was
found, 1 when a requested window never appeared.
"""

from __future__ import annotations

import logging
import time
from contextlib import ExitStack
from typing import Callable

from reaper_cli.runner.locator import WindowLocator
from reaper_cli.runner.models import LifecycleState, RunOutcome, RunRequest, WindowSearch
from reaper_cli.runner.process import ChildProcess
from reaper_cli.runner.termination import kill_and_exit, owned, release

__all__ = ["POLL_INTERVAL", "Supervisor"]

logger = logging.getLogger(__name__)

POLL_INTERVAL = 1.0


class Supervisor:
    """Drive one run from spawned processes to a ``RunOutcome``.

    ``clock``, ``sleep`` and ``locator`` are injectable so the poll loop can
    be exercised without real time or a real X server.
    """

    def __init__(
        self,
        request: RunRequest,
        *,
        locator: WindowLocator | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        poll_interval: float = POLL_INTERVAL,
    ) -> None:
        self.request = request
        self.locator = locator or WindowLocator(request.display)
        self._clock = clock
        self._sleep = sleep
        self._poll_interval = poll_interval
        self.state = LifecycleState.STARTING
        self.window_search = WindowSearch.NOT_SEARCHED

    def _transition(self, state: LifecycleState) -> None:
        if state is not self.state:
            logger.debug("Lifecycle %s -> %s", self.state.value, state.value)
        self.state = state

    def run(self, target: ChildProcess, display_server: ChildProcess | None = None) -> RunOutcome:
        """Supervise ``target`` (and ``display_server`` when headless).

        Both handles are released on every way out of this method, REAPER
        before the display server.
        """
        with ExitStack() as stack:
            stack.enter_context(owned(display_server))
            stack.enter_context(owned(target))

            if self.request.timeout is None:
                outcome = self._wait(target, display_server)
            else:
                outcome = self._poll(target, display_server, self.request.timeout)

        self._transition(LifecycleState.EXITED)
        return outcome

    def _wait(self, target: ChildProcess, display_server: ChildProcess | None) -> RunOutcome:
        self._transition(LifecycleState.RUNNING)
        status = target.wait()
        self._transition(LifecycleState.NATURAL_EXIT)
        # Xvfb does not exit with its last client, so it is stopped here.
        release(display_server)
        return RunOutcome.natural(status)

    def _poll(self, target: ChildProcess, display_server: ChildProcess | None, timeout: float) -> RunOutcome:
        title = self.request.window_title
        start = self._clock()

        while True:
            self._transition(LifecycleState.RUNNING)

            if title is not None and self.window_search is not WindowSearch.FOUND:
                if self.locator.window_exists(title):
                    self.window_search = WindowSearch.FOUND
                    logger.info("Found window '%s' on %s", title, self.request.display)
                    if not self.request.keep_going:
                        return self._terminate(target, display_server, 0, LifecycleState.WINDOW_FOUND)
                else:
                    self.window_search = WindowSearch.NOT_FOUND

            status = target.poll()
            if status is not None:
                if title is not None:
                    return self._terminate(
                        target,
                        display_server,
                        self.window_search.outcome_code(title),
                        LifecycleState.NATURAL_EXIT,
                    )
                self._transition(LifecycleState.NATURAL_EXIT)
                release(display_server)
                return RunOutcome.natural(status)

            if self._clock() - start >= timeout:
                return self._terminate(
                    target,
                    display_server,
                    self.window_search.outcome_code(title),
                    LifecycleState.TIMED_OUT,
                )

            self._sleep(self._poll_interval)

    def _terminate(
        self,
        target: ChildProcess,
        display_server: ChildProcess | None,
        code: int,
        reason: LifecycleState,
    ) -> RunOutcome:
        self._transition(reason)
        self._transition(LifecycleState.TERMINATING)
        return kill_and_exit(target, display_server, code, reason)
