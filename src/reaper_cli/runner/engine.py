"""Compose launcher and supervisor into a single run."""

from __future__ import annotations

import logging
from pathlib import Path

from reaper_cli.runner.launcher import spawn_foreground, spawn_headless
from reaper_cli.runner.models import RunOutcome, RunRequest
from reaper_cli.runner.supervisor import Supervisor

__all__ = ["run_reaper"]

logger = logging.getLogger(__name__)


def run_reaper(request: RunRequest, executable: Path, supervisor: Supervisor | None = None) -> RunOutcome:
    """Launch ``executable`` as described by ``request`` and supervise it.

    The request is expected to be validated already. Spawn failures abort
    before any supervision starts.
    """
    supervisor = supervisor or Supervisor(request)

    if request.headless:
        display_server, target = spawn_headless(executable, request.project, request.display, request.stdio)
        logger.debug("REAPER pid %s on display %s (Xvfb pid %s)", target.pid, request.display, display_server.pid)
        return supervisor.run(target, display_server)

    target = spawn_foreground(executable, request.project, request.stdio)
    logger.debug("REAPER pid %s", target.pid)
    return supervisor.run(target)
