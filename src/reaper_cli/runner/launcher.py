"""Spawn REAPER, and in headless mode the Xvfb display server first."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from reaper_cli.runner.errors import PollIoError, SpawnFailed
from reaper_cli.runner.models import StdioConfig
from reaper_cli.runner.process import ProcessHandle

__all__ = [
    "XVFB",
    "XVFB_SCREEN",
    "TARGET_NAME",
    "DISPLAY_SERVER_NAME",
    "spawn_foreground",
    "spawn_headless",
]

logger = logging.getLogger(__name__)

XVFB = "Xvfb"
XVFB_SCREEN = "1920x1080x24"

TARGET_NAME = "REAPER"
DISPLAY_SERVER_NAME = "Xvfb display server"


def _target_command(exe: Path, project: Path | None) -> list[str]:
    command = [str(exe)]
    if project is not None:
        command.append(str(project))
    return command


def _spawn(
    name: str,
    command: list[str],
    stdio: StdioConfig,
    env: dict[str, str] | None = None,
    graceful: bool = False,
) -> ProcessHandle:
    logger.debug("Spawning %s: %s", name, " ".join(command))
    try:
        popen = subprocess.Popen(command, env=env, **stdio.popen_kwargs())
    except OSError as exc:
        raise SpawnFailed(name, str(exc)) from exc
    return ProcessHandle(name, popen, graceful=graceful)


def spawn_foreground(exe: Path, project: Path | None, stdio: StdioConfig) -> ProcessHandle:
    """Start REAPER attached to the current display."""
    return _spawn(TARGET_NAME, _target_command(exe, project), stdio)


def spawn_headless(
    exe: Path,
    project: Path | None,
    display: str,
    stdio: StdioConfig,
) -> tuple[ProcessHandle, ProcessHandle]:
    """Start Xvfb on ``display`` and then REAPER against it.

    Returns:
        Tuple of (display_server, target).

    Raises:
        SpawnFailed: If either process cannot be started. A display server
            that already started is killed and reaped before this propagates.
        PollIoError: If that display server cannot be stopped; the
            ``SpawnFailed`` is chained as its cause.
    """
    env = {**os.environ, "DISPLAY": display}

    display_server = _spawn(
        DISPLAY_SERVER_NAME,
        [XVFB, display, "-screen", "0", XVFB_SCREEN],
        stdio,
        env=env,
        graceful=True,
    )
    try:
        target = _spawn(TARGET_NAME, _target_command(exe, project), stdio, env=env)
    except SpawnFailed as spawn_error:
        logger.warning("%s; stopping %s", spawn_error, DISPLAY_SERVER_NAME)
        try:
            display_server.kill()
            display_server.wait()
        except PollIoError as teardown_error:
            raise teardown_error from spawn_error
        raise
    return display_server, target
