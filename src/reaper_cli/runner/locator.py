"""Readiness probe: ask xdotool whether a named window exists on a display."""

from __future__ import annotations

import logging
import os
import subprocess

__all__ = ["XDOTOOL", "WindowLocator"]

logger = logging.getLogger(__name__)

XDOTOOL = "xdotool"
XDOTOOL_ARGS = ("search", "--name")


class WindowLocator:
    """Run ``xdotool search --name`` against one X display.

    Only the exit status is used: zero means a matching window exists.
    """

    def __init__(self, display: str) -> None:
        self.display = display
        self._warned = False

    def window_exists(self, title: str) -> bool:
        env = {**os.environ, "DISPLAY": self.display}
        try:
            completed = subprocess.run(
                [XDOTOOL, *XDOTOOL_ARGS, title],
                env=env,
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            if not self._warned:
                logger.warning("could not run %s, treating window '%s' as not found: %s", XDOTOOL, title, exc)
                self._warned = True
            return False
        logger.debug("%s search for '%s' on %s exited %s", XDOTOOL, title, self.display, completed.returncode)
        return completed.returncode == 0
