"""Run engine: launch REAPER, supervise it, and tear it down in order.

Core Components:
    - Resolver: which REAPER executable to launch
    - Launcher: spawn REAPER, and Xvfb first in headless mode
    - Locator: readiness probe through xdotool
    - Supervisor: poll loop arbitrating exit, readiness and timeout
    - Termination: ordered kill of REAPER then the display server

Usage:
    from reaper_cli.runner import RunRequest, resolve_executable, run_reaper

    request = RunRequest(headless=True, window_title="REAPER", timeout=30.0)
    request.validate()
    outcome = run_reaper(request, resolve_executable(request.executable))
"""

from reaper_cli.runner.engine import run_reaper
from reaper_cli.runner.errors import (
    ExecutableNotFound,
    InvalidRunRequest,
    PollIoError,
    RunnerError,
    SpawnFailed,
)
from reaper_cli.runner.models import (
    DEFAULT_DISPLAY,
    LifecycleState,
    RunOutcome,
    RunRequest,
    StdioConfig,
    StdioPolicy,
    WindowSearch,
)
from reaper_cli.runner.resolver import resolve_executable
from reaper_cli.runner.supervisor import POLL_INTERVAL, Supervisor

__all__ = [
    # Models
    "DEFAULT_DISPLAY",
    "LifecycleState",
    "RunOutcome",
    "RunRequest",
    "StdioConfig",
    "StdioPolicy",
    "WindowSearch",
    # Engine
    "POLL_INTERVAL",
    "Supervisor",
    "resolve_executable",
    "run_reaper",
    # Exceptions
    "RunnerError",
    "InvalidRunRequest",
    "ExecutableNotFound",
    "SpawnFailed",
    "PollIoError",
]
