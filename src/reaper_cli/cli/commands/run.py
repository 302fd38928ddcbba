"""Run command implementation."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from reaper_cli.cli.helpers import console, err_console, parse_duration
from reaper_cli.runner import (
    DEFAULT_DISPLAY,
    InvalidRunRequest,
    RunnerError,
    RunRequest,
    StdioConfig,
    StdioPolicy,
    resolve_executable,
    run_reaper,
)

logger = logging.getLogger(__name__)

# Distinct from the 0/1 codes of a forced termination.
FATAL_EXIT_CODE = 2


def run(
    project: Optional[Path] = typer.Argument(
        None,
        help="Project file to open in REAPER.",
        show_default=False,
    ),
    exec_path: Optional[Path] = typer.Option(
        None,
        "--exec",
        "-e",
        envvar="REAPER_EXECUTABLE",
        metavar="REAPER",
        help=(
            "Override the REAPER executable file path. By default the executable found on $PATH "
            "is used, falling back to the global default installation path."
        ),
    ),
    headless: bool = typer.Option(
        False,
        "--headless",
        help="Run REAPER under an Xvfb virtual display (Linux only).",
    ),
    display: str = typer.Option(
        DEFAULT_DISPLAY,
        "--display",
        help="X display identifier used in headless mode.",
    ),
    locate_window: Optional[str] = typer.Option(
        None,
        "--locate-window",
        metavar="TITLE",
        help="Exit successfully once a window with this title appears (requires --headless and --timeout).",
    ),
    keep_going: bool = typer.Option(
        False,
        "--keep-going",
        help="Keep REAPER running after the window is found, until it exits or the timeout expires.",
    ),
    timeout: Optional[str] = typer.Option(
        None,
        "--timeout",
        metavar="DURATION",
        help="Terminate REAPER after this long, e.g. 30s, 2m, 1h 30m.",
    ),
    stdin: StdioPolicy = typer.Option(StdioPolicy.INHERIT, "--stdin", case_sensitive=False, help="REAPER stdin."),
    stdout: StdioPolicy = typer.Option(StdioPolicy.INHERIT, "--stdout", case_sensitive=False, help="REAPER stdout."),
    stderr: StdioPolicy = typer.Option(StdioPolicy.INHERIT, "--stderr", case_sensitive=False, help="REAPER stderr."),
) -> None:
    """Launch REAPER and supervise it until it exits, becomes ready, or times out."""
    try:
        timeout_seconds = parse_duration(timeout) if timeout is not None else None
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--timeout")

    if headless and sys.platform != "linux":
        raise typer.BadParameter("headless mode is only supported on Linux", param_hint="--headless")

    request = RunRequest(
        executable=exec_path,
        project=project,
        headless=headless,
        display=display,
        window_title=locate_window,
        keep_going=keep_going,
        timeout=timeout_seconds,
        stdio=StdioConfig(stdin=stdin, stdout=stdout, stderr=stderr),
    )
    try:
        request.validate()
    except InvalidRunRequest as exc:
        err_console.print(f"[red]error[/red]: {exc}")
        raise typer.Exit(FATAL_EXIT_CODE)

    try:
        executable = resolve_executable(request.executable)
        console.print(f"     [bold green]Running[/bold green] REAPER executable ({executable})")
        outcome = run_reaper(request, executable)
    except RunnerError as exc:
        err_console.print(f"[red]error[/red]: While attempting to run REAPER executable: {exc}")
        raise typer.Exit(FATAL_EXIT_CODE)

    if outcome.forced:
        logger.debug("Forced exit after %s with code %s", outcome.reason.value, outcome.code)
        raise typer.Exit(outcome.code)

    console.print(f"    [bold green]Finished[/bold green] REAPER exited with status {outcome.code}")


__all__ = ["run", "FATAL_EXIT_CODE"]
