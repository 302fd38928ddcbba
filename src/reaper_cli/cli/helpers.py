"""Shared console, logging and parsing helpers for CLI commands."""

from __future__ import annotations

import logging
import math
import re
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from reaper_cli.core.config import ProjectRootNotFound, find_project_root
from reaper_cli.core.manifest import PluginDiagnostic

__all__ = [
    "console",
    "err_console",
    "configure_logging",
    "parse_duration",
    "get_project_root_or_exit",
    "print_diagnostics",
]

console = Console()
err_console = Console(stderr=True)

_DURATION_UNITS: dict[str, float] = {
    "ms": 0.001,
    "msec": 0.001,
    "s": 1.0,
    "sec": 1.0,
    "secs": 1.0,
    "second": 1.0,
    "seconds": 1.0,
    "m": 60.0,
    "min": 60.0,
    "mins": 60.0,
    "minute": 60.0,
    "minutes": 60.0,
    "h": 3600.0,
    "hr": 3600.0,
    "hrs": 3600.0,
    "hour": 3600.0,
    "hours": 3600.0,
    "d": 86400.0,
    "day": 86400.0,
    "days": 86400.0,
}

_DURATION_TOKEN = re.compile(r"(\d+(?:\.\d+)?)\s*([a-z]+)")


def configure_logging(verbose: bool = False) -> None:
    """Route log records through Rich on stderr.

    WARNING and above by default; DEBUG shows lifecycle transitions.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, markup=False)],
        force=True,
    )


def parse_duration(text: str) -> float:
    """Parse a human-readable duration such as ``5s``, ``1m 30s`` or ``250ms``.

    A bare number is read as seconds.

    Raises:
        ValueError: If the text is not a duration.
    """
    value = text.strip().lower()
    if not value:
        raise ValueError("empty duration")
    try:
        seconds = float(value)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds):
            raise ValueError(f"invalid duration: {text!r}")
        return seconds

    total = 0.0
    position = 0
    for match in _DURATION_TOKEN.finditer(value):
        if value[position:match.start()].strip():
            raise ValueError(f"invalid duration: {text!r}")
        amount, unit = match.groups()
        if unit not in _DURATION_UNITS:
            raise ValueError(f"unknown time unit {unit!r} in {text!r}")
        total += float(amount) * _DURATION_UNITS[unit]
        position = match.end()
    if position == 0 or value[position:].strip():
        raise ValueError(f"invalid duration: {text!r}")
    return total


def get_project_root_or_exit(start: Path | None = None) -> Path:
    """Return the plugin project root or exit with a helpful message."""
    try:
        return find_project_root(start)
    except ProjectRootNotFound as exc:
        err_console.print(f"[red]error[/red]: {exc}")
        raise typer.Exit(1)


def print_diagnostics(diagnostics: list[PluginDiagnostic]) -> None:
    """Print plugin diagnostics to stderr, most recent first."""
    for diagnostic in reversed(diagnostics):
        err_console.print(f"[bold red]error[/bold red][bold]: {escape(diagnostic.message)}[/bold]")
        err_console.print(f"  [blue]-->[/blue] {escape(diagnostic.location)}")
        if diagnostic.label:
            err_console.print(f"   [blue]=[/blue] {escape(diagnostic.label)}")
        if diagnostic.help:
            err_console.print(f"   [blue]=[/blue] help: {escape(diagnostic.help)}")
        err_console.print()
