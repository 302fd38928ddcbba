"""CLI command modules for reaper-cli."""

from __future__ import annotations

import typer

from . import plugins as plugins_module
from . import run as run_module


def register_commands(app: typer.Typer) -> None:
    """Attach every reaper-cli command to ``app``."""
    app.command(name="run")(run_module.run)
    app.command(name="list")(plugins_module.list_plugins)
    app.command(name="link")(plugins_module.link)
    app.command(name="clean")(plugins_module.clean)


__all__ = ["register_commands"]
