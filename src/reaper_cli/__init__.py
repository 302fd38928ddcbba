"""
reaper-cli - run and supervise REAPER while developing extension plugins.

Usage:
    reaper-cli run [PROJECT] [--exec PATH]
    reaper-cli run --headless --locate-window REAPER --timeout 30s
    reaper-cli list
    reaper-cli link target/release/reaper_hello.so
    reaper-cli clean --plugin reaper_hello --dry-run
"""

from importlib.metadata import PackageNotFoundError, version

import typer

from reaper_cli.cli.commands import register_commands
from reaper_cli.cli.helpers import configure_logging

try:
    __version__ = version("reaper-cli")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"

app = typer.Typer(
    name="reaper-cli",
    help="Run, supervise and link REAPER extension plugins during development.",
    add_completion=False,
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"reaper-cli {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging on stderr."),
    show_version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """Configure logging before any command runs."""
    configure_logging(verbose)


register_commands(app)


def main():
    app()


if __name__ == "__main__":
    main()
