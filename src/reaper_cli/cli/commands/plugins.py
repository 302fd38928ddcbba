"""Plugin commands: list configured plugins and manage UserPlugins symlinks.

Commands:
    list   -- Validate and list the plugins declared in reaper.toml
    link   -- Symlink plugin files into REAPER's UserPlugins directory
    clean  -- Remove plugin symlinks from the UserPlugins directory
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import typer

from reaper_cli.cli.helpers import console, err_console, get_project_root_or_exit, print_diagnostics
from reaper_cli.cli.ui import StepTracker
from reaper_cli.core.config import ConfigError, ReaperPluginConfig, load_plugin_config
from reaper_cli.core.manifest import PluginManifest, validate_plugin
from reaper_cli.core.user_plugins import (
    UserPluginsError,
    get_user_plugins_dir,
    plugin_file_name,
    remove_plugin_symlink,
    symlink_plugin,
)

logger = logging.getLogger(__name__)


def _load_config_or_exit() -> ReaperPluginConfig:
    project_root = get_project_root_or_exit()
    try:
        return load_plugin_config(project_root)
    except ConfigError as exc:
        err_console.print(f"[red]error[/red]: {exc}")
        raise typer.Exit(1)


def list_plugins() -> None:
    """List available extension plugins."""
    config = _load_config_or_exit()

    manifests: list[PluginManifest] = []
    diagnostics = []
    for key, manifest_dir in config.extension_plugins.items():
        result = validate_plugin(key, manifest_dir, config.file, config.contents)
        diagnostics.extend(result.diagnostics)
        if result.manifest is not None:
            manifests.append(result.manifest)

    if diagnostics:
        print_diagnostics(diagnostics)
        raise typer.Exit(1)

    console.print()
    console.print("[bold green]Available Plugins[/bold green]:")
    console.print()
    console.print("\n\n--\n\n".join(manifest.render() for manifest in sorted(manifests)))


def link(
    paths: List[Path] = typer.Argument(..., help="Plugin files to symlink into UserPlugins."),
) -> None:
    """Symlink plugin file(s) to REAPER's UserPlugins directory."""
    user_plugins_dir = get_user_plugins_dir()
    tracker = StepTracker(f"Link plugins into {user_plugins_dir}")
    failures = 0

    for path in paths:
        label = str(path)
        tracker.add(label, label)
        try:
            plugin_path = path.resolve(strict=True)
        except OSError as exc:
            failures += 1
            tracker.error(label, f"failed to canonicalize path: {exc}")
            continue
        try:
            result = symlink_plugin(plugin_path, user_plugins_dir)
        except UserPluginsError as exc:
            failures += 1
            tracker.error(label, str(exc))
            continue
        if result.created:
            tracker.complete(label, f"{result.symlink_path} → {result.plugin_path}")
        else:
            tracker.skip(label, f"symbolic link already exists ({result.symlink_path})")

    console.print(tracker.render())
    if failures:
        raise typer.Exit(1)


def clean(
    plugins: List[str] = typer.Option(
        [],
        "--plugin",
        "-p",
        metavar="PLUGIN_KEY",
        help="Clean plugin(s) by key.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Display what would be deleted without deleting anything.",
    ),
) -> None:
    """Remove plugin symlinks from the UserPlugins directory."""
    config = _load_config_or_exit()
    try:
        selected = config.select(plugins)
    except ConfigError as exc:
        err_console.print(f"[red]error[/red]: {exc}")
        raise typer.Exit(1)

    user_plugins_dir = get_user_plugins_dir()
    tracker = StepTracker("Removing plugin symlinks" if not dry_run else "Plugin symlinks to remove")
    for key in sorted(selected):
        tracker.add(key, key)
        try:
            symlink_path = remove_plugin_symlink(key, plugin_file_name(key), user_plugins_dir, dry_run=dry_run)
        except UserPluginsError as exc:
            tracker.error(key, f"benign: {exc}")
            continue
        tracker.complete(key, str(symlink_path))

    console.print(tracker.render())
    removed = tracker.count("done")
    verb = "Summary" if dry_run else "Removed"
    console.print(f"     [bold green]{verb}[/bold green] {removed} symlink(s)")
    if dry_run:
        console.print("[bold yellow]warning[/bold yellow]: no files deleted due to --dry-run")


__all__ = ["list_plugins", "link", "clean"]
