"""Symlink management for REAPER's per-user UserPlugins directory."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

__all__ = [
    "PLUGIN_EXTENSIONS",
    "UserPluginsError",
    "LinkResult",
    "plugin_file_name",
    "get_user_plugins_dir",
    "symlink_plugin",
    "remove_plugin_symlink",
]

logger = logging.getLogger(__name__)

PLUGIN_EXTENSIONS: dict[str, str] = {
    "win32": ".dll",
    "darwin": ".dylib",
    "linux": ".so",
}

WINDOWS_SYMLINK_HINT = (
    "Windows treats symlink creation as a privileged action. Try enabling Developer Mode, "
    "granting the SeCreateSymbolicLinkPrivilege privilege, or running as an administrator."
)


class UserPluginsError(RuntimeError):
    """Raised when a plugin symlink cannot be created or removed."""


@dataclass
class LinkResult:
    symlink_path: Path
    plugin_path: Path
    created: bool
    replaced_stale: bool = False


def plugin_file_name(key: str, platform: str | None = None) -> str:
    """Return the file name REAPER expects for plugin ``key``."""
    platform = platform or sys.platform
    return f"{key}{PLUGIN_EXTENSIONS.get(platform, PLUGIN_EXTENSIONS['linux'])}"


def get_user_plugins_dir() -> Path:
    """Return REAPER's UserPlugins directory for the current user.

    ``~/.config/REAPER`` on Linux, ``%APPDATA%\\REAPER`` on Windows and
    ``~/Library/Application Support/REAPER`` on macOS.
    """
    return Path(user_config_dir("REAPER", appauthor=False, roaming=True)) / "UserPlugins"


def symlink_plugin(plugin_path: Path, user_plugins_dir: Path) -> LinkResult:
    """Symlink ``plugin_path`` into ``user_plugins_dir``.

    An existing link to the same plugin is kept; a link pointing anywhere
    else is replaced. A regular file in the way is never removed.
    """
    if not user_plugins_dir.is_dir():
        raise UserPluginsError(
            "The 'UserPlugins' directory must exist before the plugin can be symlinked. "
            "Please launch REAPER to initialize the 'UserPlugins' directory and try again."
        )

    symlink_path = user_plugins_dir / plugin_path.name
    replaced_stale = False
    if symlink_path.is_symlink():
        try:
            if Path(os.readlink(symlink_path)) == plugin_path:
                return LinkResult(symlink_path, plugin_path, created=False)
            logger.warning("removing stale symlink (%s)", symlink_path)
            symlink_path.unlink()
        except OSError as exc:
            raise UserPluginsError(f"failed to replace stale symlink {symlink_path}: {exc}") from exc
        replaced_stale = True
    elif symlink_path.exists():
        raise UserPluginsError(
            f"`{symlink_path}` already exists and is not a symbolic link. "
            "Move or delete it before linking this plugin."
        )

    try:
        symlink_path.symlink_to(plugin_path)
    except OSError as exc:
        message = f"failed to link extension plugin: {exc}"
        if sys.platform == "win32" and getattr(exc, "winerror", None) == 1314:
            message = f"{message}\n\n{WINDOWS_SYMLINK_HINT}"
        raise UserPluginsError(message) from exc

    return LinkResult(symlink_path, plugin_path, created=True, replaced_stale=replaced_stale)


def remove_plugin_symlink(key: str, file_name: str, user_plugins_dir: Path, dry_run: bool = False) -> Path:
    """Remove the UserPlugins symlink for plugin ``key``.

    Raises:
        UserPluginsError: If no symlink exists or it cannot be removed.
    """
    symlink_path = user_plugins_dir / file_name
    if not symlink_path.is_symlink():
        raise UserPluginsError(f"`{user_plugins_dir}` does not contain a symlink for `{key}` ({file_name})")
    if not dry_run:
        try:
            symlink_path.unlink()
        except OSError as exc:
            raise UserPluginsError(f"failed to remove symlink for `{key}`: {exc}") from exc
    return symlink_path
