"""Project-scoped plugin configuration in reaper.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

__all__ = [
    "CONFIG_FILE_NAMES",
    "ConfigError",
    "ProjectRootNotFound",
    "ReaperPluginConfig",
    "find_project_root",
    "load_plugin_config",
]

# Acceptable plugin config names, in lookup order.
CONFIG_FILE_NAMES: tuple[str, ...] = (".reaper.toml", "reaper.toml")


class ConfigError(RuntimeError):
    """Raised when reaper.toml cannot be read or has the wrong shape."""


class ProjectRootNotFound(ConfigError):
    """Raised when no ancestor directory holds a reaper.toml."""


@dataclass
class ReaperPluginConfig:
    """Parsed contents of a reaper.toml file.

    ``extension_plugins`` maps each plugin key to the directory containing
    its Cargo.toml, already resolved against the project root.
    """

    file: Path
    contents: str
    extension_plugins: dict[str, Path] = field(default_factory=dict)

    def select(self, keys: list[str]) -> dict[str, Path]:
        """Return the plugins named by ``keys`` (all plugins when empty).

        Raises:
            ConfigError: If any key is not configured.
        """
        if not keys:
            return dict(self.extension_plugins)
        missing = [key for key in keys if key not in self.extension_plugins]
        if missing:
            raise ConfigError(
                f"The following plugin(s) were not found: {', '.join(missing)}\n\n"
                "Tip: run `reaper-cli list` to view the available plugins."
            )
        return {key: self.extension_plugins[key] for key in keys}


def find_project_root(start: Path | None = None) -> Path:
    """Walk up from ``start`` to the directory that owns the plugin config.

    A directory qualifies when it holds ``reaper.toml``, or ``.reaper.toml``
    next to a ``Cargo.toml``.
    """
    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / "reaper.toml").is_file():
            return candidate
        if (candidate / "Cargo.toml").is_file() and (candidate / ".reaper.toml").is_file():
            return candidate
    raise ProjectRootNotFound(
        "Unable to find project root directory. Please ensure a reaper.toml or "
        ".reaper.toml file is present in the project root, and try again."
    )


def load_plugin_config(project_root: Path) -> ReaperPluginConfig:
    """Locate and parse the plugin config under ``project_root``."""
    config_file = next(
        (project_root / name for name in CONFIG_FILE_NAMES if (project_root / name).is_file()),
        None,
    )
    if config_file is None:
        raise ConfigError(f"No {' or '.join(CONFIG_FILE_NAMES)} found in {project_root}")

    try:
        contents = config_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {config_file}: {exc}") from exc

    try:
        payload = tomllib.loads(contents)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to load plugin config from {config_file}: {exc}") from exc

    plugins = payload.get("extension_plugins", {})
    if not isinstance(plugins, dict):
        raise ConfigError(f"`extension_plugins` in {config_file} must be a table")

    extension_plugins: dict[str, Path] = {}
    for key, value in plugins.items():
        if not isinstance(value, str):
            raise ConfigError(f"Plugin `{key}` in {config_file} must map to a directory path string")
        manifest_dir = Path(value)
        if not manifest_dir.is_absolute():
            manifest_dir = (project_root / manifest_dir).resolve()
        extension_plugins[key] = manifest_dir

    return ReaperPluginConfig(file=config_file, contents=contents, extension_plugins=extension_plugins)
