"""Project configuration, manifest validation and UserPlugins helpers."""

from .config import (
    CONFIG_FILE_NAMES,
    ConfigError,
    ProjectRootNotFound,
    ReaperPluginConfig,
    find_project_root,
    load_plugin_config,
)
from .manifest import PluginDiagnostic, PluginManifest, PluginValidation, validate_plugin
from .user_plugins import (
    UserPluginsError,
    get_user_plugins_dir,
    plugin_file_name,
    remove_plugin_symlink,
    symlink_plugin,
)

__all__ = [
    "CONFIG_FILE_NAMES",
    "ConfigError",
    "ProjectRootNotFound",
    "ReaperPluginConfig",
    "find_project_root",
    "load_plugin_config",
    "PluginDiagnostic",
    "PluginManifest",
    "PluginValidation",
    "validate_plugin",
    "UserPluginsError",
    "get_user_plugins_dir",
    "plugin_file_name",
    "remove_plugin_symlink",
    "symlink_plugin",
]
