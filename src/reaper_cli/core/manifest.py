"""Validation of extension plugin Cargo manifests.

Checks performed per plugin:
- the plugin key is prefixed by ``reaper_`` (REAPER ignores anything else)
- the manifest declares a ``[lib]`` target
- the library target is named
- the library is built as a ``cdylib``
- the manifest describes a package, not only a workspace
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

__all__ = [
    "PLUGIN_PREFIX",
    "PluginDiagnostic",
    "PluginManifest",
    "PluginValidation",
    "validate_plugin",
]

PLUGIN_PREFIX = "reaper_"


@dataclass
class PluginDiagnostic:
    """Single problem found in a plugin config or manifest."""

    file: Path
    message: str
    line: int | None = None
    label: str | None = None
    help: str | None = None

    @property
    def location(self) -> str:
        return f"{self.file}:{self.line}" if self.line else str(self.file)


@dataclass(order=True)
class PluginManifest:
    """Package metadata shown by ``reaper-cli list``."""

    name: str
    version: str
    authors: list[str] = field(default_factory=list)
    description: str | None = None

    def render(self) -> str:
        text = f"[blue]{self.name}[/blue] v{self.version}"
        if self.description:
            text += f" -- {self.description}"
        if self.authors:
            text += f"\n\nAuthored by: {', '.join(self.authors)}"
        return text


@dataclass
class PluginValidation:
    """Result envelope for one plugin."""

    key: str
    manifest_file: Path
    manifest: PluginManifest | None = None
    diagnostics: list[PluginDiagnostic] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.diagnostics


def _line_of(contents: str, needle: str) -> int | None:
    for number, line in enumerate(contents.splitlines(), start=1):
        if needle in line:
            return number
    return None


def _workspace_package(manifest_file: Path) -> dict[str, Any]:
    """Return ``[workspace.package]`` of the nearest enclosing workspace."""
    for directory in manifest_file.parent.parents:
        candidate = directory / "Cargo.toml"
        if not candidate.is_file():
            continue
        try:
            payload = tomllib.loads(candidate.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError):
            continue
        workspace = payload.get("workspace")
        if isinstance(workspace, dict):
            package = workspace.get("package")
            return package if isinstance(package, dict) else {}
    return {}


def _package_field(package: dict[str, Any], name: str, manifest_file: Path) -> Any:
    value = package.get(name)
    if isinstance(value, dict) and value.get("workspace") is True:
        return _workspace_package(manifest_file).get(name)
    return value


def validate_plugin(
    key: str,
    manifest_dir: Path,
    config_file: Path,
    config_contents: str,
) -> PluginValidation:
    """Validate one configured plugin and collect its package metadata.

    Unreadable or unparsable manifests are reported as diagnostics rather
    than raised, so every plugin gets checked in a single pass.
    """
    manifest_file = manifest_dir / "Cargo.toml"
    result = PluginValidation(key=key, manifest_file=manifest_file)

    if not key.startswith(PLUGIN_PREFIX):
        result.diagnostics.append(
            PluginDiagnostic(
                file=config_file,
                line=_line_of(config_contents, key),
                message="Invalid extension plugin name",
                label=f"extension plugins must be prefixed by `{PLUGIN_PREFIX}` to be recognized",
                help=f"consider changing this to `{PLUGIN_PREFIX}{key}`",
            )
        )

    try:
        contents = manifest_file.read_text(encoding="utf-8")
    except OSError as exc:
        result.diagnostics.append(
            PluginDiagnostic(
                file=manifest_file,
                message=f"Failed to read manifest for plugin `{key}`: {exc}",
            )
        )
        return result

    try:
        manifest = tomllib.loads(contents)
    except tomllib.TOMLDecodeError as exc:
        result.diagnostics.append(
            PluginDiagnostic(file=manifest_file, message=f"Failed to parse plugin manifest: {exc}")
        )
        return result

    lib = manifest.get("lib")
    lib_line = _line_of(contents, "[lib]")
    if not isinstance(lib, dict):
        result.diagnostics.append(
            PluginDiagnostic(
                file=manifest_file,
                message=f"`{key}` does not contain a library target",
                help="add the `[lib]` target attribute",
            )
        )
    else:
        if not lib.get("name"):
            result.diagnostics.append(
                PluginDiagnostic(
                    file=manifest_file,
                    line=lib_line,
                    message=f"`{key}` library is unnamed",
                    label="a name is required in order for plugin path resolution during renaming",
                    help='add `name = "<...>"`',
                )
            )
        if "cdylib" not in (lib.get("crate-type") or []):
            result.diagnostics.append(
                PluginDiagnostic(
                    file=manifest_file,
                    line=lib_line,
                    message=f"`{key}` is not a dynamic library",
                    label="extension plugins must be dynamic libraries to be recognized",
                    help='add `crate-type = ["cdylib"]`',
                )
            )

    package = manifest.get("package")
    if not isinstance(package, dict):
        result.diagnostics.append(
            PluginDiagnostic(
                file=manifest_file,
                message=f"`{key}` is not a package",
                label="expected manifest path to a package containing a dynamic library target",
                help="is this a workspace? try adding the `[workspace.package]` attribute",
            )
        )
        return result

    authors = _package_field(package, "authors", manifest_file) or []
    description = _package_field(package, "description", manifest_file)
    result.manifest = PluginManifest(
        name=key,
        version=str(_package_field(package, "version", manifest_file) or "0.0.0"),
        authors=[str(author) for author in authors],
        description=str(description) if description else None,
    )
    return result
