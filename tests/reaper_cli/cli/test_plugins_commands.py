"""CLI tests for ``list``, ``link`` and ``clean``."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

from reaper_cli import app
from reaper_cli.cli import helpers
from reaper_cli.cli.commands import plugins_module

runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep long tmp paths on one line so assertions see whole messages."""
    monkeypatch.setattr(helpers.console, "width", 400)
    monkeypatch.setattr(helpers.err_console, "width", 400)


PLUGIN_MANIFEST = """[package]
name = "{name}"
version = "{version}"
description = "{description}"

[lib]
name = "{name}"
crate-type = ["cdylib"]
"""


def _write_plugin(root: Path, key: str, version: str = "0.1.0", description: str = "Test plugin") -> None:
    plugin_dir = root / key
    plugin_dir.mkdir(parents=True, exist_ok=True)
    (plugin_dir / "Cargo.toml").write_text(
        PLUGIN_MANIFEST.format(name=key, version=version, description=description),
        encoding="utf-8",
    )


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    _write_plugin(root, "reaper_alpha", "1.0.0", "First")
    _write_plugin(root, "reaper_beta", "2.0.0", "Second")
    (root / "reaper.toml").write_text(
        '[extension_plugins]\nreaper_beta = "reaper_beta"\nreaper_alpha = "reaper_alpha"\n',
        encoding="utf-8",
    )
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def plugins_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    directory = tmp_path / "UserPlugins"
    directory.mkdir()
    monkeypatch.setattr(plugins_module, "get_user_plugins_dir", lambda: directory)
    return directory


# ============================================================================
# list
# ============================================================================


class TestList:
    def test_lists_plugins_sorted(self, project: Path) -> None:
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0, result.output
        assert "Available Plugins" in result.output
        assert result.output.index("reaper_alpha") < result.output.index("reaper_beta")
        assert "v2.0.0 -- Second" in result.output

    def test_invalid_plugin_fails_with_diagnostics(self, project: Path) -> None:
        (project / "reaper_beta" / "Cargo.toml").write_text(
            '[package]\nname = "reaper_beta"\nversion = "2.0.0"\n',
            encoding="utf-8",
        )

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 1
        assert "does not contain a library target" in result.output
        assert "Available Plugins" not in result.output

    def test_outside_project_fails(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()
        monkeypatch.chdir(empty)

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 1
        assert "Unable to find project root directory" in result.output


# ============================================================================
# link
# ============================================================================


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
class TestLink:
    def test_links_plugin_file(self, tmp_path: Path, plugins_dir: Path) -> None:
        plugin = tmp_path / "reaper_alpha.so"
        plugin.write_bytes(b"")

        result = runner.invoke(app, ["link", str(plugin)])

        assert result.exit_code == 0, result.output
        assert (plugins_dir / "reaper_alpha.so").is_symlink()

    def test_second_link_is_skipped(self, tmp_path: Path, plugins_dir: Path) -> None:
        plugin = tmp_path / "reaper_alpha.so"
        plugin.write_bytes(b"")
        runner.invoke(app, ["link", str(plugin)])

        result = runner.invoke(app, ["link", str(plugin)])

        assert result.exit_code == 0
        assert "already exists" in result.output

    def test_missing_file_fails_but_links_the_rest(self, tmp_path: Path, plugins_dir: Path) -> None:
        plugin = tmp_path / "reaper_alpha.so"
        plugin.write_bytes(b"")

        result = runner.invoke(app, ["link", str(tmp_path / "missing.so"), str(plugin)])

        assert result.exit_code == 1
        assert "failed to canonicalize path" in result.output
        assert (plugins_dir / "reaper_alpha.so").is_symlink()

    def test_regular_file_in_user_plugins_is_not_replaced(self, tmp_path: Path, plugins_dir: Path) -> None:
        copied = plugins_dir / "reaper_alpha.so"
        copied.write_text("user data", encoding="utf-8")
        blocked = tmp_path / "reaper_alpha.so"
        blocked.write_bytes(b"")
        other = tmp_path / "reaper_beta.so"
        other.write_bytes(b"")

        result = runner.invoke(app, ["link", str(blocked), str(other)])

        assert result.exit_code == 1
        assert "not a symbolic link" in result.output
        assert copied.read_text(encoding="utf-8") == "user data"
        assert (plugins_dir / "reaper_beta.so").is_symlink()


# ============================================================================
# clean
# ============================================================================


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
class TestClean:
    @pytest.fixture
    def linked(self, tmp_path: Path, plugins_dir: Path) -> Path:
        built = tmp_path / "build"
        built.mkdir()
        for key in ("reaper_alpha", "reaper_beta"):
            (built / f"{key}.so").write_bytes(b"")
            (plugins_dir / f"{key}.so").symlink_to(built / f"{key}.so")
        return plugins_dir

    @pytest.fixture(autouse=True)
    def _linux_file_names(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            plugins_module,
            "plugin_file_name",
            lambda key: f"{key}.so",
        )

    def test_removes_all_symlinks(self, project: Path, linked: Path) -> None:
        result = runner.invoke(app, ["clean"])

        assert result.exit_code == 0, result.output
        assert "Removed" in result.output
        assert "2 symlink(s)" in result.output
        assert not any(linked.iterdir())

    def test_selected_plugin_only(self, project: Path, linked: Path) -> None:
        result = runner.invoke(app, ["clean", "-p", "reaper_beta"])

        assert result.exit_code == 0, result.output
        assert (linked / "reaper_alpha.so").is_symlink()
        assert not (linked / "reaper_beta.so").exists()

    def test_dry_run_keeps_symlinks(self, project: Path, linked: Path) -> None:
        result = runner.invoke(app, ["clean", "--dry-run"])

        assert result.exit_code == 0
        assert "Summary" in result.output
        assert "no files deleted" in result.output
        assert (linked / "reaper_alpha.so").is_symlink()

    def test_missing_symlink_is_benign(self, project: Path, plugins_dir: Path) -> None:
        result = runner.invoke(app, ["clean"])

        assert result.exit_code == 0
        assert "benign" in result.output
        assert "0 symlink(s)" in result.output

    def test_unknown_plugin_key(self, project: Path, plugins_dir: Path) -> None:
        result = runner.invoke(app, ["clean", "-p", "reaper_gamma"])

        assert result.exit_code == 1
        assert "reaper_gamma" in result.output
