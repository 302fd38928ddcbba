"""Locate the REAPER executable to launch."""

from __future__ import annotations

import logging
import platform as platform_module
import shutil
import subprocess
import sys
from pathlib import Path

from reaper_cli.runner.errors import ExecutableNotFound

__all__ = ["BINARY_NAME", "resolve_executable", "locate_global_default"]

logger = logging.getLogger(__name__)

BINARY_NAME = "reaper"

OVERRIDE_HINT = "Try overriding the default executable path with `--exec <PATH>`."

WINDOWS_DEFAULT_PATHS: dict[str, str] = {
    "amd64": r"C:\Program Files\REAPER (x64)\reaper.exe",
    "x86_64": r"C:\Program Files\REAPER (x64)\reaper.exe",
    "x86": r"C:\Program Files (x86)\REAPER\reaper.exe",
    "i386": r"C:\Program Files (x86)\REAPER\reaper.exe",
    "i686": r"C:\Program Files (x86)\REAPER\reaper.exe",
    "arm64": r"C:\Program Files\REAPER (ARM64)\reaper.exe",
    "aarch64": r"C:\Program Files\REAPER (ARM64)\reaper.exe",
}

DARWIN_DEFAULT_PATH = "/Applications/REAPER.app/Contents/MacOS/REAPER"
DARWIN_BUNDLE_ID = "com.cockos.reaper"

LINUX_DEFAULT_PATHS: tuple[str, ...] = ("/opt/REAPER/reaper", "~/opt/REAPER/reaper")


def _discover_darwin_bundle() -> Path | None:
    """Ask Spotlight where the REAPER app bundle lives."""
    try:
        completed = subprocess.run(
            ["mdfind", f"kMDItemCFBundleIdentifier == '{DARWIN_BUNDLE_ID}'"],
            capture_output=True,
            text=True,
            check=False,
            timeout=10,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as exc:
        logger.debug("Spotlight lookup for REAPER failed: %s", exc)
        return None
    if completed.returncode != 0:
        return None
    for line in completed.stdout.splitlines():
        bundle = line.strip()
        if bundle.endswith(".app"):
            candidate = Path(bundle) / "Contents" / "MacOS" / "REAPER"
            if candidate.exists():
                return candidate
    return None


def locate_global_default(platform: str | None = None, machine: str | None = None) -> Path:
    """Return the platform's default REAPER install location.

    Raises:
        ExecutableNotFound: If REAPER is not installed where expected.
    """
    platform = platform or sys.platform

    if platform == "win32":
        machine = (machine or platform_module.machine()).lower()
        default = WINDOWS_DEFAULT_PATHS.get(machine)
        candidates = [Path(default)] if default else []
    elif platform == "darwin":
        candidates = [Path(DARWIN_DEFAULT_PATH)]
    else:
        candidates = [Path(p).expanduser() for p in LINUX_DEFAULT_PATHS]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    if platform == "darwin":
        discovered = _discover_darwin_bundle()
        if discovered is not None:
            return discovered

    raise ExecutableNotFound("Unable to locate REAPER executable. Is REAPER installed?", hint=OVERRIDE_HINT)


def resolve_executable(
    override: Path | None = None,
    platform: str | None = None,
    machine: str | None = None,
) -> Path:
    """Decide which REAPER executable to launch.

    Resolution order:
    1. ``override`` (reported as a warning since it bypasses discovery)
    2. ``reaper`` on the executable search path
    3. the platform's global default install location
    """
    if override is not None:
        logger.warning("overriding REAPER executable path (%s)", override)
        return override

    found = shutil.which(BINARY_NAME)
    if found:
        return Path(found)

    return locate_global_default(platform, machine)
