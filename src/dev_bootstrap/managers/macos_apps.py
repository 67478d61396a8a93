"""Locate macOS application bundles and read their versions."""

from __future__ import annotations

import plistlib
from pathlib import Path


def app_directories() -> tuple[Path, ...]:
    return (Path("/Applications"), Path.home() / "Applications")


def get_app_bundle_path(app_name: str) -> Path | None:
    """Return the ``.app`` bundle path for ``app_name``, or None."""
    bundle = app_name if app_name.endswith(".app") else f"{app_name}.app"
    for directory in app_directories():
        candidate = directory / bundle
        if candidate.exists():
            return candidate
    return None


def is_app_installed(app_name: str) -> bool:
    return get_app_bundle_path(app_name) is not None


def get_app_version(app_name: str) -> str | None:
    """Read CFBundleShortVersionString (or CFBundleVersion) from Info.plist."""
    bundle = get_app_bundle_path(app_name)
    if bundle is None:
        return None
    info_plist = bundle / "Contents" / "Info.plist"
    try:
        with info_plist.open("rb") as fh:
            info = plistlib.load(fh)
    except (OSError, plistlib.InvalidFileException, ValueError):
        return None
    version = info.get("CFBundleShortVersionString") or info.get("CFBundleVersion")
    return str(version) if version else None
