"""Google Chrome Canary: nightly Chrome build. macOS and Windows only."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from operator import attrgetter
from pathlib import Path

from dev_bootstrap.errors import CommandFailedError
from dev_bootstrap.installer.base import InstallContext, InstallerSpec
from dev_bootstrap.installer.flow import check, guarded_install
from dev_bootstrap.managers import macos_apps
from dev_bootstrap.models import DEBIAN_FAMILY, RPM_FAMILY, InstallResult, PlatformType
from dev_bootstrap.tools._helpers import package_version, require_brew, require_choco

logger = logging.getLogger(__name__)

NAME = "chrome-canary"
APP_NAME = "Google Chrome Canary"
CASK = "google-chrome@canary"
CHOCO_PACKAGE = "googlechromecanary"

_DEV_CHANNEL_HINT = (
    "Google Chrome Canary is not available for Linux. "
    "Consider google-chrome-unstable (Dev channel) instead."
)


def sxs_executable(environ: Mapping[str, str]) -> Path | None:
    """Per-user Canary install location under %LOCALAPPDATA%, if known."""
    local_app_data = environ.get("LOCALAPPDATA", "")
    if not local_app_data:
        return None
    return Path(local_app_data) / "Google" / "Chrome SxS" / "Application" / "chrome.exe"


# ─── macOS ──────────────────────────────────────────────────────


async def _detect_macos(ctx: InstallContext) -> bool:
    return macos_apps.is_app_installed(APP_NAME)


async def _macos_version(ctx: InstallContext) -> str | None:
    return macos_apps.get_app_version(APP_NAME)


async def _macos_install(ctx: InstallContext) -> None:
    check(await ctx.brew.install_cask(CASK), f"install {CASK} via Homebrew")


async def _install_macos(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx,
        NAME,
        detect=_detect_macos,
        prerequisite=require_brew,
        install=_macos_install,
        version=_macos_version,
    )


# ─── Windows / Git Bash ─────────────────────────────────────────


async def _detect_windows(ctx: InstallContext) -> bool:
    if await ctx.choco.is_installed(CHOCO_PACKAGE):
        return True
    exe = sxs_executable(ctx.environ)
    return exe is not None and exe.exists()


async def _windows_install(ctx: InstallContext) -> None:
    result = await ctx.choco.install(CHOCO_PACKAGE, "--pre")
    if result.success:
        return
    # Canary rebuilds daily, so the published checksum is often stale.
    logger.warning("Chrome Canary install failed, retrying with --ignore-checksums")
    retry = await ctx.choco.install(CHOCO_PACKAGE, "--pre", "--ignore-checksums")
    if not retry.success:
        raise CommandFailedError(
            f"Failed to install {CHOCO_PACKAGE} via Chocolatey: {retry.output}",
            output=retry.output,
        )


_windows_version = package_version(attrgetter("choco"), CHOCO_PACKAGE)


async def _install_windows(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx,
        NAME,
        detect=_detect_windows,
        prerequisite=require_choco,
        install=_windows_install,
        version=_windows_version,
    )


SPEC = InstallerSpec(
    name=NAME,
    display_name=APP_NAME,
    strategies={
        PlatformType.MACOS: _install_macos,
        PlatformType.WINDOWS: _install_windows,
        PlatformType.GITBASH: _install_windows,
    },
    detectors={
        PlatformType.MACOS: _detect_macos,
        PlatformType.WINDOWS: _detect_windows,
        PlatformType.GITBASH: _detect_windows,
    },
    unavailable={
        **dict.fromkeys(DEBIAN_FAMILY, _DEV_CHANNEL_HINT),
        **dict.fromkeys(RPM_FAMILY, _DEV_CHANNEL_HINT),
    },
    requires_desktop=True,
)
