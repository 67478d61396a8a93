"""Beyond Compare: file and folder comparison (Scooter Software)."""

from __future__ import annotations

import shutil
from operator import attrgetter

from dev_bootstrap.installer.base import InstallContext, InstallerSpec
from dev_bootstrap.installer.flow import check, guarded_install
from dev_bootstrap.managers import macos_apps
from dev_bootstrap.models import DEBIAN_FAMILY, RPM_FAMILY, InstallResult, PlatformType
from dev_bootstrap.tools._helpers import (
    NEW_TERMINAL_NOTE,
    apt_install,
    choco_strategy,
    command_version,
    on_path,
    package_version,
    require_apt,
    require_brew,
    require_rpm,
)

NAME = "beyond-compare"
APP_NAME = "Beyond Compare"
CASK = "beyond-compare"
CHOCO_PACKAGE = "beyondcompare"

VERSION = "5.1.7.31736"
DEB_URL = f"https://www.scootersoftware.com/files/bcompare-{VERSION}_amd64.deb"
RPM_URL = f"https://www.scootersoftware.com/files/bcompare-{VERSION}.x86_64.rpm"

_on_path = on_path("bcompare")
_linux_version = command_version("bcompare", "--version")


# ─── Detection ──────────────────────────────────────────────────


async def _detect_macos(ctx: InstallContext) -> bool:
    if macos_apps.is_app_installed(APP_NAME):
        return True
    if await ctx.brew.is_cask_installed(CASK):
        return True
    return ctx.runner.which("bcompare")


async def _detect_windows(ctx: InstallContext) -> bool:
    return await ctx.choco.is_installed(CHOCO_PACKAGE) or ctx.runner.which("bcompare")


async def _macos_version(ctx: InstallContext) -> str | None:
    return macos_apps.get_app_version(APP_NAME)


_windows_version = package_version(attrgetter("choco"), CHOCO_PACKAGE)


# ─── macOS ──────────────────────────────────────────────────────


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


# ─── Linux packages ─────────────────────────────────────────────


async def _deb_install(ctx: InstallContext) -> None:
    workdir = ctx.downloader.make_workdir(NAME)
    try:
        package = await ctx.downloader.fetch(DEB_URL, workdir / "bcompare.deb")
        await apt_install(ctx, str(package))
    finally:
        shutil.rmtree(workdir, ignore_errors=True)


async def _rpm_install(ctx: InstallContext) -> None:
    workdir = ctx.downloader.make_workdir(NAME)
    try:
        package = await ctx.downloader.fetch(RPM_URL, workdir / "bcompare.rpm")
        check(await ctx.rpm.install(str(package)), "install Beyond Compare package")
    finally:
        shutil.rmtree(workdir, ignore_errors=True)


async def _install_debian(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx,
        NAME,
        detect=_on_path,
        prerequisite=require_apt,
        install=_deb_install,
        version=_linux_version,
    )


async def _install_rpm(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx,
        NAME,
        detect=_on_path,
        prerequisite=require_rpm,
        install=_rpm_install,
        version=_linux_version,
    )


# Git Bash reuses the Windows path: Chocolatey installs for the whole machine.
_install_windows = choco_strategy(
    NAME,
    CHOCO_PACKAGE,
    detect=_detect_windows,
    version=_windows_version,
    notes=(NEW_TERMINAL_NOTE,),
)

SPEC = InstallerSpec(
    name=NAME,
    display_name=APP_NAME,
    strategies={
        PlatformType.MACOS: _install_macos,
        PlatformType.UBUNTU: _install_debian,
        PlatformType.DEBIAN: _install_debian,
        PlatformType.WSL: _install_debian,
        **dict.fromkeys(RPM_FAMILY, _install_rpm),
        PlatformType.WINDOWS: _install_windows,
        PlatformType.GITBASH: _install_windows,
    },
    detectors={
        PlatformType.MACOS: _detect_macos,
        **dict.fromkeys((*DEBIAN_FAMILY, *RPM_FAMILY), _on_path),
        PlatformType.WINDOWS: _detect_windows,
        PlatformType.GITBASH: _detect_windows,
    },
    unavailable={
        PlatformType.RASPBIAN: (
            "Beyond Compare is not available for Raspberry Pi OS: "
            "Scooter Software does not publish ARM Linux builds."
        ),
    },
)
