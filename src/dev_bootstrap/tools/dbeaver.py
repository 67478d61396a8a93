"""DBeaver Community: universal database client."""

from __future__ import annotations

import shutil
from operator import attrgetter

from dev_bootstrap.installer.base import InstallContext, InstallerSpec
from dev_bootstrap.installer.flow import check, guarded_install
from dev_bootstrap.managers import macos_apps
from dev_bootstrap.models import DEBIAN_FAMILY, RPM_FAMILY, InstallResult, PlatformType
from dev_bootstrap.tools._helpers import (
    NEW_TERMINAL_NOTE,
    choco_strategy,
    package_version,
    powershell_choco_strategy,
    require_apt,
    require_brew,
    require_rpm,
)

NAME = "dbeaver"
APP_NAME = "DBeaver"
CASK = "dbeaver-community"
CHOCO_PACKAGE = "dbeaver"
APT_PACKAGE = "dbeaver-ce"

APT_KEY_URL = "https://dbeaver.io/debs/dbeaver.gpg.key"
APT_KEYRING_PATH = "/usr/share/keyrings/dbeaver.gpg.key"
APT_REPO_LINE = f"deb [signed-by={APT_KEYRING_PATH}] https://dbeaver.io/debs/dbeaver-ce /"
APT_LIST_PATH = "/etc/apt/sources.list.d/dbeaver.list"

RPM_URL = "https://dbeaver.io/files/dbeaver-ce-latest-stable.x86_64.rpm"


# ─── Detection ──────────────────────────────────────────────────


async def _detect_macos(ctx: InstallContext) -> bool:
    return macos_apps.is_app_installed(APP_NAME) or await ctx.brew.is_cask_installed(CASK)


async def _detect_debian(ctx: InstallContext) -> bool:
    return await ctx.apt.is_installed(APT_PACKAGE) or ctx.runner.which("dbeaver")


async def _detect_rpm(ctx: InstallContext) -> bool:
    return ctx.runner.which("dbeaver") or await ctx.rpm.is_installed(APT_PACKAGE)


async def _detect_windows(ctx: InstallContext) -> bool:
    return await ctx.choco.is_installed(CHOCO_PACKAGE) or ctx.runner.which("dbeaver")


async def _macos_version(ctx: InstallContext) -> str | None:
    return macos_apps.get_app_version(APP_NAME)


_debian_version = package_version(attrgetter("apt"), APT_PACKAGE)
_rpm_version = package_version(attrgetter("rpm"), APT_PACKAGE)
_windows_version = package_version(attrgetter("choco"), CHOCO_PACKAGE)


# ─── Install steps ──────────────────────────────────────────────


async def _macos_install(ctx: InstallContext) -> None:
    check(await ctx.brew.install_cask(CASK), f"install {CASK} via Homebrew")


async def _debian_install(ctx: InstallContext) -> tuple[str, ...]:
    check(await ctx.apt.update(), "update package lists")
    check(await ctx.apt.install("curl"), "install curl")
    await ctx.apt.add_signed_repository(
        key_url=APT_KEY_URL,
        keyring_path=APT_KEYRING_PATH,
        repo_line=APT_REPO_LINE,
        list_path=APT_LIST_PATH,
        dearmor=False,
    )
    check(await ctx.apt.install(APT_PACKAGE), f"install {APT_PACKAGE} via APT")
    if ctx.platform.type is PlatformType.WSL:
        return ("DBeaver is a GUI app: under WSL it needs WSLg or an X server to start.",)
    return ()


async def _rpm_install(ctx: InstallContext) -> None:
    workdir = ctx.downloader.make_workdir(NAME)
    try:
        package = await ctx.downloader.fetch(RPM_URL, workdir / "dbeaver-ce.rpm")
        check(await ctx.rpm.install(str(package)), f"install {APT_PACKAGE}")
    finally:
        shutil.rmtree(workdir, ignore_errors=True)


# ─── Strategies ─────────────────────────────────────────────────


async def _install_macos(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx,
        NAME,
        detect=_detect_macos,
        prerequisite=require_brew,
        install=_macos_install,
        version=_macos_version,
    )


async def _install_debian(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx,
        NAME,
        detect=_detect_debian,
        prerequisite=require_apt,
        install=_debian_install,
        version=_debian_version,
    )


async def _install_rpm(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx,
        NAME,
        detect=_detect_rpm,
        prerequisite=require_rpm,
        install=_rpm_install,
        version=_rpm_version,
    )


SPEC = InstallerSpec(
    name=NAME,
    display_name="DBeaver Community",
    strategies={
        PlatformType.MACOS: _install_macos,
        **dict.fromkeys(DEBIAN_FAMILY, _install_debian),
        **dict.fromkeys(RPM_FAMILY, _install_rpm),
        PlatformType.WINDOWS: choco_strategy(
            NAME,
            CHOCO_PACKAGE,
            detect=_detect_windows,
            version=_windows_version,
            notes=(NEW_TERMINAL_NOTE,),
        ),
        PlatformType.GITBASH: powershell_choco_strategy(
            NAME, CHOCO_PACKAGE, detect=_detect_windows, notes=(NEW_TERMINAL_NOTE,)
        ),
    },
    detectors={
        PlatformType.MACOS: _detect_macos,
        **dict.fromkeys(DEBIAN_FAMILY, _detect_debian),
        **dict.fromkeys(RPM_FAMILY, _detect_rpm),
        PlatformType.WINDOWS: _detect_windows,
        PlatformType.GITBASH: _detect_windows,
    },
    requires_desktop=True,
)
