"""Yarn (classic) from the official Yarn package repositories."""

from __future__ import annotations

import logging

from dev_bootstrap.installer.base import InstallContext, InstallerSpec
from dev_bootstrap.installer.flow import check, guarded_install
from dev_bootstrap.models import DEBIAN_FAMILY, RPM_FAMILY, InstallResult, PlatformType
from dev_bootstrap.tools._helpers import (
    NEW_TERMINAL_NOTE,
    choco_strategy,
    command_version,
    formula_strategy,
    on_path,
    powershell_choco_strategy,
    require_apt,
    require_rpm,
)

logger = logging.getLogger(__name__)

NAME = "yarn"

APT_KEY_URL = "https://dl.yarnpkg.com/debian/pubkey.gpg"
APT_KEYRING_PATH = "/etc/apt/keyrings/yarn-archive-keyring.gpg"
APT_REPO_LINE = f"deb [signed-by={APT_KEYRING_PATH}] https://dl.yarnpkg.com/debian/ stable main"
APT_LIST_PATH = "/etc/apt/sources.list.d/yarn.list"

RPM_REPO_URL = "https://dl.yarnpkg.com/rpm/yarn.repo"
RPM_REPO_PATH = "/etc/yum.repos.d/yarn.repo"
RPM_KEY_URL = "https://dl.yarnpkg.com/rpm/pubkey.gpg"

_version = command_version("yarn", "--version")
_on_path = on_path("yarn")


async def _detect_macos(ctx: InstallContext) -> bool:
    return await ctx.brew.is_installed("yarn") or ctx.runner.which("yarn")


async def _detect_windows(ctx: InstallContext) -> bool:
    return await ctx.choco.is_installed("yarn") or ctx.runner.which("yarn")


# ─── Debian family ──────────────────────────────────────────────


async def _apt_install(ctx: InstallContext) -> None:
    # Ubuntu's cmdtest ships its own "yarn" binary that shadows the real one.
    if await ctx.apt.is_installed("cmdtest"):
        removed = await ctx.apt.remove("cmdtest")
        if not removed.success:
            logger.warning("Could not remove conflicting cmdtest package: %s", removed.output)

    check(await ctx.apt.update(), "update package lists")
    for prerequisite in ("curl", "gnupg", "ca-certificates"):
        check(await ctx.apt.install(prerequisite), f"install {prerequisite}")

    await ctx.apt.add_signed_repository(
        key_url=APT_KEY_URL,
        keyring_path=APT_KEYRING_PATH,
        repo_line=APT_REPO_LINE,
        list_path=APT_LIST_PATH,
    )
    check(await ctx.apt.install("yarn"), "install yarn via APT")


async def _install_debian(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx,
        NAME,
        detect=_on_path,
        prerequisite=require_apt,
        install=_apt_install,
        version=_version,
    )


# ─── RPM family ─────────────────────────────────────────────────


async def _rpm_install(ctx: InstallContext) -> None:
    await ctx.rpm.import_key(RPM_KEY_URL)
    await ctx.rpm.add_repo_file(RPM_REPO_URL, RPM_REPO_PATH)
    check(await ctx.rpm.install("yarn"), f"install yarn via {ctx.rpm.command}")


async def _install_rpm(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx,
        NAME,
        detect=_on_path,
        prerequisite=require_rpm,
        install=_rpm_install,
        version=_version,
    )


SPEC = InstallerSpec(
    name=NAME,
    display_name="Yarn",
    strategies={
        PlatformType.MACOS: formula_strategy(NAME, "yarn", detect=_detect_macos, version=_version),
        **dict.fromkeys(DEBIAN_FAMILY, _install_debian),
        **dict.fromkeys(RPM_FAMILY, _install_rpm),
        PlatformType.WINDOWS: choco_strategy(
            NAME, "yarn", detect=_detect_windows, version=_version, notes=(NEW_TERMINAL_NOTE,)
        ),
        PlatformType.GITBASH: powershell_choco_strategy(
            NAME, "yarn", detect=_detect_windows, notes=(NEW_TERMINAL_NOTE,)
        ),
    },
    detectors={
        PlatformType.MACOS: _detect_macos,
        **dict.fromkeys((*DEBIAN_FAMILY, *RPM_FAMILY), _on_path),
        PlatformType.WINDOWS: _detect_windows,
        PlatformType.GITBASH: _detect_windows,
    },
)
