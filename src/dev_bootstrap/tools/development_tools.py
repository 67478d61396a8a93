"""Native compiler toolchain for the host.

macOS gets the Xcode Command Line Tools, Debian-family hosts get
build-essential, RPM-family hosts the "Development Tools" group and Windows
the Visual Studio 2022 Build Tools with the C++ workload.
"""

from __future__ import annotations

import logging

from dev_bootstrap.errors import CommandFailedError
from dev_bootstrap.installer.base import InstallContext, InstallerSpec
from dev_bootstrap.installer.flow import check, guarded_install
from dev_bootstrap.models import DEBIAN_FAMILY, RPM_FAMILY, InstallResult, PlatformType
from dev_bootstrap.tools._helpers import (
    apt_install,
    command_version,
    require_apt,
    require_choco,
    require_rpm,
)

logger = logging.getLogger(__name__)

NAME = "development-tools"

CLT_PLACEHOLDER = "/tmp/.com.apple.dt.CommandLineTools.installondemand.in-progress"
CLT_DOWNLOAD_PAGE = "https://developer.apple.com/download/all/?q=command%20line%20tools"
SOFTWAREUPDATE_TIMEOUT = 900.0

RPM_GROUP = "Development Tools"

VS_BUILD_TOOLS = "visualstudio2022buildtools"
VS_VCTOOLS_WORKLOAD = "visualstudio2022-workload-vctools"
VS_TIMEOUT = 1200.0

_gcc_version = command_version("gcc", "--version")


def parse_clt_label(softwareupdate_output: str) -> str | None:
    """Pick the newest Command Line Tools label from ``softwareupdate -l``."""
    labels = [
        line.strip().removeprefix("* ").removeprefix("Label: ").strip()
        for line in softwareupdate_output.splitlines()
        if "Command Line Tools" in line and "Label:" in line
    ]
    if not labels:
        # Older releases print "   * Command Line Tools (...) for Xcode-10.3" with no Label.
        labels = [
            line.strip().removeprefix("* ").strip()
            for line in softwareupdate_output.splitlines()
            if "Command Line Tools" in line and line.strip().startswith("*")
        ]
    return labels[-1] if labels else None


# ─── Detection ──────────────────────────────────────────────────


async def _detect_macos(ctx: InstallContext) -> bool:
    result = await ctx.runner.exec(["xcode-select", "-p"])
    return result.ok


def _has_compiler(ctx: InstallContext) -> bool:
    return ctx.runner.which("gcc") and ctx.runner.which("make")


async def _detect_debian(ctx: InstallContext) -> bool:
    return _has_compiler(ctx) and await ctx.apt.is_installed("build-essential")


async def _detect_rpm(ctx: InstallContext) -> bool:
    return _has_compiler(ctx)


async def _detect_windows(ctx: InstallContext) -> bool:
    return await ctx.choco.is_installed(VS_BUILD_TOOLS) and await ctx.choco.is_installed(
        VS_VCTOOLS_WORKLOAD
    )


async def _clt_version(ctx: InstallContext) -> str | None:
    result = await ctx.runner.exec(["pkgutil", "--pkg-info=com.apple.pkg.CLTools_Executables"])
    for line in result.stdout.splitlines():
        if line.startswith("version:"):
            return line.split(":", 1)[1].strip()
    return None


# ─── Install steps ──────────────────────────────────────────────


async def _macos_install(ctx: InstallContext) -> None:
    # The placeholder makes softwareupdate list the CLT package without the GUI prompt.
    check(await ctx.runner.exec(["touch", CLT_PLACEHOLDER]), "create CLT placeholder file")
    try:
        listing = await ctx.runner.exec(["softwareupdate", "-l"])
        label = parse_clt_label(listing.stdout)
        if label is None:
            raise CommandFailedError(
                "Could not find a Command Line Tools package in softwareupdate. "
                f"Download it from {CLT_DOWNLOAD_PAGE}",
                output=listing.output,
                code=listing.code,
            )
        logger.info("Installing %s", label)
        check(
            await ctx.runner.exec(
                ["softwareupdate", "-i", label, "--verbose"], timeout=SOFTWAREUPDATE_TIMEOUT
            ),
            f"install {label}",
        )
    finally:
        await ctx.runner.exec(["rm", "-f", CLT_PLACEHOLDER])


async def _debian_install(ctx: InstallContext) -> None:
    await apt_install(ctx, "build-essential")


async def _rpm_install(ctx: InstallContext) -> None:
    check(await ctx.rpm.group_install(RPM_GROUP), f'install "{RPM_GROUP}"')


async def _windows_install(ctx: InstallContext) -> tuple[str, ...]:
    if not await ctx.choco.is_installed(VS_BUILD_TOOLS):
        check(
            await ctx.choco.install(VS_BUILD_TOOLS, timeout=VS_TIMEOUT),
            "install Visual Studio Build Tools",
        )
    if not await ctx.choco.is_installed(VS_VCTOOLS_WORKLOAD):
        check(
            await ctx.choco.install(
                VS_VCTOOLS_WORKLOAD,
                "--package-parameters",
                "--includeRecommended",
                timeout=VS_TIMEOUT,
            ),
            "install the C++ build tools workload",
        )
    return (
        'Use "Developer Command Prompt for VS 2022" or "Developer PowerShell for VS 2022" '
        "to access the build tools.",
    )


# ─── Strategies ─────────────────────────────────────────────────


async def _install_macos(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx, NAME, detect=_detect_macos, install=_macos_install, version=_clt_version
    )


async def _install_debian(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx,
        NAME,
        detect=_detect_debian,
        prerequisite=require_apt,
        install=_debian_install,
        version=_gcc_version,
    )


async def _install_rpm(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx,
        NAME,
        detect=_detect_rpm,
        prerequisite=require_rpm,
        install=_rpm_install,
        version=_gcc_version,
    )


async def _install_windows(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx,
        NAME,
        detect=_detect_windows,
        prerequisite=require_choco,
        install=_windows_install,
    )


SPEC = InstallerSpec(
    name=NAME,
    display_name="Development Tools",
    strategies={
        PlatformType.MACOS: _install_macos,
        **dict.fromkeys(DEBIAN_FAMILY, _install_debian),
        **dict.fromkeys(RPM_FAMILY, _install_rpm),
        PlatformType.WINDOWS: _install_windows,
    },
    detectors={
        PlatformType.MACOS: _detect_macos,
        **dict.fromkeys(DEBIAN_FAMILY, _detect_debian),
        **dict.fromkeys(RPM_FAMILY, _detect_rpm),
        PlatformType.WINDOWS: _detect_windows,
    },
    unavailable={
        PlatformType.GITBASH: (
            "Development tools cannot be installed from Git Bash. Run "
            "'dev install development-tools' from PowerShell for the VS Build Tools, "
            "or install the MSYS2 MinGW toolchain (https://www.msys2.org/)."
        ),
    },
)
