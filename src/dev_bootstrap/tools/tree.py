"""tree: recursive directory listing."""

from __future__ import annotations

import shutil

from dev_bootstrap.installer.base import InstallContext, InstallerSpec
from dev_bootstrap.installer.flow import check, guarded_install, require
from dev_bootstrap.models import DEBIAN_FAMILY, RPM_FAMILY, InstallResult, PlatformType
from dev_bootstrap.tools._helpers import (
    NEW_TERMINAL_NOTE,
    apt_strategy,
    brew_formula,
    choco_package,
    choco_strategy,
    command_version,
    formula_strategy,
    on_path,
    rpm_strategy,
)

NAME = "tree"

GNUWIN32_TREE_URL = "https://downloads.sourceforge.net/gnuwin32/tree-1.5.2.2-bin.zip"
GITBASH_BIN_DIR = "/usr/local/bin"

_version = command_version("tree", "--version")
_on_path = on_path("tree")
_apt = apt_strategy(NAME, "tree", detect=_on_path, version=_version)
_rpm = rpm_strategy(NAME, "tree", detect=_on_path, version=_version)


# ─── Git Bash ───────────────────────────────────────────────────


async def _gitbash_prerequisite(ctx: InstallContext) -> None:
    require(
        ctx.runner.which("unzip"),
        "unzip is not available. Install it first: dev install unzip",
    )


async def _gitbash_install(ctx: InstallContext) -> tuple[str, ...]:
    check(
        await ctx.runner.exec(["mkdir", "-p", GITBASH_BIN_DIR]),
        f"create {GITBASH_BIN_DIR} (try running Git Bash as Administrator)",
    )
    workdir = ctx.downloader.make_workdir(NAME)
    try:
        archive = await ctx.downloader.fetch(GNUWIN32_TREE_URL, workdir / "tree.zip")
        check(
            await ctx.runner.exec(
                ["unzip", "-o", "-j", archive.as_posix(), "bin/tree.exe", "-d", GITBASH_BIN_DIR]
            ),
            "extract tree.exe",
        )
    finally:
        shutil.rmtree(workdir, ignore_errors=True)
    return (f"If tree is not found, add {GITBASH_BIN_DIR} to PATH in ~/.bashrc.",)


async def _install_gitbash(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx,
        NAME,
        detect=_on_path,
        prerequisite=_gitbash_prerequisite,
        install=_gitbash_install,
        version=_version,
    )


SPEC = InstallerSpec(
    name=NAME,
    display_name="tree",
    strategies={
        PlatformType.MACOS: formula_strategy(
            NAME, "tree", detect=brew_formula("tree"), version=_version
        ),
        **dict.fromkeys(DEBIAN_FAMILY, _apt),
        **dict.fromkeys(RPM_FAMILY, _rpm),
        PlatformType.WINDOWS: choco_strategy(
            NAME,
            "tree",
            notes=(
                NEW_TERMINAL_NOTE,
                "If 'tree --version' reports 'Invalid switch', the built-in Windows tree "
                "shadows it. Put the Chocolatey bin directory before System32 in PATH.",
            ),
        ),
        PlatformType.GITBASH: _install_gitbash,
    },
    detectors={
        PlatformType.MACOS: brew_formula("tree"),
        **dict.fromkeys((*DEBIAN_FAMILY, *RPM_FAMILY, PlatformType.GITBASH), _on_path),
        PlatformType.WINDOWS: choco_package("tree"),
    },
)
