"""unzip: ZIP archive extraction."""

from __future__ import annotations

import asyncio
import shutil
import zipfile
from pathlib import Path

from dev_bootstrap.errors import CommandFailedError
from dev_bootstrap.installer.base import InstallContext, InstallerSpec
from dev_bootstrap.installer.flow import check, guarded_install
from dev_bootstrap.models import DEBIAN_FAMILY, RPM_FAMILY, InstallResult, PlatformType
from dev_bootstrap.tools._helpers import (
    NEW_TERMINAL_NOTE,
    apt_strategy,
    choco_package,
    choco_strategy,
    command_version,
    formula_strategy,
    on_path,
    rpm_strategy,
)

NAME = "unzip"

GNUWIN32_UNZIP_URL = (
    "https://sourceforge.net/projects/gnuwin32/files/unzip/5.51-1/unzip-5.51-1-bin.zip/download"
)
GITBASH_TARGET = "/usr/bin/unzip.exe"

_version = command_version("unzip", "-v")
_on_path = on_path("unzip")
_apt = apt_strategy(NAME, "unzip", detect=_on_path, version=_version)
_rpm = rpm_strategy(NAME, "unzip", detect=_on_path, version=_version)


async def _detect_macos(ctx: InstallContext) -> bool:
    # The system copy in /usr/bin counts; Homebrew's unzip is keg-only.
    return ctx.runner.which("unzip") or await ctx.brew.is_installed("unzip")


# ─── Git Bash ───────────────────────────────────────────────────


def _extract_unzip_exe(archive: Path, dest: Path) -> Path:
    with zipfile.ZipFile(archive) as zf:
        try:
            zf.extract("bin/unzip.exe", dest)
        except KeyError:
            raise CommandFailedError(
                f"Failed to extract unzip.exe: bin/unzip.exe not found in {archive.name}",
            ) from None
    return dest / "bin" / "unzip.exe"


async def _gitbash_install(ctx: InstallContext) -> tuple[str, ...]:
    workdir = ctx.downloader.make_workdir(NAME)
    try:
        archive = await ctx.downloader.fetch(GNUWIN32_UNZIP_URL, workdir / "unzip-5.51-1-bin.zip")
        try:
            exe = await asyncio.to_thread(_extract_unzip_exe, archive, workdir / "extract")
        except zipfile.BadZipFile as exc:
            raise CommandFailedError(f"Failed to extract unzip archive: {exc}") from exc
        check(
            await ctx.runner.exec(["cp", exe.as_posix(), GITBASH_TARGET]),
            "copy unzip.exe to /usr/bin (try running Git Bash as Administrator)",
        )
    finally:
        shutil.rmtree(workdir, ignore_errors=True)
    return ()


async def _install_gitbash(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx, NAME, detect=_on_path, install=_gitbash_install, version=_version
    )


SPEC = InstallerSpec(
    name=NAME,
    display_name="unzip",
    strategies={
        PlatformType.MACOS: formula_strategy(
            NAME, "unzip", detect=_detect_macos, version=_version
        ),
        **dict.fromkeys(DEBIAN_FAMILY, _apt),
        **dict.fromkeys(RPM_FAMILY, _rpm),
        PlatformType.WINDOWS: choco_strategy(NAME, "unzip", notes=(NEW_TERMINAL_NOTE,)),
        PlatformType.GITBASH: _install_gitbash,
    },
    detectors={
        PlatformType.MACOS: _detect_macos,
        **dict.fromkeys((*DEBIAN_FAMILY, *RPM_FAMILY, PlatformType.GITBASH), _on_path),
        PlatformType.WINDOWS: choco_package("unzip"),
    },
)
