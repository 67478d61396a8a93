"""NVM: Node Version Manager (nvm-sh on Unix, nvm-windows on Windows)."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from dev_bootstrap.installer.base import InstallContext, InstallerSpec
from dev_bootstrap.installer.flow import check, guarded_install, require
from dev_bootstrap.models import DEBIAN_FAMILY, RPM_FAMILY, InstallResult, PlatformType
from dev_bootstrap.tools._helpers import (
    NEW_TERMINAL_NOTE,
    apt_install,
    powershell_choco_strategy,
    require_apt,
    require_brew,
    require_rpm,
    rpm_install,
)

logger = logging.getLogger(__name__)

NAME = "nvm"

NVM_VERSION = "0.40.3"
INSTALL_SCRIPT_URL = f"https://raw.githubusercontent.com/nvm-sh/nvm/v{NVM_VERSION}/install.sh"
FORMULA = "nvm"
CHOCO_PACKAGE = "nvm"
WINGET_ID = "CoreyButler.NVMforWindows"

SCRIPT_CONFIG = """
# NVM Configuration
export NVM_DIR="$HOME/.nvm"
[ -s "$NVM_DIR/nvm.sh" ] && \\. "$NVM_DIR/nvm.sh"  # This loads nvm
[ -s "$NVM_DIR/bash_completion" ] && \\. "$NVM_DIR/bash_completion"
"""

BREW_CONFIG = """
# NVM Configuration (installed via Homebrew)
export NVM_DIR="$HOME/.nvm"
[ -s "{prefix}/opt/nvm/nvm.sh" ] && \\. "{prefix}/opt/nvm/nvm.sh"  # This loads nvm
[ -s "{prefix}/opt/nvm/etc/bash_completion.d/nvm" ] && \\. "{prefix}/opt/nvm/etc/bash_completion.d/nvm"
"""

RELOAD_NOTE = "Restart your terminal or run 'source {rc}' to start using nvm."


# ─── Shell configuration ────────────────────────────────────────


def nvm_dir(ctx: InstallContext) -> Path:
    configured = ctx.environ.get("NVM_DIR", "")
    return Path(configured) if configured else ctx.home / ".nvm"


def shell_config_file(ctx: InstallContext) -> Path:
    """~/.zshrc for zsh users, ~/.bashrc for everyone else."""
    if "zsh" in ctx.environ.get("SHELL", ""):
        return ctx.home / ".zshrc"
    return ctx.home / ".bashrc"


def ensure_shell_config(ctx: InstallContext, block: str) -> tuple[str, ...]:
    """Append ``block`` to the user's rc file unless it already sets NVM_DIR."""
    rc = shell_config_file(ctx)
    try:
        existing = rc.read_text(encoding="utf-8") if rc.exists() else ""
        if "NVM_DIR" not in existing:
            with rc.open("a", encoding="utf-8") as fh:
                fh.write(block)
            logger.info("Added NVM configuration to %s", rc)
    except OSError as exc:
        logger.warning("Could not update %s: %s", rc, exc)
        return (f"Could not update {rc}. Add these lines yourself:{block}",)
    return (RELOAD_NOTE.format(rc=rc),)


# ─── Detection ──────────────────────────────────────────────────


async def _detect_script(ctx: InstallContext) -> bool:
    return (nvm_dir(ctx) / "nvm.sh").exists()


async def _detect_macos(ctx: InstallContext) -> bool:
    return await ctx.brew.is_installed(FORMULA) or await _detect_script(ctx)


async def _detect_windows(ctx: InstallContext) -> bool:
    if ctx.runner.which("nvm"):
        return True
    if ctx.choco.is_available() and await ctx.choco.is_installed(CHOCO_PACKAGE):
        return True
    return ctx.winget.is_available() and await ctx.winget.is_installed(WINGET_ID)


async def _sourced_version(ctx: InstallContext, nvm_sh: str) -> str | None:
    # nvm is a shell function, so it only exists inside a shell that sourced nvm.sh.
    result = await ctx.runner.exec(
        ["bash", "-c", '. "$1" && nvm --version', "nvm-version", nvm_sh],
        env={"NVM_DIR": str(nvm_dir(ctx))},
    )
    version = result.stdout.strip()
    return version if result.ok and version else None


async def _script_version(ctx: InstallContext) -> str | None:
    return await _sourced_version(ctx, str(nvm_dir(ctx) / "nvm.sh"))


async def _brew_version(ctx: InstallContext) -> str | None:
    if not await ctx.brew.is_installed(FORMULA):
        return await _script_version(ctx)
    prefix = await ctx.brew.prefix()
    return await _sourced_version(ctx, f"{prefix}/opt/nvm/nvm.sh")


async def _windows_version(ctx: InstallContext) -> str | None:
    result = await ctx.runner.exec(["nvm", "version"])
    version = result.stdout.strip()
    return version if result.ok and version else None


# ─── macOS ──────────────────────────────────────────────────────


async def _macos_install(ctx: InstallContext) -> tuple[str, ...]:
    check(await ctx.brew.install(FORMULA), "install nvm via Homebrew")
    # Homebrew's nvm expects the directory to exist but does not create it.
    (ctx.home / ".nvm").mkdir(parents=True, exist_ok=True)
    prefix = await ctx.brew.prefix()
    return ensure_shell_config(ctx, BREW_CONFIG.format(prefix=prefix))


async def _install_macos(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx,
        NAME,
        detect=_detect_macos,
        prerequisite=require_brew,
        install=_macos_install,
        version=_brew_version,
    )


# ─── Linux (install.sh) ─────────────────────────────────────────


async def _script_prerequisite(ctx: InstallContext) -> None:
    require(ctx.runner.which("bash"), "bash is required to run the nvm installer.")
    if ctx.runner.which("curl"):
        return
    # curl gets installed through the system package manager.
    if ctx.platform.type in RPM_FAMILY:
        await require_rpm(ctx)
    else:
        await require_apt(ctx)


async def _ensure_curl(ctx: InstallContext) -> None:
    if ctx.runner.which("curl"):
        return
    if ctx.platform.type in RPM_FAMILY:
        await rpm_install(ctx, "curl")
    else:
        await apt_install(ctx, "curl")


async def _script_install(ctx: InstallContext) -> tuple[str, ...]:
    await _ensure_curl(ctx)
    workdir = ctx.downloader.make_workdir(NAME)
    try:
        script = workdir / "install.sh"
        script.write_text(await ctx.downloader.fetch_text(INSTALL_SCRIPT_URL), encoding="utf-8")
        check(await ctx.runner.exec(["bash", str(script)]), f"run the nvm v{NVM_VERSION} installer")
    finally:
        shutil.rmtree(workdir, ignore_errors=True)
    return ensure_shell_config(ctx, SCRIPT_CONFIG)


async def _install_script(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx,
        NAME,
        detect=_detect_script,
        prerequisite=_script_prerequisite,
        install=_script_install,
        version=_script_version,
    )


# ─── Windows ────────────────────────────────────────────────────


async def _windows_prerequisite(ctx: InstallContext) -> None:
    require(
        ctx.choco.is_available() or ctx.winget.is_available(),
        "Neither Chocolatey nor winget is installed. Install Chocolatey first: "
        "dev install chocolatey",
    )


async def _windows_install(ctx: InstallContext) -> tuple[str, ...]:
    if ctx.choco.is_available():
        check(await ctx.choco.install(CHOCO_PACKAGE), "install nvm via Chocolatey")
    else:
        check(await ctx.winget.install(WINGET_ID), "install nvm via winget")
    return (NEW_TERMINAL_NOTE, "Then run 'nvm install lts' and 'nvm use lts'.")


async def _install_windows(ctx: InstallContext) -> InstallResult:
    return await guarded_install(
        ctx,
        NAME,
        detect=_detect_windows,
        prerequisite=_windows_prerequisite,
        install=_windows_install,
        version=_windows_version,
    )


SPEC = InstallerSpec(
    name=NAME,
    display_name="NVM",
    strategies={
        PlatformType.MACOS: _install_macos,
        **dict.fromkeys((*DEBIAN_FAMILY, *RPM_FAMILY), _install_script),
        PlatformType.WINDOWS: _install_windows,
        PlatformType.GITBASH: powershell_choco_strategy(
            NAME, CHOCO_PACKAGE, detect=_detect_windows, notes=(NEW_TERMINAL_NOTE,)
        ),
    },
    detectors={
        PlatformType.MACOS: _detect_macos,
        **dict.fromkeys((*DEBIAN_FAMILY, *RPM_FAMILY), _detect_script),
        PlatformType.WINDOWS: _detect_windows,
        PlatformType.GITBASH: _detect_windows,
    },
)
