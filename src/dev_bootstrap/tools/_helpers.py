"""Building blocks shared by the tool installers."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from dev_bootstrap.installer.base import Detector, InstallContext, Strategy
from dev_bootstrap.installer.flow import VersionProbe, check, guarded_install, require
from dev_bootstrap.managers.base import PackageManagerPort
from dev_bootstrap.models import InstallResult

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"(\d+(?:\.\d+)+)")

ManagerSelector = Callable[[InstallContext], PackageManagerPort]


# ─── Prerequisites ──────────────────────────────────────────────


async def require_brew(ctx: InstallContext) -> None:
    require(
        ctx.brew.is_available(),
        "Homebrew is not installed. Install it first: dev install homebrew",
    )


async def require_apt(ctx: InstallContext) -> None:
    require(ctx.apt.is_available(), "apt-get is not available on this system.")


async def require_rpm(ctx: InstallContext) -> None:
    require(ctx.rpm.is_available(), "Neither dnf nor yum is available on this system.")


async def require_choco(ctx: InstallContext) -> None:
    require(
        ctx.choco.is_available(),
        "Chocolatey is not installed. Install it first: dev install chocolatey",
    )


# ─── Detectors & version probes ─────────────────────────────────


def on_path(command: str) -> Detector:
    """Detector: ``command`` resolves on PATH."""

    async def detect(ctx: InstallContext) -> bool:
        return ctx.runner.which(command)

    return detect


def brew_formula(formula: str) -> Detector:
    async def detect(ctx: InstallContext) -> bool:
        return await ctx.brew.is_installed(formula)

    return detect


def choco_package(package: str) -> Detector:
    async def detect(ctx: InstallContext) -> bool:
        return await ctx.choco.is_installed(package)

    return detect


def command_version(*cmd: str) -> VersionProbe:
    """Version probe: first dotted number printed by ``cmd``."""

    async def probe(ctx: InstallContext) -> str | None:
        result = await ctx.runner.exec(list(cmd))
        if not result.ok:
            return None
        m = _VERSION_RE.search(result.stdout or result.stderr)
        return m.group(1) if m else None

    return probe


def package_version(manager: ManagerSelector, package: str) -> VersionProbe:
    """Version probe: what the package manager has on record for ``package``."""

    async def probe(ctx: InstallContext) -> str | None:
        return await manager(ctx).get_version(package)

    return probe


# ─── Install steps ──────────────────────────────────────────────


async def apt_install(ctx: InstallContext, package: str) -> None:
    """Refresh package lists, then install. A failed refresh is only a warning."""
    update = await ctx.apt.update()
    if not update.success:
        logger.warning("Failed to update package lists, continuing: %s", update.output)
    check(await ctx.apt.install(package), f"install {package} via APT")


async def rpm_install(ctx: InstallContext, package: str) -> None:
    check(await ctx.rpm.install(package), f"install {package} via {ctx.rpm.command}")


# ─── Strategy factories ─────────────────────────────────────────


def formula_strategy(
    tool: str, formula: str, *, detect: Detector, version: VersionProbe | None = None
) -> Strategy:
    """macOS: ``brew install <formula>``."""

    async def install(ctx: InstallContext) -> None:
        check(await ctx.brew.install(formula), f"install {formula} via Homebrew")

    async def strategy(ctx: InstallContext) -> InstallResult:
        return await guarded_install(
            ctx, tool, detect=detect, prerequisite=require_brew, install=install, version=version
        )

    return strategy


def apt_strategy(
    tool: str, package: str, *, detect: Detector, version: VersionProbe | None = None
) -> Strategy:
    async def install(ctx: InstallContext) -> None:
        await apt_install(ctx, package)

    async def strategy(ctx: InstallContext) -> InstallResult:
        return await guarded_install(
            ctx, tool, detect=detect, prerequisite=require_apt, install=install, version=version
        )

    return strategy


def rpm_strategy(
    tool: str, package: str, *, detect: Detector, version: VersionProbe | None = None
) -> Strategy:
    async def install(ctx: InstallContext) -> None:
        await rpm_install(ctx, package)

    async def strategy(ctx: InstallContext) -> InstallResult:
        return await guarded_install(
            ctx, tool, detect=detect, prerequisite=require_rpm, install=install, version=version
        )

    return strategy


def choco_strategy(
    tool: str,
    package: str,
    *extra_args: str,
    detect: Detector | None = None,
    version: VersionProbe | None = None,
    notes: tuple[str, ...] = (),
) -> Strategy:
    """Windows: ``choco install <package> -y``. Detection defaults to the choco registry."""
    detector = detect or choco_package(package)

    async def install(ctx: InstallContext) -> tuple[str, ...]:
        check(await ctx.choco.install(package, *extra_args), f"install {package} via Chocolatey")
        return notes

    async def strategy(ctx: InstallContext) -> InstallResult:
        return await guarded_install(
            ctx,
            tool,
            detect=detector,
            prerequisite=require_choco,
            install=install,
            version=version,
        )

    return strategy


def powershell_choco_strategy(
    tool: str, package: str, *, detect: Detector, notes: tuple[str, ...] = ()
) -> Strategy:
    """Git Bash: drive Chocolatey through ``powershell.exe``."""

    async def prerequisite(ctx: InstallContext) -> None:
        require(ctx.runner.which("powershell.exe"), "powershell.exe is not reachable from Git Bash")
        await require_choco(ctx)

    async def install(ctx: InstallContext) -> tuple[str, ...]:
        result = await ctx.runner.exec(
            ["powershell.exe", "-NoProfile", "-Command", f"choco install {package} -y"]
        )
        check(result, f"install {package} via Chocolatey")
        return notes

    async def strategy(ctx: InstallContext) -> InstallResult:
        return await guarded_install(
            ctx, tool, detect=detect, prerequisite=prerequisite, install=install
        )

    return strategy


NEW_TERMINAL_NOTE = "Open a new terminal window for the PATH update to take effect."
