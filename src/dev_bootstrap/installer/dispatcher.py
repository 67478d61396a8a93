"""Route an install or detection request to the strategy for the current platform."""

from __future__ import annotations

import logging

from dev_bootstrap.installer.base import InstallContext, InstallerSpec
from dev_bootstrap.models import FailureKind, InstallResult

logger = logging.getLogger(__name__)


async def install(spec: InstallerSpec, ctx: InstallContext) -> InstallResult:
    """Install ``spec`` on the detected platform.

    Exactly one strategy runs, or none: unsupported platforms and missing
    desktops short-circuit before any command executes. Unexpected errors
    inside a strategy are reported as Failed instead of propagating.
    """
    platform = ctx.platform.type

    hint = spec.unavailable.get(platform)
    if hint is not None:
        logger.info("%s is unavailable on %s", spec.name, platform)
        return InstallResult.unsupported(spec.name, platform, hint)

    strategy = spec.strategies.get(platform)
    if strategy is None:
        logger.info("No %s installer registered for %s", spec.name, platform)
        return InstallResult.unsupported(spec.name, platform)

    if spec.requires_desktop and not ctx.detector.is_desktop_available():
        return InstallResult.unsupported(
            spec.name,
            platform,
            f"{spec.display_name} requires a desktop environment, none was detected.",
        )

    try:
        return await strategy(ctx)
    except Exception as exc:
        logger.exception("Unexpected error installing %s on %s", spec.name, platform)
        return InstallResult.failed(
            spec.name,
            platform,
            f"Unexpected error installing {spec.display_name}: {exc}",
            kind=FailureKind.UNEXPECTED,
        )


async def is_installed(spec: InstallerSpec, ctx: InstallContext) -> bool:
    """Read-only presence check. Platforms without a detector report False."""
    detector = spec.detectors.get(ctx.platform.type)
    if detector is None:
        return False
    return await detector(ctx)


def is_eligible(spec: InstallerSpec, ctx: InstallContext) -> bool:
    """True when ``install`` would run a strategy on this host."""
    if not spec.supports(ctx.platform.type):
        return False
    return not spec.requires_desktop or ctx.detector.is_desktop_available()
