"""The detect / prerequisite / install / verify template every strategy follows."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence

from dev_bootstrap.errors import (
    CommandFailedError,
    PrerequisiteMissingError,
    VerificationFailedError,
)
from dev_bootstrap.installer.base import Detector, InstallContext
from dev_bootstrap.models import CommandResult, FailureKind, InstallResult, PackageResult

logger = logging.getLogger(__name__)

InstallSteps = Callable[[InstallContext], Awaitable[Sequence[str] | None]]
Prerequisite = Callable[[InstallContext], Awaitable[None]]
VersionProbe = Callable[[InstallContext], Awaitable[str | None]]


async def guarded_install(
    ctx: InstallContext,
    tool: str,
    *,
    detect: Detector,
    install: InstallSteps,
    prerequisite: Prerequisite | None = None,
    version: VersionProbe | None = None,
) -> InstallResult:
    """Run one platform strategy.

    1. ``detect`` -- already present means AlreadyInstalled, nothing runs.
    2. ``prerequisite`` -- raises PrerequisiteMissingError when a package
       manager or helper is absent.
    3. ``install`` -- raises CommandFailedError on the first failing step and
       may return user-facing notes.
    4. ``detect`` again -- still absent means Failed("verification failed").

    Expected errors become Failed results; anything else propagates to the
    dispatcher.
    """
    platform = ctx.platform.type

    if await detect(ctx):
        logger.info("%s is already installed, skipping", tool)
        return InstallResult.already_installed(tool, platform, await _version(ctx, version))

    try:
        if prerequisite is not None:
            await prerequisite(ctx)
        logger.info("Installing %s on %s", tool, platform)
        notes = tuple(await install(ctx) or ())
    except PrerequisiteMissingError as exc:
        return InstallResult.failed(
            tool, platform, str(exc), kind=FailureKind.PREREQUISITE_MISSING
        )
    except CommandFailedError as exc:
        logger.debug("%s install failed (exit %d): %s", tool, exc.code, exc.output)
        return InstallResult.failed(
            tool,
            platform,
            str(exc),
            kind=FailureKind.COMMAND_FAILED,
            command_output=exc.output,
        )
    except VerificationFailedError as exc:
        return InstallResult.failed(
            tool, platform, str(exc), kind=FailureKind.VERIFICATION_FAILED
        )

    if not await detect(ctx):
        logger.warning("%s install commands succeeded but %s is not detected", tool, tool)
        return InstallResult.failed(
            tool,
            platform,
            "verification failed",
            kind=FailureKind.VERIFICATION_FAILED,
            notes=notes,
        )

    return InstallResult.installed(tool, platform, await _version(ctx, version), notes=notes)


def check(result: CommandResult | PackageResult, action: str) -> None:
    """Raise CommandFailedError when ``result`` reports failure.

    The captured stderr (or stdout) is carried verbatim.
    """
    if isinstance(result, PackageResult):
        ok, code = result.success, 1
    else:
        ok, code = result.ok, result.code
    if not ok:
        raise CommandFailedError(
            f"Failed to {action}: {result.output}", output=result.output, code=code
        )


def require(condition: bool, message: str) -> None:
    if not condition:
        raise PrerequisiteMissingError(message)


async def _version(ctx: InstallContext, probe: VersionProbe | None) -> str:
    if probe is None:
        return ""
    return (await probe(ctx)) or ""
