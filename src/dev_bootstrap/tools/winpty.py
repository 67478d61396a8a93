"""winpty: PTY bridge for Windows console programs. Ships with Git for Windows."""

from __future__ import annotations

from dev_bootstrap.installer.base import InstallContext, InstallerSpec
from dev_bootstrap.installer.flow import guarded_install, require
from dev_bootstrap.models import DEBIAN_FAMILY, RPM_FAMILY, InstallResult, PlatformType
from dev_bootstrap.tools._helpers import NEW_TERMINAL_NOTE, choco_package, choco_strategy, on_path

NAME = "winpty"
GIT_PACKAGE = "git"

USAGE_NOTE = "In Git Bash, run interactive console programs through winpty, e.g. 'winpty python'."
REINSTALL_HINT = (
    "winpty is bundled with Git for Windows but was not found. Reinstall Git from an "
    "Administrator PowerShell: choco uninstall git -y && choco install git -y, "
    "then reopen Git Bash."
)

_NATIVE_PTY = "winpty is not needed here: {label} has native PTY support."

_on_path = on_path("winpty")


async def _nothing_to_install(ctx: InstallContext) -> None:
    return None


async def _require_bundled_winpty(ctx: InstallContext) -> None:
    require(False, REINSTALL_HINT)


async def _install_gitbash(ctx: InstallContext) -> InstallResult:
    # Detection only: winpty cannot be installed from inside Git Bash.
    return await guarded_install(
        ctx,
        NAME,
        detect=_on_path,
        prerequisite=_require_bundled_winpty,
        install=_nothing_to_install,
    )


SPEC = InstallerSpec(
    name=NAME,
    display_name="winpty",
    strategies={
        PlatformType.WINDOWS: choco_strategy(
            NAME, GIT_PACKAGE, notes=(NEW_TERMINAL_NOTE, USAGE_NOTE)
        ),
        PlatformType.GITBASH: _install_gitbash,
    },
    detectors={
        PlatformType.WINDOWS: choco_package(GIT_PACKAGE),
        PlatformType.GITBASH: _on_path,
    },
    unavailable={
        PlatformType.MACOS: _NATIVE_PTY.format(label="macOS"),
        **dict.fromkeys(DEBIAN_FAMILY, _NATIVE_PTY.format(label="Linux")),
        **dict.fromkeys(RPM_FAMILY, _NATIVE_PTY.format(label="Linux")),
    },
)
