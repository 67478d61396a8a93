"""tmux: terminal multiplexer. Unix only."""

from __future__ import annotations

from dev_bootstrap.installer.base import InstallerSpec
from dev_bootstrap.models import DEBIAN_FAMILY, RPM_FAMILY, PlatformType
from dev_bootstrap.tools._helpers import (
    apt_strategy,
    brew_formula,
    command_version,
    formula_strategy,
    on_path,
    rpm_strategy,
)

NAME = "tmux"

_version = command_version("tmux", "-V")
_on_path = on_path("tmux")
_apt = apt_strategy(NAME, "tmux", detect=_on_path, version=_version)
_rpm = rpm_strategy(NAME, "tmux", detect=_on_path, version=_version)

SPEC = InstallerSpec(
    name=NAME,
    display_name="tmux",
    strategies={
        PlatformType.MACOS: formula_strategy(
            NAME, "tmux", detect=brew_formula("tmux"), version=_version
        ),
        **dict.fromkeys(DEBIAN_FAMILY, _apt),
        **dict.fromkeys(RPM_FAMILY, _rpm),
    },
    detectors={
        PlatformType.MACOS: brew_formula("tmux"),
        **dict.fromkeys((*DEBIAN_FAMILY, *RPM_FAMILY), _on_path),
    },
    unavailable={
        PlatformType.WINDOWS: "tmux is not available for Windows. Use WSL instead.",
        PlatformType.GITBASH: "tmux is not available for Git Bash. Use WSL instead.",
    },
)
