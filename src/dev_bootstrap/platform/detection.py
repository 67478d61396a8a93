"""Detect the host platform and whether a graphical desktop is available."""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Mapping
from pathlib import Path

from dev_bootstrap.models import Platform, PlatformType

_ID_RE = re.compile(r"""^ID=["']?([^"'\n]+)["']?""", re.MULTILINE)
_LSB_ID_RE = re.compile(r"""^DISTRIB_ID=["']?([^"'\n]+)["']?""", re.MULTILINE)

_LINUX_FAMILY = frozenset(
    {
        PlatformType.UBUNTU,
        PlatformType.DEBIAN,
        PlatformType.WSL,
        PlatformType.RASPBIAN,
        PlatformType.AMAZON_LINUX,
        PlatformType.RHEL,
        PlatformType.FEDORA,
        PlatformType.LINUX,
    }
)


# ─── Public API ─────────────────────────────────────────────────


def detect(
    *,
    sys_platform: str | None = None,
    environ: Mapping[str, str] | None = None,
    root: Path = Path("/"),
) -> Platform:
    """Classify the current host.

    Args:
        sys_platform: Override for ``sys.platform`` (tests).
        environ: Override for ``os.environ`` (tests).
        root: Filesystem root used for marker files (tests).
    """
    plat = sys_platform or sys.platform
    env = os.environ if environ is None else environ

    match plat:
        case "darwin":
            return Platform(type=PlatformType.MACOS, distro="macos")
        case "win32" | "cygwin" | "msys":
            if env.get("WSL_DISTRO_NAME"):
                return _wsl(env)
            # Git Bash (MSYS2 runtime) exports MSYSTEM, e.g. MINGW64.
            if env.get("MSYSTEM"):
                return Platform(type=PlatformType.GITBASH, distro="windows")
            return Platform(type=PlatformType.WINDOWS, distro="windows")
        case "linux":
            return _detect_linux(env, root)
    return Platform(type=PlatformType.UNKNOWN)


def get_distro(root: Path = Path("/")) -> str | None:
    """Return the lowercase distro ID from os-release or lsb-release."""
    for rel, pattern in (("etc/os-release", _ID_RE), ("etc/lsb-release", _LSB_ID_RE)):
        path = root / rel
        try:
            content = path.read_text(encoding="utf-8")
        except OSError:
            continue
        m = pattern.search(content)
        if m:
            return m.group(1).strip().lower()
    return None


def is_desktop_available(
    platform: Platform,
    *,
    environ: Mapping[str, str] | None = None,
    root: Path = Path("/"),
) -> bool:
    """Check whether GUI applications can be launched on this host."""
    env = os.environ if environ is None else environ

    if platform.type in (PlatformType.MACOS, PlatformType.WINDOWS, PlatformType.GITBASH):
        return True
    if platform.type not in _LINUX_FAMILY:
        return False

    if env.get("WAYLAND_DISPLAY") or env.get("DISPLAY"):
        return True
    if env.get("XDG_SESSION_TYPE") in ("x11", "wayland"):
        return True
    if env.get("XDG_CURRENT_DESKTOP") or env.get("DESKTOP_SESSION"):
        return True
    return platform.type is PlatformType.WSL and (root / "mnt" / "wslg").exists()


def get_home_dir() -> Path:
    return Path.home()


# ─── Internals ──────────────────────────────────────────────────


def _wsl(env: Mapping[str, str]) -> Platform:
    return Platform(type=PlatformType.WSL, distro=env["WSL_DISTRO_NAME"].lower())


def _detect_linux(env: Mapping[str, str], root: Path) -> Platform:
    if env.get("WSL_DISTRO_NAME"):
        return _wsl(env)

    distro = get_distro(root)

    if (root / "etc" / "debian_version").exists():
        if distro in ("raspbian", "raspberry"):
            kind = PlatformType.RASPBIAN
        elif distro == "ubuntu":
            kind = PlatformType.UBUNTU
        else:
            kind = PlatformType.DEBIAN
        return Platform(type=kind, distro=distro)

    if (root / "etc" / "redhat-release").exists() or (root / "etc" / "system-release").exists():
        if distro in ("amzn", "amazon"):
            kind = PlatformType.AMAZON_LINUX
        elif distro == "fedora":
            kind = PlatformType.FEDORA
        else:
            kind = PlatformType.RHEL
        manager = "dnf" if (root / "usr" / "bin" / "dnf").exists() else "yum"
        return Platform(type=kind, package_manager=manager, distro=distro)

    return Platform(type=PlatformType.LINUX, distro=distro)
