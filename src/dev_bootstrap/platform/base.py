"""Port: platform detection."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from dev_bootstrap.models import Platform


class PlatformDetectorPort(Protocol):
    """Port for querying the host platform."""

    def detect(self) -> Platform:
        """Return the platform tag and package-manager hint."""
        ...

    def is_desktop_available(self) -> bool:
        """Check whether a graphical display is available."""
        ...

    def get_home_dir(self) -> Path:
        """Return the current user's home directory."""
        ...
