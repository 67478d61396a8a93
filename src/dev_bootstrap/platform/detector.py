"""Default platform detector -- resolves the platform once per process."""

from __future__ import annotations

import logging
from pathlib import Path

from dev_bootstrap.models import Platform
from dev_bootstrap.platform.detection import detect, get_home_dir, is_desktop_available

logger = logging.getLogger(__name__)


class DefaultPlatformDetector:
    """Adapter for PlatformDetectorPort backed by the real host."""

    def __init__(self) -> None:
        self._platform: Platform | None = None

    def detect(self) -> Platform:
        if self._platform is None:
            self._platform = detect()
            logger.debug(
                "Detected platform %s (package manager: %s, distro: %s)",
                self._platform.type,
                self._platform.package_manager,
                self._platform.distro,
            )
        return self._platform

    def is_desktop_available(self) -> bool:
        return is_desktop_available(self.detect())

    def get_home_dir(self) -> Path:
        return get_home_dir()
