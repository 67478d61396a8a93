"""Homebrew adapter (macOS)."""

from __future__ import annotations

import re
from dataclasses import dataclass

from dev_bootstrap.models import PackageResult
from dev_bootstrap.shell.base import CommandRunnerPort

_NOT_INSTALLED = "Homebrew is not installed"


@dataclass(frozen=True, slots=True)
class BrewManager:
    """Installs formulas and casks with ``brew``."""

    runner: CommandRunnerPort

    def is_available(self) -> bool:
        return self.runner.which("brew")

    async def is_installed(self, name: str) -> bool:
        if not self.is_available():
            return False
        result = await self.runner.exec(["brew", "list", "--formula", name])
        return result.ok

    async def is_cask_installed(self, cask: str) -> bool:
        if not self.is_available():
            return False
        result = await self.runner.exec(["brew", "list", "--cask", cask])
        return result.ok

    async def install(self, name: str) -> PackageResult:
        if not self.is_available():
            return PackageResult(success=False, output=_NOT_INSTALLED)
        result = await self.runner.exec(["brew", "install", "--quiet", name])
        return PackageResult(success=result.ok, output=result.output)

    async def install_cask(self, cask: str) -> PackageResult:
        if not self.is_available():
            return PackageResult(success=False, output=_NOT_INSTALLED)
        result = await self.runner.exec(["brew", "install", "--cask", "--quiet", cask])
        return PackageResult(success=result.ok, output=result.output)

    async def get_version(self, name: str) -> str | None:
        if not self.is_available():
            return None
        result = await self.runner.exec(["brew", "list", "--versions", name])
        if not result.ok:
            return None
        # "yarn 1.22.22" -> "1.22.22"
        parts = result.stdout.split()
        return parts[-1] if len(parts) >= 2 else None

    async def version(self) -> str | None:
        """Version of Homebrew itself."""
        if not self.is_available():
            return None
        result = await self.runner.exec(["brew", "--version"])
        m = re.search(r"Homebrew\s+(\d+\.\d+\.?\d*)", result.stdout)
        return m.group(1) if result.ok and m else None

    async def prefix(self) -> str:
        result = await self.runner.exec(["brew", "--prefix"])
        if result.ok and result.stdout.strip():
            return result.stdout.strip()
        return "/opt/homebrew"
