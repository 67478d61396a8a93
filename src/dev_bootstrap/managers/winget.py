"""winget adapter (Windows)."""

from __future__ import annotations

import re
from dataclasses import dataclass

from dev_bootstrap.models import PackageResult
from dev_bootstrap.shell.base import CommandRunnerPort

_AGREEMENTS = ("--accept-package-agreements", "--accept-source-agreements")


@dataclass(frozen=True, slots=True)
class WingetManager:
    """Installs packages by winget ID."""

    runner: CommandRunnerPort

    def is_available(self) -> bool:
        return self.runner.which("winget")

    async def install(self, name: str) -> PackageResult:
        if not self.is_available():
            return PackageResult(success=False, output="winget is not available")
        result = await self.runner.exec(
            ["winget", "install", "--exact", "--id", name, "--silent", *_AGREEMENTS]
        )
        return PackageResult(success=result.ok, output=result.output)

    async def _list(self, name: str) -> str | None:
        if not self.is_available():
            return None
        result = await self.runner.exec(["winget", "list", "--exact", "--id", name])
        return result.stdout if result.ok else None

    async def is_installed(self, name: str) -> bool:
        listing = await self._list(name)
        return listing is not None and name in listing

    async def get_version(self, name: str) -> str | None:
        listing = await self._list(name)
        if listing is None:
            return None
        for line in listing.splitlines():
            if name in line:
                # Columns are separated by runs of 2+ spaces: Name  Id  Version  Source
                parts = re.split(r"\s{2,}", line.strip())
                if len(parts) >= 3:
                    return parts[2].strip()
        return None
