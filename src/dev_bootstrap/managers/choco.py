"""Chocolatey adapter (Windows, Git Bash)."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dev_bootstrap.models import PackageResult
from dev_bootstrap.shell.base import CommandRunnerPort

CHOCO_KNOWN_PATH = r"C:\ProgramData\chocolatey\bin\choco.exe"


@dataclass(frozen=True, slots=True)
class ChocoManager:
    """Installs Chocolatey packages. Looks on PATH first, then the default location."""

    runner: CommandRunnerPort

    @property
    def executable(self) -> str | None:
        if self.runner.which("choco"):
            return "choco"
        if os.path.exists(CHOCO_KNOWN_PATH):
            return CHOCO_KNOWN_PATH
        return None

    def is_available(self) -> bool:
        return self.executable is not None

    async def install(
        self, name: str, *extra_args: str, timeout: float | None = None
    ) -> PackageResult:
        choco = self.executable
        if choco is None:
            return PackageResult(success=False, output="Chocolatey is not installed")
        result = await self.runner.exec(
            [choco, "install", name, "-y", *extra_args], timeout=timeout
        )
        return PackageResult(success=result.ok, output=result.output)

    async def _list_local(self, name: str) -> str | None:
        choco = self.executable
        if choco is None:
            return None
        result = await self.runner.exec([choco, "list", "--local-only", "--exact", name])
        return result.stdout if result.ok else None

    async def is_installed(self, name: str) -> bool:
        listing = await self._list_local(name)
        return listing is not None and name.lower() in listing.lower()

    async def get_version(self, name: str) -> str | None:
        listing = await self._list_local(name)
        if listing is None:
            return None
        for line in listing.splitlines():
            parts = line.split()
            if len(parts) >= 2 and parts[0].lower() == name.lower():
                return parts[1]
        return None
