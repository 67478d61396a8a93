"""DNF / YUM adapter (Amazon Linux, RHEL, Fedora)."""

from __future__ import annotations

import shlex
from dataclasses import dataclass

from dev_bootstrap.errors import CommandFailedError
from dev_bootstrap.models import PackageResult
from dev_bootstrap.shell.base import CommandRunnerPort


@dataclass(frozen=True, slots=True)
class RpmManager:
    """Installs RPM packages with dnf, falling back to yum.

    ``hint`` is the package manager reported by platform detection; when it
    is absent the first of dnf/yum found on PATH is used.
    """

    runner: CommandRunnerPort
    hint: str | None = None

    @property
    def command(self) -> str | None:
        if self.hint in ("dnf", "yum"):
            return self.hint
        if self.runner.which("dnf"):
            return "dnf"
        if self.runner.which("yum"):
            return "yum"
        return None

    def is_available(self) -> bool:
        return self.command is not None

    async def install(self, name: str) -> PackageResult:
        """Install a package by name, or a local ``.rpm`` given by absolute path."""
        manager = self.command
        if manager is None:
            return PackageResult(success=False, output="Neither dnf nor yum is available")
        result = await self.runner.exec(self.runner.as_root([manager, "install", "-y", name]))
        return PackageResult(success=result.ok, output=result.output)

    async def group_install(self, group: str) -> PackageResult:
        manager = self.command
        if manager is None:
            return PackageResult(success=False, output="Neither dnf nor yum is available")
        result = await self.runner.exec(
            self.runner.as_root([manager, "groupinstall", "-y", group]),
        )
        return PackageResult(success=result.ok, output=result.output)

    async def is_installed(self, name: str) -> bool:
        result = await self.runner.exec(["rpm", "-q", name])
        return result.ok

    async def get_version(self, name: str) -> str | None:
        result = await self.runner.exec(["rpm", "-q", "--queryformat", "%{VERSION}", name])
        version = result.stdout.strip()
        return version if result.ok and version else None

    async def import_key(self, key_url: str) -> None:
        result = await self.runner.exec(self.runner.as_root(["rpm", "--import", key_url]))
        if not result.ok:
            raise CommandFailedError(
                f"Failed to import GPG key {key_url}: {result.output}",
                output=result.output,
                code=result.code,
            )

    async def add_repo_file(self, repo_url: str, repo_path: str) -> None:
        fetch = shlex.join(self.runner.as_root(["curl", "-fsSL", repo_url, "-o", repo_path]))
        result = await self.runner.shell(fetch)
        if not result.ok:
            raise CommandFailedError(
                f"Failed to add repository {repo_url}: {result.output}",
                output=result.output,
                code=result.code,
            )
