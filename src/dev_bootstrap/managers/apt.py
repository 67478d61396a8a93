"""APT / dpkg adapter (Ubuntu, Debian, WSL, Raspberry Pi OS)."""

from __future__ import annotations

import shlex
from dataclasses import dataclass

from dev_bootstrap.errors import CommandFailedError
from dev_bootstrap.models import PackageResult
from dev_bootstrap.shell.base import CommandRunnerPort

_NONINTERACTIVE = "DEBIAN_FRONTEND=noninteractive"


@dataclass(frozen=True, slots=True)
class AptManager:
    """Installs Debian packages with ``apt-get``; queries go through dpkg."""

    runner: CommandRunnerPort

    def is_available(self) -> bool:
        return self.runner.which("apt-get")

    def _apt_get(self, *args: str) -> list[str]:
        return self.runner.as_root(["env", _NONINTERACTIVE, "apt-get", *args])

    async def update(self) -> PackageResult:
        result = await self.runner.exec(self._apt_get("update", "-y"))
        return PackageResult(success=result.ok, output=result.output)

    async def install(self, name: str) -> PackageResult:
        """Install a package by name, or a local ``.deb`` given by absolute path."""
        if not self.is_available():
            return PackageResult(success=False, output="apt-get is not available")
        result = await self.runner.exec(self._apt_get("install", "-y", name))
        return PackageResult(success=result.ok, output=result.output)

    async def remove(self, name: str) -> PackageResult:
        result = await self.runner.exec(self._apt_get("remove", "-y", name))
        return PackageResult(success=result.ok, output=result.output)

    async def is_installed(self, name: str) -> bool:
        result = await self.runner.exec(["dpkg-query", "-W", "-f=${Status}", name])
        return result.ok and "install ok installed" in result.stdout

    async def get_version(self, name: str) -> str | None:
        if not await self.is_installed(name):
            return None
        result = await self.runner.exec(["dpkg-query", "-W", "-f=${Version}", name])
        version = result.stdout.strip()
        return version if result.ok and version else None

    async def add_signed_repository(
        self,
        *,
        key_url: str,
        keyring_path: str,
        repo_line: str,
        list_path: str,
        dearmor: bool = True,
    ) -> None:
        """Register a vendor APT repository signed by a downloaded key.

        Raises:
            CommandFailedError: On the first step that exits non-zero.
        """
        keyring_dir = keyring_path.rsplit("/", 1)[0]
        mkdir = shlex.join(self.runner.as_root(["mkdir", "-p", keyring_dir]))
        steps: list[tuple[str, str]] = [("create keyring directory", mkdir)]
        tee_key = shlex.join(self.runner.as_root(["tee", keyring_path]))
        if dearmor:
            key_cmd = f"curl -fsSL {shlex.quote(key_url)} | gpg --dearmor | {tee_key} > /dev/null"
        else:
            key_cmd = f"curl -fsSL {shlex.quote(key_url)} | {tee_key} > /dev/null"
        steps.append(("add signing key", key_cmd))
        tee_list = shlex.join(self.runner.as_root(["tee", list_path]))
        steps.append(("add repository", f"echo {shlex.quote(repo_line)} | {tee_list} > /dev/null"))

        for action, command in steps:
            result = await self.runner.shell(command)
            if not result.ok:
                raise CommandFailedError(
                    f"Failed to {action}: {result.output}", output=result.output, code=result.code
                )

        update = await self.update()
        if not update.success:
            raise CommandFailedError(
                f"Failed to update package lists: {update.output}", output=update.output
            )
