"""Port: external command execution."""

from __future__ import annotations

from typing import Protocol

from dev_bootstrap.models import CommandResult


class CommandRunnerPort(Protocol):
    """Port for running external commands on the host."""

    async def exec(
        self,
        cmd: list[str],
        *,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Run an argv list without a shell. Never raises on non-zero exit."""
        ...

    async def shell(self, command: str, *, timeout: float | None = None) -> CommandResult:
        """Run a shell pipeline. Never raises on non-zero exit."""
        ...

    def which(self, name: str) -> bool:
        """Check whether an executable is on PATH."""
        ...

    def as_root(self, cmd: list[str]) -> list[str]:
        """Prefix ``cmd`` with sudo when the current user is not root."""
        ...
