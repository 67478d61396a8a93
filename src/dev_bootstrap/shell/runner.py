"""Default command runner backed by asyncio subprocesses."""

from __future__ import annotations

import logging
import os
import shlex
import shutil

from dev_bootstrap.models import CommandResult
from dev_bootstrap.shell.subprocess import command_exists, run_command, run_shell

logger = logging.getLogger(__name__)


class DefaultCommandRunner:
    """Adapter for CommandRunnerPort -- holds the default timeout."""

    def __init__(self, default_timeout: float = 300.0) -> None:
        self._timeout = default_timeout
        self._needs_sudo = _needs_sudo()

    async def exec(
        self,
        cmd: list[str],
        *,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        logger.debug("exec: %s", shlex.join(cmd))
        code, stdout, stderr = await run_command(
            cmd,
            env=_merged_env(env),
            timeout=timeout or self._timeout,
        )
        logger.debug("exit %d: %s", code, cmd[0])
        return CommandResult(code=code, stdout=stdout, stderr=stderr)

    async def shell(self, command: str, *, timeout: float | None = None) -> CommandResult:
        logger.debug("shell: %s", command)
        code, stdout, stderr = await run_shell(command, timeout=timeout or self._timeout)
        logger.debug("exit %d", code)
        return CommandResult(code=code, stdout=stdout, stderr=stderr)

    def which(self, name: str) -> bool:
        return command_exists(name)

    def as_root(self, cmd: list[str]) -> list[str]:
        if self._needs_sudo:
            return ["sudo", *cmd]
        return list(cmd)


def _needs_sudo() -> bool:
    geteuid = getattr(os, "geteuid", None)
    if geteuid is None:
        # Windows: elevation is the caller's job (Administrator shell).
        return False
    return geteuid() != 0 and shutil.which("sudo") is not None


def _merged_env(extra: dict[str, str] | None) -> dict[str, str] | None:
    if not extra:
        return None
    return {**os.environ, **extra}
