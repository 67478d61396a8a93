"""Safe async subprocess execution for installer commands."""

from __future__ import annotations

import asyncio
import os
import shutil
import signal

_OUTPUT_LIMIT = 4000


async def run_command(
    cmd: list[str],
    env: dict[str, str] | None = None,
    timeout: float = 300.0,
) -> tuple[int, str, str]:
    """Run a subprocess with timeout, return (returncode, stdout, stderr).

    Uses asyncio.create_subprocess_exec -- no shell involved.
    Output is truncated to keep diagnostics readable.
    Uses start_new_session=True so child processes can be killed as a group.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=env,
            start_new_session=True,
        )
    except FileNotFoundError:
        return (127, "", f"Command not found: {cmd[0]}")
    return await _communicate(proc, timeout)


async def run_shell(
    command: str,
    env: dict[str, str] | None = None,
    timeout: float = 300.0,
) -> tuple[int, str, str]:
    """Run a shell pipeline with timeout, return (returncode, stdout, stderr).

    Only for vendor recipes that need pipes or redirection
    (``curl ... | gpg --dearmor | sudo tee ...``). Everything else goes
    through run_command.
    """
    proc = await asyncio.create_subprocess_shell(
        command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        env=env,
        start_new_session=True,
    )
    return await _communicate(proc, timeout)


async def _communicate(proc: asyncio.subprocess.Process, timeout: float) -> tuple[int, str, str]:
    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError:
        try:
            os.killpg(os.getpgid(proc.pid), signal.SIGKILL)
        except (ProcessLookupError, OSError, AttributeError):
            # No process groups on Windows.
            proc.kill()
        await proc.wait()
        return (-1, "", f"Command timed out after {timeout}s")

    return (
        proc.returncode or 0,
        stdout_bytes.decode(errors="replace")[:_OUTPUT_LIMIT],
        stderr_bytes.decode(errors="replace")[:_OUTPUT_LIMIT],
    )


def command_exists(name: str) -> bool:
    """True when ``name`` resolves to an executable on PATH."""
    return shutil.which(name) is not None
