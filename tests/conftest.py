"""Shared test fixtures: in-memory fakes for the command runner, detector and downloader."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from dev_bootstrap.installer.base import InstallContext
from dev_bootstrap.managers.apt import AptManager
from dev_bootstrap.managers.brew import BrewManager
from dev_bootstrap.managers.choco import ChocoManager
from dev_bootstrap.managers.rpm import RpmManager
from dev_bootstrap.managers.winget import WingetManager
from dev_bootstrap.models import CommandResult, Platform, PlatformType

_Effect = Callable[[], None] | None


class FakeRunner:
    """CommandRunnerPort that records calls and answers from canned responses.

    Responses are matched by argv prefix (``exec``) or substring (``shell``);
    the most recently registered match wins. ``effect`` runs when a response
    is used, e.g. to put a tool on PATH once its install command ran.
    """

    def __init__(self, on_path: tuple[str, ...] | list[str] = (), *, sudo: bool = False) -> None:
        self.on_path: set[str] = set(on_path)
        self.sudo = sudo
        self.calls: list[list[str]] = []
        self.envs: list[dict[str, str] | None] = []
        self.timeouts: list[float | None] = []
        self.shell_calls: list[str] = []
        self._exec_responses: list[tuple[tuple[str, ...], CommandResult, _Effect]] = []
        self._shell_responses: list[tuple[str, CommandResult, _Effect]] = []

    def respond(
        self,
        *prefix: str,
        code: int = 0,
        stdout: str = "",
        stderr: str = "",
        effect: Callable[[], None] | None = None,
    ) -> None:
        self._exec_responses.append((prefix, CommandResult(code, stdout, stderr), effect))

    def respond_shell(
        self,
        fragment: str,
        *,
        code: int = 0,
        stdout: str = "",
        stderr: str = "",
        effect: Callable[[], None] | None = None,
    ) -> None:
        self._shell_responses.append((fragment, CommandResult(code, stdout, stderr), effect))

    def installs(self, *prefix: str, command: str) -> None:
        """Shortcut: running ``prefix`` succeeds and puts ``command`` on PATH."""
        self.respond(*prefix, effect=lambda: self.on_path.add(command))

    async def exec(
        self,
        cmd: list[str],
        *,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        self.calls.append(list(cmd))
        self.envs.append(env)
        self.timeouts.append(timeout)
        bare = cmd[1:] if cmd and cmd[0] == "sudo" else cmd
        for prefix, result, effect in reversed(self._exec_responses):
            if tuple(bare[: len(prefix)]) == prefix:
                if effect is not None:
                    effect()
                return result
        return CommandResult(code=1, stderr=f"unexpected command: {' '.join(cmd)}")

    async def shell(self, command: str, *, timeout: float | None = None) -> CommandResult:
        self.shell_calls.append(command)
        for fragment, result, effect in reversed(self._shell_responses):
            if fragment in command:
                if effect is not None:
                    effect()
                return result
        return CommandResult(code=0)

    def which(self, name: str) -> bool:
        return name in self.on_path

    def as_root(self, cmd: list[str]) -> list[str]:
        return ["sudo", *cmd] if self.sudo else list(cmd)

    @property
    def executed(self) -> int:
        return len(self.calls) + len(self.shell_calls)

    def ran(self, *prefix: str) -> bool:
        for cmd in self.calls:
            bare = cmd[1:] if cmd and cmd[0] == "sudo" else cmd
            if tuple(bare[: len(prefix)]) == prefix:
                return True
        return False


class FakeDetector:
    """PlatformDetectorPort with a fixed answer."""

    def __init__(self, platform: Platform, *, desktop: bool = True, home: Path) -> None:
        self.platform = platform
        self.desktop = desktop
        self.home = home

    def detect(self) -> Platform:
        return self.platform

    def is_desktop_available(self) -> bool:
        return self.desktop

    def get_home_dir(self) -> Path:
        return self.home


class FakeDownloader:
    """DownloaderPort serving canned payloads from memory."""

    def __init__(self, root: Path, payloads: dict[str, bytes] | None = None) -> None:
        self.root = root
        self.payloads = payloads or {}
        self.fetched: list[str] = []
        self.workdirs: list[Path] = []

    def make_workdir(self, tool: str) -> Path:
        path = self.root / f"dev-{tool}-{len(self.workdirs)}"
        path.mkdir(parents=True)
        self.workdirs.append(path)
        return path

    async def fetch(self, url: str, dest: Path) -> Path:
        self.fetched.append(url)
        dest.write_bytes(self.payloads.get(url, b"payload"))
        return dest

    async def fetch_text(self, url: str) -> str:
        self.fetched.append(url)
        return self.payloads.get(url, b"#!/bin/sh\n").decode()


ContextFactory = Callable[..., InstallContext]


@pytest.fixture
def make_ctx(tmp_path: Path) -> ContextFactory:
    """Build an InstallContext wired to fakes for the given platform tag."""

    def factory(
        platform: PlatformType,
        runner: FakeRunner | None = None,
        *,
        desktop: bool = True,
        package_manager: str | None = None,
        environ: dict[str, str] | None = None,
        downloader: FakeDownloader | None = None,
    ) -> InstallContext:
        runner = runner or FakeRunner()
        home = tmp_path / "home"
        home.mkdir(exist_ok=True)
        plat = Platform(type=platform, package_manager=package_manager)
        return InstallContext(
            platform=plat,
            runner=runner,
            detector=FakeDetector(plat, desktop=desktop, home=home),
            brew=BrewManager(runner),
            apt=AptManager(runner),
            rpm=RpmManager(runner, hint=package_manager),
            choco=ChocoManager(runner),
            winget=WingetManager(runner),
            downloader=downloader or FakeDownloader(tmp_path / "downloads"),
            home=home,
            environ=environ or {},
        )

    return factory
