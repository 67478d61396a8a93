"""Installer specs and the context handed to every strategy."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dev_bootstrap.download.base import DownloaderPort
from dev_bootstrap.managers.apt import AptManager
from dev_bootstrap.managers.brew import BrewManager
from dev_bootstrap.managers.choco import ChocoManager
from dev_bootstrap.managers.rpm import RpmManager
from dev_bootstrap.managers.winget import WingetManager
from dev_bootstrap.models import InstallResult, Platform, PlatformType
from dev_bootstrap.platform.base import PlatformDetectorPort
from dev_bootstrap.shell.base import CommandRunnerPort


@dataclass(frozen=True, slots=True)
class InstallContext:
    """Everything a strategy or detector may touch.

    Built once per CLI invocation by ``app.app_context``; tests build it
    from fakes.
    """

    platform: Platform
    runner: CommandRunnerPort
    detector: PlatformDetectorPort
    brew: BrewManager
    apt: AptManager
    rpm: RpmManager
    choco: ChocoManager
    winget: WingetManager
    downloader: DownloaderPort
    home: Path
    environ: Mapping[str, str] = field(default_factory=dict)


Strategy = Callable[[InstallContext], Awaitable[InstallResult]]
Detector = Callable[[InstallContext], Awaitable[bool]]


@dataclass(frozen=True, slots=True)
class InstallerSpec:
    """Declarative description of one tool's installer.

    ``strategies`` and ``detectors`` are keyed by exact platform tag.
    ``unavailable`` lists platforms the vendor does not ship for, with a
    hint shown to the user; those platforms never have a strategy.
    """

    name: str
    display_name: str
    strategies: Mapping[PlatformType, Strategy]
    detectors: Mapping[PlatformType, Detector] = field(default_factory=dict)
    unavailable: Mapping[PlatformType, str] = field(default_factory=dict)
    requires_desktop: bool = False

    def __post_init__(self) -> None:
        if not self.strategies:
            raise ValueError(f"Installer '{self.name}' must register at least one strategy")
        overlap = set(self.strategies) & set(self.unavailable)
        if overlap:
            tags = ", ".join(sorted(p.value for p in overlap))
            raise ValueError(
                f"Installer '{self.name}' marks platforms with a strategy as unavailable: {tags}"
            )

    @property
    def platforms(self) -> frozenset[PlatformType]:
        return frozenset(self.strategies)

    def supports(self, platform: PlatformType) -> bool:
        return platform in self.strategies
