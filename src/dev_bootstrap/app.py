"""Composition root: build the InstallContext and own its HTTP client."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from dev_bootstrap.download.fetcher import HttpDownloader
from dev_bootstrap.installer.base import InstallContext
from dev_bootstrap.managers.apt import AptManager
from dev_bootstrap.managers.brew import BrewManager
from dev_bootstrap.managers.choco import ChocoManager
from dev_bootstrap.managers.rpm import RpmManager
from dev_bootstrap.managers.winget import WingetManager
from dev_bootstrap.platform.detector import DefaultPlatformDetector
from dev_bootstrap.settings import Settings
from dev_bootstrap.shell.runner import DefaultCommandRunner


@asynccontextmanager
async def app_context(settings: Settings) -> AsyncIterator[InstallContext]:
    """Wire the real adapters for one CLI invocation."""
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(settings.download_timeout, connect=10.0),
        follow_redirects=True,
        limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
        transport=httpx.AsyncHTTPTransport(retries=3),
    ) as http_client:
        runner = DefaultCommandRunner(default_timeout=settings.command_timeout)
        detector = DefaultPlatformDetector()
        platform = detector.detect()
        yield InstallContext(
            platform=platform,
            runner=runner,
            detector=detector,
            brew=BrewManager(runner),
            apt=AptManager(runner),
            rpm=RpmManager(runner, hint=platform.package_manager),
            choco=ChocoManager(runner),
            winget=WingetManager(runner),
            downloader=HttpDownloader(http_client),
            home=detector.get_home_dir(),
            environ=dict(os.environ),
        )
