"""Port: fetching vendor artefacts over HTTP."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class DownloaderPort(Protocol):
    """Port for downloading installers, archives and scripts."""

    def make_workdir(self, tool: str) -> Path:
        """Create a fresh temporary directory reserved for one tool's install."""
        ...

    async def fetch(self, url: str, dest: Path) -> Path:
        """Download ``url`` to ``dest`` and return ``dest``. Raises DownloadError."""
        ...

    async def fetch_text(self, url: str) -> str:
        """Download a small text resource (e.g. an install script)."""
        ...
