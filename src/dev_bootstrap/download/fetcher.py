"""Download vendor artefacts with httpx."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import httpx

from dev_bootstrap.errors import DownloadError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class HttpDownloader:
    """Adapter for DownloaderPort -- holds httpx client."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    def make_workdir(self, tool: str) -> Path:
        # One directory per install so concurrent installs never share files.
        return Path(tempfile.mkdtemp(prefix=f"dev-{tool}-"))

    async def fetch(self, url: str, dest: Path) -> Path:
        """Stream ``url`` into ``dest``.

        Raises:
            DownloadError: On any HTTP status >= 400 or transport error.
                The partially written file is removed.
        """
        logger.info("Downloading %s -> %s", url, dest)
        try:
            async with self._http.stream("GET", url) as response:
                response.raise_for_status()
                with dest.open("wb") as fh:
                    async for chunk in response.aiter_bytes(_CHUNK_SIZE):
                        fh.write(chunk)
        except httpx.HTTPStatusError as exc:
            dest.unlink(missing_ok=True)
            raise DownloadError(
                f"Download failed: HTTP {exc.response.status_code} for {url}",
                output=str(exc),
            ) from exc
        except httpx.HTTPError as exc:
            dest.unlink(missing_ok=True)
            raise DownloadError(f"Download failed for {url}: {exc}", output=str(exc)) from exc
        return dest

    async def fetch_text(self, url: str) -> str:
        logger.info("Fetching %s", url)
        try:
            response = await self._http.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise DownloadError(
                f"Download failed: HTTP {exc.response.status_code} for {url}",
                output=str(exc),
            ) from exc
        except httpx.HTTPError as exc:
            raise DownloadError(f"Download failed for {url}: {exc}", output=str(exc)) from exc
        return response.text
