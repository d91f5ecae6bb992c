# ABOUTME: Content-addressed local cache for remote media referenced by Notion pages
# ABOUTME: Files are keyed by a hash of their URL; misses degrade to the remote URL with a warning

import asyncio
import hashlib
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

import httpx

from portfolio_sync.utils.logging import get_logger

KEY_LENGTH = 16
DEFAULT_EXTENSION = ".png"


def asset_filename(url: str) -> str:
    """Deterministic local filename for a remote URL."""
    key = hashlib.sha256(url.encode("utf-8")).hexdigest()[:KEY_LENGTH]
    extension = PurePosixPath(urlparse(url).path).suffix.lower() or DEFAULT_EXTENSION
    return f"{key}{extension}"


class AssetCache:
    """Download-once store for icons, covers, logos and image blocks.

    A file already present on disk is trusted as-is, so a remote asset that
    changes under a stable URL is never refreshed.
    """

    def __init__(
        self,
        assets_dir: Path,
        url_prefix: str = "/notion-assets",
        client: httpx.AsyncClient | None = None,
    ):
        self.assets_dir = Path(assets_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self._owns_client = client is None
        self.http_client = client or httpx.AsyncClient(follow_redirects=True, trust_env=True)
        self._in_flight: dict[str, asyncio.Task[str]] = {}
        self.downloads = 0
        self.failures = 0
        self.logger = get_logger(__name__)

    def local_path(self, url: str) -> Path:
        return self.assets_dir / asset_filename(url)

    def public_path(self, url: str) -> str:
        return f"{self.url_prefix}/{asset_filename(url)}"

    async def cache_asset(self, url: str) -> str:
        """Return the public path of a cached copy of ``url``, or ``url`` itself on failure."""
        if not url.startswith(("http://", "https://")):
            return url

        filename = asset_filename(url)
        if (self.assets_dir / filename).exists():
            return self.public_path(url)

        # concurrent callers for the same file share one download
        task = self._in_flight.get(filename)
        if task is None:
            task = asyncio.ensure_future(self._download(url))
            self._in_flight[filename] = task
            task.add_done_callback(lambda _: self._in_flight.pop(filename, None))
        return await asyncio.shield(task)

    async def _download(self, url: str) -> str:
        target = self.local_path(url)
        try:
            response = await self.http_client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            self.failures += 1
            self.logger.warning("Failed to download asset, keeping remote URL", url=url, error=str(e))
            return url

        self.assets_dir.mkdir(parents=True, exist_ok=True)
        partial = target.with_suffix(target.suffix + ".part")
        partial.write_bytes(response.content)
        partial.replace(target)
        self.downloads += 1
        self.logger.debug("Cached asset", url=url, path=str(target), size=len(response.content))
        return self.public_path(url)

    async def cancel_pending(self) -> None:
        """Cancel shared downloads still running and wait for them to stop."""
        pending = list(self._in_flight.values())
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    async def close(self) -> None:
        await self.cancel_pending()
        if self._owns_client:
            await self.http_client.aclose()
