# ABOUTME: Sync orchestrator that fetches every collection, builds identities, assembles and writes
# ABOUTME: Writes happen only after the whole run succeeded, so a failure leaves old output intact

from collections.abc import Callable
from pathlib import Path

from portfolio_sync.config import Config, get_config
from portfolio_sync.content.assets import AssetCache
from portfolio_sync.content.identity import EntityKind, build_identity_map
from portfolio_sync.content.properties import Page
from portfolio_sync.core.assemblers import ASSEMBLERS, AssemblyContext
from portfolio_sync.core.fetcher import BlockTreeFetcher
from portfolio_sync.core.models import COLLECTIONS, SyncMeta, SyncResult
from portfolio_sync.notion.client import NotionClient
from portfolio_sync.persistence.writer import ContentCacheWriter, utc_timestamp
from portfolio_sync.utils.concurrency import gather_or_cancel
from portfolio_sync.utils.logging import get_logger


class SyncError(Exception):
    """Raised when a sync run aborts; the previous cache is left untouched."""

    pass


class SyncPipeline:
    """Runs one full resync from Notion into the content cache.

    Stages:
    1. Fetch every configured collection
    2. Build the identity map from all fetched pages
    3. Assemble entities per collection
    4. Write the collection documents and meta.json

    ``on_stage`` receives a short description as each stage starts.
    """

    def __init__(
        self,
        config: Config | None = None,
        client: NotionClient | None = None,
        assets: AssetCache | None = None,
        on_stage: Callable[[str], None] | None = None,
    ):
        self.config = config or get_config()
        self.client = client
        self.assets = assets
        self.on_stage = on_stage
        self.writer = ContentCacheWriter(self.config.cache_dir)
        self.logger = get_logger(__name__)

    def _stage(self, description: str) -> None:
        self.logger.info(description)
        if self.on_stage is not None:
            self.on_stage(description)

    def _ensure_directories(self) -> None:
        Path(self.config.cache_dir).mkdir(parents=True, exist_ok=True)
        Path(self.config.assets_dir).mkdir(parents=True, exist_ok=True)

    async def run(self) -> SyncResult:
        """Run the sync, or write placeholder output when Notion is not configured."""
        self._ensure_directories()

        if not self.config.has_notion_config:
            return self._write_placeholder()

        client = self.client or NotionClient(config=self.config)
        assets = self.assets or AssetCache(self.config.assets_dir, url_prefix=self.config.assets_url_prefix)
        try:
            return await self._sync(client, assets)
        except Exception as e:
            await assets.cancel_pending()
            self.logger.error("Sync aborted, cache left untouched", error=str(e), error_type=type(e).__name__)
            raise SyncError(f"Sync failed: {e}") from e
        finally:
            if self.client is None:
                await client.close()
            if self.assets is None:
                await assets.close()

    async def _sync(self, client: NotionClient, assets: AssetCache) -> SyncResult:
        fetcher = BlockTreeFetcher(client, publish_property=self.config.publish_property)

        self._stage("Fetching collections")
        pages = await self._fetch_collections(fetcher)

        # every relation may point into any collection, so the map must be complete first
        self._stage("Building identity map")
        identities = build_identity_map(pages)
        self.logger.info("Built identity map", entries=len(identities))

        context = AssemblyContext(fetcher=fetcher, identities=identities, assets=assets)
        kinds = list(COLLECTIONS)
        self._stage("Assembling entities")
        assembled = await gather_or_cancel(ASSEMBLERS[kind](context).assemble_all(pages[kind]) for kind in kinds)
        entities = dict(zip(kinds, assembled, strict=True))

        meta = SyncMeta(build_time=utc_timestamp(), schema_version=self.config.schema_version)
        self._stage("Writing content cache")
        written = self.writer.write_collections(entities)
        written.append(self.writer.write_meta(meta))

        result = SyncResult(
            organizations=entities[EntityKind.ORGANIZATION],
            involvements=entities[EntityKind.INVOLVEMENT],
            projects=entities[EntityKind.PROJECT],
            skills=entities[EntityKind.SKILL],
            meta=meta,
            written_files=[str(path) for path in written],
            requests_made=client.gate.total_admitted,
            assets_downloaded=assets.downloads,
            asset_failures=assets.failures,
        )
        self.logger.info("Sync complete", **result.counts, requests=result.requests_made)
        return result

    async def _fetch_collections(self, fetcher: BlockTreeFetcher) -> dict[EntityKind, list[Page]]:
        database_ids = self.config.database_ids

        async def fetch(kind: EntityKind) -> list[Page]:
            database_id = database_ids[COLLECTIONS[kind]]
            if not database_id:
                self.logger.warning("No database configured, collection left empty", collection=COLLECTIONS[kind])
                return []
            pages = await fetcher.fetch_database(database_id)
            self.logger.info("Fetched collection", collection=COLLECTIONS[kind], pages=len(pages))
            return pages

        kinds = list(COLLECTIONS)
        results = await gather_or_cancel(fetch(kind) for kind in kinds)
        return dict(zip(kinds, results, strict=True))

    def _write_placeholder(self) -> SyncResult:
        self.logger.warning("Notion credentials not configured, writing placeholder data")
        self._stage("Writing placeholder cache")
        meta = SyncMeta(build_time=utc_timestamp(), schema_version=self.config.schema_version, placeholder=True)
        written = self.writer.write_collections({})
        written.append(self.writer.write_meta(meta))
        return SyncResult(placeholder=True, meta=meta, written_files=[str(path) for path in written])
