# ABOUTME: Paginated retrieval of Notion database pages and recursive block trees
# ABOUTME: Failures propagate untouched; the orchestrator decides to abort the run

from typing import Any

from portfolio_sync.content.blocks import BlockArena
from portfolio_sync.content.properties import Page
from portfolio_sync.notion.client import NotionClient
from portfolio_sync.utils.concurrency import gather_or_cancel
from portfolio_sync.utils.logging import get_logger


def is_full_page(record: dict[str, Any]) -> bool:
    return record.get("object") == "page" and isinstance(record.get("properties"), dict)


def is_full_block(record: dict[str, Any]) -> bool:
    return isinstance(record.get("id"), str) and isinstance(record.get("type"), str)


class BlockTreeFetcher:
    """Fetches database pages and whole block trees through a NotionClient.

    Every request goes through the client's shared gate, so concurrent
    fetchers never exceed the run's in-flight limit.
    """

    def __init__(self, client: NotionClient, publish_property: str = "Published"):
        self.client = client
        self.publish_property = publish_property
        self.logger = get_logger(__name__)

    async def fetch_database(self, database_id: str) -> list[Page]:
        """All published, fully-populated pages of a database in source order."""
        pages: list[Page] = []
        cursor: str | None = None
        query_filter = {"property": self.publish_property, "checkbox": {"equals": True}}

        while True:
            response = await self.client.query_database(database_id, start_cursor=cursor, filter=query_filter)
            pages.extend(record for record in response.get("results", []) if is_full_page(record))
            cursor = response.get("next_cursor") if response.get("has_more") else None
            if not cursor:
                break

        self.logger.info("Fetched database", database_id=database_id, pages=len(pages))
        return pages

    async def fetch_blocks(self, container_id: str) -> BlockArena:
        """The container's full block tree, children attached in source order."""
        arena = BlockArena(root_id=container_id)
        await self._fetch_children(arena, container_id)
        self.logger.debug("Fetched block tree", container_id=container_id, blocks=len(arena), depth=arena.depth())
        return arena

    async def _fetch_children(self, arena: BlockArena, parent_id: str) -> None:
        nested: list[str] = []
        cursor: str | None = None

        while True:
            response = await self.client.list_block_children(parent_id, start_cursor=cursor)
            for block in response.get("results", []):
                if not is_full_block(block):
                    continue
                arena.add(parent_id, block)
                if block.get("has_children"):
                    nested.append(block["id"])
            cursor = response.get("next_cursor") if response.get("has_more") else None
            if not cursor:
                break

        # sibling subtrees only touch their own edges, so order is preserved
        await gather_or_cancel(self._fetch_children(arena, block_id) for block_id in nested)
