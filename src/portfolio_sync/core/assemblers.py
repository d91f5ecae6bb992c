# ABOUTME: Per-kind assemblers that turn one Notion page into one frozen entity record
# ABOUTME: Pull block trees, resolve mentions and relations, extract sections, cache assets

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar

from portfolio_sync.content import properties
from portfolio_sync.content.assets import AssetCache
from portfolio_sync.content.blocks import normalize_tree
from portfolio_sync.content.identity import EntityKind, IdentityMap, page_slug
from portfolio_sync.content.mentions import resolve_mentions
from portfolio_sync.content.models import BlockKind, BlockNode, DateRange, Icon, ResolvedRef
from portfolio_sync.content.properties import Page
from portfolio_sync.content.sections import extract_sections
from portfolio_sync.core.fetcher import BlockTreeFetcher
from portfolio_sync.core.models import (
    Entity,
    Involvement,
    InvolvementSections,
    Organization,
    Project,
    ProjectSections,
    Skill,
)
from portfolio_sync.utils.concurrency import gather_or_cancel
from portfolio_sync.utils.logging import with_entity_context


@dataclass(frozen=True)
class AssemblyContext:
    """Everything an assembler needs; built once the identity map is complete."""

    fetcher: BlockTreeFetcher
    identities: IdentityMap
    assets: AssetCache | None = None


class EntityAssembler(ABC):
    """Shared orchestration for turning a page into an entity."""

    kind: ClassVar[EntityKind]
    # output field name → heading text that opens the section
    section_headings: ClassVar[dict[str, str]] = {}

    def __init__(self, context: AssemblyContext):
        self.context = context

    async def assemble_all(self, pages: Sequence[Page]) -> list[Entity]:
        """Assemble pages concurrently; results keep the source page order."""
        return await gather_or_cancel(self.assemble(page) for page in pages)

    async def assemble(self, page: Page) -> Entity:
        with with_entity_context(self.kind.value, page["id"]) as logger:
            blocks = await self.page_blocks(page)
            entity = await self.build(page, blocks)
            logger.debug("Assembled entity", slug=entity.slug, blocks=len(blocks))
            return entity

    @abstractmethod
    async def build(self, page: Page, blocks: list[BlockNode]) -> Entity:
        """Build the entity from the page properties and its normalized blocks."""

    async def page_blocks(self, page: Page) -> list[BlockNode]:
        arena = await self.context.fetcher.fetch_blocks(page["id"])
        blocks = resolve_mentions(normalize_tree(arena), self.context.identities)
        return await self._cache_block_images(blocks)

    async def _cache_block_images(self, blocks: list[BlockNode]) -> list[BlockNode]:
        if self.context.assets is None:
            return blocks
        return await gather_or_cancel(self._cache_block_image(block) for block in blocks)

    async def _cache_block_image(self, block: BlockNode) -> BlockNode:
        update = {}
        if block.kind is BlockKind.IMAGE and block.url:
            update["url"] = await self.context.assets.cache_asset(block.url)
        if block.children:
            update["children"] = await self._cache_block_images(block.children)
        return block.model_copy(update=update) if update else block

    async def cache(self, url: str | None) -> str | None:
        if url is None or self.context.assets is None:
            return url
        return await self.context.assets.cache_asset(url)

    async def icon(self, page: Page) -> Icon | None:
        icon = properties.get_icon(page)
        if icon is None or icon.type != "image":
            return icon
        return icon.model_copy(update={"value": await self.cache(icon.value)})

    async def cover(self, page: Page) -> str | None:
        return await self.cache(properties.get_cover(page))

    def refs(self, page: Page, name: str) -> list[ResolvedRef]:
        return self.context.identities.resolve_refs(properties.get_relation_ids(page, name))

    def sections(self, blocks: list[BlockNode]) -> dict[str, list[BlockNode]]:
        found = extract_sections(blocks, list(self.section_headings.values()))
        return {field: found[heading] for field, heading in self.section_headings.items()}

    def identity(self, page: Page) -> dict[str, str]:
        slug = page_slug(page)
        return {"id": page["id"], "slug": slug, "share_path": self.kind.share_path(slug)}


class OrganizationAssembler(EntityAssembler):
    kind = EntityKind.ORGANIZATION

    async def build(self, page: Page, blocks: list[BlockNode]) -> Organization:
        logos = properties.get_files(page, "Logo")
        return Organization(
            **self.identity(page),
            name=properties.get_title(page),
            type=properties.get_select(page, "Type"),
            logo=await self.cache(logos[0]) if logos else None,
            url=properties.get_url(page, "URL"),
            location=properties.get_rich_text(page, "Location"),
            involvements=self.refs(page, "Involvements"),
            context=blocks,
            icon=await self.icon(page),
            cover=await self.cover(page),
        )


class InvolvementAssembler(EntityAssembler):
    kind = EntityKind.INVOLVEMENT
    section_headings = {"tldr": "TLDR", "role_overview": "Role Overview"}

    async def build(self, page: Page, blocks: list[BlockNode]) -> Involvement:
        organizations = self.refs(page, "Organization")
        return Involvement(
            **self.identity(page),
            title=properties.get_title(page),
            organization=organizations[0] if organizations else None,
            dates=properties.get_date(page, "Dates") or DateRange(start=""),
            current=properties.get_checkbox(page, "Current"),
            type=properties.get_select(page, "Type"),
            location=properties.get_select(page, "Location") or properties.get_rich_text(page, "Location"),
            projects=self.refs(page, "Projects"),
            skills=self.refs(page, "Skills Developed"),
            sections=InvolvementSections(**self.sections(blocks)),
            icon=await self.icon(page),
            cover=await self.cover(page),
        )


class ProjectAssembler(EntityAssembler):
    kind = EntityKind.PROJECT
    section_headings = {"overview": "Project Overview", "under_the_hood": "Under the Hood", "impact": "Impact"}

    async def build(self, page: Page, blocks: list[BlockNode]) -> Project:
        link = properties.get_url(page, "Links")
        return Project(
            **self.identity(page),
            name=properties.get_title(page),
            dates=properties.get_date(page, "Dates"),
            involvements=self.refs(page, "Involvements"),
            organizations=self.refs(page, "Involved With"),
            skills=self.refs(page, "Skills Developed"),
            tags=properties.get_multi_select(page, "Tags"),
            links=[link] if link else None,
            sections=ProjectSections(**self.sections(blocks)),
            icon=await self.icon(page),
            cover=await self.cover(page),
            featured=properties.get_checkbox(page, "Featured"),
        )


class SkillAssembler(EntityAssembler):
    kind = EntityKind.SKILL

    async def build(self, page: Page, blocks: list[BlockNode]) -> Skill:
        return Skill(
            **self.identity(page),
            name=properties.get_title(page),
            type=properties.get_select(page, "Type"),
            proficiency=properties.get_number(page, "Proficiency (1-5)"),
            related_projects=self.refs(page, "Related Projects"),
            related_involvements=self.refs(page, "Related Involvements"),
            context=blocks,
            icon=await self.icon(page),
        )


ASSEMBLERS: dict[EntityKind, type[EntityAssembler]] = {
    EntityKind.ORGANIZATION: OrganizationAssembler,
    EntityKind.INVOLVEMENT: InvolvementAssembler,
    EntityKind.PROJECT: ProjectAssembler,
    EntityKind.SKILL: SkillAssembler,
}
