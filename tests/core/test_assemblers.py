# ABOUTME: Tests for the per-kind entity assemblers
# ABOUTME: Builds entities from fake Notion pages and checks fields, refs, sections and cached media

import httpx
import pytest
import pytest_asyncio
from factories import (
    FakeNotion,
    checkbox_prop,
    date_prop,
    files_prop,
    heading,
    image_block,
    multi_select_prop,
    number_prop,
    page,
    page_mention,
    paragraph,
    relation_prop,
    rich_text_prop,
    select_prop,
    text_run,
    url_prop,
)

from portfolio_sync.config import Config
from portfolio_sync.content.assets import AssetCache, asset_filename
from portfolio_sync.content.identity import EntityKind, build_identity_map
from portfolio_sync.core.assemblers import (
    AssemblyContext,
    InvolvementAssembler,
    OrganizationAssembler,
    ProjectAssembler,
    SkillAssembler,
)
from portfolio_sync.core.fetcher import BlockTreeFetcher
from portfolio_sync.notion.client import NotionClient

LOGO_URL = "https://cdn.example.com/acme-logo.svg"

ORG = page(
    "org-1",
    "Acme Corp",
    icon={"type": "emoji", "emoji": "🏢"},
    Type=select_prop("Company"),
    URL=url_prop("https://acme.example"),
    Location=rich_text_prop("Berlin"),
    Involvements=relation_prop("inv-1", "inv-unpublished"),
    Logo=files_prop(LOGO_URL),
)
INVOLVEMENT = page(
    "inv-1",
    "Backend Engineer",
    Organization=relation_prop("org-1"),
    Dates=date_prop("2022-03-01"),
    Current=checkbox_prop(True),
    Type=select_prop("Job"),
    Projects=relation_prop("proj-1"),
    Skills_Developed=relation_prop("skill-1"),
)
PROJECT = page(
    "proj-1",
    "Search Engine",
    Slug=rich_text_prop("search"),
    Involvements=relation_prop("inv-1"),
    Involved_With=relation_prop("org-1"),
    Skills_Developed=relation_prop("skill-1"),
    Tags=multi_select_prop("rust", "search"),
    Links=url_prop("https://github.com/acme/search"),
    Featured=checkbox_prop(True),
)
SKILL = page(
    "skill-1",
    "Rust",
    Type=select_prop("Language"),
    **{"Proficiency (1-5)": number_prop(4), "Related Projects": relation_prop("proj-1")},
)


@pytest.fixture
def workspace():
    workspace = FakeNotion()
    workspace.add_children(
        "inv-1",
        [
            paragraph("Preamble"),
            heading(2, "TLDR"),
            paragraph("Built the API"),
            heading(2, "Role Overview"),
            paragraph("Owned the ingestion path"),
        ],
    )
    workspace.add_children(
        "proj-1",
        [
            heading(2, "Project Overview"),
            {
                "object": "block",
                "id": "p-mention",
                "type": "paragraph",
                "has_children": False,
                "paragraph": {"rich_text": [text_run("Written in "), page_mention("Rust", "skill-1")]},
            },
            heading(2, "Under the Hood"),
            image_block("https://cdn.example.com/arch.png", caption="Architecture"),
            heading(2, "Impact"),
            paragraph("Faster queries"),
        ],
    )
    workspace.add_children("org-1", [paragraph("About Acme")])
    return workspace


@pytest_asyncio.fixture
async def context(workspace):
    config = Config(_env_file=None, notion_token="secret", organizations_db_id="orgs")
    notion_http = workspace.client()
    identities = build_identity_map(
        {
            EntityKind.ORGANIZATION: [ORG],
            EntityKind.INVOLVEMENT: [INVOLVEMENT],
            EntityKind.PROJECT: [PROJECT],
            EntityKind.SKILL: [SKILL],
        }
    )
    fetcher = BlockTreeFetcher(NotionClient(config=config, client=notion_http))
    yield AssemblyContext(fetcher=fetcher, identities=identities)
    await notion_http.aclose()


class TestOrganizationAssembler:
    """Test organization records."""

    @pytest.mark.asyncio
    async def test_fields_and_refs(self, context):
        """Test properties, relation refs and context blocks."""
        org = await OrganizationAssembler(context).assemble(ORG)

        assert org.slug == "acme-corp"
        assert org.share_path == "/organizations/acme-corp"
        assert org.type == "Company"
        assert org.location == "Berlin"
        assert org.logo == LOGO_URL
        assert [ref.slug for ref in org.involvements] == ["backend-engineer"]
        assert [block.plain_text for block in org.context] == ["About Acme"]
        assert org.icon.value == "🏢"


class TestInvolvementAssembler:
    """Test involvement records."""

    @pytest.mark.asyncio
    async def test_sections_and_organization(self, context):
        """Test sections are split by heading and the organization ref resolves."""
        involvement = await InvolvementAssembler(context).assemble(INVOLVEMENT)

        assert involvement.organization.title == "Acme Corp"
        assert involvement.dates.start == "2022-03-01"
        assert involvement.dates.end is None
        assert involvement.current is True
        assert [b.plain_text for b in involvement.sections.tldr] == ["Built the API"]
        assert [b.plain_text for b in involvement.sections.role_overview] == ["Owned the ingestion path"]
        assert [ref.share_path for ref in involvement.projects] == ["/projects/search"]

    @pytest.mark.asyncio
    async def test_unresolved_organization_is_omitted(self, context):
        """Test an organization outside the run is left out."""
        orphan = page("inv-2", "Freelance", Organization=relation_prop("org-missing"), Dates=date_prop("2020"))

        involvement = await InvolvementAssembler(context).assemble(orphan)

        assert involvement.organization is None
        assert "organization" not in involvement.to_json_dict()
        assert involvement.sections.tldr == []


class TestProjectAssembler:
    """Test project records."""

    @pytest.mark.asyncio
    async def test_sections_mentions_and_links(self, context):
        """Test project sections, resolved mentions and output aliases."""
        project = await ProjectAssembler(context).assemble(PROJECT)
        data = project.to_json_dict()

        assert data["slug"] == "search"
        assert data["sharePath"] == "/projects/search"
        assert data["featured"] is True
        assert data["links"] == ["https://github.com/acme/search"]
        assert data["tags"] == ["rust", "search"]
        assert [ref["slug"] for ref in data["organizations"]] == ["acme-corp"]
        mention = data["sections"]["overview"][0]["content"][1]
        assert mention == {"type": "mention", "label": "Rust", "entityType": "skill", "slug": "rust"}
        assert data["sections"]["underTheHood"][0]["url"] == "https://cdn.example.com/arch.png"
        assert [b["type"] for b in data["sections"]["impact"]] == ["paragraph"]

    @pytest.mark.asyncio
    async def test_assemble_all_keeps_order(self, context):
        """Test concurrent assembly keeps the source page order."""
        pages = [page(f"p-{i}", f"Project {i}") for i in range(4)]

        projects = await ProjectAssembler(context).assemble_all(pages)

        assert [p.slug for p in projects] == ["project-0", "project-1", "project-2", "project-3"]
        assert all(p.links is None for p in projects)


class TestSkillAssembler:
    """Test skill records."""

    @pytest.mark.asyncio
    async def test_proficiency_and_related(self, context):
        """Test proficiency stays numeric and related refs resolve."""
        skill = await SkillAssembler(context).assemble(SKILL)

        assert skill.proficiency == 4
        assert skill.share_path == "/skills/rust"
        assert [ref.title for ref in skill.related_projects] == ["Search Engine"]
        assert skill.related_involvements == []


class TestAssetCaching:
    """Test media is routed through the asset cache."""

    @pytest.mark.asyncio
    async def test_logo_and_images_are_cached(self, context, tmp_path):
        """Test logo and image blocks point at local public paths."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"img"))
        assets_http = httpx.AsyncClient(transport=transport)
        cached = AssemblyContext(
            fetcher=context.fetcher,
            identities=context.identities,
            assets=AssetCache(tmp_path, client=assets_http),
        )

        org = await OrganizationAssembler(cached).assemble(ORG)
        project = await ProjectAssembler(cached).assemble(PROJECT)

        assert org.logo == f"/notion-assets/{asset_filename(LOGO_URL)}"
        image = project.sections.under_the_hood[0]
        assert image.url == f"/notion-assets/{asset_filename('https://cdn.example.com/arch.png')}"
        assert (tmp_path / asset_filename(LOGO_URL)).read_bytes() == b"img"
        await assets_http.aclose()
