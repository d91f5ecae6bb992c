# ABOUTME: Entity models written to the content cache, one per Notion collection
# ABOUTME: These are the output contract consumed by the site build

from pydantic import BaseModel, Field

from portfolio_sync.content.identity import EntityKind
from portfolio_sync.content.models import BlockNode, ContentModel, DateRange, Icon, ResolvedRef


class Organization(ContentModel):
    id: str
    slug: str
    share_path: str
    name: str
    published: bool = True
    type: str | None = None
    logo: str | None = None
    url: str | None = None
    location: str | None = None
    involvements: list[ResolvedRef] = Field(default_factory=list)
    context: list[BlockNode] = Field(default_factory=list)
    icon: Icon | None = None
    cover: str | None = None


class InvolvementSections(ContentModel):
    tldr: list[BlockNode] = Field(default_factory=list)
    role_overview: list[BlockNode] = Field(default_factory=list)


class Involvement(ContentModel):
    id: str
    slug: str
    share_path: str
    title: str
    published: bool = True
    organization: ResolvedRef | None = None
    dates: DateRange
    current: bool = False
    type: str | None = None
    location: str | None = None
    projects: list[ResolvedRef] = Field(default_factory=list)
    skills: list[ResolvedRef] = Field(default_factory=list)
    sections: InvolvementSections = Field(default_factory=InvolvementSections)
    icon: Icon | None = None
    cover: str | None = None


class ProjectSections(ContentModel):
    overview: list[BlockNode] = Field(default_factory=list)
    under_the_hood: list[BlockNode] = Field(default_factory=list)
    impact: list[BlockNode] = Field(default_factory=list)


class Project(ContentModel):
    id: str
    slug: str
    share_path: str
    name: str
    published: bool = True
    dates: DateRange | None = None
    involvements: list[ResolvedRef] = Field(default_factory=list)
    organizations: list[ResolvedRef] = Field(default_factory=list)
    skills: list[ResolvedRef] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    links: list[str] | None = None
    sections: ProjectSections = Field(default_factory=ProjectSections)
    icon: Icon | None = None
    cover: str | None = None
    featured: bool = False


class Skill(ContentModel):
    id: str
    slug: str
    share_path: str
    name: str
    published: bool = True
    type: str | None = None
    proficiency: int | float | None = None
    related_projects: list[ResolvedRef] = Field(default_factory=list)
    related_involvements: list[ResolvedRef] = Field(default_factory=list)
    context: list[BlockNode] = Field(default_factory=list)
    icon: Icon | None = None


Entity = Organization | Involvement | Project | Skill

# Output document name for every entity kind, in write order
COLLECTIONS: dict[EntityKind, str] = {
    EntityKind.ORGANIZATION: "organizations",
    EntityKind.INVOLVEMENT: "involvements",
    EntityKind.PROJECT: "projects",
    EntityKind.SKILL: "skills",
}


class SyncMeta(ContentModel):
    build_time: str
    schema_version: str
    placeholder: bool | None = None


class SyncResult(BaseModel):
    """Summary of one pipeline run, used for CLI output and logging."""

    placeholder: bool = False
    organizations: list[Organization] = Field(default_factory=list)
    involvements: list[Involvement] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)
    meta: SyncMeta
    written_files: list[str] = Field(default_factory=list)
    requests_made: int = 0
    assets_downloaded: int = 0
    asset_failures: int = 0

    @property
    def counts(self) -> dict[str, int]:
        return {
            "organizations": len(self.organizations),
            "involvements": len(self.involvements),
            "projects": len(self.projects),
            "skills": len(self.skills),
        }
