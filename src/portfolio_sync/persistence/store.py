# ABOUTME: Read-only access to a written content cache, indexed by id and slug
# ABOUTME: Mirrors what the site build does with the JSON documents

from dataclasses import dataclass, field
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import TypeAdapter

from portfolio_sync.core.models import Involvement, Organization, Project, Skill, SyncMeta
from portfolio_sync.content.identity import EntityKind
from portfolio_sync.persistence.writer import ADAPTERS, META_FILENAME, collection_filename

T = TypeVar("T", Organization, Involvement, Project, Skill)


@dataclass
class ContentIndex(Generic[T]):
    all: list[T] = field(default_factory=list)
    by_slug: dict[str, T] = field(default_factory=dict)
    by_id: dict[str, T] = field(default_factory=dict)

    @classmethod
    def build(cls, items: list[T]) -> "ContentIndex[T]":
        return cls(
            all=items,
            by_slug={item.slug: item for item in items},
            by_id={item.id: item for item in items},
        )


def _load(path: Path, adapter: TypeAdapter) -> list:
    if not path.exists():
        return []
    return adapter.validate_json(path.read_bytes())


@dataclass
class ContentStore:
    organizations: ContentIndex[Organization]
    involvements: ContentIndex[Involvement]
    projects: ContentIndex[Project]
    skills: ContentIndex[Skill]
    meta: SyncMeta | None = None

    @classmethod
    def load(cls, cache_dir: Path) -> "ContentStore":
        """Load every document in ``cache_dir``; missing documents load as empty."""
        cache_dir = Path(cache_dir)
        loaded = {
            kind: ContentIndex.build(_load(cache_dir / collection_filename(kind), adapter))
            for kind, adapter in ADAPTERS.items()
        }
        meta_path = cache_dir / META_FILENAME
        meta = SyncMeta.model_validate_json(meta_path.read_bytes()) if meta_path.exists() else None
        return cls(
            organizations=loaded[EntityKind.ORGANIZATION],
            involvements=loaded[EntityKind.INVOLVEMENT],
            projects=loaded[EntityKind.PROJECT],
            skills=loaded[EntityKind.SKILL],
            meta=meta,
        )

    def current_involvements(self) -> list[Involvement]:
        """Involvements flagged current or without an end date."""
        return [item for item in self.involvements.all if item.current or not item.dates.end]

    def featured_projects(self) -> list[Project]:
        """Featured projects that are not shown under an involvement."""
        return [project for project in self.projects.all if project.featured and not project.involvements]

    def projects_for_involvement(self, involvement_id: str) -> list[Project]:
        return [
            project
            for project in self.projects.all
            if any(ref.id == involvement_id for ref in project.involvements)
        ]

    def involvements_for_organization(self, organization_id: str) -> list[Involvement]:
        return [
            item
            for item in self.involvements.all
            if item.organization is not None and item.organization.id == organization_id
        ]
