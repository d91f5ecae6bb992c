# ABOUTME: Slug generation, the per-run identity map and relation resolution
# ABOUTME: The map is an immutable snapshot built from every collection before any relation resolves

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from portfolio_sync.content import properties
from portfolio_sync.content.models import ResolvedRef
from portfolio_sync.content.properties import Page

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


class EntityKind(str, Enum):
    ORGANIZATION = "organization"
    INVOLVEMENT = "involvement"
    PROJECT = "project"
    SKILL = "skill"

    @property
    def plural(self) -> str:
        return f"{self.value}s"

    def share_path(self, slug: str) -> str:
        return f"/{self.plural}/{slug}"


def slugify(title: str) -> str:
    """Lowercase, collapse every non-alphanumeric run to one hyphen, trim hyphens."""
    return _NON_ALPHANUMERIC.sub("-", title.lower()).strip("-")


def page_slug(page: Page) -> str:
    """Slug from the page's Slug property, else its title, else its id."""
    slug = slugify(properties.get_rich_text(page, "Slug") or "") or slugify(properties.get_title(page))
    return slug or slugify(str(page.get("id", "")))


@dataclass(frozen=True)
class Identity:
    kind: EntityKind
    slug: str
    title: str

    @property
    def share_path(self) -> str:
        return self.kind.share_path(self.slug)


class IdentityMap(Mapping[str, Identity]):
    """Read-only id → Identity lookup scoped to one sync run."""

    def __init__(self, entries: Mapping[str, Identity]):
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, page_id: str) -> Identity:
        return self._entries[page_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def resolve(self, page_id: str) -> ResolvedRef | None:
        identity = self._entries.get(page_id)
        if identity is None:
            return None
        return ResolvedRef(id=page_id, slug=identity.slug, title=identity.title, share_path=identity.share_path)

    def resolve_refs(self, ids: Iterable[str]) -> list[ResolvedRef]:
        """Resolve ids in order, silently dropping any the run never fetched."""
        return [ref for ref in (self.resolve(page_id) for page_id in ids) if ref is not None]


def build_identity_map(collections: Mapping[EntityKind, Iterable[Page]]) -> IdentityMap:
    """Index every fetched page of every collection exactly once."""
    entries: dict[str, Identity] = {}
    for kind, pages in collections.items():
        for page in pages:
            page_id = page.get("id")
            if not isinstance(page_id, str):
                continue
            entries[page_id] = Identity(kind=kind, slug=page_slug(page), title=properties.get_title(page))
    return IdentityMap(entries)
