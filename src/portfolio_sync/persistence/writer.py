# ABOUTME: Writes the entity collections and sync metadata as JSON documents
# ABOUTME: Each file is written beside its target and swapped in with an atomic replace

from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from pydantic import TypeAdapter

from portfolio_sync.core.models import (
    COLLECTIONS,
    Involvement,
    Organization,
    Project,
    Skill,
    SyncMeta,
)
from portfolio_sync.content.identity import EntityKind
from portfolio_sync.utils.logging import get_logger

META_FILENAME = "meta.json"

ADAPTERS: dict[EntityKind, TypeAdapter] = {
    EntityKind.ORGANIZATION: TypeAdapter(list[Organization]),
    EntityKind.INVOLVEMENT: TypeAdapter(list[Involvement]),
    EntityKind.PROJECT: TypeAdapter(list[Project]),
    EntityKind.SKILL: TypeAdapter(list[Skill]),
}


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def collection_filename(kind: EntityKind) -> str:
    return f"{COLLECTIONS[kind]}.json"


class ContentCacheWriter:
    """Serializes a finished run into the cache directory."""

    def __init__(self, cache_dir: Path):
        self.cache_dir = Path(cache_dir)
        self.logger = get_logger(__name__)

    def _write(self, filename: str, payload: bytes) -> Path:
        target = self.cache_dir / filename
        partial = target.with_name(f".{filename}.tmp")
        partial.write_bytes(payload + b"\n")
        partial.replace(target)
        return target

    def write_collections(self, collections: dict[EntityKind, Sequence]) -> list[Path]:
        """Write one document per entity kind; kinds not supplied are written empty."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        written = []
        for kind in COLLECTIONS:
            entities = list(collections.get(kind, []))
            payload = ADAPTERS[kind].dump_json(entities, by_alias=True, exclude_none=True, indent=2)
            written.append(self._write(collection_filename(kind), payload))
            self.logger.debug("Wrote collection", kind=kind.value, entities=len(entities))
        return written

    def write_meta(self, meta: SyncMeta) -> Path:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        payload = meta.model_dump_json(by_alias=True, exclude_none=True, indent=2).encode("utf-8")
        return self._write(META_FILENAME, payload)
