# ABOUTME: Persistence of normalized content as JSON documents
# ABOUTME: Pipeline Stage 4: assembled entities → cache files → read-only content store

"""
Persistence Layer: Store and read back the normalized content

This layer handles:
- Writing one JSON document per entity collection plus meta.json
- Atomic replacement so a failed run never leaves half-written files
- Loading and indexing the documents for read-only consumers

Data Flow: core/ entities → cache directory → site build
"""

from .store import ContentIndex, ContentStore
from .writer import ContentCacheWriter

__all__ = ["ContentCacheWriter", "ContentIndex", "ContentStore"]
