# ABOUTME: Normalization of raw Notion records into the portable content model
# ABOUTME: Pipeline Stage 2: raw pages and blocks → tokens, block nodes, sections, identities

"""
Content Layer: Turn raw Notion JSON into the normalized content model

This layer handles:
- Property extraction and rich-text tokenization
- Block normalization and heading-based section extraction
- Slugs, the identity map, relation and mention resolution
- Local caching of remote media

Data Flow: notion/ raw records → normalized content → core/ assemblers
"""

from .models import BlockKind, BlockNode, DateRange, Icon, InlineToken, LinkToken, MentionToken, ResolvedRef, TextToken

__all__ = [
    "BlockKind",
    "BlockNode",
    "DateRange",
    "Icon",
    "InlineToken",
    "LinkToken",
    "MentionToken",
    "ResolvedRef",
    "TextToken",
]
