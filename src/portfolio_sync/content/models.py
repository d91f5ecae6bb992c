# ABOUTME: Normalized content model shared by every entity: inline tokens, block nodes, icons
# ABOUTME: Frozen pydantic models with camelCase aliases; None fields are omitted on output

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ContentModel(BaseModel):
    """Base for every normalized record written to the cache."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BlockKind(str, Enum):
    """Block kinds the normalizer understands, plus an opaque catch-all."""

    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    CODE = "code"
    QUOTE = "quote"
    CALLOUT = "callout"
    DIVIDER = "divider"
    IMAGE = "image"
    OPAQUE = "opaque"

    @classmethod
    def from_source(cls, kind: str | None) -> BlockKind:
        """Map a Notion block type string, degrading unknown kinds to OPAQUE."""
        try:
            member = cls(kind)
        except ValueError:
            return cls.OPAQUE
        return cls.OPAQUE if member is cls.OPAQUE else member

    @property
    def is_heading(self) -> bool:
        return self in (BlockKind.HEADING_1, BlockKind.HEADING_2, BlockKind.HEADING_3)

    @property
    def nests(self) -> bool:
        """Whether normalized nodes of this kind keep their children."""
        return self in NESTING_KINDS


NESTING_KINDS = frozenset(
    {
        BlockKind.PARAGRAPH,
        BlockKind.BULLETED_LIST_ITEM,
        BlockKind.NUMBERED_LIST_ITEM,
        BlockKind.QUOTE,
        BlockKind.CALLOUT,
    }
)


class TextToken(ContentModel):
    type: Literal["text"] = "text"
    text: str
    bold: Literal[True] | None = None
    italic: Literal[True] | None = None
    strikethrough: Literal[True] | None = None
    underline: Literal[True] | None = None
    color: str | None = None


class LinkToken(ContentModel):
    type: Literal["link"] = "link"
    text: str
    url: str


class MentionToken(ContentModel):
    """A page mention. entity_type and slug are filled once identities are known."""

    type: Literal["mention"] = "mention"
    label: str
    entity_type: str | None = None
    slug: str | None = None
    page_id: str | None = Field(default=None, exclude=True)


InlineToken = Annotated[TextToken | LinkToken | MentionToken, Field(discriminator="type")]


class BlockNode(ContentModel):
    """One normalized content block.

    ``type`` is the source kind string, so opaque passthrough nodes keep the
    name Notion gave them.
    """

    type: str
    content: list[InlineToken] | None = None
    children: list[BlockNode] | None = None
    language: str | None = None
    url: str | None = None
    caption: list[InlineToken] | None = None

    @property
    def kind(self) -> BlockKind:
        return BlockKind.from_source(self.type)

    @property
    def plain_text(self) -> str:
        """Concatenated display text of the block's content tokens."""
        if not self.content:
            return ""
        return "".join(token.label if isinstance(token, MentionToken) else token.text for token in self.content)


class Icon(ContentModel):
    type: Literal["emoji", "image"]
    value: str


class DateRange(ContentModel):
    start: str
    end: str | None = None


class ResolvedRef(ContentModel):
    """Denormalized pointer from one entity to another."""

    id: str
    slug: str
    title: str
    share_path: str
