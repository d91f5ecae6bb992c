# ABOUTME: Block arena for fetched Notion block trees and the block normalizer
# ABOUTME: Maps each raw block to one BlockNode, walking the arena without Python recursion

from dataclasses import dataclass, field
from typing import Any

from portfolio_sync.content.models import BlockKind, BlockNode
from portfolio_sync.content.rich_text import tokenize

RawBlock = dict[str, Any]


@dataclass
class BlockArena:
    """Raw blocks addressed by id, with ordered parent → children edges.

    The root is the container (usually the page) whose children were fetched;
    it has edges but no block record of its own.
    """

    root_id: str
    blocks: dict[str, RawBlock] = field(default_factory=dict)
    edges: dict[str, list[str]] = field(default_factory=dict)

    def add(self, parent_id: str, block: RawBlock) -> None:
        block_id = block["id"]
        self.blocks[block_id] = block
        self.edges.setdefault(parent_id, []).append(block_id)

    def child_ids(self, block_id: str) -> list[str]:
        return self.edges.get(block_id, [])

    def children_of(self, block_id: str) -> list[RawBlock]:
        return [self.blocks[child_id] for child_id in self.child_ids(block_id)]

    @property
    def top_level(self) -> list[RawBlock]:
        return self.children_of(self.root_id)

    def depth(self) -> int:
        """Deepest nesting level below the root (0 for an empty tree)."""
        deepest = 0
        stack = [(child_id, 1) for child_id in self.child_ids(self.root_id)]
        while stack:
            block_id, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child_id, level + 1) for child_id in self.child_ids(block_id))
        return deepest

    def __len__(self) -> int:
        return len(self.blocks)


def _image_url(image: dict[str, Any]) -> str | None:
    kind = image.get("type")
    payload = image.get(kind) if kind in ("external", "file") else None
    if isinstance(payload, dict):
        return payload.get("url")
    return None


def normalize_block(raw: RawBlock, children: list[BlockNode] | None = None) -> BlockNode:
    """Normalize one raw block whose children were already normalized."""
    source_kind = raw.get("type")
    kind = BlockKind.from_source(source_kind)
    payload = raw.get(source_kind) if isinstance(source_kind, str) else None
    if not isinstance(payload, dict):
        payload = {}

    if kind is BlockKind.OPAQUE:
        return BlockNode(type=source_kind if isinstance(source_kind, str) and source_kind else "unsupported")

    if kind is BlockKind.DIVIDER:
        return BlockNode(type=kind.value)

    if kind is BlockKind.IMAGE:
        caption = tokenize(payload.get("caption"))
        return BlockNode(type=kind.value, url=_image_url(payload), caption=caption or None)

    content = tokenize(payload.get("rich_text"))

    if kind is BlockKind.CODE:
        return BlockNode(type=kind.value, content=content, language=payload.get("language"))

    if kind.is_heading:
        # headings never carry children so section boundaries stay unambiguous
        return BlockNode(type=kind.value, content=content)

    return BlockNode(type=kind.value, content=content, children=children or None)


def normalize_tree(arena: BlockArena) -> list[BlockNode]:
    """Normalize every block of an arena, children before parents."""
    normalized: dict[str, BlockNode] = {}
    expanded: set[str] = set()
    stack: list[tuple[str, bool]] = [(block_id, False) for block_id in reversed(arena.child_ids(arena.root_id))]

    while stack:
        block_id, children_done = stack.pop()
        if block_id in normalized:
            continue
        if children_done:
            children = [normalized[child_id] for child_id in arena.child_ids(block_id) if child_id in normalized]
            normalized[block_id] = normalize_block(arena.blocks[block_id], children)
        elif block_id not in expanded:
            expanded.add(block_id)
            stack.append((block_id, True))
            stack.extend((child_id, False) for child_id in reversed(arena.child_ids(block_id)))

    return [normalized[block_id] for block_id in arena.child_ids(arena.root_id)]
