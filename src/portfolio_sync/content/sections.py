# ABOUTME: Splits a page's top-level blocks into named sections delimited by level-2 headings
# ABOUTME: Unmatched headings close the open section; a repeated section replaces the earlier run

from collections.abc import Sequence

from portfolio_sync.content.models import BlockKind, BlockNode


def _match_section(heading: str, names: Sequence[str]) -> str | None:
    lowered = heading.lower()
    for name in names:
        if name.lower() in lowered:
            return name
    return None


def extract_sections(blocks: Sequence[BlockNode], names: Sequence[str]) -> dict[str, list[BlockNode]]:
    """Collect the blocks under each requested heading_2.

    Content outside a matched section is dropped, and when a name appears
    twice only the later run survives.
    """
    sections: dict[str, list[BlockNode]] = {name: [] for name in names}
    current: str | None = None
    collected: list[BlockNode] = []

    for block in blocks:
        if block.kind is BlockKind.HEADING_2:
            if current is not None:
                sections[current] = collected
            current = _match_section(block.plain_text, names)
            collected = []
        elif current is not None:
            collected.append(block)

    if current is not None:
        sections[current] = collected

    return sections
