# ABOUTME: Second pass over normalized blocks that fills page mentions from the identity map
# ABOUTME: Tokenization stays label-only; this runs once every collection has been indexed

from collections.abc import Sequence

from portfolio_sync.content.identity import IdentityMap
from portfolio_sync.content.models import BlockNode, InlineToken, MentionToken


def _resolve_tokens(tokens: list[InlineToken] | None, identities: IdentityMap) -> list[InlineToken] | None:
    if tokens is None:
        return None
    resolved: list[InlineToken] = []
    for token in tokens:
        if isinstance(token, MentionToken) and token.page_id in identities:
            identity = identities[token.page_id]
            token = token.model_copy(update={"entity_type": identity.kind.value, "slug": identity.slug})
        resolved.append(token)
    return resolved


def resolve_mentions(blocks: Sequence[BlockNode], identities: IdentityMap) -> list[BlockNode]:
    """Return copies of ``blocks`` whose page mentions know their target entity."""
    resolved = []
    for block in blocks:
        update = {
            "content": _resolve_tokens(block.content, identities),
            "caption": _resolve_tokens(block.caption, identities),
        }
        if block.children:
            update["children"] = resolve_mentions(block.children, identities)
        resolved.append(block.model_copy(update=update))
    return resolved
