# ABOUTME: Converts Notion rich-text runs into normalized inline tokens
# ABOUTME: One token per run, same order; style flags only when set, color only when non-default

from typing import Any

from portfolio_sync.content.models import InlineToken, LinkToken, MentionToken, TextToken

STYLE_FLAGS = ("bold", "italic", "strikethrough", "underline")


def _text_token(run: dict[str, Any], text: str) -> TextToken:
    annotations = run.get("annotations")
    if not isinstance(annotations, dict):
        return TextToken(text=text)

    flags = {flag: True for flag in STYLE_FLAGS if annotations.get(flag) is True}
    color = annotations.get("color")
    if isinstance(color, str) and color and color != "default":
        flags["color"] = color
    return TextToken(text=text, **flags)


def tokenize_run(run: dict[str, Any]) -> InlineToken:
    text = run.get("plain_text") or ""
    kind = run.get("type")

    if kind == "mention":
        mention = run.get("mention") or {}
        if mention.get("type") == "page":
            page = mention.get("page") or {}
            return MentionToken(label=text, page_id=page.get("id"))
        # user, date, database and link mentions render as their label
        return TextToken(text=text)

    if kind == "text":
        link = (run.get("text") or {}).get("link")
        if isinstance(link, dict) and link.get("url"):
            return LinkToken(text=text, url=link["url"])
        return _text_token(run, text)

    return TextToken(text=text)


def tokenize(runs: Any) -> list[InlineToken]:
    """Tokenize a rich-text array; anything that is not a list yields no tokens."""
    if not isinstance(runs, list):
        return []
    return [tokenize_run(run) for run in runs if isinstance(run, dict)]
