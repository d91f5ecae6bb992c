# ABOUTME: Builders for raw Notion API records used across the test suite
# ABOUTME: Produce the JSON shapes returned by databases.query and blocks.children.list

import asyncio
import itertools
import json
from typing import Any

import httpx

_ids = itertools.count(1)


def new_id(prefix: str = "block") -> str:
    return f"{prefix}-{next(_ids):04d}"


def annotations(**overrides: Any) -> dict[str, Any]:
    base = {
        "bold": False,
        "italic": False,
        "strikethrough": False,
        "underline": False,
        "code": False,
        "color": "default",
    }
    base.update(overrides)
    return base


def text_run(text: str, link: str | None = None, **styles: Any) -> dict[str, Any]:
    return {
        "type": "text",
        "text": {"content": text, "link": {"url": link} if link else None},
        "annotations": annotations(**styles),
        "plain_text": text,
        "href": link,
    }


def page_mention(label: str, page_id: str) -> dict[str, Any]:
    return {
        "type": "mention",
        "mention": {"type": "page", "page": {"id": page_id}},
        "annotations": annotations(),
        "plain_text": label,
        "href": f"https://www.notion.so/{page_id.replace('-', '')}",
    }


def user_mention(label: str) -> dict[str, Any]:
    return {
        "type": "mention",
        "mention": {"type": "user", "user": {"object": "user", "id": "user-1"}},
        "annotations": annotations(),
        "plain_text": label,
        "href": None,
    }


def block(kind: str, payload: dict[str, Any] | None = None, block_id: str | None = None, has_children=False):
    return {
        "object": "block",
        "id": block_id or new_id(),
        "type": kind,
        "has_children": has_children,
        kind: payload if payload is not None else {},
    }


def text_block(kind: str, text: str, block_id: str | None = None, has_children=False, **extra: Any):
    return block(kind, {"rich_text": [text_run(text)], "color": "default", **extra}, block_id, has_children)


def paragraph(text: str, block_id: str | None = None, has_children=False):
    return text_block("paragraph", text, block_id, has_children)


def heading(level: int, text: str, block_id: str | None = None):
    return text_block(f"heading_{level}", text, block_id, is_toggleable=False)


def image_block(url: str, uploaded: bool = False, caption: str | None = None, block_id: str | None = None):
    payload: dict[str, Any] = {"caption": [text_run(caption)] if caption else []}
    if uploaded:
        payload.update(type="file", file={"url": url, "expiry_time": "2026-01-01T00:00:00.000Z"})
    else:
        payload.update(type="external", external={"url": url})
    return block("image", payload, block_id)


# Page properties


def title_prop(text: str) -> dict[str, Any]:
    return {"id": "title", "type": "title", "title": [text_run(text)] if text else []}


def rich_text_prop(text: str) -> dict[str, Any]:
    return {"id": "rt", "type": "rich_text", "rich_text": [text_run(text)] if text else []}


def checkbox_prop(value: bool) -> dict[str, Any]:
    return {"id": "cb", "type": "checkbox", "checkbox": value}


def select_prop(name: str | None) -> dict[str, Any]:
    return {"id": "sel", "type": "select", "select": {"id": "opt", "name": name, "color": "blue"} if name else None}


def multi_select_prop(*names: str) -> dict[str, Any]:
    return {"id": "ms", "type": "multi_select", "multi_select": [{"id": n, "name": n, "color": "red"} for n in names]}


def url_prop(url: str | None) -> dict[str, Any]:
    return {"id": "url", "type": "url", "url": url}


def date_prop(start: str, end: str | None = None) -> dict[str, Any]:
    return {"id": "date", "type": "date", "date": {"start": start, "end": end, "time_zone": None}}


def relation_prop(*ids: str) -> dict[str, Any]:
    return {"id": "rel", "type": "relation", "relation": [{"id": page_id} for page_id in ids], "has_more": False}


def number_prop(value: float | None) -> dict[str, Any]:
    return {"id": "num", "type": "number", "number": value}


def files_prop(*urls: str) -> dict[str, Any]:
    return {
        "id": "files",
        "type": "files",
        "files": [{"name": url.rsplit("/", 1)[-1], "type": "external", "external": {"url": url}} for url in urls],
    }


def page(page_id: str, title: str, icon: dict | None = None, cover: dict | None = None, **props: Any):
    properties = {"Name": title_prop(title), "Published": checkbox_prop(True)}
    properties.update({name.replace("_", " "): value for name, value in props.items()})
    return {
        "object": "page",
        "id": page_id,
        "icon": icon,
        "cover": cover,
        "properties": properties,
    }


class FakeNotion:
    """In-memory Notion workspace served through httpx.MockTransport."""

    def __init__(self, page_size: int = 100):
        self.page_size = page_size
        self.databases: dict[str, list[dict[str, Any]]] = {}
        self.children: dict[str, list[dict[str, Any]]] = {}
        self.failing: set[str] = set()
        self.requests: list[httpx.Request] = []
        # seconds to wait before answering for a target id
        self.delays: dict[str, float] = {}
        # target ids whose response was actually produced
        self.completed: list[str] = []

    def add_database(self, database_id: str, pages: list[dict[str, Any]]) -> None:
        self.databases[database_id] = pages

    def add_children(self, parent_id: str, blocks: list[dict[str, Any]]) -> None:
        self.children[parent_id] = blocks

    def _paginate(self, items: list[dict[str, Any]], cursor: str | None, size: int) -> dict[str, Any]:
        start = int(cursor) if cursor else 0
        end = start + min(size, self.page_size)
        has_more = end < len(items)
        return {
            "object": "list",
            "results": items[start:end],
            "has_more": has_more,
            "next_cursor": str(end) if has_more else None,
        }

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.split("/")
        target = parts[3] if len(parts) > 3 else ""

        if target in self.delays:
            await asyncio.sleep(self.delays[target])
        response = self._respond(request, parts, target)
        self.completed.append(target)
        return response

    def _respond(self, request: httpx.Request, parts: list[str], target: str) -> httpx.Response:
        if target in self.failing:
            return httpx.Response(500, json={"object": "error", "code": "internal_server_error", "message": "boom"})

        if request.method == "POST" and parts[2] == "databases":
            body = json.loads(request.content or b"{}")
            pages = self.databases.get(target)
            if pages is None:
                return httpx.Response(404, json={"object": "error", "code": "object_not_found", "message": "nope"})
            return httpx.Response(200, json=self._paginate(pages, body.get("start_cursor"), body["page_size"]))

        if request.method == "GET" and parts[2] == "blocks":
            params = request.url.params
            blocks = self.children.get(target, [])
            return httpx.Response(200, json=self._paginate(blocks, params.get("start_cursor"), int(params["page_size"])))

        return httpx.Response(400, json={"object": "error", "code": "invalid_request_url", "message": "bad"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def block_requests(self) -> list[str]:
        return [r.url.path.split("/")[3] for r in self.requests if r.method == "GET"]
