# ABOUTME: Pure property extractors over raw Notion page records
# ABOUTME: Every extractor tolerates missing or mistyped properties and returns an absent value

from typing import Any

from portfolio_sync.content.models import DateRange, Icon

Page = dict[str, Any]


def _property(page: Page, name: str, prop_type: str) -> Any:
    """Return the typed payload of a property, or None when absent or of another type."""
    properties = page.get("properties")
    if not isinstance(properties, dict):
        return None
    prop = properties.get(name)
    if not isinstance(prop, dict) or prop.get("type") != prop_type:
        return None
    return prop.get(prop_type)


def _plain_text(runs: Any) -> str:
    if not isinstance(runs, list):
        return ""
    return "".join(run.get("plain_text") or "" for run in runs if isinstance(run, dict))


def _file_url(file_object: Any) -> str | None:
    """URL of an external or uploaded Notion file object."""
    if not isinstance(file_object, dict):
        return None
    kind = file_object.get("type")
    if kind not in ("external", "file"):
        return None
    payload = file_object.get(kind)
    if isinstance(payload, dict) and payload.get("url"):
        return payload["url"]
    return None


def get_title(page: Page) -> str:
    """Concatenated plain text of the page's title property, whatever it is named."""
    properties = page.get("properties")
    if not isinstance(properties, dict):
        return ""
    for prop in properties.values():
        if isinstance(prop, dict) and prop.get("type") == "title":
            return _plain_text(prop.get("title"))
    return ""


def get_rich_text(page: Page, name: str) -> str | None:
    text = _plain_text(_property(page, name, "rich_text"))
    return text or None


def get_checkbox(page: Page, name: str) -> bool:
    value = _property(page, name, "checkbox")
    return value if isinstance(value, bool) else False


def get_select(page: Page, name: str) -> str | None:
    value = _property(page, name, "select")
    if isinstance(value, dict) and value.get("name"):
        return value["name"]
    return None


def get_multi_select(page: Page, name: str) -> list[str]:
    values = _property(page, name, "multi_select")
    if not isinstance(values, list):
        return []
    return [value["name"] for value in values if isinstance(value, dict) and value.get("name")]


def get_url(page: Page, name: str) -> str | None:
    value = _property(page, name, "url")
    return value if isinstance(value, str) and value else None


def get_date(page: Page, name: str) -> DateRange | None:
    """Date range with opaque start/end strings; no timezone handling."""
    value = _property(page, name, "date")
    if not isinstance(value, dict) or not isinstance(value.get("start"), str):
        return None
    end = value.get("end")
    return DateRange(start=value["start"], end=end if isinstance(end, str) and end else None)


def get_relation_ids(page: Page, name: str) -> list[str]:
    values = _property(page, name, "relation")
    if not isinstance(values, list):
        return []
    return [value["id"] for value in values if isinstance(value, dict) and isinstance(value.get("id"), str)]


def get_number(page: Page, name: str) -> int | float | None:
    value = _property(page, name, "number")
    # bool is an int subclass but never a Notion number
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return None


def get_files(page: Page, name: str) -> list[str]:
    """URLs of every external or uploaded file in a files property."""
    values = _property(page, name, "files")
    if not isinstance(values, list):
        return []
    return [url for url in (_file_url(value) for value in values) if url]


def get_icon(page: Page) -> Icon | None:
    icon = page.get("icon")
    if not isinstance(icon, dict):
        return None
    if icon.get("type") == "emoji" and isinstance(icon.get("emoji"), str):
        return Icon(type="emoji", value=icon["emoji"])
    url = _file_url(icon)
    if url:
        return Icon(type="image", value=url)
    return None


def get_cover(page: Page) -> str | None:
    return _file_url(page.get("cover"))
