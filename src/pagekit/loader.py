"""Page store loading from JSON exports.

Export format:
    {
        "start_page": 2,
        "root_page": 1,
        "pages": [
            {"id": 1, "name": "Root"},
            {"id": 2, "name": "Home", "parent": 1, "type": 1,
             "visible": true, "link_type": "normal", "url_segment": "home",
             "link_url": "/page?id=2",
             "properties": {
                 "PageStartPublish": {"date": "2024-01-01T00:00:00"},
                 "PageShortcutLink": {"ref": 5},
                 "Summary": "plain strings, numbers and booleans as is"
             }}
        ]
    }
"""

import json
import logging
from datetime import datetime
from pathlib import Path

from pagekit.core.pages import PageStore, PageStoreBuilder
from pagekit.core.types import LinkType, PageRef
from pagekit.core.values import PropertyRaw

logger = logging.getLogger(__name__)


def load_store(path: Path) -> PageStore:
    """Load a page store from a JSON export file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the export is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Page store not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    store = parse_store(data)
    logger.info(f"Loaded {len(store)} pages from {path}")
    return store


def parse_store(data: object) -> PageStore:
    """Build a page store from decoded export data.

    Raises:
        ValueError: If the export is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Page export must be a dictionary")

    pages = data.get("pages", [])
    if not isinstance(pages, list):
        raise ValueError("pages must be a list")

    builder = PageStoreBuilder()
    for index, item in enumerate(pages):
        _add_page(builder, item, f"pages[{index}]")

    for key, setter in (("start_page", builder.set_start_page), ("root_page", builder.set_root_page)):
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"{key} must be an integer")
        setter(value)

    return builder.build()


def _add_page(builder: PageStoreBuilder, item: object, where: str) -> None:
    if not isinstance(item, dict):
        raise ValueError(f"{where} must be a dictionary")

    page_id = item.get("id")
    if not isinstance(page_id, int) or isinstance(page_id, bool):
        raise ValueError(f"{where}.id must be an integer")

    name = item.get("name")
    if not isinstance(name, str):
        raise ValueError(f"{where}.name must be a string")

    parent = item.get("parent")
    if parent is not None and (not isinstance(parent, int) or isinstance(parent, bool)):
        raise ValueError(f"{where}.parent must be an integer")

    type_id = item.get("type", 0)
    if not isinstance(type_id, int) or isinstance(type_id, bool):
        raise ValueError(f"{where}.type must be an integer")

    visible = item.get("visible", True)
    if not isinstance(visible, bool):
        raise ValueError(f"{where}.visible must be a boolean")

    link_type_raw = item.get("link_type", LinkType.NORMAL.value)
    try:
        link_type = LinkType(link_type_raw)
    except ValueError as e:
        raise ValueError(f"{where}.link_type is not a known link type: {link_type_raw}") from e

    url_segment = item.get("url_segment")
    if url_segment is not None and not isinstance(url_segment, str):
        raise ValueError(f"{where}.url_segment must be a string")

    link_url = item.get("link_url")
    if link_url is not None and not isinstance(link_url, str):
        raise ValueError(f"{where}.link_url must be a string")

    properties_raw = item.get("properties", {})
    if not isinstance(properties_raw, dict):
        raise ValueError(f"{where}.properties must be a dictionary")
    properties = {
        key: _parse_property(value, f"{where}.properties.{key}")
        for key, value in properties_raw.items()
    }

    try:
        builder.add_page(
            page_id,
            name,
            parent=parent,
            type_id=type_id,
            visible_in_menu=visible,
            link_type=link_type,
            url_segment=url_segment,
            link_url=link_url,
            properties=properties,
        )
    except ValueError as e:
        raise ValueError(f"{where}: {e}") from e


def _parse_property(value: object, where: str) -> PropertyRaw:
    if isinstance(value, bool | int | float | str):
        return value
    if isinstance(value, dict) and len(value) == 1:
        if "date" in value:
            try:
                return datetime.fromisoformat(value["date"])
            except (TypeError, ValueError) as e:
                raise ValueError(f"{where} is not an ISO-8601 date: {value['date']}") from e
        if "ref" in value:
            ref = value["ref"]
            if not isinstance(ref, int) or isinstance(ref, bool):
                raise ValueError(f"{where}.ref must be an integer")
            return PageRef(ref)
    raise ValueError(f"{where} has an unsupported value: {value!r}")


def site_refs(store: PageStore, start_page: int | None, root_page: int | None) -> tuple[PageRef, PageRef]:
    """Start and root references, configured ids taking precedence over the store."""
    start = PageRef(start_page) if start_page is not None else store.start_ref
    root = PageRef(root_page) if root_page is not None else store.root_ref
    return start, root
