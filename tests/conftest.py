"""Shared test fixtures.

The sample site used across tests:

    1 Root
    └── 2 Home (start page, type 1)
        ├── 3 About (type 1)
        │   └── 4 Team (type 2)
        ├── 5 Hidden (type 2, not visible in menu)
        ├── 6 News (type 1)
        ├── 7 Go to team (type 3, shortcut to 4)
        └── 8 Future (type 1, published from 2100)
"""

import json
from datetime import datetime
from pathlib import Path

import pytest

from pagekit.config import (
    Config,
    PagingConfig,
    ServerConfig,
    SiteConfig,
    TreeConfig,
    UrlsConfig,
)
from pagekit.core.pages import PageStore, PageStoreBuilder
from pagekit.core.tree import PageTree
from pagekit.core.types import PAGE_CREATED, PAGE_SHORTCUT_LINK, PAGE_START_PUBLISH, LinkType, PageRef
from pagekit.urls import UrlRewriter

SITE_EXPORT = {
    "start_page": 2,
    "root_page": 1,
    "pages": [
        {"id": 1, "name": "Root"},
        {"id": 2, "name": "Home", "parent": 1, "type": 1},
        {
            "id": 3,
            "name": "About",
            "parent": 2,
            "type": 1,
            "properties": {"PageCreated": {"date": "2023-01-10T00:00:00"}},
        },
        {"id": 4, "name": "Team", "parent": 3, "type": 2},
        {"id": 5, "name": "Hidden", "parent": 2, "type": 2, "visible": False},
        {
            "id": 6,
            "name": "News",
            "parent": 2,
            "type": 1,
            "properties": {"PageCreated": {"date": "2024-03-05T00:00:00"}},
        },
        {
            "id": 7,
            "name": "Go to team",
            "parent": 2,
            "type": 3,
            "link_type": "shortcut",
            "properties": {"PageShortcutLink": {"ref": 4}},
        },
        {
            "id": 8,
            "name": "Future",
            "parent": 2,
            "type": 1,
            "properties": {"PageStartPublish": {"date": "2100-01-01T00:00:00"}},
        },
    ],
}


@pytest.fixture
def store() -> PageStore:
    """Build the sample site in memory."""
    builder = PageStoreBuilder()
    builder.add_page(1, "Root")
    builder.add_page(2, "Home", parent=1, type_id=1)
    builder.add_page(3, "About", parent=2, type_id=1, properties={PAGE_CREATED: datetime(2023, 1, 10)})
    builder.add_page(4, "Team", parent=3, type_id=2)
    builder.add_page(5, "Hidden", parent=2, type_id=2, visible_in_menu=False)
    builder.add_page(6, "News", parent=2, type_id=1, properties={PAGE_CREATED: datetime(2024, 3, 5)})
    builder.add_page(
        7,
        "Go to team",
        parent=2,
        type_id=3,
        link_type=LinkType.SHORTCUT,
        properties={PAGE_SHORTCUT_LINK: PageRef(4)},
    )
    builder.add_page(8, "Future", parent=2, type_id=1, properties={PAGE_START_PUBLISH: datetime(2100, 1, 1)})
    builder.set_root_page(1)
    builder.set_start_page(2)
    return builder.build()


@pytest.fixture
def tree(store: PageStore) -> PageTree:
    return PageTree(store)


@pytest.fixture
def rewriter(tree: PageTree, store: PageStore) -> UrlRewriter:
    return UrlRewriter(tree, store.start_ref, root_ref=store.root_ref)


@pytest.fixture
def store_file(tmp_path: Path) -> Path:
    """Write the sample site as a JSON export."""
    path = tmp_path / "pages.json"
    path.write_text(json.dumps(SITE_EXPORT))
    return path


@pytest.fixture
def test_config(store_file: Path) -> Config:
    """Create a test configuration pointing at the sample store file."""
    return Config(
        server=ServerConfig(),
        site=SiteConfig(store_path=store_file),
        paging=PagingConfig(page_size=2),
        tree=TreeConfig(),
        urls=UrlsConfig(),
    )
