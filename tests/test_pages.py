"""Tests for pages and the in-memory page store."""

import pytest

from pagekit.core.pages import (
    LinkItem,
    PageStore,
    PageStoreBuilder,
    is_resolvable,
    pages_from_links,
    pages_from_refs,
    parent,
    to_refs,
)
from pagekit.core.types import EMPTY_REF, LinkType, PageRef


class TestPage:
    """Tests for Page property access."""

    def test__name_and_visibility__read_from_properties(self, store: PageStore) -> None:
        """Expose name and menu visibility from well-known properties."""
        hidden = store.resolve(PageRef(5))

        assert hidden is not None
        assert hidden.name == "Hidden"
        assert hidden.is_visible_in_menu is False

    def test__missing_visibility__counts_as_hidden(self) -> None:
        """Page without PageVisibleInMenu is not visible."""
        builder = PageStoreBuilder()
        builder.add_page(1, "Page")
        page = builder.build().resolve(PageRef(1))
        assert page is not None
        bare = type(page)(ref=page.ref, parent_ref=EMPTY_REF, type_id=0)

        assert bare.is_visible_in_menu is False
        assert bare.name == ""

    def test__property_value__returns_default_on_type_mismatch(self) -> None:
        """Substitute the default when the stored value has another type."""
        builder = PageStoreBuilder()
        builder.add_page(1, "Page", properties={"Count": 3, "Flag": True, "Empty": ""})
        page = builder.build().resolve(PageRef(1))
        assert page is not None

        assert page.property_value("Count", 0) == 3
        assert page.property_value("Count", "none") == "none"
        assert page.property_value("Flag", 0) == 0
        assert page.property_value("Flag") is True
        assert page.property_value("Missing", "x") == "x"
        assert page.property_value("Empty", "fallback") == "fallback"
        assert not page.property_has_value("Empty")

    def test__shortcut__exposes_target(self, store: PageStore) -> None:
        """Shortcut pages expose the referenced page."""
        shortcut = store.resolve(PageRef(7))
        assert shortcut is not None

        assert shortcut.is_shortcut
        assert shortcut.shortcut_ref == PageRef(4)

    def test__non_shortcut__has_empty_target(self, store: PageStore) -> None:
        """Normal pages have no shortcut target."""
        page = store.resolve(PageRef(3))
        assert page is not None
        assert page.shortcut_ref == EMPTY_REF


class TestPageStore:
    """Tests for PageStore lookups."""

    def test__resolve__returns_none_for_empty_or_unknown(self, store: PageStore) -> None:
        """Unresolvable references give None without raising."""
        assert store.resolve(None) is None
        assert store.resolve(EMPTY_REF) is None
        assert store.resolve(PageRef(999)) is None

    def test__children_of__keeps_insertion_order(self, store: PageStore) -> None:
        """Children are returned in the order they were added."""
        children = store.children_of(PageRef(2))
        assert [page.ref.id for page in children] == [3, 5, 6, 7, 8]

    def test__children_of_unknown__returns_empty(self, store: PageStore) -> None:
        """Unknown pages have no children."""
        assert store.children_of(PageRef(999)) == []
        assert store.children_of(None) == []

    def test__ref_from_url__uses_link_url(self, store: PageStore) -> None:
        """Find pages by their internal link URL."""
        assert store.ref_from_url("/page?id=6") == PageRef(6)
        assert store.ref_from_url("https://example.com") is None

    def test__len__counts_pages(self, store: PageStore) -> None:
        """Store length is the number of pages."""
        assert len(store) == 8


class TestPageStoreBuilder:
    """Tests for PageStoreBuilder."""

    def test__duplicate_id__raises_value_error(self) -> None:
        """Reject a page id that was already added."""
        builder = PageStoreBuilder()
        builder.add_page(1, "One")
        with pytest.raises(ValueError, match="Duplicate page id: 1"):
            builder.add_page(1, "Again")

    def test__non_positive_id__raises_value_error(self) -> None:
        """Reject empty page ids."""
        with pytest.raises(ValueError, match="Page id must be positive"):
            PageStoreBuilder().add_page(0, "Zero")

    def test__defaults__derive_segment_and_url(self) -> None:
        """Default url segment and link URL come from name and id."""
        builder = PageStoreBuilder()
        builder.add_page(4, "Contact Us", link_type=LinkType.EXTERNAL)
        page = builder.build().resolve(PageRef(4))
        assert page is not None

        assert page.url_segment == "contact-us"
        assert page.link_url == "/page?id=4"
        assert page.link_type is LinkType.EXTERNAL


class TestHelpers:
    """Tests for resolution helpers."""

    def test__parent__resolves_parent_page(self, store: PageStore) -> None:
        """Return the parent, None at the top."""
        team = store.resolve(PageRef(4))
        root = store.resolve(PageRef(1))

        assert parent(store, team).name == "About"  # type: ignore[union-attr]
        assert parent(store, root) is None
        assert parent(store, None) is None

    def test__is_resolvable__checks_store(self, store: PageStore) -> None:
        """Only known references are resolvable."""
        assert is_resolvable(store, PageRef(3))
        assert not is_resolvable(store, PageRef(42))

    def test__pages_from_refs__skips_unresolvable(self, store: PageStore) -> None:
        """Drop references without a page, keeping order."""
        pages = pages_from_refs(store, [PageRef(6), PageRef(42), PageRef(3)])

        assert to_refs(pages) == [PageRef(6), PageRef(3)]
        assert pages_from_refs(store, None) == []
        assert to_refs(None) == []

    def test__pages_from_links__keeps_page_links_only(self, store: PageStore) -> None:
        """Links to external sites are dropped."""
        links = [
            LinkItem("/page?id=4", "Team"),
            LinkItem("https://example.com", "Elsewhere"),
            LinkItem("/page?id=3", "About"),
        ]

        pages = pages_from_links(store, links)

        assert [page.name for page in pages] == ["Team", "About"]
