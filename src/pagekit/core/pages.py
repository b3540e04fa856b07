"""Content pages and page resolution.

Pages are owned by an external store and reached only through a resolver.
PageStore is the in-memory resolver used by the loader, the CLI and the
server; anything implementing PageResolver can stand in for it.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from pagekit.core.types import (
    EMPTY_REF,
    PAGE_NAME,
    PAGE_SHORTCUT_LINK,
    PAGE_VISIBLE_IN_MENU,
    LinkType,
    PageRef,
)
from pagekit.core.values import PropertyRaw, PropertyValue, ValueKind

logger = logging.getLogger(__name__)


def internal_url(page_id: int) -> str:
    """Internal (non-friendly) URL of a page."""
    return f"/page?id={page_id}"


@dataclass(frozen=True)
class Page:
    """A content page as seen by the library."""

    ref: PageRef
    parent_ref: PageRef
    type_id: int
    link_type: LinkType = LinkType.NORMAL
    url_segment: str = ""
    link_url: str = ""
    properties: Mapping[str, PropertyValue] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.property_value(PAGE_NAME, "")

    @property
    def is_visible_in_menu(self) -> bool:
        return self.property_value(PAGE_VISIBLE_IN_MENU, False)

    @property
    def is_shortcut(self) -> bool:
        return self.link_type is LinkType.SHORTCUT

    @property
    def shortcut_ref(self) -> PageRef:
        """Target of a shortcut page, EMPTY_REF if not set."""
        return self.property_value(PAGE_SHORTCUT_LINK, EMPTY_REF)

    def get_property(self, name: str) -> PropertyValue | None:
        """Get the tagged value of a property, None if absent."""
        return self.properties.get(name)

    def property_has_value(self, name: str) -> bool:
        """Return True if the property is set to a non-empty value."""
        value = self.get_property(name)
        if value is None:
            return False
        return not (value.kind is ValueKind.STRING and value.raw == "")

    def property_value(self, name: str, default: Any = None) -> Any:
        """Get a property value, or default when absent or of another type.

        With default=None any kind of value is returned as is.
        """
        if not self.property_has_value(name):
            return default
        raw = self.properties[name].raw
        if default is None:
            return raw
        if isinstance(default, bool) != isinstance(raw, bool):
            return default
        if isinstance(raw, type(default)):
            return raw
        return default


@dataclass(frozen=True)
class LinkItem:
    """A link in a link collection property."""

    href: str
    text: str
    title: str = ""
    target: str = ""


class PageResolver(Protocol):
    """Lookup contract for the external page store."""

    def resolve(self, ref: PageRef | None) -> Page | None: ...

    def children_of(self, ref: PageRef | None) -> list[Page]: ...

    def ref_from_url(self, url: str) -> PageRef | None: ...


class PageStore:
    """In-memory page store keyed by page id.

    Children keep insertion order. Lookups never raise: unknown or empty
    references resolve to None and have no children.
    """

    __slots__ = ("_children", "_pages", "_root_ref", "_start_ref", "_url_index")

    def __init__(
        self,
        pages: dict[int, Page],
        children: dict[int, list[int]],
        *,
        start_ref: PageRef = EMPTY_REF,
        root_ref: PageRef = EMPTY_REF,
    ) -> None:
        """Initialize store.

        Args:
            pages: Pages by id
            children: Child ids for each parent id, in display order
            start_ref: Site start page
            root_ref: Store root (above the start page, never displayed)
        """
        self._pages = pages
        self._children = children
        self._start_ref = start_ref
        self._root_ref = root_ref
        self._url_index = {page.link_url: page.ref for page in pages.values() if page.link_url}

    @property
    def start_ref(self) -> PageRef:
        return self._start_ref

    @property
    def root_ref(self) -> PageRef:
        return self._root_ref

    def __len__(self) -> int:
        return len(self._pages)

    def resolve(self, ref: PageRef | None) -> Page | None:
        if ref is None or ref.is_empty:
            return None
        return self._pages.get(ref.id)

    def children_of(self, ref: PageRef | None) -> list[Page]:
        if self.resolve(ref) is None:
            return []
        return [self._pages[i] for i in self._children.get(ref.id, [])]  # type: ignore[union-attr]

    def ref_from_url(self, url: str) -> PageRef | None:
        return self._url_index.get(url)


class PageStoreBuilder:
    """Builder for constructing PageStore instances."""

    def __init__(self) -> None:
        self._pages: dict[int, Page] = {}
        self._children: dict[int, list[int]] = {}
        self._start_ref = EMPTY_REF
        self._root_ref = EMPTY_REF

    def add_page(
        self,
        page_id: int,
        name: str,
        *,
        parent: PageRef | int | None = None,
        type_id: int = 0,
        visible_in_menu: bool = True,
        link_type: LinkType = LinkType.NORMAL,
        url_segment: str | None = None,
        link_url: str | None = None,
        properties: Mapping[str, PropertyRaw] | None = None,
    ) -> PageRef:
        """Add a page to the store.

        Args:
            page_id: Unique positive page id
            name: Page name
            parent: Parent reference or id, None for a top-level page
            type_id: Page type id
            visible_in_menu: Value of the PageVisibleInMenu property
            link_type: Link behaviour, SHORTCUT redirects to PageShortcutLink
            url_segment: Friendly URL segment (default: lower-cased name)
            link_url: Link URL (default: internal URL)
            properties: Extra raw property values

        Returns:
            Reference to the added page

        Raises:
            ValueError: If page_id is not positive or already added
        """
        if page_id <= 0:
            raise ValueError(f"Page id must be positive: {page_id}")
        if page_id in self._pages:
            raise ValueError(f"Duplicate page id: {page_id}")

        parent_ref = parent if isinstance(parent, PageRef) else PageRef(parent or 0)
        values = {
            PAGE_NAME: PropertyValue.of(name),
            PAGE_VISIBLE_IN_MENU: PropertyValue.of(visible_in_menu),
        }
        for key, raw in (properties or {}).items():
            values[key] = PropertyValue.of(raw)

        ref = PageRef(page_id)
        self._pages[page_id] = Page(
            ref=ref,
            parent_ref=parent_ref,
            type_id=type_id,
            link_type=link_type,
            url_segment=url_segment if url_segment is not None else _segment(name),
            link_url=link_url if link_url is not None else internal_url(page_id),
            properties=values,
        )
        self._children.setdefault(page_id, [])
        if not parent_ref.is_empty:
            self._children.setdefault(parent_ref.id, []).append(page_id)
        return ref

    def set_start_page(self, ref: PageRef | int) -> None:
        self._start_ref = ref if isinstance(ref, PageRef) else PageRef(ref)

    def set_root_page(self, ref: PageRef | int) -> None:
        self._root_ref = ref if isinstance(ref, PageRef) else PageRef(ref)

    def build(self) -> PageStore:
        """Build the PageStore instance."""
        return PageStore(
            pages=self._pages,
            children=self._children,
            start_ref=self._start_ref,
            root_ref=self._root_ref,
        )


def _segment(name: str) -> str:
    return "-".join(name.lower().split())


def is_resolvable(resolver: PageResolver, ref: PageRef | None) -> bool:
    """Return True if the reference resolves to a page."""
    return resolver.resolve(ref) is not None


def parent(resolver: PageResolver, page: Page | None) -> Page | None:
    """Parent of page, None for top-level, unresolvable or missing pages."""
    if page is None:
        return None
    return resolver.resolve(page.parent_ref)


def to_refs(pages: Iterable[Page] | None) -> list[PageRef]:
    """References of the pages, in order."""
    if pages is None:
        return []
    return [page.ref for page in pages]


def pages_from_refs(resolver: PageResolver, refs: Iterable[PageRef] | None) -> list[Page]:
    """Resolve references in order, skipping unresolvable ones."""
    pages: list[Page] = []
    for ref in refs or []:
        page = resolver.resolve(ref)
        if page is not None:
            pages.append(page)
    return pages


def pages_from_links(resolver: PageResolver, links: Iterable[LinkItem] | None) -> list[Page]:
    """Resolve links that point at pages, dropping all other links."""
    pages: list[Page] = []
    for link in links or []:
        ref = resolver.ref_from_url(link.href)
        page = resolver.resolve(ref)
        if page is None:
            logger.debug(f"Link does not resolve to a page: {link.href}")
            continue
        pages.append(page)
    return pages
