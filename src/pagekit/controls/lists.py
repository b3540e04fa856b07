"""Templated page and link lists."""

from collections.abc import Iterable, Mapping
from datetime import datetime

from markupsafe import Markup

from pagekit.controls.base import (
    ItemContext,
    PageControlMixin,
    PagerContext,
    PagerItemContext,
    PositionalItemListControl,
)
from pagekit.core.filters import (
    CountFilter,
    FilterStage,
    PagerFilter,
    SortDirection,
    SortFilter,
    SortOrder,
    StageFunc,
)
from pagekit.core.pages import LinkItem, Page
from pagekit.core.tree import PageTree
from pagekit.core.types import PageRef
from pagekit.urls import UrlRewriter, with_query_param

DEFAULT_PAGE_SIZE = 10
DEFAULT_QUERY_KEY = "p"


class PageList(PositionalItemListControl, PageControlMixin):
    """Templated list of pages.

    Items come from explicit pages or, when list_root is set, from the
    published children of list_root. Caller filters run first, then the
    sort order, the property sort, max_count and finally paging.
    """

    def __init__(
        self,
        tree: PageTree,
        *,
        pages: Iterable[Page] | None = None,
        list_root: PageRef | None = None,
        filters: list[FilterStage | StageFunc] | None = None,
        sort_order: SortOrder = SortOrder.NONE,
        sort_by: str | None = None,
        sort_direction: SortDirection = SortDirection.ASCENDING,
        max_count: int = 0,
        now: datetime | None = None,
        url_rewriter: UrlRewriter | None = None,
        templates: Mapping[str, str] | None = None,
        invisible_if_empty: bool = False,
    ) -> None:
        super().__init__(templates=templates, invisible_if_empty=invisible_if_empty)
        self._init_pages(filters=filters, now=now, url_rewriter=url_rewriter)
        self.tree = tree
        self.pages = list(pages) if pages is not None else None
        self.list_root = list_root
        self.sort_order = sort_order
        self.sort_by = sort_by
        self.sort_direction = sort_direction
        self.max_count = max_count
        self.total_item_count = 0

    def get_items(self) -> list[Page]:
        """Items to display, with filtering, sorting and paging applied."""
        items = list(self.pages or [])
        if self.list_root is not None and not self.list_root.is_empty:
            items = self._published(self.tree.children_of(self.list_root))

        items = self.filters.apply(items)
        if self.sort_order is not SortOrder.NONE:
            items = SortFilter(self.sort_order).apply(items)
        if self.sort_by:
            items = SortFilter.by_property(self.sort_by, self.sort_direction).apply(items)
        if self.max_count > 0:
            items = CountFilter(self.max_count).apply(items)

        self.total_item_count = len(items)
        return self._apply_paging(items)

    def _build(self) -> None:
        items = self.get_items()
        if not items:
            self._hide_or_empty()
            return

        self._add_header_pager(self.total_item_count)
        self._add_header()
        for index, item in enumerate(items):
            context = ItemContext(item, index + 1, url=self._page_url(item))
            self._add_item(self._item_template(index), context)
        self._add_footer()
        self._add_footer_pager(self.total_item_count)

    def _apply_paging(self, items: list[Page]) -> list[Page]:
        return items

    def _add_header_pager(self, item_count: int) -> None:
        pass

    def _add_footer_pager(self, item_count: int) -> None:
        pass


class PagedPageList(PageList):
    """PageList showing one page of items plus pager links.

    The current page number is read from query_params[query_key]; missing,
    non-numeric or non-positive values mean page 1. max_count still limits
    the total number of items across all pages.
    """

    TEMPLATE_NAMES = PageList.TEMPLATE_NAMES | {
        "pager_header",
        "pager_footer",
        "pager_prev",
        "pager_next",
        "pager_item",
        "pager_selected_item",
        "pager_separator",
    }

    def __init__(
        self,
        tree: PageTree,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        query_params: Mapping[str, str] | None = None,
        query_key: str = DEFAULT_QUERY_KEY,
        current_url: str = "",
        prev_text: str | None = None,
        next_text: str | None = None,
        show_top_pager: bool = False,
        hide_bottom_pager: bool = False,
        **kwargs,
    ) -> None:
        super().__init__(tree, **kwargs)
        self.page_size = page_size if page_size > 0 else DEFAULT_PAGE_SIZE
        self.query_params = dict(query_params or {})
        self.query_key = query_key or DEFAULT_QUERY_KEY
        self.current_url = current_url
        self.prev_text = prev_text or Markup("&lt;&lt;")
        self.next_text = next_text or Markup("&gt;&gt;")
        self.show_top_pager = show_top_pager
        self.hide_bottom_pager = hide_bottom_pager

    @property
    def current_page_number(self) -> int:
        raw = self.query_params.get(self.query_key, "")
        try:
            number = int(raw)
        except ValueError:
            return 1
        return number if number > 0 else 1

    def _apply_paging(self, items: list[Page]) -> list[Page]:
        return PagerFilter(self.page_size, self.current_page_number).apply(items)

    def _add_header_pager(self, item_count: int) -> None:
        if self.show_top_pager:
            self._add_pager(item_count)

    def _add_footer_pager(self, item_count: int) -> None:
        if not self.hide_bottom_pager:
            self._add_pager(item_count)

    def _add_pager(self, item_count: int) -> None:
        current = self.current_page_number
        pager = PagerContext(current, item_count, self.page_size)
        number_of_pages = pager.number_of_pages

        self._add_template(self._template("pager_header"), pager)

        if current > 1 and self._add_pager_item("pager_prev", current - 1, self.prev_text):
            self._add_template(self._template("pager_separator"))

        for number in range(1, number_of_pages + 1):
            if number == current:
                name = "pager_selected_item" if self._template("pager_selected_item") else "pager_item"
                self._add_pager_item(name, number, str(number), selected=True)
            else:
                self._add_pager_item("pager_item", number, str(number))
            if number < number_of_pages:
                self._add_template(self._template("pager_separator"))

        if current < number_of_pages and self._template("pager_next") is not None:
            self._add_template(self._template("pager_separator"))
            self._add_pager_item("pager_next", current + 1, self.next_text)

        self._add_template(self._template("pager_footer"), pager)

    def _add_pager_item(self, name: str, page_number: int, text: str, *, selected: bool = False) -> bool:
        url = with_query_param(self.current_url, self.query_key, str(page_number))
        return self._add_template(
            self._template(name),
            PagerItemContext(url, page_number, text, selected),
        )


class LinkItemList(PositionalItemListControl):
    """Templated list of link items."""

    def __init__(
        self,
        links: Iterable[LinkItem] | None = None,
        *,
        templates: Mapping[str, str] | None = None,
        invisible_if_empty: bool = False,
    ) -> None:
        super().__init__(templates=templates, invisible_if_empty=invisible_if_empty)
        self.links = list(links or [])

    def _build(self) -> None:
        if not self.links:
            self._hide_or_empty()
            return

        self._add_header()
        for index, link in enumerate(self.links):
            self._add_item(self._item_template(index), ItemContext(link, index + 1, url=link.href))
        self._add_footer()
