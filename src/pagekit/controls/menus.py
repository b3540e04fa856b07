"""Templated menus built by walking the page tree."""

from collections.abc import Mapping
from datetime import datetime

from jinja2 import Template

from pagekit.controls.base import (
    ItemContext,
    ItemListControl,
    LevelContext,
    MultiLevelItemContext,
    PageControlMixin,
)
from pagekit.core.filters import FilterStage, StageFunc, VisibilityFilter
from pagekit.core.pages import Page
from pagekit.core.tree import PageTree
from pagekit.core.types import EMPTY_REF, PageRef
from pagekit.urls import UrlRewriter


class ChildrenMenu(ItemListControl, PageControlMixin):
    """Base for menus listing the children of a menu root.

    Children are limited to published pages, visible in menu unless
    show_hidden is set, and then passed through the caller filters. An item
    is selected when the current page is the item or lies below it; with
    selected_follows_shortcuts the item's shortcut target is checked
    instead, otherwise a shortcut pointing at the current page also counts.
    """

    TEMPLATE_NAMES = ItemListControl.TEMPLATE_NAMES | {"selected_item"}

    def __init__(
        self,
        tree: PageTree,
        menu_root: PageRef,
        *,
        current_page: Page | None = None,
        show_hidden: bool = False,
        selected_follows_shortcuts: bool = False,
        filters: list[FilterStage | StageFunc] | None = None,
        now: datetime | None = None,
        url_rewriter: UrlRewriter | None = None,
        templates: Mapping[str, str] | None = None,
        invisible_if_empty: bool = False,
    ) -> None:
        super().__init__(templates=templates, invisible_if_empty=invisible_if_empty)
        self._init_pages(filters=filters, now=now, url_rewriter=url_rewriter)
        self.tree = tree
        self.menu_root = menu_root
        self.current_page = current_page
        self.show_hidden = show_hidden
        self.selected_follows_shortcuts = selected_follows_shortcuts

    def children_items(self, ref: PageRef) -> list[Page]:
        items = self._published(self.tree.children_of(ref))
        if not self.show_hidden:
            items = VisibilityFilter(True).apply(items)
        return self.filters.apply(items)

    def is_selected(self, page: Page) -> bool:
        return self.tree.is_selected(
            self.current_page,
            page,
            follow_shortcuts=self.selected_follows_shortcuts,
        )

    def _selected_or_item(self, selected: bool) -> Template | None:
        if selected and self._template("selected_item") is not None:
            return self._template("selected_item")
        return self._template("item")


class OneLevelMenu(ChildrenMenu):
    """Menu of the children of menu_root."""

    def _build(self) -> None:
        if self.tree.resolve(self.menu_root) is None:
            self._hide_or_empty()
            return

        items = self.children_items(self.menu_root)
        if not items:
            self._hide_or_empty()
            return

        self._add_header()
        for index, item in enumerate(items):
            selected = self.is_selected(item)
            context = ItemContext(item, index + 1, selected, url=self._page_url(item))
            self._add_item(self._selected_or_item(selected), context)
        self._add_footer()


class MultiLevelMenu(ChildrenMenu):
    """Menu of number_of_levels levels below menu_root.

    Each level is wrapped in the level_start and level_end templates, and
    each item is closed by item_end (or selected_item_end) after its
    children. With expand_selected_only only selected items are expanded.
    Separators are placed between siblings of the same level.
    """

    TEMPLATE_NAMES = ChildrenMenu.TEMPLATE_NAMES | {
        "level_start",
        "level_end",
        "item_end",
        "selected_item_end",
    }

    def __init__(
        self,
        tree: PageTree,
        menu_root: PageRef,
        *,
        number_of_levels: int = 1,
        expand_selected_only: bool = False,
        **kwargs,
    ) -> None:
        super().__init__(tree, menu_root, **kwargs)
        self.number_of_levels = number_of_levels
        self.expand_selected_only = expand_selected_only

    def _build(self) -> None:
        if self.tree.resolve(self.menu_root) is None:
            self._hide_or_empty()
            return

        items = self.children_items(self.menu_root)
        if not items:
            self._hide_or_empty()
            return

        self._add_header()
        self._add_level(items, 1)
        self._add_footer()

    def _add_level(self, items: list[Page], level: int) -> None:
        if not items:
            return

        self._add_template(self._template("level_start"), LevelContext(level))
        added = False
        for index, item in enumerate(items):
            added = self._add_menu_item(item, index + 1, level, separate=added) or added
        self._add_template(self._template("level_end"), LevelContext(level))

    def _add_menu_item(self, item: Page, item_number: int, level: int, *, separate: bool) -> bool:
        selected = self.is_selected(item)
        children: list[Page] = []
        if self.number_of_levels > level and (selected or not self.expand_selected_only):
            children = self.children_items(item.ref)

        context = MultiLevelItemContext(
            item,
            item_number,
            selected,
            url=self._page_url(item),
            level=level,
            has_children=bool(children),
        )

        template = self._selected_or_item(selected)
        if template is not None and separate:
            self._add_separator()
        added = self._add_template(template, context)

        self._add_level(children, level + 1)

        end_template = self._template("item_end")
        if selected and self._template("selected_item_end") is not None:
            end_template = self._template("selected_item_end")
        self._add_template(end_template, context)
        return added


class BreadcrumbsMenu(ItemListControl, PageControlMixin):
    """Links to the pages from site_root down to the current page.

    The store root is never listed. Pages that are unpublished, or hidden
    from menus unless show_hidden is set, are left out. The current page is
    the last item and the only one selected.
    """

    TEMPLATE_NAMES = ItemListControl.TEMPLATE_NAMES | {"selected_item"}

    def __init__(
        self,
        tree: PageTree,
        current_page: Page | None,
        *,
        site_root: PageRef = EMPTY_REF,
        root_ref: PageRef = EMPTY_REF,
        show_hidden: bool = False,
        now: datetime | None = None,
        url_rewriter: UrlRewriter | None = None,
        templates: Mapping[str, str] | None = None,
        invisible_if_empty: bool = False,
    ) -> None:
        super().__init__(templates=templates, invisible_if_empty=invisible_if_empty)
        self._init_pages(now=now, url_rewriter=url_rewriter)
        self.tree = tree
        self.current_page = current_page
        self.site_root = site_root
        self.root_ref = root_ref
        self.show_hidden = show_hidden

    def get_items(self) -> list[Page]:
        if self.current_page is None:
            return []
        stop_at = None if self.site_root.is_empty else self.site_root
        chain = [*self.tree.ancestors(self.current_page, stop_at=stop_at), self.current_page]
        items = self._published([page for page in chain if not page.ref.matches(self.root_ref)])
        if not self.show_hidden:
            items = VisibilityFilter(True).apply(items)
        return items

    def _build(self) -> None:
        items = self.get_items()
        if not items:
            self._hide_or_empty()
            return

        self._add_header()
        last = len(items) - 1
        for index, item in enumerate(items):
            selected = index == last
            template = self._template("item")
            if selected and self._template("selected_item") is not None:
                template = self._template("selected_item")
            context = ItemContext(item, index + 1, selected, url=self._page_url(item))
            self._add_item(template, context)
        self._add_footer()
