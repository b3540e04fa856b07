"""Navigation tree builder.

Builds nested navigation data from the page tree for JSON presentation.
Navigation is a view layer over the page tree, using the same visitor and
menu visibility rules as the menu controls.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TypedDict

from pagekit.core.filters import PublishedFilter, VisibilityFilter
from pagekit.core.pages import Page
from pagekit.core.tree import PageTree
from pagekit.core.types import PageRef


class NavItemDict(TypedDict, total=False):
    """Dictionary representation of a navigation item."""

    id: int
    title: str
    url: str
    selected: bool
    children: list["NavItemDict"]


@dataclass
class NavItem:
    """Navigation item with children for UI tree."""

    id: int
    title: str
    url: str
    selected: bool = False
    children: list["NavItem"] = field(default_factory=list)

    def to_dict(self) -> NavItemDict:
        """Convert to dictionary for JSON serialization."""
        result: NavItemDict = {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "selected": self.selected,
        }
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


def build_navigation(
    tree: PageTree,
    root: PageRef,
    *,
    levels: int = 1,
    current_page: Page | None = None,
    now: datetime | None = None,
    url_for: Callable[[Page], str] | None = None,
) -> list[NavItem]:
    """Build navigation tree below root.

    Args:
        tree: Page tree to walk
        root: Page whose children form the first level
        levels: Number of levels to include
        current_page: Page used to mark selected items
        now: Moment used for publish filtering (default: now)
        url_for: Maps a page to its URL (default: page.link_url)

    Returns:
        List of NavItem trees for navigation UI
    """
    published = PublishedFilter(now or datetime.now(UTC))
    visible = VisibilityFilter(True)

    def children(ref: PageRef) -> list[Page]:
        return visible.apply(published.apply(tree.children_of(ref)))

    def nav_item(page: Page, level: int) -> NavItem:
        return NavItem(
            id=page.ref.id,
            title=page.name,
            url=url_for(page) if url_for else page.link_url,
            selected=tree.is_selected(current_page, page),
            children=[nav_item(child, level + 1) for child in children(page.ref)]
            if level < levels
            else [],
        )

    return [nav_item(page, 1) for page in children(root)]
