"""Core type definitions."""

from dataclasses import dataclass
from enum import Enum

# Well-known property names
PAGE_NAME = "PageName"
PAGE_VISIBLE_IN_MENU = "PageVisibleInMenu"
PAGE_START_PUBLISH = "PageStartPublish"
PAGE_STOP_PUBLISH = "PageStopPublish"
PAGE_CREATED = "PageCreated"
PAGE_CHANGED = "PageChanged"
PAGE_SHORTCUT_LINK = "PageShortcutLink"
PAGE_SORT_INDEX = "PageSortIndex"


class LinkType(Enum):
    """How a page behaves when linked to."""

    NORMAL = "normal"
    SHORTCUT = "shortcut"
    EXTERNAL = "external"
    INACTIVE = "inactive"
    FETCH_DATA = "fetch_data"


@dataclass(frozen=True)
class PageRef:
    """Opaque reference to a page.

    A reference with id 0 is empty and never resolves. work_id identifies
    a working version of the page and is ignored by matches().
    """

    id: int
    work_id: int = 0

    @property
    def is_empty(self) -> bool:
        return self.id <= 0

    def matches(self, other: "PageRef | None") -> bool:
        """Compare identity, ignoring the working version."""
        if other is None:
            return False
        return self.id == other.id


EMPTY_REF = PageRef(0)


def page_ref(page_id: int) -> PageRef:
    """Build a reference from a plain page id."""
    return PageRef(page_id)
