"""Templated controls rendering page lists and menus."""

from .base import (
    ItemContext,
    LevelContext,
    MultiLevelItemContext,
    PagerContext,
    PagerItemContext,
    compile_template,
)
from .lists import LinkItemList, PagedPageList, PageList
from .menus import BreadcrumbsMenu, MultiLevelMenu, OneLevelMenu

__all__ = [
    "BreadcrumbsMenu",
    "ItemContext",
    "LevelContext",
    "LinkItemList",
    "MultiLevelItemContext",
    "MultiLevelMenu",
    "OneLevelMenu",
    "PageList",
    "PagedPageList",
    "PagerContext",
    "PagerItemContext",
    "compile_template",
]
