"""Base classes and template contexts for templated controls.

A control renders a sequence of template fragments (header, items,
separators, footer) into one string. Templates are Jinja2 source strings
compiled with autoescaping; each fragment is rendered with its context
object available as ``container`` and with the context fields as top-level
variables.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import UTC, datetime
from functools import lru_cache
from typing import Any, ClassVar

from jinja2 import Environment, Template, select_autoescape

from pagekit.core.filters import FilterPipeline, FilterStage, PublishedFilter, StageFunc
from pagekit.core.pages import LinkItem, Page
from pagekit.markup import anchor, div, figure, img
from pagekit.urls import UrlRewriter

_environment = Environment(autoescape=select_autoescape(default_for_string=True))
_environment.globals.update(anchor=anchor, img=img, figure=figure, div=div)


@lru_cache(maxsize=256)
def compile_template(source: str) -> Template:
    """Compile template source with the shared environment."""
    return _environment.from_string(source)


@dataclass(frozen=True)
class ItemContext:
    """Context of one rendered list item."""

    item: Page | LinkItem
    item_number: int
    selected: bool = False
    url: str = ""

    @property
    def odd(self) -> bool:
        return self.item_number % 2 == 1

    @property
    def even(self) -> bool:
        return self.item_number % 2 == 0


@dataclass(frozen=True)
class MultiLevelItemContext(ItemContext):
    level: int = 1
    has_children: bool = False


@dataclass(frozen=True)
class LevelContext:
    level: int


@dataclass(frozen=True)
class PagerContext:
    """Context of pager header and footer templates."""

    page_number: int
    item_count: int
    page_size: int

    @property
    def number_of_pages(self) -> int:
        return math.ceil(self.item_count / self.page_size)

    @property
    def from_item_number(self) -> int:
        return (self.page_number - 1) * self.page_size + 1

    @property
    def to_item_number(self) -> int:
        return min(self.page_number * self.page_size, self.item_count)


@dataclass(frozen=True)
class PagerItemContext:
    url: str
    page_number: int
    text: str
    selected: bool = False


class TemplatedControl:
    """Control assembled from named templates.

    Subclasses list the template names they accept in TEMPLATE_NAMES and
    implement _build(). A control without content renders the "empty"
    template, or nothing when invisible_if_empty is set.
    """

    TEMPLATE_NAMES: ClassVar[frozenset[str]] = frozenset({"header", "footer", "separator", "empty"})

    def __init__(
        self,
        *,
        templates: Mapping[str, str] | None = None,
        invisible_if_empty: bool = False,
    ) -> None:
        """Initialize control.

        Args:
            templates: Template sources by name
            invisible_if_empty: Render nothing instead of the empty template

        Raises:
            ValueError: If a template name is not supported by the control
        """
        templates = dict(templates or {})
        unknown = set(templates) - self.TEMPLATE_NAMES
        if unknown:
            raise ValueError(
                f"{type(self).__name__} does not support templates: {', '.join(sorted(unknown))}",
            )
        self._templates = {name: compile_template(source) for name, source in templates.items()}
        self.invisible_if_empty = invisible_if_empty
        self._parts: list[str] = []

    def render(self) -> str:
        """Render the control to markup."""
        self._parts = []
        self._build()
        return "".join(self._parts)

    def _build(self) -> None:
        raise NotImplementedError

    def _template(self, name: str) -> Template | None:
        return self._templates.get(name)

    def _add_template(self, template: Template | None, context: object = None) -> bool:
        """Render template with context, returning False when there is no template."""
        if template is None:
            return False
        variables: dict[str, Any] = {"container": context}
        if context is not None:
            variables.update({f.name: getattr(context, f.name) for f in fields(context)})  # type: ignore[arg-type]
        self._parts.append(template.render(variables))
        return True

    def _add_header(self) -> None:
        self._add_template(self._template("header"))

    def _add_footer(self) -> None:
        self._add_template(self._template("footer"))

    def _add_separator(self) -> None:
        self._add_template(self._template("separator"))

    def _hide_or_empty(self) -> None:
        if not self.invisible_if_empty:
            self._add_template(self._template("empty"))


class ItemListControl(TemplatedControl):
    """Control rendering a flat list of items with separators in between."""

    TEMPLATE_NAMES = TemplatedControl.TEMPLATE_NAMES | {"item"}

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._item_added = False

    def render(self) -> str:
        self._item_added = False
        return super().render()

    def _add_item(self, template: Template | None, context: ItemContext) -> bool:
        if template is None:
            return False
        if self._item_added:
            self._add_separator()
        self._add_template(template, context)
        self._item_added = True
        return True


class PositionalItemListControl(ItemListControl):
    """Item list with optional templates for the first four and alternating items."""

    TEMPLATE_NAMES = ItemListControl.TEMPLATE_NAMES | {
        "first_item",
        "second_item",
        "third_item",
        "fourth_item",
        "alternating_item",
    }

    _POSITIONS = ("first_item", "second_item", "third_item", "fourth_item")

    def _item_template(self, index: int) -> Template | None:
        if index < len(self._POSITIONS):
            template = self._template(self._POSITIONS[index])
            if template is not None:
                return template
        if index % 2 == 1 and self._template("alternating_item") is not None:
            return self._template("alternating_item")
        return self._template("item")


class PageControlMixin:
    """Shared page handling: visitor filtering, caller filters and URLs."""

    def _init_pages(
        self,
        *,
        filters: list[FilterStage | StageFunc] | None = None,
        now: datetime | None = None,
        url_rewriter: UrlRewriter | None = None,
    ) -> None:
        self.filters = FilterPipeline(filters or [])
        self.now = now
        self.url_rewriter = url_rewriter

    def _published(self, pages: list[Page]) -> list[Page]:
        return PublishedFilter(self.now or datetime.now(UTC)).apply(pages)

    def _page_url(self, page: Page) -> str:
        if self.url_rewriter is None:
            return page.link_url
        return self.url_rewriter.to_external(page.link_url)
