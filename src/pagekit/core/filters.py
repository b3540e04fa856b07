"""Page collection filters.

Filter, sort and paging stages applied to ordered page lists. Every stage
returns a new list and leaves its input untouched, so stages compose as
plain function calls or through FilterPipeline. Filtering is stable:
retained pages keep their relative order.

Missing or mistyped property values never raise; the page is treated as
not matching. Only constructor arguments are validated.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import UTC, datetime
from enum import Enum
from typing import Protocol

from pagekit.core.pages import Page
from pagekit.core.types import (
    PAGE_CHANGED,
    PAGE_CREATED,
    PAGE_NAME,
    PAGE_SORT_INDEX,
    PAGE_START_PUBLISH,
    PAGE_STOP_PUBLISH,
    PAGE_VISIBLE_IN_MENU,
)
from pagekit.core.values import ValueKind

logger = logging.getLogger(__name__)

MIN_DATE = datetime.min
MAX_DATE = datetime.max


def as_utc(date: datetime) -> datetime:
    """Make a date comparable with any other, reading naive dates as UTC."""
    if date.tzinfo is None:
        return date.replace(tzinfo=UTC)
    return date


class FilterConfigurationError(ValueError):
    """Invalid filter constructor arguments."""


class FilterStage(Protocol):
    """One step of a page pipeline."""

    def apply(self, pages: Sequence[Page]) -> list[Page]: ...


StageFunc = Callable[[list[Page]], list[Page]]


class PageFilter:
    """Base class for stages that keep or drop pages one at a time."""

    def should_remove(self, page: Page) -> bool:
        raise NotImplementedError

    def apply(self, pages: Sequence[Page]) -> list[Page]:
        kept = [page for page in pages if not self.should_remove(page)]
        logger.debug(f"{type(self).__name__} kept {len(kept)} of {len(pages)} pages")
        return kept

    def __call__(self, pages: Sequence[Page]) -> list[Page]:
        return self.apply(pages)


class TypeFilter(PageFilter):
    """Keep only pages of the given type(s)."""

    def __init__(self, type_ids: int | Iterable[int]) -> None:
        if isinstance(type_ids, int):
            self._type_ids = frozenset([type_ids])
        else:
            self._type_ids = frozenset(type_ids)

    def should_remove(self, page: Page) -> bool:
        return page.type_id not in self._type_ids


class DateIntervalFilter(PageFilter):
    """Keep pages whose date property lies within [from_date, to_date].

    Pages without a date value for the property are removed. Use MIN_DATE
    or MAX_DATE as a bound for open-ended intervals.
    """

    def __init__(self, property_name: str, from_date: datetime, to_date: datetime) -> None:
        self._property_name = property_name
        self._from_date = from_date
        self._to_date = to_date

    @classmethod
    def start_publish(cls, from_date: datetime, to_date: datetime) -> "DateIntervalFilter":
        return cls(PAGE_START_PUBLISH, from_date, to_date)

    @classmethod
    def stop_publish(cls, from_date: datetime, to_date: datetime) -> "DateIntervalFilter":
        return cls(PAGE_STOP_PUBLISH, from_date, to_date)

    @classmethod
    def created(cls, from_date: datetime, to_date: datetime) -> "DateIntervalFilter":
        return cls(PAGE_CREATED, from_date, to_date)

    @classmethod
    def changed(cls, from_date: datetime, to_date: datetime) -> "DateIntervalFilter":
        return cls(PAGE_CHANGED, from_date, to_date)

    def should_remove(self, page: Page) -> bool:
        value = page.get_property(self._property_name)
        date = value.as_date() if value is not None else None
        if date is None:
            return True
        return not (as_utc(self._from_date) <= as_utc(date) <= as_utc(self._to_date))


class CompareFilter(PageFilter):
    """Keep pages whose property text equals the expected value."""

    def __init__(self, property_name: str, expected: str) -> None:
        self._property_name = property_name
        self._expected = expected

    def should_remove(self, page: Page) -> bool:
        value = page.get_property(self._property_name)
        if value is None:
            return True
        return value.to_text() != self._expected


class VisibilityFilter(CompareFilter):
    """Keep pages visible (or hidden) in menus."""

    def __init__(self, visible: bool = True) -> None:
        super().__init__(PAGE_VISIBLE_IN_MENU, "true" if visible else "false")


class PublishedFilter(PageFilter):
    """Keep pages published at the given moment.

    A page is published when its start date is unset or not after now and
    its stop date is unset or not before now.
    """

    def __init__(self, now: datetime) -> None:
        self._now = as_utc(now)

    def should_remove(self, page: Page) -> bool:
        start = _date_or_none(page, PAGE_START_PUBLISH)
        stop = _date_or_none(page, PAGE_STOP_PUBLISH)
        if start is not None and as_utc(start) > self._now:
            return True
        return stop is not None and as_utc(stop) < self._now


def _date_or_none(page: Page, name: str) -> datetime | None:
    value = page.get_property(name)
    return value.as_date() if value is not None else None


class SortDirection(Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class SortOrder(Enum):
    """Built-in sort orders."""

    NONE = "none"
    ALPHABETICAL = "alphabetical"
    CREATED_ASCENDING = "created_ascending"
    CREATED_DESCENDING = "created_descending"
    CHANGED_DESCENDING = "changed_descending"
    PUBLISHED_ASCENDING = "published_ascending"
    PUBLISHED_DESCENDING = "published_descending"
    INDEX = "index"


_SORT_ORDERS: dict[SortOrder, tuple[str, SortDirection]] = {
    SortOrder.ALPHABETICAL: (PAGE_NAME, SortDirection.ASCENDING),
    SortOrder.CREATED_ASCENDING: (PAGE_CREATED, SortDirection.ASCENDING),
    SortOrder.CREATED_DESCENDING: (PAGE_CREATED, SortDirection.DESCENDING),
    SortOrder.CHANGED_DESCENDING: (PAGE_CHANGED, SortDirection.DESCENDING),
    SortOrder.PUBLISHED_ASCENDING: (PAGE_START_PUBLISH, SortDirection.ASCENDING),
    SortOrder.PUBLISHED_DESCENDING: (PAGE_START_PUBLISH, SortDirection.DESCENDING),
    SortOrder.INDEX: (PAGE_SORT_INDEX, SortDirection.ASCENDING),
}

_SORTABLE_KINDS = (ValueKind.STRING, ValueKind.NUMBER, ValueKind.DATE)


class SortFilter:
    """Reorder pages by a built-in order or by a property.

    Sorting is stable in both directions. The comparison follows the kind
    of the values found (string, number or date); pages lacking a value of
    that kind are placed last, in their original order.
    """

    def __init__(
        self,
        order: SortOrder = SortOrder.NONE,
        *,
        property_name: str | None = None,
        direction: SortDirection = SortDirection.ASCENDING,
    ) -> None:
        if property_name is None and order is not SortOrder.NONE:
            property_name, direction = _SORT_ORDERS[order]
        self._property_name = property_name
        self._direction = direction

    @classmethod
    def by_property(
        cls,
        property_name: str,
        direction: SortDirection = SortDirection.ASCENDING,
    ) -> "SortFilter":
        return cls(property_name=property_name, direction=direction)

    def apply(self, pages: Sequence[Page]) -> list[Page]:
        if self._property_name is None:
            return list(pages)

        values = [page.get_property(self._property_name) for page in pages]
        kind = next(
            (value.kind for value in values if value is not None and value.kind in _SORTABLE_KINDS),
            None,
        )
        if kind is None:
            return list(pages)

        keyed = []
        missing = []
        for page, value in zip(pages, values, strict=True):
            if value is None or value.kind is not kind:
                missing.append(page)
            else:
                keyed.append((_sort_key(value.raw, kind), page))

        # reverse=True keeps ties in input order
        descending = self._direction is SortDirection.DESCENDING
        keyed.sort(key=lambda item: item[0], reverse=descending)
        return [page for _, page in keyed] + missing

    def __call__(self, pages: Sequence[Page]) -> list[Page]:
        return self.apply(pages)


def _sort_key(raw: object, kind: ValueKind) -> object:
    if kind is ValueKind.STRING:
        return str(raw).casefold()
    if kind is ValueKind.DATE:
        return as_utc(raw)  # type: ignore[arg-type]
    return raw


class PagerFilter:
    """Keep the pages of one page of results.

    page_number is 1-based. The input is expected in final display order.
    """

    def __init__(self, page_size: int, page_number: int) -> None:
        if page_size < 1:
            raise FilterConfigurationError(f"page_size must be larger than zero: {page_size}")
        if page_number < 1:
            raise FilterConfigurationError(f"page_number must be larger than zero: {page_number}")
        self._page_size = page_size
        self._page_number = page_number

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def page_number(self) -> int:
        return self._page_number

    def apply(self, pages: Sequence[Page]) -> list[Page]:
        start = (self._page_number - 1) * self._page_size
        return list(pages[start : start + self._page_size])

    def __call__(self, pages: Sequence[Page]) -> list[Page]:
        return self.apply(pages)


class CountFilter:
    """Keep at most the first max_count pages."""

    def __init__(self, max_count: int) -> None:
        if max_count < 1:
            raise FilterConfigurationError(f"max_count must be larger than zero: {max_count}")
        self._max_count = max_count

    def apply(self, pages: Sequence[Page]) -> list[Page]:
        return list(pages[: self._max_count])

    def __call__(self, pages: Sequence[Page]) -> list[Page]:
        return self.apply(pages)


class FilterPipeline:
    """Stages applied in the order given.

    Stages may be FilterStage objects or plain callables taking and
    returning a page list.
    """

    def __init__(self, stages: Iterable[FilterStage | StageFunc] = ()) -> None:
        self._stages = tuple(stages)

    def __len__(self) -> int:
        return len(self._stages)

    def then(self, stage: FilterStage | StageFunc) -> "FilterPipeline":
        """Return a new pipeline with stage appended."""
        return FilterPipeline((*self._stages, stage))

    def apply(self, pages: Sequence[Page]) -> list[Page]:
        result = list(pages)
        for stage in self._stages:
            apply = getattr(stage, "apply", None)
            result = apply(result) if apply is not None else stage(list(result))  # type: ignore[operator]
        return result

    def __call__(self, pages: Sequence[Page]) -> list[Page]:
        return self.apply(pages)


def of_type(pages: Sequence[Page], type_id: int) -> list[Page]:
    return TypeFilter(type_id).apply(pages)


def of_types(pages: Sequence[Page], type_ids: Iterable[int]) -> list[Page]:
    return TypeFilter(type_ids).apply(pages)


def visible_in_menu(pages: Sequence[Page]) -> list[Page]:
    return VisibilityFilter(True).apply(pages)


def not_visible_in_menu(pages: Sequence[Page]) -> list[Page]:
    return VisibilityFilter(False).apply(pages)


def compare_to(pages: Sequence[Page], property_name: str, expected: str) -> list[Page]:
    return CompareFilter(property_name, expected).apply(pages)


def published(pages: Sequence[Page], now: datetime) -> list[Page]:
    return PublishedFilter(now).apply(pages)


def sort(pages: Sequence[Page], order: SortOrder) -> list[Page]:
    return SortFilter(order).apply(pages)


def property_sort(
    pages: Sequence[Page],
    property_name: str,
    direction: SortDirection = SortDirection.ASCENDING,
) -> list[Page]:
    return SortFilter.by_property(property_name, direction).apply(pages)


def for_pager(pages: Sequence[Page], page_size: int, page_number: int) -> list[Page]:
    return PagerFilter(page_size, page_number).apply(pages)
