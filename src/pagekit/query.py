"""Child list queries shared by the CLI and the HTTP API."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from pagekit.core.filters import (
    FilterPipeline,
    PagerFilter,
    PublishedFilter,
    SortDirection,
    SortFilter,
    SortOrder,
    TypeFilter,
    VisibilityFilter,
)
from pagekit.core.pages import Page


@dataclass
class ChildrenQuery:
    """Filters, sort and paging requested for a child list."""

    type_ids: list[int] = field(default_factory=list)
    visible: bool | None = True
    order: SortOrder = SortOrder.NONE
    sort_by: str | None = None
    descending: bool = False
    page_number: int | None = None
    page_size: int = 10
    include_unpublished: bool = False

    def filter_pipeline(self, now: datetime | None = None) -> FilterPipeline:
        """Filtering and sorting stages, without paging."""
        pipeline = FilterPipeline()
        if not self.include_unpublished:
            pipeline = pipeline.then(PublishedFilter(now or datetime.now(UTC)))
        if self.type_ids:
            pipeline = pipeline.then(TypeFilter(self.type_ids))
        if self.visible is not None:
            pipeline = pipeline.then(VisibilityFilter(self.visible))
        if self.order is not SortOrder.NONE:
            pipeline = pipeline.then(SortFilter(self.order))
        if self.sort_by:
            direction = SortDirection.DESCENDING if self.descending else SortDirection.ASCENDING
            pipeline = pipeline.then(SortFilter.by_property(self.sort_by, direction))
        return pipeline

    def pager(self) -> PagerFilter | None:
        """Paging stage, None when no page was requested.

        Raises:
            FilterConfigurationError: If page number or size is not positive
        """
        if self.page_number is None:
            return None
        return PagerFilter(self.page_size, self.page_number)

    def run(self, pages: list[Page], now: datetime | None = None) -> tuple[list[Page], int]:
        """Apply the query, returning the items and the total before paging."""
        pager = self.pager()
        items = self.filter_pipeline(now).apply(pages)
        total = len(items)
        if pager is not None:
            items = pager.apply(items)
        return items, total
