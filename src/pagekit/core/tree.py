"""Page tree predicates.

Answers ancestry questions over a page tree that is only reachable through
parent references. Every hop is a fresh resolver lookup; nothing about the
tree is materialized. Upward walks are bounded by max_depth so corrupt
parent chains fail with CycleSuspectedError instead of looping forever.
"""

import logging
from collections.abc import Iterator

from pagekit.core.pages import Page, PageResolver, parent
from pagekit.core.types import PageRef

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 1000


class PageTreeError(Exception):
    """Base error for page tree walks."""


class CycleSuspectedError(PageTreeError):
    """Parent chain is longer than the allowed depth."""

    def __init__(self, start: PageRef, max_depth: int) -> None:
        super().__init__(
            f"Parent chain of page {start.id} exceeds {max_depth} levels, cycle suspected",
        )
        self.start = start
        self.max_depth = max_depth


def resolve(resolver: PageResolver, ref: PageRef | None) -> Page | None:
    """Resolve a reference, None for empty or unknown references."""
    return resolver.resolve(ref)


def walk_up(
    resolver: PageResolver,
    page: Page | None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Iterator[Page]:
    """Yield page and then its ancestors, nearest first.

    Stops at the first parent that does not resolve.

    Raises:
        CycleSuspectedError: If more than max_depth parent hops are needed
    """
    current = page
    hops = 0
    while current is not None:
        yield current
        current = resolver.resolve(current.parent_ref)
        if current is None:
            return
        hops += 1
        if hops > max_depth:
            logger.warning(f"Aborting walk from page {page.ref.id} after {max_depth} hops")  # type: ignore[union-attr]
            raise CycleSuspectedError(page.ref, max_depth)  # type: ignore[union-attr]


def is_or_is_descendant_of(
    resolver: PageResolver,
    page: Page | None,
    candidate: Page | None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> bool:
    """Return True if page is candidate or lies below it."""
    if page is None or candidate is None:
        return False
    return any(
        node.ref.matches(candidate.ref)
        for node in walk_up(resolver, page, max_depth=max_depth)
    )


def is_descendant_of(
    resolver: PageResolver,
    page: Page | None,
    candidate: Page | None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> bool:
    """Return True if page lies below candidate. A page never descends from itself."""
    return is_or_is_descendant_of(
        resolver,
        parent(resolver, page),
        candidate,
        max_depth=max_depth,
    )


def resolve_shortcut(resolver: PageResolver, page: Page | None) -> Page | None:
    """Return the shortcut target of page, or page itself.

    Pages that are not shortcuts, and shortcuts whose target does not
    resolve, are returned unchanged.
    """
    if page is None:
        return None
    if page.is_shortcut:
        target = resolver.resolve(page.shortcut_ref)
        if target is not None:
            return target
    return page


def is_or_is_descendant_of_or_shortcut(
    resolver: PageResolver,
    page: Page | None,
    candidate: Page | None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> bool:
    """Return True if page is candidate, candidate's shortcut target, or below candidate.

    The walk itself uses candidate, not its shortcut target.
    """
    if page is None or candidate is None:
        return False
    target = resolve_shortcut(resolver, candidate)
    if page.ref.matches(target.ref):  # type: ignore[union-attr]
        return True
    return is_or_is_descendant_of(resolver, page, candidate, max_depth=max_depth)


def is_descendant_of_following_shortcut(
    resolver: PageResolver,
    page: Page | None,
    candidate: Page | None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> bool:
    """is_descendant_of() with candidate replaced by its shortcut target."""
    return is_or_is_descendant_of(
        resolver,
        parent(resolver, page),
        resolve_shortcut(resolver, candidate),
        max_depth=max_depth,
    )


def is_or_is_descendant_of_following_shortcut(
    resolver: PageResolver,
    page: Page | None,
    candidate: Page | None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> bool:
    """is_or_is_descendant_of() with candidate replaced by its shortcut target."""
    return is_or_is_descendant_of(
        resolver,
        page,
        resolve_shortcut(resolver, candidate),
        max_depth=max_depth,
    )


def ancestor_or_self_of_type(
    resolver: PageResolver,
    page: Page | None,
    type_id: int,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Page | None:
    """First page of the given type, checking page itself and then its ancestors."""
    return next(
        (node for node in walk_up(resolver, page, max_depth=max_depth) if node.type_id == type_id),
        None,
    )


def ancestors(
    resolver: PageResolver,
    page: Page | None,
    *,
    stop_at: PageRef | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[Page]:
    """Ancestors of page, root first. page itself is not included.

    Args:
        resolver: Page resolver
        page: Page to start from
        stop_at: Ancestor at which to stop (included when reached)
        max_depth: Maximum number of parent hops

    Returns:
        Ancestor pages ordered from the top of the walk down to the parent
    """
    if page is None or (stop_at is not None and page.ref.matches(stop_at)):
        return []
    chain: list[Page] = []
    for node in walk_up(resolver, parent(resolver, page), max_depth=max_depth):
        chain.append(node)
        if stop_at is not None and node.ref.matches(stop_at):
            break
    chain.reverse()
    return chain


class PageTree:
    """Tree predicates bound to one resolver and depth limit."""

    def __init__(self, resolver: PageResolver, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._resolver = resolver
        self._max_depth = max_depth

    @property
    def resolver(self) -> PageResolver:
        return self._resolver

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def resolve(self, ref: PageRef | None) -> Page | None:
        return self._resolver.resolve(ref)

    def children_of(self, ref: PageRef | None) -> list[Page]:
        return self._resolver.children_of(ref)

    def is_descendant_of(self, page: Page | None, candidate: Page | None) -> bool:
        return is_descendant_of(self._resolver, page, candidate, max_depth=self._max_depth)

    def is_or_is_descendant_of(self, page: Page | None, candidate: Page | None) -> bool:
        return is_or_is_descendant_of(self._resolver, page, candidate, max_depth=self._max_depth)

    def is_or_is_descendant_of_or_shortcut(self, page: Page | None, candidate: Page | None) -> bool:
        return is_or_is_descendant_of_or_shortcut(
            self._resolver, page, candidate, max_depth=self._max_depth
        )

    def is_or_is_descendant_of_following_shortcut(
        self, page: Page | None, candidate: Page | None
    ) -> bool:
        return is_or_is_descendant_of_following_shortcut(
            self._resolver, page, candidate, max_depth=self._max_depth
        )

    def is_selected(
        self,
        current: Page | None,
        item: Page,
        *,
        follow_shortcuts: bool = False,
    ) -> bool:
        """Whether a menu item counts as selected for the current page.

        With follow_shortcuts the item's shortcut target and its ancestors
        are checked; otherwise the item itself, with a shortcut pointing at
        the current page counting as a match.
        """
        if follow_shortcuts:
            return self.is_or_is_descendant_of_following_shortcut(current, item)
        return self.is_or_is_descendant_of_or_shortcut(current, item)

    def ancestor_or_self_of_type(self, page: Page | None, type_id: int) -> Page | None:
        return ancestor_or_self_of_type(self._resolver, page, type_id, max_depth=self._max_depth)

    def ancestors(self, page: Page | None, *, stop_at: PageRef | None = None) -> list[Page]:
        return ancestors(self._resolver, page, stop_at=stop_at, max_depth=self._max_depth)
