"""URL rewriting between internal and friendly page URLs.

Internal URLs address pages by id (/page?id=12&lang=en). Friendly URLs are
built from the url segments of the pages between the start page and the
target (/about/team/?lang=en).
"""

import logging
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pagekit.core.pages import Page, internal_url
from pagekit.core.tree import PageTree
from pagekit.core.types import EMPTY_REF, PageRef

logger = logging.getLogger(__name__)

INTERNAL_PATH = "/page"


def with_query_param(url: str, key: str, value: str) -> str:
    """Return url with query parameter key set to value."""
    parts = urlsplit(url)
    params = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != key]
    params.append((key, value))
    return urlunsplit(parts._replace(query=urlencode(params)))


class UrlRewriter:
    """Converts page URLs between internal and friendly form.

    URLs that do not address a known page are returned unchanged.
    """

    def __init__(
        self,
        tree: PageTree,
        start_ref: PageRef,
        *,
        root_ref: PageRef = EMPTY_REF,
        enabled: bool = True,
    ) -> None:
        self._tree = tree
        self._start_ref = start_ref
        self._root_ref = root_ref
        self._enabled = enabled

    def to_external(self, url: str) -> str:
        """Convert an internal URL to its friendly form."""
        if not url or not self._enabled:
            return url

        parts = urlsplit(url)
        if parts.path != INTERNAL_PATH:
            return url
        params = parse_qsl(parts.query, keep_blank_values=True)
        page_id = next((v for k, v in params if k == "id"), None)
        if page_id is None or not page_id.isdecimal():
            return url
        page = self._tree.resolve(PageRef(int(page_id)))
        if page is None:
            logger.debug(f"No page for internal URL {url}")
            return url

        segments = [p.url_segment for p in self._path_below_start(page)]
        path = "/" + "".join(f"{segment}/" for segment in segments)
        rest = [(k, v) for k, v in params if k != "id"]
        return urlunsplit(parts._replace(path=path, query=urlencode(rest)))

    def to_internal(self, url: str) -> str:
        """Convert a friendly URL back to its internal form."""
        if not url or not self._enabled:
            return url

        parts = urlsplit(url)
        page = self._tree.resolve(self._start_ref)
        for segment in (s for s in parts.path.split("/") if s):
            page = next(
                (child for child in self._tree.children_of(page.ref if page else None)
                 if child.url_segment == segment),
                None,
            )
            if page is None:
                return url
        if page is None:
            return url

        internal = urlsplit(internal_url(page.ref.id))
        params = parse_qsl(internal.query) + parse_qsl(parts.query, keep_blank_values=True)
        return urlunsplit(parts._replace(path=internal.path, query=urlencode(params)))

    def _path_below_start(self, page: Page) -> list[Page]:
        chain = [*self._tree.ancestors(page), page]
        for index, node in enumerate(chain):
            if node.ref.matches(self._start_ref):
                return chain[index + 1 :]
        return [node for node in chain if not node.ref.matches(self._root_ref)]
