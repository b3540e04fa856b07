"""Navigation API endpoints.

Provides the site navigation tree below the start page or any other page.
"""

from aiohttp import web

from pagekit.app_keys import config_key, rewriter_key, store_key, tree_key
from pagekit.core.navigation import build_navigation
from pagekit.core.pages import Page
from pagekit.core.tree import PageTreeError
from pagekit.core.types import PageRef
from pagekit.loader import site_refs


def create_navigation_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/navigation", get_navigation),
        web.get("/api/navigation/{id}", get_navigation_subtree),
    ]


async def get_navigation(request: web.Request) -> web.Response:
    config = request.app[config_key]
    start_ref, _ = site_refs(request.app[store_key], config.site.start_page, config.site.root_page)
    if request.app[tree_key].resolve(start_ref) is None:
        return web.json_response(
            {"error": "Start page not found", "path": request.path},
            status=404,
        )
    return _navigation_response(request, start_ref)


async def get_navigation_subtree(request: web.Request) -> web.Response:
    raw_id = request.match_info["id"]
    tree = request.app[tree_key]
    page = tree.resolve(PageRef(int(raw_id))) if raw_id.isdecimal() else None
    if page is None:
        return web.json_response(
            {"error": "Section not found", "path": request.path},
            status=404,
        )
    return _navigation_response(request, page.ref)


def _navigation_response(request: web.Request, root: PageRef) -> web.Response:
    tree = request.app[tree_key]
    rewriter = request.app[rewriter_key]

    try:
        levels = int(request.query.get("levels", "1"))
        current_id = request.query.get("current")
        current = tree.resolve(PageRef(int(current_id))) if current_id else None
    except ValueError:
        return web.json_response(
            {"error": "levels and current must be integers", "path": request.path},
            status=400,
        )

    def url_for(page: Page) -> str:
        return rewriter.to_external(page.link_url)

    try:
        items = build_navigation(tree, root, levels=levels, current_page=current, url_for=url_for)
    except PageTreeError as e:
        return web.json_response({"error": str(e), "path": request.path}, status=500)
    return web.json_response({"items": [item.to_dict() for item in items]})
