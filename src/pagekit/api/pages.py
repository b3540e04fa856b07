"""Pages API endpoints.

Single pages, filtered child lists, breadcrumbs and typed ancestors as JSON.
"""

import json

from aiohttp import web

from pagekit.app_keys import config_key, rewriter_key, store_key, tree_key
from pagekit.controls import BreadcrumbsMenu
from pagekit.core.filters import FilterConfigurationError, SortOrder
from pagekit.core.pages import Page
from pagekit.core.tree import PageTreeError
from pagekit.core.types import PageRef
from pagekit.loader import site_refs
from pagekit.query import ChildrenQuery


def create_pages_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/pages/{id}", get_page),
        web.get("/api/pages/{id}/children", get_children),
        web.get("/api/pages/{id}/breadcrumbs", get_breadcrumbs),
        web.get("/api/pages/{id}/ancestor", get_ancestor),
    ]


async def get_page(request: web.Request) -> web.Response:
    page = _requested_page(request)
    return web.json_response(page_to_dict(request, page))


async def get_children(request: web.Request) -> web.Response:
    page = _requested_page(request)
    config = request.app[config_key]
    query = _children_query(request, config.paging.page_size)

    try:
        items, total = query.run(request.app[tree_key].children_of(page.ref))
    except FilterConfigurationError as e:
        raise _error(400, str(e), request) from e

    response_data: dict[str, object] = {
        "items": [page_to_dict(request, item) for item in items],
        "total": total,
    }
    if query.page_number is not None:
        response_data["page"] = query.page_number
        response_data["size"] = query.page_size
    return web.json_response(response_data)


async def get_breadcrumbs(request: web.Request) -> web.Response:
    page = _requested_page(request)
    tree = request.app[tree_key]
    config = request.app[config_key]
    start_ref, root_ref = site_refs(
        request.app[store_key], config.site.start_page, config.site.root_page
    )

    menu = BreadcrumbsMenu(
        tree,
        page,
        site_root=start_ref,
        root_ref=root_ref,
        show_hidden=_flag(request, "hidden", default=False),
    )
    try:
        items = menu.get_items()
    except PageTreeError as e:
        raise _error(500, str(e), request) from e
    return web.json_response({"items": [page_to_dict(request, item) for item in items]})


async def get_ancestor(request: web.Request) -> web.Response:
    page = _requested_page(request)
    type_id = _int_param(request, "type")
    if type_id is None:
        raise _error(400, "type is required", request)

    try:
        ancestor = request.app[tree_key].ancestor_or_self_of_type(page, type_id)
    except PageTreeError as e:
        raise _error(500, str(e), request) from e
    if ancestor is None:
        raise _error(404, f"No ancestor of type {type_id}", request)
    return web.json_response(page_to_dict(request, ancestor))


def page_to_dict(request: web.Request, page: Page) -> dict[str, object]:
    """JSON representation of a page with its rewritten URL."""
    return {
        "id": page.ref.id,
        "name": page.name,
        "type": page.type_id,
        "parent": None if page.parent_ref.is_empty else page.parent_ref.id,
        "url": request.app[rewriter_key].to_external(page.link_url),
        "link_type": page.link_type.value,
        "visible_in_menu": page.is_visible_in_menu,
        "properties": {name: value.to_text() for name, value in page.properties.items()},
    }


def _requested_page(request: web.Request) -> Page:
    raw_id = request.match_info["id"]
    page = None
    if raw_id.isdecimal():
        page = request.app[tree_key].resolve(PageRef(int(raw_id)))
    if page is None:
        raise _error(404, "Page not found", request)
    return page


def _children_query(request: web.Request, default_page_size: int) -> ChildrenQuery:
    query = request.query
    direction = query.get("direction", "asc")
    if direction not in ("asc", "desc"):
        raise _error(400, f"direction must be asc or desc, got {direction}", request)

    order_name = query.get("order")
    order = SortOrder.NONE
    if order_name is not None:
        try:
            order = SortOrder[order_name.upper()]
        except KeyError as e:
            raise _error(400, f"Unknown sort order: {order_name}", request) from e

    visible_raw = query.get("visible", "true")
    visible: bool | None = None if visible_raw == "all" else _flag(request, "visible", default=True)

    page_size = _int_param(request, "size")
    return ChildrenQuery(
        type_ids=[_parse_int(request, "type", value) for value in query.getall("type", [])],
        visible=visible,
        order=order,
        sort_by=query.get("sort"),
        descending=direction == "desc",
        page_number=_int_param(request, "page"),
        page_size=page_size if page_size is not None else default_page_size,
    )


def _flag(request: web.Request, name: str, *, default: bool) -> bool:
    value = request.query.get(name)
    if value is None:
        return default
    if value in ("true", "1"):
        return True
    if value in ("false", "0"):
        return False
    raise _error(400, f"{name} must be true or false, got {value}", request)


def _int_param(request: web.Request, name: str) -> int | None:
    value = request.query.get(name)
    if value is None:
        return None
    return _parse_int(request, name, value)


def _parse_int(request: web.Request, name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise _error(400, f"{name} must be an integer, got {value}", request) from e


def _error(status: int, message: str, request: web.Request) -> web.HTTPException:
    error_class = {
        400: web.HTTPBadRequest,
        404: web.HTTPNotFound,
        500: web.HTTPInternalServerError,
    }[status]
    return error_class(
        text=json.dumps({"error": message, "path": request.path}),
        content_type="application/json",
    )
