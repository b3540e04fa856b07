"""aiohttp server for pagekit.

Application factory and route registration exposing the page tree,
filtered child lists and navigation as JSON.
"""

import logging

from aiohttp import web

from pagekit.api.navigation import create_navigation_routes
from pagekit.api.pages import create_pages_routes
from pagekit.app_keys import config_key, rewriter_key, store_key, tree_key
from pagekit.config import Config
from pagekit.core.pages import PageStore
from pagekit.core.tree import PageTree
from pagekit.loader import load_store, site_refs
from pagekit.urls import UrlRewriter

logger = logging.getLogger(__name__)


def create_app(config: Config, store: PageStore | None = None) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        store: Page store (default: loaded from config.site.store_path)

    Returns:
        Configured aiohttp application
    """
    if store is None:
        store = load_store(config.site.store_path)

    tree = PageTree(store, max_depth=config.tree.max_depth)
    start_ref, root_ref = site_refs(store, config.site.start_page, config.site.root_page)

    app = web.Application()
    app[config_key] = config
    app[store_key] = store
    app[tree_key] = tree
    app[rewriter_key] = UrlRewriter(
        tree,
        start_ref,
        root_ref=root_ref,
        enabled=config.urls.friendly,
    )

    app.router.add_routes(create_pages_routes())
    app.router.add_routes(create_navigation_routes())

    return app


def run_server(config: Config, store: PageStore | None = None) -> None:
    """Run the server."""
    app = create_app(config, store)
    logger.info(f"Serving {len(app[store_key])} pages on {config.server.host}:{config.server.port}")
    web.run_app(app, host=config.server.host, port=config.server.port)
