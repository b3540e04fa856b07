"""CLI interface for pagekit.

Command-line tool for querying a page store and serving it over HTTP.
"""

import logging
import sys
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import Any

import click

from pagekit.config import Config
from pagekit.controls import BreadcrumbsMenu, MultiLevelMenu
from pagekit.core.filters import FilterConfigurationError, SortOrder
from pagekit.core.navigation import NavItem, build_navigation
from pagekit.core.pages import Page, PageStore
from pagekit.core.tree import PageTree, PageTreeError
from pagekit.core.types import PageRef
from pagekit.loader import load_store, site_refs
from pagekit.query import ChildrenQuery
from pagekit.urls import UrlRewriter

MENU_TEMPLATES = {
    "level_start": "<ul>",
    "level_end": "</ul>",
    "item": '<li><a href="{{ url }}">{{ item.name }}</a>',
    "selected_item": '<li class="selected"><a href="{{ url }}">{{ item.name }}</a>',
    "item_end": "</li>",
}


class _Site:
    """Loaded configuration, store and the objects built on them."""

    def __init__(self, config: Config, store: PageStore) -> None:
        self.config = config
        self.store = store
        self.tree = PageTree(store, max_depth=config.tree.max_depth)
        self.start_ref, self.root_ref = site_refs(
            store, config.site.start_page, config.site.root_page
        )
        self.rewriter = UrlRewriter(
            self.tree,
            self.start_ref,
            root_ref=self.root_ref,
            enabled=config.urls.friendly,
        )

    def page(self, page_id: int) -> Page:
        page = self.tree.resolve(PageRef(page_id))
        if page is None:
            raise click.ClickException(f"Page not found: {page_id}")
        return page

    def url(self, page: Page) -> str:
        return self.rewriter.to_external(page.link_url)


def _site_options(func: Callable[..., Any]) -> Callable[..., Any]:
    func = click.option(
        "--verbose",
        "-v",
        is_flag=True,
        help="Enable debug logging",
    )(func)
    func = click.option(
        "--store",
        "-s",
        "store_path",
        type=click.Path(exists=True, path_type=Path, dir_okay=False),
        default=None,
        help="Path to page store JSON export (overrides config)",
    )(func)
    func = click.option(
        "--config",
        "-c",
        "config_path",
        type=click.Path(exists=True, path_type=Path),
        default=None,
        help="Path to configuration file (default: auto-discover pagekit.toml)",
    )(func)
    return func


def _with_site(func: Callable[..., None]) -> Callable[..., None]:
    """Load the site from the common options and report errors in red."""

    @_site_options
    @wraps(func)
    def wrapper(
        config_path: Path | None,
        store_path: Path | None,
        verbose: bool,
        **kwargs: Any,
    ) -> None:
        _configure_logging(verbose)
        try:
            config = Config.load(config_path).with_overrides(store_path=store_path)
            site = _Site(config, load_store(config.site.store_path))
            func(site, **kwargs)
        except click.ClickException:
            raise
        except (FileNotFoundError, ValueError, PageTreeError) as e:
            click.echo(click.style(f"Error: {e}", fg="red"), err=True)
            sys.exit(1)

    return wrapper


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.group()
def cli() -> None:
    """pagekit - page tree queries and navigation for content sites."""


@cli.command()
@click.argument("page_id", type=int)
@click.option(
    "--type",
    "-t",
    "type_ids",
    type=int,
    multiple=True,
    help="Keep only pages of this type id (repeatable)",
)
@click.option(
    "--visible/--all",
    default=True,
    help="List only pages visible in menus (default) or all pages",
)
@click.option(
    "--order",
    type=click.Choice([order.name.lower() for order in SortOrder]),
    default=None,
    help="Built-in sort order",
)
@click.option(
    "--sort-by",
    default=None,
    help="Sort by property name",
)
@click.option(
    "--descending",
    is_flag=True,
    help="Sort in descending order",
)
@click.option(
    "--page",
    "page_number",
    type=int,
    default=None,
    help="Page number to show",
)
@click.option(
    "--page-size",
    type=int,
    default=None,
    help="Items per page (overrides config)",
)
@_with_site
def children(
    site: _Site,
    page_id: int,
    type_ids: tuple[int, ...],
    visible: bool,
    order: str | None,
    sort_by: str | None,
    descending: bool,
    page_number: int | None,
    page_size: int | None,
) -> None:
    """List the published children of a page."""
    parent = site.page(page_id)
    query = ChildrenQuery(
        type_ids=list(type_ids),
        visible=True if visible else None,
        order=SortOrder[order.upper()] if order else SortOrder.NONE,
        sort_by=sort_by,
        descending=descending,
        page_number=page_number,
        page_size=page_size if page_size is not None else site.config.paging.page_size,
    )

    try:
        items, total = query.run(site.tree.children_of(parent.ref))
    except FilterConfigurationError as e:
        raise click.BadParameter(str(e)) from e

    for item in items:
        click.echo(f"{item.ref.id}\t{item.name}\t{site.url(item)}")

    if page_number is not None:
        click.echo(f"Page {page_number}, {len(items)} of {total} pages")
    else:
        click.echo(f"{total} pages")


@cli.command()
@click.argument("page_id", type=int)
@click.option(
    "--show-hidden",
    is_flag=True,
    help="Include pages hidden from menus",
)
@_with_site
def breadcrumbs(site: _Site, page_id: int, show_hidden: bool) -> None:
    """Show the path from the start page down to a page."""
    menu = BreadcrumbsMenu(
        site.tree,
        site.page(page_id),
        site_root=site.start_ref,
        root_ref=site.root_ref,
        show_hidden=show_hidden,
    )
    click.echo(" > ".join(item.name for item in menu.get_items()))


@cli.command()
@click.argument("root_id", type=int)
@click.option(
    "--levels",
    "-l",
    type=click.IntRange(min=1),
    default=1,
    help="Number of menu levels",
)
@click.option(
    "--current",
    "current_id",
    type=int,
    default=None,
    help="Page id to mark as selected",
)
@click.option(
    "--html",
    is_flag=True,
    help="Render the menu as nested HTML lists",
)
@_with_site
def menu(site: _Site, root_id: int, levels: int, current_id: int | None, html: bool) -> None:
    """Show the menu below a page."""
    root = site.page(root_id)
    current = site.page(current_id) if current_id is not None else None

    if html:
        control = MultiLevelMenu(
            site.tree,
            root.ref,
            number_of_levels=levels,
            current_page=current,
            url_rewriter=site.rewriter,
            templates=MENU_TEMPLATES,
        )
        click.echo(control.render())
        return

    items = build_navigation(
        site.tree,
        root.ref,
        levels=levels,
        current_page=current,
        url_for=site.url,
    )
    _echo_nav(items, 0)


def _echo_nav(items: list[NavItem], depth: int) -> None:
    for item in items:
        marker = "*" if item.selected else "-"
        click.echo(f"{'  ' * depth}{marker} {item.title} ({item.url})")
        _echo_nav(item.children, depth + 1)


@cli.command()
@_site_options
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
def serve(
    config_path: Path | None,
    store_path: Path | None,
    verbose: bool,
    host: str | None,
    port: int | None,
) -> None:
    """Start the page API server."""
    from pagekit.server import run_server

    _configure_logging(verbose)
    try:
        config = Config.load(config_path).with_overrides(
            host=host,
            port=port,
            store_path=store_path,
        )
        store = load_store(config.site.store_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Page store: {config.site.store_path} ({len(store)} pages)")
    if config.urls.friendly:
        click.echo("Friendly URLs: enabled")
    else:
        click.echo("Friendly URLs: disabled")

    run_server(config, store)
