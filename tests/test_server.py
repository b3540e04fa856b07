"""Tests for server module."""

from dataclasses import replace
from pathlib import Path

import pytest

from pagekit.app_keys import config_key, rewriter_key, store_key, tree_key
from pagekit.config import Config, UrlsConfig
from pagekit.core.pages import PageStore
from pagekit.server import create_app


class TestCreateApp:
    """Tests for create_app()."""

    def test__valid_config__returns_configured_app(self, test_config: Config) -> None:
        """Create app with the store loaded from config."""
        app = create_app(test_config)

        assert config_key in app
        assert store_key in app
        assert tree_key in app
        assert rewriter_key in app
        assert len(app[store_key]) == 8

    def test__given_store__is_used_as_is(self, test_config: Config, store: PageStore) -> None:
        """A store passed in is not reloaded."""
        app = create_app(test_config, store)

        assert app[store_key] is store

    def test__max_depth__comes_from_config(self, test_config: Config, store: PageStore) -> None:
        """The page tree uses the configured walk limit."""
        app = create_app(test_config.with_overrides(max_depth=7), store)

        assert app[tree_key].max_depth == 7

    def test__friendly_urls_disabled__keeps_internal_urls(self, test_config: Config, store: PageStore) -> None:
        """URL rewriting follows the urls.friendly setting."""
        config = replace(test_config, urls=UrlsConfig(friendly=False))
        app = create_app(config, store)

        assert app[rewriter_key].to_external("/page?id=4") == "/page?id=4"

    def test__configured_start_page__overrides_store(self, test_config: Config, store: PageStore) -> None:
        """site.start_page changes the friendly URL base."""
        config = replace(test_config, site=replace(test_config.site, start_page=3))
        app = create_app(config, store)

        assert app[rewriter_key].to_external("/page?id=4") == "/team/"

    def test__missing_store__raises_file_not_found(self, test_config: Config, tmp_path: Path) -> None:
        """Fail early when the page store is missing."""
        config = test_config.with_overrides(store_path=tmp_path / "missing.json")

        with pytest.raises(FileNotFoundError):
            create_app(config)
