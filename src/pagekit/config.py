"""Configuration management for pagekit.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from pagekit.core.tree import DEFAULT_MAX_DEPTH

CONFIG_FILENAME = "pagekit.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class SiteConfig:
    """Page store configuration."""

    store_path: Path = field(default_factory=lambda: Path("pages.json"))
    start_page: int | None = None
    root_page: int | None = None


@dataclass
class PagingConfig:
    """Paged list configuration."""

    page_size: int = 10


@dataclass
class TreeConfig:
    """Page tree walk configuration."""

    max_depth: int = DEFAULT_MAX_DEPTH


@dataclass
class UrlsConfig:
    """URL rewriting configuration."""

    friendly: bool = True


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    site: SiteConfig
    paging: PagingConfig
    tree: TreeConfig
    urls: UrlsConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for pagekit.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        return cls(
            server=ServerConfig(),
            site=SiteConfig(),
            paging=PagingConfig(),
            tree=TreeConfig(),
            urls=UrlsConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            site=cls._parse_site(data.get("site"), config_dir),
            paging=cls._parse_paging(data.get("paging")),
            tree=cls._parse_tree(data.get("tree")),
            urls=cls._parse_urls(data.get("urls")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_site(cls, data: object, config_dir: Path) -> SiteConfig:
        """Parse site configuration section.

        Args:
            data: Raw site section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            SiteConfig instance
        """
        if data is None:
            return SiteConfig(store_path=config_dir / "pages.json")

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        store_path = data.get("store_path", "pages.json")
        if not isinstance(store_path, str):
            raise ValueError("site.store_path must be a string")

        start_page = _optional_page_id(data, "start_page")
        root_page = _optional_page_id(data, "root_page")

        return SiteConfig(
            store_path=config_dir / store_path,
            start_page=start_page,
            root_page=root_page,
        )

    @classmethod
    def _parse_paging(cls, data: object) -> PagingConfig:
        if data is None:
            return PagingConfig()

        if not isinstance(data, dict):
            raise ValueError("paging section must be a dictionary")

        page_size = data.get("page_size", 10)
        if not isinstance(page_size, int) or isinstance(page_size, bool) or page_size < 1:
            raise ValueError("paging.page_size must be a positive integer")

        return PagingConfig(page_size=page_size)

    @classmethod
    def _parse_tree(cls, data: object) -> TreeConfig:
        if data is None:
            return TreeConfig()

        if not isinstance(data, dict):
            raise ValueError("tree section must be a dictionary")

        max_depth = data.get("max_depth", DEFAULT_MAX_DEPTH)
        if not isinstance(max_depth, int) or isinstance(max_depth, bool) or max_depth < 1:
            raise ValueError("tree.max_depth must be a positive integer")

        return TreeConfig(max_depth=max_depth)

    @classmethod
    def _parse_urls(cls, data: object) -> UrlsConfig:
        if data is None:
            return UrlsConfig()

        if not isinstance(data, dict):
            raise ValueError("urls section must be a dictionary")

        friendly = data.get("friendly", True)
        if not isinstance(friendly, bool):
            raise ValueError("urls.friendly must be a boolean")

        return UrlsConfig(friendly=friendly)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        store_path: Path | None = None,
        page_size: int | None = None,
        max_depth: int | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        site = self.site
        if store_path is not None:
            site = replace(self.site, store_path=store_path)

        paging = self.paging
        if page_size is not None:
            paging = replace(self.paging, page_size=page_size)

        tree = self.tree
        if max_depth is not None:
            tree = replace(self.tree, max_depth=max_depth)

        return replace(self, server=server, site=site, paging=paging, tree=tree)


def _optional_page_id(data: dict, key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise ValueError(f"site.{key} must be a positive integer")
    return value
