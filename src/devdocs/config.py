"""Configuration management for devdocs.

Supports YAML configuration format with auto-discovery.
"""

import datetime
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

import yaml

from devdocs.core.navigation import NavItem
from devdocs.core.slugs import is_external, normalize_slug

CONFIG_FILENAMES = ("devdocs.yml", "devdocs.yaml")


@dataclass
class SiteConfig:
    """Site metadata."""

    site_name: str = "DevDocs"
    site_description: str = "A documentation site."
    site_author: str = ""
    site_url: str = ""
    repo_name: str = ""
    repo_url: str = ""
    edit_uri: str = ""
    copyright: str = field(
        default_factory=lambda: f"© {datetime.date.today().year} DevDocs",
    )
    logo_path: str = ""
    favicon_path: str = ""

    def edit_url(self, source_file_path: str) -> str | None:
        """Build the "edit this page" URL for a source file.

        edit_uri is either absolute or relative to repo_url.

        Args:
            source_file_path: Path relative to the content root

        Returns:
            Edit URL, or None when edit links are not configured
        """
        if not self.edit_uri or not source_file_path:
            return None
        if is_external(self.edit_uri):
            base = self.edit_uri.rstrip("/")
        elif self.repo_url:
            base = f"{self.repo_url.rstrip('/')}/{self.edit_uri.strip('/')}"
        else:
            return None
        return f"{base}/{source_file_path}"


@dataclass
class ThemeConfig:
    """Theme configuration."""

    default: str = "system"
    options: list[str] = field(default_factory=lambda: ["light", "dark"])


@dataclass
class SearchConfig:
    """Search configuration."""

    enabled: bool = True


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class DocsConfig:
    """Documentation configuration."""

    source_dir: Path = field(default_factory=lambda: Path("docs"))
    cache_dir: Path = field(default_factory=lambda: Path(".cache"))
    cache_enabled: bool = True


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = True
    watch_patterns: list[str] | None = None


class _Section:
    """Typed reads from one raw configuration mapping.

    Error messages carry the dotted key, e.g. "server.port must be an integer".
    A missing section reads as empty so every key falls back to its default.
    """

    def __init__(self, data: object, name: str = "") -> None:
        if data is None:
            data = {}
        if not isinstance(data, dict):
            if not name:
                raise ValueError("Configuration must be a dictionary")
            raise ValueError(f"{name} section must be a dictionary")
        self._data: dict[str, object] = data
        self._name = name

    def raw(self, key: str) -> object:
        return self._data.get(key)

    def string(self, key: str, default: str) -> str:
        value = self._data.get(key, default)
        if not isinstance(value, str):
            raise ValueError(f"{self._where(key)} must be a string")
        return value

    def boolean(self, key: str, default: bool) -> bool:
        value = self._data.get(key, default)
        if not isinstance(value, bool):
            raise ValueError(f"{self._where(key)} must be a boolean")
        return value

    def integer(self, key: str, default: int) -> int:
        value = self._data.get(key, default)
        # bool is an int subclass
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"{self._where(key)} must be an integer")
        return value

    def strings(self, key: str, default: list[str] | None) -> list[str] | None:
        value = self._data.get(key, default)
        if value is None:
            return None
        if not isinstance(value, list):
            raise ValueError(f"{self._where(key)} must be a list")
        if not all(isinstance(item, str) for item in value):
            raise ValueError(f"{self._where(key)} items must be strings")
        return list(value)

    def _where(self, key: str) -> str:
        return f"{self._name}.{key}" if self._name else key


@dataclass
class Config:
    """Application configuration."""

    site: SiteConfig
    nav: list[NavItem]
    theme: ThemeConfig
    search: SearchConfig
    server: ServerConfig
    docs: DocsConfig
    live_reload: LiveReloadConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration, discovering devdocs.yml when no path is given.

        Discovery walks from the current directory up to the filesystem root.
        Without a file every section takes its defaults.

        Raises:
            FileNotFoundError: If an explicit config_path doesn't exist
            ValueError: If the file is not valid YAML or a value has the wrong type
        """
        if config_path is None:
            config_path = cls._discover_config()
            if config_path is None:
                return cls.default()
        elif not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        return cls._load_from_file(config_path)

    @classmethod
    def default(cls, source_dir: Path | None = None) -> "Config":
        """Build a config with every section at its defaults.

        Args:
            source_dir: Optional content root (default: ./docs)
        """
        docs = DocsConfig() if source_dir is None else DocsConfig(source_dir=source_dir)
        return cls(
            site=SiteConfig(),
            nav=[],
            theme=ThemeConfig(),
            search=SearchConfig(),
            server=ServerConfig(),
            docs=docs,
            live_reload=LiveReloadConfig(),
        )

    @classmethod
    def _discover_config(cls) -> Path | None:
        current = Path.cwd()
        for directory in (current, *current.parents):
            for filename in CONFIG_FILENAMES:
                candidate = directory / filename
                if candidate.exists():
                    return candidate
        return None

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        try:
            with path.open(encoding="utf-8") as f:
                root = _Section(yaml.safe_load(f))
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

        # Relative directories resolve against the file's location
        base_dir = path.parent
        return cls(
            site=cls._parse_site(root),
            nav=cls._parse_nav(root.raw("nav"), "nav"),
            theme=cls._parse_theme(_Section(root.raw("theme"), "theme")),
            search=SearchConfig(
                enabled=_Section(root.raw("search"), "search").boolean("enabled", True),
            ),
            server=cls._parse_server(_Section(root.raw("server"), "server")),
            docs=cls._parse_docs(_Section(root.raw("docs"), "docs"), base_dir),
            live_reload=cls._parse_live_reload(_Section(root.raw("live_reload"), "live_reload")),
            config_path=path,
        )

    @classmethod
    def _parse_site(cls, root: _Section) -> SiteConfig:
        """Read the top-level site metadata keys; all are strings."""
        defaults = SiteConfig()
        names = [f.name for f in fields(SiteConfig)]
        return SiteConfig(**{name: root.string(name, getattr(defaults, name)) for name in names})

    @classmethod
    def _parse_nav(cls, data: object, where: str) -> list[NavItem]:
        """Parse a navigation list, normalizing internal paths to slugs.

        Args:
            data: Raw nav list
            where: Location used in error messages (e.g., "nav[0].children")

        Returns:
            List of NavItem trees
        """
        if data is None:
            return []

        if not isinstance(data, list):
            raise ValueError(f"{where} must be a list")

        items: list[NavItem] = []
        for i, raw in enumerate(data):
            if not isinstance(raw, dict):
                raise ValueError(f"{where}[{i}] must be a dictionary")
            entry = _Section(raw, f"{where}[{i}]")

            title = entry.raw("title")
            if not isinstance(title, str):
                raise ValueError(f"{where}[{i}].title must be a string")

            path = entry.raw("path")
            if path is not None:
                path = entry.string("path", "")
                if not is_external(path):
                    path = normalize_slug(path)

            children = cls._parse_nav(entry.raw("children"), f"{where}[{i}].children")
            items.append(NavItem(title=title, path=path, children=children))

        return items

    @classmethod
    def _parse_theme(cls, section: _Section) -> ThemeConfig:
        defaults = ThemeConfig()
        return ThemeConfig(
            default=section.string("default", defaults.default),
            options=section.strings("options", defaults.options) or [],
        )

    @classmethod
    def _parse_server(cls, section: _Section) -> ServerConfig:
        defaults = ServerConfig()
        return ServerConfig(
            host=section.string("host", defaults.host),
            port=section.integer("port", defaults.port),
        )

    @classmethod
    def _parse_docs(cls, section: _Section, base_dir: Path) -> DocsConfig:
        return DocsConfig(
            source_dir=base_dir / section.string("source_dir", "docs"),
            cache_dir=base_dir / section.string("cache_dir", ".cache"),
            cache_enabled=section.boolean("cache_enabled", True),
        )

    @classmethod
    def _parse_live_reload(cls, section: _Section) -> LiveReloadConfig:
        return LiveReloadConfig(
            enabled=section.boolean("enabled", True),
            watch_patterns=section.strings("watch_patterns", None),
        )

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        source_dir: Path | None = None,
        cache_dir: Path | None = None,
        cache_enabled: bool | None = None,
        live_reload_enabled: bool | None = None,
    ) -> "Config":
        """Return a copy with command-line overrides applied.

        Arguments left as None keep the configured value.
        """
        return replace(
            self,
            server=replace(self.server, **_given(host=host, port=port)),
            docs=replace(
                self.docs,
                **_given(source_dir=source_dir, cache_dir=cache_dir, cache_enabled=cache_enabled),
            ),
            live_reload=replace(self.live_reload, **_given(enabled=live_reload_enabled)),
        )


def _given(**values: object) -> dict[str, object]:
    return {key: value for key, value in values.items() if value is not None}
