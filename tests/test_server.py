"""Tests for application setup."""

from dataclasses import replace

from devdocs.app_keys import renderer_key
from devdocs.config import Config, LiveReloadConfig
from devdocs.server import create_app, live_reload_manager_key


class TestCreateApp:
    """Tests for create_app()."""

    def test__live_reload_disabled__has_no_websocket_route(self, test_config: Config) -> None:
        """No watcher or WebSocket route without live reload."""
        app = create_app(test_config)

        paths = {resource.canonical for resource in app.router.resources()}
        assert "/ws/live-reload" not in paths
        assert live_reload_manager_key not in app
        assert "/api/pages/{path}" in paths

    def test__live_reload_enabled__registers_websocket_route(self, test_config: Config) -> None:
        """Live reload adds the WebSocket endpoint and the manager."""
        config = replace(test_config, live_reload=LiveReloadConfig(enabled=True))

        app = create_app(config)

        paths = {resource.canonical for resource in app.router.resources()}
        assert "/ws/live-reload" in paths
        assert live_reload_manager_key in app

    def test__cache_disabled__renders_without_cache(self, sample_docs, test_config: Config) -> None:
        """Turning the cache off never serves from cache."""
        app = create_app(test_config.with_overrides(cache_enabled=False))
        renderer = app[renderer_key]

        renderer.render("guides/setup")

        assert renderer.render("guides/setup").from_cache is False
        assert not test_config.docs.cache_dir.exists()
