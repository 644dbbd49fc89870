"""aiohttp server for devdocs.

Application factory and route registration for standalone server mode.
"""

import logging

from aiohttp import web

from devdocs.api.config import create_config_routes
from devdocs.api.navigation import create_navigation_routes
from devdocs.api.pages import create_pages_routes
from devdocs.api.search import create_search_routes
from devdocs.app_keys import (
    config_key,
    content_key,
    navigation_key,
    renderer_key,
    search_index_key,
    verbose_key,
)
from devdocs.config import Config
from devdocs.core.cache import DocumentCache, SearchIndexCache
from devdocs.core.content import ContentSource
from devdocs.core.navigation import Navigation
from devdocs.core.renderer import PageRenderer
from devdocs.live import LiveReloadManager
from devdocs.live.reload import create_live_reload_routes

logger = logging.getLogger(__name__)

live_reload_manager_key = web.AppKey("live_reload_manager", LiveReloadManager)


def create_app(config: Config, *, verbose: bool = False) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        verbose: Enable verbose output (log every served page)

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    content = ContentSource(config.docs.source_dir, site_name=config.site.site_name)
    cache = DocumentCache(config.docs.cache_dir) if config.docs.cache_enabled else None
    search_index = SearchIndexCache(content)

    app[config_key] = config
    app[content_key] = content
    app[renderer_key] = PageRenderer(content, cache)
    app[navigation_key] = Navigation(config.nav)
    app[search_index_key] = search_index
    app[verbose_key] = verbose

    app.router.add_routes(create_pages_routes())
    app.router.add_routes(create_navigation_routes())
    app.router.add_routes(create_search_routes())
    app.router.add_routes(create_config_routes())

    # Live reload WebSocket endpoint
    if config.live_reload.enabled:
        manager = LiveReloadManager(
            config.docs.source_dir,
            watch_patterns=config.live_reload.watch_patterns,
            search_index=search_index,
        )
        app[live_reload_manager_key] = manager
        app.router.add_routes(create_live_reload_routes(manager))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    return app


async def _start_live_reload(app: web.Application) -> None:
    """Start live reload on application startup."""
    await app[live_reload_manager_key].start()


async def _stop_live_reload(app: web.Application) -> None:
    """Stop live reload on application cleanup."""
    await app[live_reload_manager_key].stop()


def run_server(config: Config, *, verbose: bool = False) -> None:
    """Run the server.

    Args:
        config: Application configuration
        verbose: Enable verbose output (log every served page)
    """
    app = create_app(config, verbose=verbose)
    logger.info(f"Serving {config.docs.source_dir} on {config.server.host}:{config.server.port}")
    web.run_app(app, host=config.server.host, port=config.server.port)
