"""Application keys for type-safe app configuration access."""

from aiohttp import web

from devdocs.config import Config
from devdocs.core.cache import SearchIndexCache
from devdocs.core.content import ContentSource
from devdocs.core.navigation import Navigation
from devdocs.core.renderer import PageRenderer

config_key = web.AppKey("config", Config)
content_key = web.AppKey("content", ContentSource)
renderer_key = web.AppKey("renderer", PageRenderer)
navigation_key = web.AppKey("navigation", Navigation)
search_index_key = web.AppKey("search_index", SearchIndexCache)
verbose_key = web.AppKey("verbose", bool)
