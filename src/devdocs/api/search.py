"""Search index and route listing endpoints."""

import logging

from aiohttp import web

from devdocs.app_keys import config_key, content_key, search_index_key

logger = logging.getLogger(__name__)


def create_search_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/search-index", get_search_index),
        web.get("/api/routes", get_routes),
    ]


async def get_search_index(request: web.Request) -> web.Response:
    if not request.app[config_key].search.enabled:
        return web.json_response({"error": "Search disabled"}, status=404)

    try:
        entries = await request.app[search_index_key].get()
    except Exception:
        logger.exception("Failed to build search index")
        return web.json_response({"error": "Failed to load search index"}, status=500)

    return web.json_response([entry.to_dict() for entry in entries])


async def get_routes(request: web.Request) -> web.Response:
    slugs = await request.app[content_key].list_all_slugs_async()
    return web.json_response({"slugs": slugs})
