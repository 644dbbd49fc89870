"""Pages API endpoint.

Handles page rendering and returns JSON responses with metadata, ToC, and HTML content.
"""

import asyncio
import logging
from datetime import UTC, datetime
from email.utils import formatdate
from hashlib import md5

from aiohttp import web

from devdocs.app_keys import config_key, navigation_key, renderer_key, verbose_key
from devdocs.core.frontmatter import get_str
from devdocs.core.slugs import slug_to_url

logger = logging.getLogger(__name__)


def create_pages_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/pages", get_page),
        web.get("/api/pages/{path:.*}", get_page),
    ]


async def get_page(request: web.Request) -> web.Response:
    path = request.match_info.get("path", "")
    renderer = request.app[renderer_key]
    navigation = request.app[navigation_key]
    site = request.app[config_key].site

    try:
        result = await asyncio.to_thread(renderer.render, path)
    except FileNotFoundError:
        return web.json_response(
            {"error": "Page not found", "path": path},
            status=404,
        )

    document = result.document
    if request.app[verbose_key]:
        logger.info(f"Served {document.slug!r} (from_cache={result.from_cache})")

    etag = _compute_etag(document.rendered_html)

    if_none_match = request.headers.get("If-None-Match")
    if if_none_match == etag:
        return web.Response(status=304)

    last_modified = datetime.fromtimestamp(result.source_mtime, tz=UTC)
    prev_page, next_page = navigation.get_prev_next(document.slug)

    meta: dict[str, str] = {
        "title": document.title,
        "slug": document.slug,
        "path": slug_to_url(document.slug),
        "source_file": document.source_file_path,
        "last_modified": last_modified.isoformat(),
    }
    description = get_str(document.frontmatter, "description") or site.site_description
    if description:
        meta["description"] = description
    edit_url = site.edit_url(document.source_file_path)
    if edit_url:
        meta["edit_url"] = edit_url

    response_data = {
        "meta": meta,
        "frontmatter": document.frontmatter,
        "breadcrumbs": [b.to_dict() for b in navigation.get_breadcrumbs(document.slug)],
        "toc": [entry.to_dict() for entry in document.toc],
        "prev": prev_page.to_dict() if prev_page else None,
        "next": next_page.to_dict() if next_page else None,
        "content": document.rendered_html,
    }

    return web.json_response(
        response_data,
        headers={
            "ETag": etag,
            "Last-Modified": formatdate(result.source_mtime, usegmt=True),
            "Cache-Control": "private, max-age=60",
        },
    )


def _compute_etag(content: str) -> str:
    # First 16 hex chars (64 bits) are enough for cache validation
    content_hash = md5(content.encode("utf-8"), usedforsecurity=False).hexdigest()[:16]
    return f'"{content_hash}"'
