"""Page rendering with caching.

Wraps document resolution with the file-based document cache and mtime
tracking. Used by the server; the content core itself stays cache-free.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from devdocs.core.cache import DocumentCache
from devdocs.core.content import ContentSource
from devdocs.core.documents import Document
from devdocs.core.slugs import SlugInput, canonical_slug

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Result of rendering a page."""

    document: Document
    source_path: Path
    source_mtime: float
    from_cache: bool


class PageRenderer:
    """Renders pages with optional caching.

    Cache invalidation is based on source file mtime.
    """

    def __init__(self, content: ContentSource, cache: DocumentCache | None = None) -> None:
        """Initialize renderer.

        Args:
            content: Content source resolving slugs to documents
            cache: DocumentCache instance, or None to disable caching
        """
        self._content = content
        self._cache = cache

    @property
    def source_dir(self) -> Path:
        """Root directory containing markdown sources."""
        return self._content.source_dir

    def render(self, path: SlugInput) -> RenderResult:
        """Render a page.

        Args:
            path: Route path or slug, e.g. "guides/setup" or "" for the root

        Returns:
            RenderResult with the resolved document

        Raises:
            FileNotFoundError: If no source file exists for the path
        """
        source_path = self._content.locate(path)
        if source_path is None:
            raise FileNotFoundError(f"Source file not found for: {path!r}")

        slug = canonical_slug(path)
        source_mtime = source_path.stat().st_mtime

        if self._cache is not None:
            cached = self._cache.get(slug, source_path, source_mtime)
            if cached is not None:
                logger.debug(f"Serving {slug!r} from cache")
                return RenderResult(cached, source_path, source_mtime, from_cache=True)

        document = self._content.resolve(slug)
        if document is None:
            raise FileNotFoundError(f"Source file not readable: {source_path}")

        if self._cache is not None:
            self._cache.set(document, source_mtime)

        return RenderResult(document, source_path, source_mtime, from_cache=False)

    def invalidate(self, slug: str) -> None:
        """Invalidate cached content for a slug.

        Args:
            slug: Document slug to invalidate
        """
        if self._cache is not None:
            self._cache.invalidate(slug)
