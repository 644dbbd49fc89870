"""Content entry points for the routing layer."""

import asyncio
from pathlib import Path

from devdocs.core.documents import Document, DocumentResolver
from devdocs.core.search import SearchCorpusBuilder, SearchEntry
from devdocs.core.slugs import SlugInput
from devdocs.core.types import Slug
from devdocs.core.walker import SiteWalker


class ContentSource:
    """Resolves documents, routes and search entries for one content root.

    Holds no results between calls: every call reflects the files on disk
    at that moment.
    """

    def __init__(self, source_dir: Path, *, site_name: str | None = None) -> None:
        """Initialize content source.

        Args:
            source_dir: Content root containing markdown sources
            site_name: Title used for the root page when it has none
        """
        self._resolver = DocumentResolver(source_dir, site_name=site_name)
        self._walker = SiteWalker(source_dir, self._resolver.files)
        self._corpus = SearchCorpusBuilder(self._walker, self._resolver)

    @property
    def source_dir(self) -> Path:
        """Content root containing markdown sources."""
        return self._resolver.source_dir

    @property
    def resolver(self) -> DocumentResolver:
        """Document resolver for this content root."""
        return self._resolver

    def resolve(self, raw: SlugInput) -> Document | None:
        """Resolve a slug or route segments to a Document, or None."""
        return self._resolver.resolve(raw)

    def locate(self, raw: SlugInput) -> Path | None:
        """Return the source file for a slug, or None."""
        return self._resolver.locate(raw)

    def list_all_slugs(self) -> list[Slug]:
        """List every routable slug in walk order."""
        return self._walker.list_slugs()

    def build_search_corpus(self) -> list[SearchEntry]:
        """Build the search corpus."""
        return self._corpus.build()

    async def list_all_slugs_async(self) -> list[Slug]:
        """List every routable slug without blocking the event loop."""
        return await asyncio.to_thread(self._walker.list_slugs)

    async def build_search_corpus_async(self) -> list[SearchEntry]:
        """Build the search corpus as one concurrent batch."""
        return await self._corpus.build_async()

    async def list_static_routes(self) -> list[Slug]:
        """List slugs whose documents resolve, checked as one concurrent batch.

        Used for static generation, where a route must never point at a
        document that fails to resolve.
        """
        slugs = await self.list_all_slugs_async()
        documents = await self._resolver.resolve_many(slugs)
        return [slug for slug, document in zip(slugs, documents, strict=True) if document]
