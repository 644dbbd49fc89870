"""Search corpus construction.

Builds one plain-text entry per resolvable document for an external
full-text index. Ranking and querying are the index's concern.
"""

import asyncio
import logging
from dataclasses import dataclass

from devdocs.core.documents import DocumentResolver
from devdocs.core.pipeline import SearchTextPipeline
from devdocs.core.types import Slug
from devdocs.core.walker import SiteWalker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchEntry:
    """Searchable text of one document."""

    slug: Slug
    title: str
    plain_text: str

    def to_dict(self) -> dict[str, str]:
        """Convert to the dictionary shape consumed by the search widget."""
        return {"slug": self.slug, "title": self.title, "content": self.plain_text}


class SearchCorpusBuilder:
    """Builds the search corpus from the slug universe."""

    def __init__(
        self,
        walker: SiteWalker,
        resolver: DocumentResolver,
        pipeline: SearchTextPipeline | None = None,
    ) -> None:
        self._walker = walker
        self._resolver = resolver
        self._pipeline = pipeline or SearchTextPipeline()

    def build(self) -> list[SearchEntry]:
        """Build the corpus, blocking until every document is processed."""
        return asyncio.run(self.build_async())

    async def build_async(self) -> list[SearchEntry]:
        """Build the corpus with all resolutions issued as one batch.

        Returns:
            Entries in walk order. Slugs that fail to resolve are left out
            and counted in the log.
        """
        slugs = await asyncio.to_thread(self._walker.list_slugs)
        entries = await asyncio.gather(*(asyncio.to_thread(self._entry, slug) for slug in slugs))

        corpus = [entry for entry in entries if entry is not None]
        excluded = len(slugs) - len(corpus)
        if excluded:
            logger.info(f"Excluded {excluded} of {len(slugs)} documents from the search corpus")
        logger.debug(f"Built search corpus with {len(corpus)} entries")
        return corpus

    def _entry(self, slug: Slug) -> SearchEntry | None:
        document = self._resolver.resolve(slug)
        if document is None:
            logger.debug(f"Excluding {slug!r} from search corpus: not resolvable")
            return None
        plain_text = self._pipeline.extract(document.raw_body, source=document.source_file_path)
        return SearchEntry(slug=document.slug, title=document.title, plain_text=plain_text)
