"""Content resolution and markdown processing core."""

from devdocs.core.content import ContentSource
from devdocs.core.documents import Document, DocumentResolver
from devdocs.core.search import SearchCorpusBuilder, SearchEntry
from devdocs.core.slugs import normalize_slug

__all__ = [
    "ContentSource",
    "Document",
    "DocumentResolver",
    "SearchCorpusBuilder",
    "SearchEntry",
    "normalize_slug",
]
