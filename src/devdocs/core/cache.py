"""Caches used by the serving layer.

Document cache structure:
    .cache/
    └── documents/
        └── guides/
            └── setup.json      # Resolved document + source mtime

The content core never reads these caches; the server consults them
before asking the core to resolve a document.
"""

import asyncio
import json
import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Any

from devdocs.core.documents import Document

if TYPE_CHECKING:
    from devdocs.core.content import ContentSource
    from devdocs.core.search import SearchEntry

logger = logging.getLogger(__name__)


class DocumentCache:
    """File-based cache for resolved documents.

    Uses source file mtime for invalidation. Cache entries are considered valid
    when the cached mtime matches the current source file mtime.
    """

    _GITIGNORE_CONTENT = "# Ignore everything in this directory\n*\n"

    def __init__(self, cache_dir: Path) -> None:
        """Initialize cache with directory path.

        Args:
            cache_dir: Root directory for cache files (e.g., .cache/)
        """
        self._cache_dir = cache_dir
        self._documents_dir = cache_dir / "documents"

    @property
    def cache_dir(self) -> Path:
        """Root cache directory."""
        return self._cache_dir

    def _ensure_cache_dir(self) -> None:
        """Create cache directory with .gitignore if it doesn't exist."""
        if not self._cache_dir.exists():
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            gitignore_path = self._cache_dir / ".gitignore"
            gitignore_path.write_text(self._GITIGNORE_CONTENT, encoding="utf-8")

    def get(self, slug: str, source_path: Path, source_mtime: float) -> Document | None:
        """Retrieve cached document if valid.

        Args:
            slug: Document slug (e.g., "guides/setup")
            source_path: Source file the document must have been built from
            source_mtime: Current mtime of source file

        Returns:
            Document if cache hit and valid, None otherwise
        """
        entry_path = self._entry_path(slug)
        if not entry_path.exists():
            return None

        data = self._read_entry(entry_path)
        if data is None:
            return None

        if data["source_mtime"] != source_mtime or data["source_path"] != str(source_path):
            return None

        try:
            return Document.from_dict(data["document"], source_path=source_path)
        except (KeyError, TypeError, ValueError) as e:
            logger.debug(f"Discarding unreadable cache entry {entry_path}: {e}")
            return None

    def set(self, document: Document, source_mtime: float) -> None:
        """Store document in cache.

        Args:
            document: Resolved document
            source_mtime: Source file mtime for invalidation
        """
        self._ensure_cache_dir()

        entry_path = self._entry_path(document.slug)
        entry_path.parent.mkdir(parents=True, exist_ok=True)

        entry = {
            "source_mtime": source_mtime,
            "source_path": str(document.source_path),
            "document": document.to_dict(),
        }
        entry_path.write_text(json.dumps(entry), encoding="utf-8")

    def invalidate(self, slug: str) -> None:
        """Remove entry from cache.

        Args:
            slug: Document slug to invalidate
        """
        entry_path = self._entry_path(slug)
        if entry_path.exists():
            entry_path.unlink()

    def clear(self) -> None:
        """Remove all cached entries."""
        if self._documents_dir.exists():
            shutil.rmtree(self._documents_dir)

    def _entry_path(self, slug: str) -> Path:
        return self._documents_dir / f"{slug}.json"

    def _read_entry(self, entry_path: Path) -> dict[str, Any] | None:
        """Read and validate a cache entry file.

        Args:
            entry_path: Path to entry JSON file

        Returns:
            Entry dict if valid, None otherwise
        """
        try:
            data = json.loads(entry_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return None

        if not isinstance(data, dict):
            return None
        if "source_mtime" not in data or "source_path" not in data:
            return None
        if not isinstance(data.get("document"), dict):
            return None

        return data


class SearchIndexCache:
    """In-memory search corpus, rebuilt on first use after invalidation.

    A build that is overtaken by invalidate() is returned to its caller but
    not kept, so the next request reads the files again.
    """

    def __init__(self, content: "ContentSource") -> None:
        self._content = content
        self._entries: "list[SearchEntry] | None" = None
        self._generation = 0
        self._lock = asyncio.Lock()

    async def get(self) -> list["SearchEntry"]:
        """Return the corpus, building it if needed."""
        async with self._lock:
            if self._entries is not None:
                return self._entries

            generation = self._generation
            entries = await self._content.build_search_corpus_async()
            if generation == self._generation:
                self._entries = entries
            else:
                logger.debug("Search corpus changed during build, not caching it")
            return entries

    def invalidate(self) -> None:
        """Drop the corpus so the next request rebuilds it."""
        self._generation += 1
        self._entries = None
