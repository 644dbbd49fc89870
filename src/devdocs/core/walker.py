"""Content tree walker.

Enumerates every markdown file under the content root and maps it to its
slug. The result is the authoritative list of routes: a slug is only
listed when the file resolver maps it back to a file.
"""

import logging
from pathlib import Path, PurePosixPath

from devdocs.core.files import FileResolver
from devdocs.core.slugs import INDEX_SLUG, MARKDOWN_SUFFIXES, slug_from_path
from devdocs.core.types import Slug

logger = logging.getLogger(__name__)


class SiteWalker:
    """Builds the slug universe for a content root."""

    def __init__(self, source_dir: Path, files: FileResolver | None = None) -> None:
        """Initialize walker.

        Args:
            source_dir: Content root containing markdown sources
            files: File resolver used to verify discovered slugs
        """
        self._source_dir = source_dir
        self._files = files or FileResolver(source_dir)

    @property
    def source_dir(self) -> Path:
        """Content root containing markdown sources."""
        return self._source_dir

    def list_files(self) -> list[PurePosixPath]:
        """List markdown files relative to the root in depth-first order."""
        if not self._source_dir.is_dir():
            logger.warning(f"Content root does not exist: {self._source_dir}")
            return []
        return _walk(self._source_dir, PurePosixPath())

    def list_slugs(self) -> list[Slug]:
        """List every resolvable slug, in walk order, without duplicates.

        Returns:
            Ordered slugs; "index" is included iff a root index file exists
        """
        slugs: list[Slug] = []
        seen: set[Slug] = set()
        dropped = 0

        for relative_path in self.list_files():
            slug = slug_from_path(relative_path)
            if slug in seen:
                continue
            seen.add(slug)

            if self._files.resolve(slug) is None:
                logger.warning(f"Skipping {relative_path}: slug {slug!r} does not resolve to it")
                dropped += 1
                continue
            slugs.append(slug)

        has_root_index = self._files.resolve(INDEX_SLUG) is not None
        if has_root_index and INDEX_SLUG not in slugs:
            slugs.insert(0, INDEX_SLUG)
        elif not has_root_index and INDEX_SLUG in slugs:
            slugs.remove(INDEX_SLUG)

        logger.debug(f"Discovered {len(slugs)} slugs under {self._source_dir} ({dropped} dropped)")
        return slugs


def _walk(directory: Path, relative: PurePosixPath) -> list[PurePosixPath]:
    try:
        entries = sorted(directory.iterdir(), key=lambda entry: entry.name)
    except OSError as e:
        logger.warning(f"Skipping unreadable directory {directory}: {e}")
        return []

    found: list[PurePosixPath] = []
    for entry in entries:
        if entry.name.startswith("."):
            continue
        entry_relative = relative / entry.name
        try:
            if entry.is_dir() and not entry.is_symlink():
                found.extend(_walk(entry, entry_relative))
            elif entry.is_file() and entry.suffix in MARKDOWN_SUFFIXES:
                found.append(entry_relative)
        except OSError as e:
            logger.warning(f"Skipping inaccessible entry {entry}: {e}")
    return found
