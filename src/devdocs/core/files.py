"""Slug to source file resolution.

Probes a fixed, ordered list of candidate files under the content root:

    index        -> index.md, index.mdx
    guides/setup -> guides/setup.md, guides/setup.mdx,
                    guides/setup/index.md, guides/setup/index.mdx
"""

import logging
import stat
from pathlib import Path

from devdocs.core.slugs import INDEX_SLUG, MARKDOWN_SUFFIXES
from devdocs.core.types import Slug

logger = logging.getLogger(__name__)


class FileResolver:
    """Locates the source file for a canonical slug.

    Candidate paths never leave the content root: slugs with ".." segments
    or absolute paths are rejected before any filesystem access, and a
    matching file that symlinks outside the root is not served. Hidden
    (dot-prefixed) segments are rejected too, as the walker never lists them.
    """

    def __init__(self, source_dir: Path) -> None:
        """Initialize resolver.

        Args:
            source_dir: Content root containing markdown sources
        """
        self._source_dir = source_dir

    @property
    def source_dir(self) -> Path:
        """Content root containing markdown sources."""
        return self._source_dir

    def candidates(self, slug: Slug) -> list[Path]:
        """List candidate source paths for a slug in probe order.

        Args:
            slug: Canonical slug

        Returns:
            Candidate paths, empty if the slug is rejected
        """
        if not self._is_safe(slug):
            logger.warning(f"Rejected slug outside content root or hidden: {slug!r}")
            return []

        if slug == INDEX_SLUG:
            return [self._source_dir / f"index{suffix}" for suffix in MARKDOWN_SUFFIXES]

        base = self._source_dir / slug
        return [
            *(base.with_name(f"{base.name}{suffix}") for suffix in MARKDOWN_SUFFIXES),
            *(base / f"index{suffix}" for suffix in MARKDOWN_SUFFIXES),
        ]

    def resolve(self, slug: Slug) -> Path | None:
        """Return the first existing regular file for a slug.

        Args:
            slug: Canonical slug

        Returns:
            Absolute path to source file, or None if nothing matches
        """
        for candidate in self.candidates(slug):
            if not self._is_regular_file(candidate):
                continue
            if not self._is_contained(candidate):
                logger.warning(f"Rejected {candidate}: links outside content root")
                return None
            logger.debug(f"Resolved {slug!r} to {candidate}")
            return candidate.absolute()
        logger.debug(f"No source file for {slug!r}")
        return None

    def relative_path(self, source_path: Path) -> str:
        """Return a source path relative to the content root, "/"-separated."""
        root = self._source_dir.absolute()
        return source_path.absolute().relative_to(root).as_posix()

    def _is_safe(self, slug: Slug) -> bool:
        parts = slug.replace("\\", "/").split("/")
        # Dot-prefixed segments cover "." and ".." as well as hidden entries
        if slug.startswith("/") or any(not part or part.startswith(".") for part in parts):
            return False
        return self._is_contained(self._source_dir / slug)

    def _is_contained(self, path: Path) -> bool:
        root = self._source_dir.resolve()
        target = path.resolve()
        return target == root or root in target.parents

    def _is_regular_file(self, path: Path) -> bool:
        try:
            mode = path.stat().st_mode
        except (FileNotFoundError, NotADirectoryError):
            return False
        except PermissionError as e:
            logger.warning(f"Permission denied while probing {path}: {e}")
            return False
        except OSError as e:
            logger.warning(f"Could not access {path}: {e}")
            return False

        if stat.S_ISDIR(mode):
            logger.debug(f"Skipping directory candidate {path}")
            return False
        return stat.S_ISREG(mode)
