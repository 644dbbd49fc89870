"""Document resolution.

Turns a slug into a fully resolved Document: locates the source file,
splits frontmatter, renders the body and derives the title. Resolution
either fully succeeds or returns None; nothing raises past resolve().
"""

import asyncio
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any

from devdocs.core.files import FileResolver
from devdocs.core.frontmatter import Frontmatter, get_str, parse_frontmatter
from devdocs.core.pipeline import RenderPipeline, TocEntry
from devdocs.core.slugs import SlugInput, canonical_slug
from devdocs.core.types import Slug

logger = logging.getLogger(__name__)

SOURCE_FILE_PATH_KEY = "sourceFilePath"
ROOT_FALLBACK_TITLE = "Home"
UNTITLED = "Untitled"

_WORD_SPLIT_RE = re.compile(r"[-_\s]+")
_MARKDOWN_SUFFIX_RE = re.compile(r"\.mdx?$")


@dataclass(frozen=True)
class Document:
    """Fully resolved document."""

    slug: Slug
    title: str
    rendered_html: str
    raw_body: str
    frontmatter: Frontmatter
    toc: list[TocEntry] = field(default_factory=list)
    source_path: Path | None = None

    @property
    def source_file_path(self) -> str:
        """Source path relative to the content root."""
        value = self.frontmatter.get(SOURCE_FILE_PATH_KEY)
        return value if isinstance(value, str) else ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "slug": self.slug,
            "title": self.title,
            "rendered_html": self.rendered_html,
            "raw_body": self.raw_body,
            "frontmatter": self.frontmatter,
            "toc": [entry.to_dict() for entry in self.toc],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], source_path: Path | None = None) -> "Document":
        """Rebuild a Document from its to_dict() form."""
        return cls(
            slug=Slug(str(data["slug"])),
            title=str(data["title"]),
            rendered_html=str(data["rendered_html"]),
            raw_body=str(data["raw_body"]),
            frontmatter=dict(data["frontmatter"]),
            toc=[
                TocEntry(level=int(entry["level"]), title=str(entry["title"]), id=str(entry["id"]))
                for entry in data.get("toc", [])
            ],
            source_path=source_path,
        )


def humanize(name: str) -> str:
    """Turn a file or directory name into a title ("getting-started" -> "Getting Started")."""
    words = [word for word in _WORD_SPLIT_RE.split(name) if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


def derive_title(
    metadata: Frontmatter,
    relative_path: str,
    *,
    site_name: str | None = None,
) -> str:
    """Pick a document title.

    Precedence: frontmatter title, humanized file name, humanized parent
    directory name (for index files), then a fixed fallback (site name or
    "Home" for the root index, "Untitled" otherwise).

    Args:
        metadata: Parsed frontmatter
        relative_path: Source path relative to the content root
        site_name: Site name used as the root page title

    Returns:
        Document title
    """
    title = get_str(metadata, "title")
    if title is not None:
        return title

    path = PurePosixPath(relative_path)
    stem = _MARKDOWN_SUFFIX_RE.sub("", path.name)
    if stem.lower() != "index":
        return humanize(stem) or UNTITLED

    parent = path.parent.name
    if not parent:
        return site_name or ROOT_FALLBACK_TITLE
    return humanize(parent) or UNTITLED


class DocumentResolver:
    """Resolves slugs to Documents.

    Each call reads the source file afresh; caching belongs to the caller.
    """

    def __init__(
        self,
        source_dir: Path,
        *,
        site_name: str | None = None,
        pipeline: RenderPipeline | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            source_dir: Content root containing markdown sources
            site_name: Title used for the root page when it has none
            pipeline: Render pipeline (default: RenderPipeline())
        """
        self._files = FileResolver(source_dir)
        self._site_name = site_name
        self._pipeline = pipeline or RenderPipeline()

    @property
    def source_dir(self) -> Path:
        """Content root containing markdown sources."""
        return self._files.source_dir

    @property
    def files(self) -> FileResolver:
        """File resolver used to locate sources."""
        return self._files

    def locate(self, raw: SlugInput) -> Path | None:
        """Return the source file for a slug without reading it."""
        return self._files.resolve(canonical_slug(raw))

    def resolve(self, raw: SlugInput) -> Document | None:
        """Resolve a slug or route segments to a Document.

        Args:
            raw: Slug string, route segments, or None for the root

        Returns:
            Document, or None if no readable source file exists
        """
        slug = canonical_slug(raw)
        source_path = self._files.resolve(slug)
        if source_path is None:
            return None

        relative_path = self._files.relative_path(source_path)
        try:
            content = source_path.read_bytes()
        except OSError as e:
            logger.warning(f"Could not read {relative_path} for {slug!r}: {e}")
            return None

        parsed = parse_frontmatter(content, source=relative_path)
        rendered = self._pipeline.render(parsed.body, source=relative_path)

        return Document(
            slug=slug,
            title=derive_title(parsed.metadata, relative_path, site_name=self._site_name),
            rendered_html=rendered.html,
            raw_body=parsed.body,
            frontmatter={**parsed.metadata, SOURCE_FILE_PATH_KEY: relative_path},
            toc=rendered.toc,
            source_path=source_path,
        )

    async def resolve_many(self, slugs: Iterable[SlugInput]) -> list[Document | None]:
        """Resolve many slugs concurrently.

        Resolutions are independent, so they run as one batch in worker
        threads. Results keep the input order.
        """
        return list(
            await asyncio.gather(*(asyncio.to_thread(self.resolve, slug) for slug in slugs))
        )
