"""Slug normalization.

Maps route segments, link paths and content-relative file paths to the
canonical slug form used everywhere else:

    []                     -> "index"
    ["guides", "index"]    -> "guides"
    "guides/setup.md"      -> "guides/setup"
    "guides/setup#install" -> "guides/setup#install"

The same rules are applied to request paths, configured navigation links and
files discovered on disk, so a slug always maps back to exactly one file.
"""

import re
from collections.abc import Sequence
from pathlib import PurePath

from devdocs.core.types import Slug, URLPath

INDEX_SLUG = Slug("index")
MARKDOWN_SUFFIXES = (".md", ".mdx")

_EXTENSION_RE = re.compile(r"\.mdx?$")
_EXTERNAL_PREFIXES = ("http://", "https://")

SlugInput = str | Sequence[str] | None


def split_fragment(path: str) -> tuple[str, str]:
    """Split a link path into its path portion and fragment.

    Args:
        path: Link path, e.g. "guides/setup#install"

    Returns:
        Tuple of path and fragment including the "#", e.g.
        ("guides/setup", "#install"). Fragment is "" when absent.
    """
    base, sep, fragment = path.partition("#")
    return base, f"{sep}{fragment}"


def normalize_slug(raw: SlugInput = None) -> str:
    """Normalize route segments or a link path to canonical slug form.

    A "#fragment" is split off first and reattached unmodified, so the
    result may carry an anchor. Use canonical_slug() when a bare document
    slug is needed.

    Args:
        raw: Path segments, a "/"-joined string, or None for the root

    Returns:
        Canonical slug, with the original fragment if there was one
    """
    base, fragment = split_fragment(_join(raw))
    return f"{_normalize_path(base)}{fragment}"


def canonical_slug(raw: SlugInput = None) -> Slug:
    """Normalize to a bare document slug, dropping any fragment."""
    base, _ = split_fragment(_join(raw))
    return _normalize_path(base)


def slug_from_path(relative_path: PurePath | str) -> Slug:
    """Compute the slug of a content file from its path relative to the root.

    File names are never split on "#": a fragment only exists in links.
    """
    return _normalize_path(PurePath(relative_path).as_posix())


def slug_to_segments(slug: str) -> list[str]:
    """Split a slug into route segments ("index" is the empty route)."""
    base = canonical_slug(slug)
    if base == INDEX_SLUG:
        return []
    return base.split("/")


def is_external(path: str) -> bool:
    """Whether a navigation path points outside the site."""
    return path.startswith(_EXTERNAL_PREFIXES)


def slug_to_url(path: str) -> URLPath:
    """Build the route href for a slug or link path.

    External links are returned unchanged, the root slug maps to "/",
    and a fragment is kept verbatim.
    """
    if is_external(path):
        return URLPath(path)
    base, fragment = split_fragment(path)
    slug = _normalize_path(base)
    href = "/" if slug == INDEX_SLUG else f"/{slug}"
    return URLPath(f"{href}{fragment}")


def _join(raw: SlugInput) -> str:
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    return "/".join(raw)


def _normalize_path(path: str) -> Slug:
    segments = [segment for segment in path.replace("\\", "/").split("/") if segment]
    if not segments:
        return INDEX_SLUG

    last = _EXTENSION_RE.sub("", segments[-1])
    if last.lower() == "index":
        if len(segments) == 1:
            return INDEX_SLUG
        segments.pop()
    elif last:
        segments[-1] = last
    else:
        segments.pop()

    return Slug("/".join(segments) or INDEX_SLUG)
