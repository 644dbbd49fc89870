"""Navigation tree built from the configured nav.

The nav tree is stored as a flat list with parent indices, which gives
cheap slug lookups, breadcrumbs by walking the parent chain, and a
reading order for previous/next links.
"""

from dataclasses import dataclass, field
from typing import TypedDict

from devdocs.core.slugs import (
    INDEX_SLUG,
    canonical_slug,
    is_external,
    slug_to_url,
    split_fragment,
)
from devdocs.core.types import Slug, URLPath


class NavItemDict(TypedDict, total=False):
    """Dictionary representation of a navigation item."""

    title: str
    path: str
    href: str
    children: list["NavItemDict"]


@dataclass
class NavItem:
    """Configured navigation entry.

    path is a normalized slug (optionally with a "#fragment"), an external
    URL, or None for a section heading without a page.
    """

    title: str
    path: str | None = None
    children: list["NavItem"] = field(default_factory=list)

    @property
    def href(self) -> URLPath | None:
        """Route href for the entry, None for section headings."""
        if self.path is None:
            return None
        return slug_to_url(self.path)

    @property
    def is_page(self) -> bool:
        """Whether the entry links to a whole page of this site."""
        return self.path is not None and not is_external(self.path) and "#" not in self.path

    def to_dict(self) -> NavItemDict:
        """Convert to dictionary for JSON serialization."""
        result: NavItemDict = {"title": self.title}
        if self.path is not None:
            result["path"] = self.path
            result["href"] = str(self.href)
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


@dataclass(frozen=True)
class NavPage:
    """Page entry in reading order."""

    title: str
    path: Slug

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"title": self.title, "path": self.path, "href": slug_to_url(self.path)}


@dataclass(frozen=True)
class BreadcrumbItem:
    """Breadcrumb navigation item."""

    title: str
    path: URLPath

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"title": self.title, "path": self.path}


class Navigation:
    """Lookups over the configured navigation tree."""

    __slots__ = ("_items", "_nodes", "_pages", "_parents", "_path_index")

    def __init__(self, items: list[NavItem]) -> None:
        """Initialize navigation.

        Args:
            items: Top-level navigation entries
        """
        self._items = items
        self._nodes: list[NavItem] = []
        self._parents: list[int | None] = []
        self._path_index: dict[Slug, int] = {}
        self._pages: list[NavPage] = []

        for item in items:
            self._add(item, None)

    @property
    def items(self) -> list[NavItem]:
        """Top-level navigation entries."""
        return self._items

    def pages(self) -> list[NavPage]:
        """Pages in reading order (nav order, section links excluded)."""
        return list(self._pages)

    def get_prev_next(self, slug: str) -> tuple[NavPage | None, NavPage | None]:
        """Find the pages before and after a slug in reading order.

        A slug with a fragment is looked up by its page.

        Args:
            slug: Document slug, optionally with "#fragment"

        Returns:
            Tuple of previous and next page, each None at the ends or when
            the slug is not in the navigation
        """
        base = canonical_slug(split_fragment(slug)[0])
        for i, page in enumerate(self._pages):
            if page.path == base:
                prev = self._pages[i - 1] if i > 0 else None
                next_ = self._pages[i + 1] if i < len(self._pages) - 1 else None
                return prev, next_
        return None, None

    def get_breadcrumbs(self, slug: str) -> list[BreadcrumbItem]:
        """Build breadcrumbs for a slug.

        Returns "Home" followed by ancestor entries that link to pages.
        The current page is not included, and the root page has none.

        Note:
            For slugs missing from the navigation, returns [Home] so the UI
            still has a way back.

        Args:
            slug: Document slug

        Returns:
            List of BreadcrumbItem for ancestor navigation
        """
        base = canonical_slug(slug)
        if base == INDEX_SLUG:
            return []

        home = BreadcrumbItem(title="Home", path=URLPath("/"))
        idx = self._path_index.get(base)
        if idx is None:
            return [home]

        ancestors: list[NavItem] = []
        current = self._parents[idx]
        while current is not None:
            ancestors.append(self._nodes[current])
            current = self._parents[current]
        ancestors.reverse()

        breadcrumbs = [home]
        for item in ancestors:
            if item.is_page and item.href is not None and item.href != "/":
                breadcrumbs.append(BreadcrumbItem(title=item.title, path=item.href))
        return breadcrumbs

    def get_subtree(self, slug: str) -> list[NavItem] | None:
        """Return the children of the entry for a slug, None if absent."""
        idx = self._path_index.get(canonical_slug(slug))
        if idx is None:
            return None
        return self._nodes[idx].children

    def to_dict(self) -> list[NavItemDict]:
        """Convert the tree to dictionaries for JSON serialization."""
        return [item.to_dict() for item in self._items]

    def _add(self, item: NavItem, parent_idx: int | None) -> None:
        idx = len(self._nodes)
        self._nodes.append(item)
        self._parents.append(parent_idx)

        if item.is_page and item.path is not None:
            slug = canonical_slug(item.path)
            self._path_index.setdefault(slug, idx)
            self._pages.append(NavPage(title=item.title, path=slug))

        for child in item.children:
            self._add(child, idx)
