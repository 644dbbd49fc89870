"""Markdown processing pipelines.

Two independent transforms of the same markdown body:

- RenderPipeline produces the HTML fragment shown on the page
  (GFM, raw HTML passthrough, heading ids and anchors, highlighting).
- SearchTextPipeline produces plain text for the search corpus, with code
  blocks, <pre> and <script> content removed.

Both build a fresh mistune parser per call so concurrent resolutions share
no parser state.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

import mistune
from bs4 import BeautifulSoup, Tag
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

GFM_PLUGINS = ["table", "strikethrough", "url", "task_lists"]
HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]

RENDER_ERROR_HTML = (
    '<p class="render-error">This page could not be rendered. '
    "See the server log for details.</p>"
)

_WHITESPACE_RE = re.compile(r"\s+")
_HEADING_STRIP_RE = re.compile(r"[^\w\- ]")


@dataclass(frozen=True)
class TocEntry:
    """Table of contents entry for a heading."""

    level: int
    title: str
    id: str

    def to_dict(self) -> dict[str, str | int]:
        """Convert to dictionary for JSON serialization."""
        return {"level": self.level, "title": self.title, "id": self.id}


@dataclass(frozen=True)
class RenderResult:
    """Result of rendering a markdown body."""

    html: str
    toc: list[TocEntry] = field(default_factory=list)
    failed: bool = False


def create_markdown(*, drop_code_blocks: bool = False) -> mistune.Markdown:
    """Create a GFM markdown parser that passes raw HTML through.

    Args:
        drop_code_blocks: Remove fenced and indented code blocks from the
            parsed tree before rendering

    Returns:
        Configured mistune Markdown instance
    """
    md = mistune.create_markdown(escape=False, plugins=GFM_PLUGINS)
    if drop_code_blocks:
        md.before_render_hooks.append(_drop_code_blocks)
    return md


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def heading_slug(text: str) -> str:
    """Derive a URL-safe id from heading text ("Getting Started!" -> "getting-started")."""
    slug = _HEADING_STRIP_RE.sub("", text.strip().lower()).replace(" ", "-")
    return slug or "section"


class RenderPipeline:
    """Renders markdown bodies to HTML fragments.

    Stage order matters: ids are assigned on the re-parsed tree so that
    hand-written HTML headings get them too, and anchors are added after
    ids exist. Anchors are prepended inside the heading rather than
    wrapping its content, so headings that already contain links never
    produce nested <a> elements.
    """

    def __init__(self) -> None:
        self._formatter = HtmlFormatter(nowrap=True)

    def render(self, body: str, *, source: str = "<string>") -> RenderResult:
        """Render a markdown body.

        Args:
            body: Markdown text without frontmatter
            source: Source file path used in log messages

        Returns:
            RenderResult with HTML and table of contents. On any failure the
            HTML is a short error paragraph and failed is True.
        """
        try:
            html = create_markdown()(body)
            soup = BeautifulSoup(html, "html.parser")
            toc = self._assign_heading_ids(soup)
            self._add_heading_anchors(soup)
            self._highlight_code_blocks(soup)
            return RenderResult(html=str(soup), toc=toc)
        except Exception:
            logger.exception(f"Failed to render markdown from {source}")
            return RenderResult(html=RENDER_ERROR_HTML, failed=True)

    def _assign_heading_ids(self, soup: BeautifulSoup) -> list[TocEntry]:
        used = {str(element["id"]) for element in soup.find_all(id=True)}
        toc: list[TocEntry] = []

        for heading in soup.find_all(HEADING_TAGS):
            title = collapse_whitespace(heading.get_text())
            heading_id = heading.get("id")
            if not heading_id:
                heading_id = _unique(heading_slug(title), used)
                heading["id"] = heading_id

            level = int(heading.name[1])
            if level > 1:
                toc.append(TocEntry(level=level, title=title, id=str(heading_id)))

        return toc

    def _add_heading_anchors(self, soup: BeautifulSoup) -> None:
        for heading in soup.find_all(HEADING_TAGS):
            anchor = soup.new_tag(
                "a",
                attrs={
                    "class": "anchor",
                    "href": f"#{heading['id']}",
                    "aria-hidden": "true",
                    "tabindex": "-1",
                },
            )
            heading.insert(0, anchor)

    def _highlight_code_blocks(self, soup: BeautifulSoup) -> None:
        for code in soup.select("pre > code"):
            language = _code_language(code)
            if language is None:
                continue

            try:
                lexer = get_lexer_by_name(language)
            except ClassNotFound:
                logger.debug(f"No lexer for language {language!r}, leaving code plain")
                continue

            highlighted = highlight(code.get_text(), lexer, self._formatter)
            # Token spans sit inside one span carrying the language class
            replacement = BeautifulSoup(
                f'<code><span class="language-{language}">{highlighted}</span></code>',
                "html.parser",
            ).code
            if replacement is None:
                continue
            replacement.attrs = dict(code.attrs)
            code.replace_with(replacement)


class SearchTextPipeline:
    """Extracts indexable plain text from markdown bodies."""

    def extract(self, body: str, *, source: str = "<string>") -> str:
        """Convert a markdown body to plain text.

        Args:
            body: Markdown text without frontmatter
            source: Source file path used in log messages

        Returns:
            Whitespace-normalized text. Falls back to the raw body with
            whitespace collapsed if processing fails.
        """
        try:
            html = create_markdown(drop_code_blocks=True)(body)
            soup = BeautifulSoup(html, "html.parser")
            for element in soup.find_all(["script", "pre"]):
                if not element.decomposed:
                    element.decompose()
            text = soup.get_text()
        except Exception as e:
            logger.warning(f"Falling back to raw text for search index of {source}: {e}")
            text = body
        return collapse_whitespace(text)


def _drop_code_blocks(md: mistune.Markdown, state: Any) -> None:
    state.tokens = _without_code_blocks(state.tokens)


def _without_code_blocks(tokens: list[dict[str, Any]]) -> list[dict[str, Any]]:
    kept: list[dict[str, Any]] = []
    for token in tokens:
        if token.get("type") == "block_code":
            continue
        children = token.get("children")
        if isinstance(children, list):
            token = {**token, "children": _without_code_blocks(children)}
        kept.append(token)
    return kept


def _code_language(code: Tag) -> str | None:
    classes = code.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    for css_class in classes:
        if css_class.startswith("language-"):
            return css_class.removeprefix("language-") or None
    return None


def _unique(base: str, used: set[str]) -> str:
    candidate = base
    suffix = 1
    while candidate in used:
        candidate = f"{base}-{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate
