"""Tests for search corpus construction."""

from pathlib import Path
from unittest.mock import patch

import pytest

from devdocs.core.content import ContentSource
from devdocs.core.documents import DocumentResolver
from devdocs.core.search import SearchCorpusBuilder, SearchEntry
from devdocs.core.walker import SiteWalker


class TestSearchEntry:
    """Tests for SearchEntry.to_dict()."""

    def test__to_dict__uses_content_key(self) -> None:
        """Serialize plain text under "content"."""
        entry = SearchEntry(slug="guides/setup", title="Setup", plain_text="Install it")

        assert entry.to_dict() == {
            "slug": "guides/setup",
            "title": "Setup",
            "content": "Install it",
        }


class TestSearchCorpusBuilder:
    """Tests for SearchCorpusBuilder."""

    def test__sample_docs__builds_entry_per_page(self, sample_docs: Path) -> None:
        """One entry per resolvable slug, titled like the document."""
        entries = ContentSource(sample_docs, site_name="Test Docs").build_search_corpus()

        assert {(e.slug, e.title) for e in entries} == {
            ("index", "Home"),
            ("guides/setup", "Setup"),
        }

    def test__code_blocks__are_not_indexed(self, sample_docs: Path) -> None:
        """Fenced code never reaches the corpus while prose does."""
        entries = {e.slug: e for e in ContentSource(sample_docs).build_search_corpus()}

        setup = entries["guides/setup"].plain_text
        assert "console.log" not in setup
        assert "Install the tool first." in setup
        assert setup.startswith("Setup guide intro")

    def test__frontmatter__is_not_indexed(self, sample_docs: Path) -> None:
        """Metadata is stripped before text extraction."""
        entries = {e.slug: e for e in ContentSource(sample_docs).build_search_corpus()}

        assert entries["index"].plain_text == "Welcome to the docs."

    def test__unresolvable_slug__is_excluded(self, sample_docs: Path) -> None:
        """Slugs that stop resolving between listing and reading are left out."""
        walker = SiteWalker(sample_docs)
        resolver = DocumentResolver(sample_docs)
        builder = SearchCorpusBuilder(walker, resolver)

        with patch.object(walker, "list_slugs", return_value=["index", "gone", "guides/setup"]):
            entries = builder.build()

        assert [e.slug for e in entries] == ["index", "guides/setup"]

    def test__empty_root__builds_empty_corpus(self, docs_dir: Path) -> None:
        """No content means no entries."""
        assert ContentSource(docs_dir).build_search_corpus() == []

    @pytest.mark.asyncio
    async def test__build_async__matches_build(self, sample_docs: Path) -> None:
        """The async variant returns the same corpus."""
        content = ContentSource(sample_docs)

        entries = await content.build_search_corpus_async()

        assert [e.slug for e in entries] == [str(s) for s in content.list_all_slugs()]
