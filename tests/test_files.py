"""Tests for slug to file resolution."""

import os
from pathlib import Path

import pytest

from devdocs.core.files import FileResolver
from devdocs.core.types import Slug


class TestFileResolverCandidates:
    """Tests for FileResolver.candidates()."""

    def test__root_slug__probes_root_index_only(self, docs_dir: Path) -> None:
        """Probe index.md then index.mdx for the root."""
        resolver = FileResolver(docs_dir)

        assert resolver.candidates(Slug("index")) == [
            docs_dir / "index.md",
            docs_dir / "index.mdx",
        ]

    def test__nested_slug__probes_in_priority_order(self, docs_dir: Path) -> None:
        """Probe direct files before directory index files."""
        resolver = FileResolver(docs_dir)

        assert resolver.candidates(Slug("guides/setup")) == [
            docs_dir / "guides" / "setup.md",
            docs_dir / "guides" / "setup.mdx",
            docs_dir / "guides" / "setup" / "index.md",
            docs_dir / "guides" / "setup" / "index.mdx",
        ]

    @pytest.mark.parametrize(
        "slug", ["../secret", "guides/../../secret", "/etc/passwd", "a/./b", ".drafts/x", "a/.b"]
    )
    def test__escaping_slug__is_rejected(self, docs_dir: Path, slug: str) -> None:
        """Reject slugs that could leave the content root or name hidden entries."""
        assert FileResolver(docs_dir).candidates(Slug(slug)) == []


class TestFileResolverResolve:
    """Tests for FileResolver.resolve()."""

    def test__direct_file__resolves(self, docs_dir: Path) -> None:
        """Resolve {slug}.md."""
        (docs_dir / "about.md").write_text("About")

        result = FileResolver(docs_dir).resolve(Slug("about"))

        assert result == (docs_dir / "about.md").absolute()

    def test__mdx_file__resolves(self, docs_dir: Path) -> None:
        """Resolve {slug}.mdx when no .md exists."""
        (docs_dir / "about.mdx").write_text("About")

        result = FileResolver(docs_dir).resolve(Slug("about"))

        assert result is not None
        assert result.name == "about.mdx"

    def test__direct_file_and_directory_index__prefers_direct_file(
        self, docs_dir: Path
    ) -> None:
        """Prefer guides.md over guides/index.md."""
        (docs_dir / "guides.md").write_text("Direct")
        (docs_dir / "guides").mkdir()
        (docs_dir / "guides" / "index.md").write_text("Index")

        result = FileResolver(docs_dir).resolve(Slug("guides"))

        assert result is not None
        assert result.name == "guides.md"

    def test__directory_index__resolves(self, docs_dir: Path) -> None:
        """Resolve {slug}/index.md for directory slugs."""
        (docs_dir / "guides").mkdir()
        (docs_dir / "guides" / "index.mdx").write_text("Index")

        result = FileResolver(docs_dir).resolve(Slug("guides"))

        assert result == (docs_dir / "guides" / "index.mdx").absolute()

    def test__directory_named_like_file__is_not_a_match(self, docs_dir: Path) -> None:
        """A directory called "setup.md" is not a source file."""
        (docs_dir / "setup.md").mkdir()

        assert FileResolver(docs_dir).resolve(Slug("setup")) is None

    def test__missing__returns_none(self, docs_dir: Path) -> None:
        """Return None when nothing matches."""
        assert FileResolver(docs_dir).resolve(Slug("nonexistent")) is None

    def test__root_without_index__returns_none(self, docs_dir: Path) -> None:
        """Return None for the root when there is no root index file."""
        (docs_dir / "about.md").write_text("About")

        assert FileResolver(docs_dir).resolve(Slug("index")) is None

    def test__symlink_outside_root__is_not_served(self, docs_dir: Path) -> None:
        """A matching file that links outside the content root is rejected."""
        outside = docs_dir.parent / "secret.md"
        outside.write_text("Secret")
        (docs_dir / "guides").mkdir()
        (docs_dir / "guides" / "setup.md").symlink_to(outside)

        assert FileResolver(docs_dir).resolve(Slug("guides/setup")) is None

    def test__symlink_inside_root__resolves(self, docs_dir: Path) -> None:
        """Links to other files under the root are served."""
        (docs_dir / "real.md").write_text("Real")
        (docs_dir / "alias.md").symlink_to(docs_dir / "real.md")

        assert FileResolver(docs_dir).resolve(Slug("alias")) == (docs_dir / "alias.md").absolute()

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="permission checks do not apply to root",
    )
    def test__unreadable_directory__is_treated_as_not_found(self, docs_dir: Path) -> None:
        """Treat permission errors while probing as not-found."""
        locked = docs_dir / "locked"
        locked.mkdir()
        (locked / "page.md").write_text("Hidden")
        locked.chmod(0)
        try:
            assert FileResolver(docs_dir).resolve(Slug("locked/page")) is None
        finally:
            locked.chmod(0o755)


class TestFileResolverRelativePath:
    """Tests for FileResolver.relative_path()."""

    def test__nested_file__returns_posix_relative_path(self, docs_dir: Path) -> None:
        """Return the path relative to the content root."""
        resolver = FileResolver(docs_dir)

        result = resolver.relative_path(docs_dir / "guides" / "setup.md")

        assert result == "guides/setup.md"
