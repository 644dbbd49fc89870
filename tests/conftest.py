"""Shared test fixtures."""

from pathlib import Path

import pytest

from devdocs.config import (
    Config,
    DocsConfig,
    LiveReloadConfig,
    SearchConfig,
    ServerConfig,
    SiteConfig,
    ThemeConfig,
)
from devdocs.core.navigation import NavItem
from devdocs.server import create_app

SETUP_MD = """# Setup guide intro

Install the tool first.

## Install

```js
console.log(1)
```
"""


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Create an empty content root."""
    docs = tmp_path / "docs"
    docs.mkdir(exist_ok=True)
    return docs


@pytest.fixture
def sample_docs(docs_dir: Path) -> Path:
    """Create a content root with a home page and one guide.

    index.md has a frontmatter title; guides/setup.md has none and
    contains a fenced js block under an "Install" heading.
    """
    (docs_dir / "index.md").write_text("---\ntitle: Home\n---\n\nWelcome to the docs.\n")
    guides = docs_dir / "guides"
    guides.mkdir()
    (guides / "setup.md").write_text(SETUP_MD)
    return docs_dir


@pytest.fixture
def test_config(tmp_path: Path, docs_dir: Path) -> Config:
    """Create a test configuration with tmp_path directories.

    Live reload is disabled so no file watcher runs during tests.
    """
    return Config(
        site=SiteConfig(
            site_name="Test Docs",
            repo_url="https://example.com/repo",
            edit_uri="edit/main/docs",
        ),
        nav=[
            NavItem(title="Home", path="index"),
            NavItem(
                title="Guides",
                path="guides",
                children=[
                    NavItem(title="Setup", path="guides/setup"),
                    NavItem(title="Install step", path="guides/setup#install"),
                    NavItem(title="Usage", path="guides/usage"),
                ],
            ),
            NavItem(title="GitHub", path="https://github.com/example"),
        ],
        theme=ThemeConfig(),
        search=SearchConfig(),
        server=ServerConfig(),
        docs=DocsConfig(source_dir=docs_dir, cache_dir=tmp_path / ".cache"),
        live_reload=LiveReloadConfig(enabled=False),
    )


@pytest.fixture
def client(test_config: Config, aiohttp_client):
    """Create test client for an app serving the test configuration."""
    return aiohttp_client(create_app(test_config))
