"""devdocs - Markdown documentation site generator and server."""

__version__ = "0.1.0"
