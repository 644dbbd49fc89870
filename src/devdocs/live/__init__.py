"""Live reload support for development mode."""

from devdocs.live.reload import LiveReloadManager

__all__ = ["LiveReloadManager"]
