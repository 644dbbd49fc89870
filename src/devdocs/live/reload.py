"""Live reload over WebSocket.

Watches the content root with watchfiles and tells connected browsers which
page changed. Each added or modified page produces one message:

    {"type": "reload", "slug": "guides/setup", "path": "/guides/setup"}
"""

import asyncio
import contextlib
import json
import logging
import weakref
from collections.abc import Iterable
from pathlib import Path

from aiohttp import WSMsgType, web
from watchfiles import Change, DefaultFilter, awatch

from devdocs.core.cache import SearchIndexCache
from devdocs.core.slugs import slug_from_path, slug_to_url
from devdocs.core.types import Slug

logger = logging.getLogger(__name__)

DEFAULT_WATCH_PATTERNS = ["**/*.md", "**/*.mdx"]

FileChange = tuple[Change, str]


class SourceFilter(DefaultFilter):
    """watchfiles filter that only lets content files through.

    Keeps DefaultFilter's ignores (VCS directories, editor swap files) and
    additionally requires a match against one of the watch patterns.
    """

    def __init__(self, source_dir: Path, patterns: list[str]) -> None:
        super().__init__()
        self._source_dir = source_dir
        self._patterns = patterns

    def __call__(self, change: Change, path: str) -> bool:
        return super().__call__(change, path) and self.matches(Path(path))

    def matches(self, path: Path) -> bool:
        """Whether a path under the content root matches a watch pattern."""
        try:
            relative = path.relative_to(self._source_dir)
        except ValueError:
            return False
        # "**/" also matches files directly in the root
        return any(
            relative.match(pattern) or relative.match(pattern.removeprefix("**/"))
            for pattern in self._patterns
        )


class LiveReloadManager:
    """Watches the content root and pushes reload events to browsers."""

    def __init__(
        self,
        source_dir: Path,
        watch_patterns: list[str] | None = None,
        *,
        search_index: SearchIndexCache | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            source_dir: Content root to watch
            watch_patterns: Glob patterns relative to the root (default: .md and .mdx)
            search_index: Search corpus dropped whenever content changes
        """
        self._source_dir = source_dir.absolute()
        self._filter = SourceFilter(self._source_dir, watch_patterns or DEFAULT_WATCH_PATTERNS)
        self._search_index = search_index
        self._clients: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._task: asyncio.Task[None] | None = None

    @property
    def client_count(self) -> int:
        """Number of open WebSocket connections."""
        return len(self._clients)

    async def start(self) -> None:
        """Start watching in a background task."""
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info(f"Watching {self._source_dir} for changes")

    async def stop(self) -> None:
        """Cancel the watcher and close every client connection."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        for ws in list(self._clients):
            await ws.close()

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        """Keep a client connection open until the browser goes away."""
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        self._clients.add(ws)
        logger.debug(f"Live reload client connected ({self.client_count} open)")

        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    logger.debug(f"Live reload connection failed: {ws.exception()}")
                    break
        finally:
            self._clients.discard(ws)

        return ws

    def matches(self, path: Path) -> bool:
        """Whether a changed path is a watched content file."""
        return self._filter.matches(path)

    def to_slug(self, path: Path) -> Slug:
        """Map a content file to the slug it serves."""
        return slug_from_path(path.relative_to(self._source_dir))

    async def apply_changes(self, changes: Iterable[FileChange]) -> list[Slug]:
        """Handle one batch of file system changes.

        The search corpus is invalidated once per batch that touches content.
        Deleted files invalidate but are not announced, since there is no
        page left to reload.

        Args:
            changes: (change, path) pairs as yielded by watchfiles

        Returns:
            Sorted slugs that were announced to clients
        """
        relevant = [(change, Path(path)) for change, path in changes if self.matches(Path(path))]
        if not relevant:
            return []

        if self._search_index is not None:
            self._search_index.invalidate()

        slugs = sorted({self.to_slug(path) for change, path in relevant if change != Change.deleted})
        for slug in slugs:
            await self._broadcast(slug)
        return slugs

    async def _watch(self) -> None:
        async for changes in awatch(self._source_dir, watch_filter=self._filter):
            slugs = await self.apply_changes(changes)
            if slugs:
                logger.debug(f"Reloading {', '.join(slugs)}")

    async def _broadcast(self, slug: Slug) -> None:
        if not self._clients:
            return

        message = json.dumps({"type": "reload", "slug": slug, "path": slug_to_url(slug)})
        for ws in list(self._clients):
            if ws.closed:
                continue
            try:
                await ws.send_str(message)
            except ConnectionResetError:
                self._clients.discard(ws)


def create_live_reload_routes(manager: LiveReloadManager) -> list[web.RouteDef]:
    return [web.get("/ws/live-reload", manager.handle_websocket)]
