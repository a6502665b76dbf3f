"""Background worker that resolves trailers for newly added titles."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import Awaitable, Callable, Iterable

from ..models import TitleKey
from ..store import CatalogStore
from .trailers import TrailerResolver

logger = logging.getLogger(__name__)


class EnrichmentScheduler:
    """Resolves queued titles one at a time and patches the catalog.

    Titles are processed strictly sequentially; after each resolution the
    worker pauses ``delay_seconds`` before taking the next queued title.
    Failures are logged and skipped; the only visible outcome is the trailer
    staying unset.
    """

    def __init__(
        self,
        resolver: TrailerResolver,
        store: CatalogStore,
        lock: asyncio.Lock,
        *,
        delay_seconds: float = 1.0,
        max_pending: int = 1_000,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._resolver = resolver
        self._store = store
        self._lock = lock
        self._delay_seconds = delay_seconds
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=max_pending)
        self._pending: set[TitleKey] = set()
        self._sleep = sleep
        self._worker: asyncio.Task[None] | None = None

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    async def start(self) -> None:
        """Launch the worker task."""

        if self._worker is None:
            self._worker = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Cancel the worker task; queued titles are abandoned."""

        if self._worker is None:
            return
        self._worker.cancel()
        with suppress(asyncio.CancelledError):
            await self._worker
        self._worker = None

    async def join(self) -> None:
        """Wait until every queued title has been processed."""

        await self._queue.join()

    def enqueue(self, names: Iterable[str]) -> int:
        """Queue ``names`` for resolution without waiting; returns how many were queued."""

        queued = 0
        for name in names:
            key = TitleKey(name)
            if not key or key in self._pending:
                continue
            try:
                self._queue.put_nowait(name)
            except asyncio.QueueFull:
                logger.warning(
                    "Enrichment queue full; %s will stay without a trailer", name
                )
                continue
            self._pending.add(key)
            queued += 1
        if queued:
            logger.info("Queued %d title(s) for trailer enrichment", queued)
        return queued

    async def _run(self) -> None:
        while True:
            name = await self._queue.get()
            try:
                await self._enrich(name)
            except Exception as exc:  # pragma: no cover - background safety net
                logger.exception("Trailer enrichment for %s failed: %s", name, exc)
            finally:
                self._pending.discard(TitleKey(name))
                self._queue.task_done()
            if not self._queue.empty():
                await self._sleep(self._delay_seconds)

    async def _enrich(self, name: str) -> None:
        try:
            trailer = await self._resolver.resolve(name)
        except Exception as exc:
            logger.warning("Trailer lookup for %s raised: %s", name, exc)
            return
        if trailer is None:
            logger.info("No trailer found for %s; leaving it unresolved", name)
            return

        async with self._lock:
            catalog = self._store.load()
            entry = catalog.find(name)
            if entry is None:
                logger.debug("Discarding trailer for %s; title was removed", name)
                return
            entry.trailer = trailer
            self._store.save(catalog)
        logger.info("Stored trailer %s for %s", trailer.video_id, name)
