"""Catalog reconciliation and the operations exposed to the HTTP layer."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from ..models import Catalog, CatalogEntry, TitleKey, TrailerRef
from ..store import CatalogStore
from ..utils import normalize_names
from .enrichment import EnrichmentScheduler
from .trailers import TrailerResolver

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Reconciliation:
    """Outcome of merging a desired title list into the catalog."""

    catalog: Catalog
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    queued: int = 0

    @property
    def unresolved(self) -> list[str]:
        """Titles in the new catalog that still lack a trailer."""

        return self.catalog.unresolved_names()


def reconcile(current: Catalog, desired_names: Iterable[str]) -> Reconciliation:
    """Return the catalog made of exactly ``desired_names``.

    Surviving titles keep their trailer and watched flag but take the casing
    of the desired name; new titles start unresolved and unwatched.
    """

    existing = current.index()
    entries: list[CatalogEntry] = []
    added: list[str] = []
    kept: set[TitleKey] = set()

    for name in normalize_names(desired_names):
        previous = existing.get(TitleKey(name))
        if previous is not None:
            kept.add(previous.key)
            entries.append(
                CatalogEntry(
                    name=name, trailer=previous.trailer, watched=previous.watched
                )
            )
        else:
            entries.append(CatalogEntry(name=name))
            added.append(name)

    removed = [entry.name for entry in current.movies if entry.key not in kept]
    return Reconciliation(catalog=Catalog(movies=entries), added=added, removed=removed)


class CatalogService:
    """Coordinates the catalog store, trailer resolver and enrichment worker.

    Every read-modify-write of the catalog document inside this process goes
    through ``self._lock``, which the enrichment worker shares.
    """

    def __init__(
        self,
        store: CatalogStore,
        resolver: TrailerResolver,
        *,
        delay_seconds: float = 1.0,
        max_pending: int = 1_000,
        scheduler: EnrichmentScheduler | None = None,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._lock = asyncio.Lock()
        self.scheduler = scheduler or EnrichmentScheduler(
            resolver,
            store,
            self._lock,
            delay_seconds=delay_seconds,
            max_pending=max_pending,
        )

    async def start(self) -> None:
        """Start background enrichment and pick up titles left unresolved."""

        await self.scheduler.start()
        unresolved = self.load_catalog().unresolved_names()
        if unresolved:
            logger.info(
                "Resuming trailer enrichment for %d unresolved title(s)", len(unresolved)
            )
            self.scheduler.enqueue(unresolved)

    async def stop(self) -> None:
        await self.scheduler.stop()

    def load_catalog(self) -> Catalog:
        return self._store.load()

    async def update_list(self, names: Sequence[str]) -> Reconciliation:
        """Replace the catalog with ``names`` and queue trailer lookups.

        The new catalog is saved before this returns; lookups happen in the
        background.
        """

        async with self._lock:
            current = self._store.load()
            result = reconcile(current, names)
            self._store.save(result.catalog)

        logger.info(
            "Catalog updated: %d title(s), %d added, %d removed",
            len(result.catalog.movies),
            len(result.added),
            len(result.removed),
        )
        # Survivors that never resolved get another attempt.
        result.queued = self.scheduler.enqueue(result.unresolved)
        return result

    async def mark_watched(self, name: str) -> bool:
        """Flag ``name`` as watched; returns ``False`` if it is not in the catalog."""

        async with self._lock:
            catalog = self._store.load()
            entry = catalog.find(name)
            if entry is None:
                return False
            if not entry.watched:
                entry.watched = True
                self._store.save(catalog)
        return True

    async def resolve_one(self, title: str) -> TrailerRef | None:
        """Resolve a single title on demand without touching the catalog."""

        return await self._resolver.resolve(title)

    def random_trailer(self, rng: random.Random | None = None) -> CatalogEntry | None:
        """Pick a random unwatched title whose trailer is ready."""

        candidates = [
            entry for entry in self.load_catalog().ready() if not entry.watched
        ]
        if not candidates:
            return None
        return (rng or random).choice(candidates)
