"""Trailer resolution across the YouTube and Piped search providers."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from ..models import TrailerRef
from .results import SearchResult, pick_preferred

logger = logging.getLogger(__name__)


class PrimarySearch(Protocol):
    async def search(self, query: str) -> Sequence[SearchResult]: ...


class FallbackSearch(Protocol):
    async def find_video_id(self, query: str) -> str | None: ...


def build_query_variants(title: str, *, year: int) -> list[str]:
    """Return search phrasings for ``title`` in the order they are tried."""

    title = title.strip()
    if not title:
        return []
    return [
        f"{title} official trailer",
        f"{title} trailer",
        f"{title} teaser",
        f"{title} movie trailer",
        f"{title} ({year}) trailer",
        title,
    ]


class TrailerResolver:
    """Turns a title into a YouTube trailer reference."""

    def __init__(
        self,
        primary: PrimarySearch,
        fallback: FallbackSearch | None,
        *,
        embed_base: str,
        year: int,
    ) -> None:
        self._primary = primary
        self._fallback = fallback
        self._embed_base = embed_base
        self._year = year

    async def resolve(self, title: str) -> TrailerRef | None:
        """Return the trailer for ``title`` or ``None`` when nothing is found."""

        variants = build_query_variants(title, year=self._year)
        if not variants:
            return None

        for query in variants:
            video_id = await self._search_primary(query)
            if video_id:
                logger.debug("Resolved %s via YouTube query %r", title, query)
                return TrailerRef.for_video(video_id, self._embed_base)

        fallback = self._fallback
        if fallback is None:
            return None

        for query in variants:
            video_id = await self._search_fallback(fallback, query)
            if video_id:
                logger.debug("Resolved %s via Piped query %r", title, query)
                return TrailerRef.for_video(video_id, self._embed_base)

        logger.info("No trailer found for %s", title)
        return None

    async def _search_primary(self, query: str) -> str | None:
        try:
            results = await self._primary.search(query)
        except Exception as exc:
            logger.warning("Primary search failed for %r: %s", query, exc)
            return None
        pick = pick_preferred(list(results))
        if pick is None:
            return None
        return pick.extract_id()

    async def _search_fallback(self, fallback: FallbackSearch, query: str) -> str | None:
        try:
            return await fallback.find_video_id(query)
        except Exception as exc:
            logger.warning("Fallback search failed for %r: %s", query, exc)
            return None
