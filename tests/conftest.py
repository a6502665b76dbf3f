"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

import pytest


# Ensure the application package is importable when running tests without an
# editable install; ``app`` sits at the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.models import Catalog, CatalogEntry, TrailerRef  # noqa: E402
from app.services.results import SearchResult, YouTubeVideo  # noqa: E402
from app.store import CatalogStore  # noqa: E402

EMBED_BASE = "https://www.youtube.com/embed"


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


@pytest.fixture
def store(tmp_path: Path) -> CatalogStore:
    return CatalogStore(tmp_path / "data" / "movies.json")


def trailer(video_id: str) -> TrailerRef:
    return TrailerRef.for_video(video_id, EMBED_BASE)


def catalog_of(*entries: CatalogEntry) -> Catalog:
    return Catalog(movies=list(entries))


class FakeYouTube:
    """Primary search stub answering from a query -> results mapping."""

    def __init__(self, responses: dict[str, Sequence[SearchResult]] | None = None) -> None:
        self.responses = dict(responses or {})
        self.queries: list[str] = []

    async def search(self, query: str) -> Sequence[SearchResult]:
        self.queries.append(query)
        return self.responses.get(query, [])


def video(video_id: str, title: str = "") -> YouTubeVideo:
    return YouTubeVideo(video_id=video_id, title=title)
