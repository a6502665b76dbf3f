"""Search result shapes returned by the trailer providers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Union

from ..utils import accept_video_id, video_id_from_watch_url


@dataclass(slots=True, frozen=True)
class YouTubeVideo:
    """A video entry from a YouTube search."""

    video_id: str
    title: str = ""

    def extract_id(self) -> str | None:
        return accept_video_id(self.video_id)


@dataclass(slots=True, frozen=True)
class PipedStream:
    """A Piped search item that links to ``/watch?v=<id>``."""

    url: str
    title: str = ""

    def extract_id(self) -> str | None:
        return video_id_from_watch_url(self.url)


@dataclass(slots=True, frozen=True)
class PipedVideo:
    """A Piped search item that carries the identifier directly."""

    id: str
    title: str = ""

    def extract_id(self) -> str | None:
        return accept_video_id(self.id)


SearchResult = Union[YouTubeVideo, PipedStream, PipedVideo]


def mentions_trailer(result: SearchResult) -> bool:
    return "trailer" in result.title.lower()


def pick_preferred(results: Sequence[SearchResult]) -> SearchResult | None:
    """Return the first result titled as a trailer, else the first result."""

    if not results:
        return None
    for result in results:
        if mentions_trailer(result):
            return result
    return results[0]


def parse_piped_item(item: Any) -> SearchResult | None:
    """Convert a raw Piped search item into a typed result.

    Only ``video``/``stream`` items carrying a URL or id are usable.
    """

    if not isinstance(item, dict):
        return None
    if item.get("type") not in {"video", "stream"}:
        return None
    title = item.get("title")
    title = title if isinstance(title, str) else ""
    url = item.get("url")
    if isinstance(url, str) and url:
        if video_id_from_watch_url(url) is not None or not isinstance(
            item.get("id"), str
        ):
            return PipedStream(url=url, title=title)
    raw_id = item.get("id")
    if isinstance(raw_id, str) and raw_id:
        return PipedVideo(id=raw_id, title=title)
    return None
