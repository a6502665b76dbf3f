"""Credential-free YouTube search backed by yt-dlp."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError, ExtractorError

from .results import YouTubeVideo

logger = logging.getLogger(__name__)

YDL_OPTIONS: dict[str, Any] = {
    "quiet": True,
    "no_warnings": True,
    "skip_download": True,
    "extract_flat": "in_playlist",
    "noplaylist": True,
}


class YouTubeSearchClient:
    """Runs ``ytsearchN:`` queries through yt-dlp in a worker thread."""

    def __init__(
        self,
        max_results: int = 10,
        ydl_factory: Callable[[dict[str, Any]], Any] = YoutubeDL,
    ) -> None:
        self._max_results = max_results
        self._ydl_factory = ydl_factory

    async def search(self, query: str) -> list[YouTubeVideo]:
        """Return the videos YouTube lists for ``query``, best first."""

        query = query.strip()
        if not query:
            return []
        try:
            info = await asyncio.to_thread(self._extract, query)
        except (DownloadError, ExtractorError) as exc:
            logger.warning("YouTube search failed for %s: %s", query, exc)
            return []
        return self._parse_entries(info)

    def _extract(self, query: str) -> dict[str, Any] | None:
        with self._ydl_factory(dict(YDL_OPTIONS)) as ydl:
            return ydl.extract_info(
                f"ytsearch{self._max_results}:{query}", download=False
            )

    @staticmethod
    def _parse_entries(info: Any) -> list[YouTubeVideo]:
        if not isinstance(info, dict):
            return []
        entries = info.get("entries") or []
        videos: list[YouTubeVideo] = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            video_id = entry.get("id")
            if isinstance(video_id, int):
                video_id = str(video_id)
            if not isinstance(video_id, str) or not video_id:
                continue
            title = entry.get("title")
            videos.append(
                YouTubeVideo(video_id=video_id, title=title if isinstance(title, str) else "")
            )
        return videos
