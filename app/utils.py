"""Utility helpers for the Trailer Deck service."""

from __future__ import annotations

import re
from typing import Iterable


VIDEO_ID_RE = re.compile(r"^[\w-]{6,}$")
WATCH_QUERY_RE = re.compile(r"v=([\w-]{6,})")


def clean_title(value: str) -> str:
    """Strip surrounding whitespace from a title."""

    return value.strip()


def title_key(value: str) -> str:
    """Return the case-insensitive identity of a title."""

    return clean_title(value).casefold()


def normalize_names(names: Iterable[str]) -> list[str]:
    """Trim, drop blanks and de-duplicate titles preserving first occurrence."""

    seen: set[str] = set()
    cleaned: list[str] = []
    for raw in names:
        if not isinstance(raw, str):
            continue
        name = clean_title(raw)
        if not name:
            continue
        key = name.casefold()
        if key in seen:
            continue
        seen.add(key)
        cleaned.append(name)
    return cleaned


def accept_video_id(value: object) -> str | None:
    """Return ``value`` when it looks like a usable YouTube identifier."""

    if not isinstance(value, str):
        return None
    value = value.strip()
    if VIDEO_ID_RE.match(value):
        return value
    return None


def video_id_from_watch_url(url: object) -> str | None:
    """Extract the ``v=<id>`` parameter from a watch URL or path."""

    if not isinstance(url, str):
        return None
    match = WATCH_QUERY_RE.search(url)
    if not match:
        return None
    return match.group(1)
