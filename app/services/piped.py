"""Client for the federated Piped search API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

import httpx

from .results import SearchResult, parse_piped_item, pick_preferred

logger = logging.getLogger(__name__)


class PipedSearchClient:
    """Searches a fixed set of interchangeable Piped instances."""

    _SEARCH_PATH = "/api/v1/search"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        instances: Sequence[str],
        *,
        timeout: float = 8.0,
        region: str = "US",
        language: str = "en",
    ) -> None:
        self._client = http_client
        self._instances = tuple(instance.rstrip("/") for instance in instances)
        self._timeout = timeout
        self._region = region
        self._language = language

    @property
    def instances(self) -> tuple[str, ...]:
        return self._instances

    async def find_video_id(self, query: str) -> str | None:
        """Query every instance at once and return the first usable id."""

        if not self._instances:
            return None
        results = await asyncio.gather(
            *(self.find_on_instance(instance, query) for instance in self._instances),
            return_exceptions=True,
        )
        for instance, result in zip(self._instances, results):
            if isinstance(result, BaseException):
                logger.warning(
                    "Piped search on %s failed for %s: %s", instance, query, result
                )
                continue
            if result is not None:
                return result
        return None

    async def find_on_instance(self, instance: str, query: str) -> str | None:
        """Return the preferred video id a single instance offers for ``query``."""

        items = await self.search(instance, query)
        pick = pick_preferred(items)
        if pick is None:
            return None
        return pick.extract_id()

    async def search(self, instance: str, query: str) -> list[SearchResult]:
        """Return the usable video items from one instance."""

        params = {
            "q": query,
            "region": self._region,
            "hl": self._language,
        }
        url = f"{instance}{self._SEARCH_PATH}"
        try:
            response = await asyncio.wait_for(
                self._client.get(url, params=params, timeout=self._timeout),
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except asyncio.TimeoutError:
            logger.warning("Piped search on %s timed out for %s", instance, query)
            return []
        except httpx.HTTPError as exc:
            logger.warning("Piped search on %s failed for %s: %s", instance, query, exc)
            return []
        except ValueError as exc:
            logger.warning(
                "Piped search on %s returned malformed JSON for %s: %s",
                instance,
                query,
                exc,
            )
            return []

        return self._parse_items(payload)

    @staticmethod
    def _parse_items(payload: Any) -> list[SearchResult]:
        if isinstance(payload, list):
            raw_items = payload
        elif isinstance(payload, dict) and isinstance(payload.get("items"), list):
            raw_items = payload["items"]
        else:
            return []
        parsed: list[SearchResult] = []
        for item in raw_items:
            result = parse_piped_item(item)
            if result is not None:
                parsed.append(result)
        return parsed
