"""Trailer resolution across the provider tiers."""

from __future__ import annotations

import pytest

from app.services.trailers import TrailerResolver, build_query_variants

from conftest import EMBED_BASE, FakeYouTube, trailer, video


class FakePiped:
    def __init__(self, answers: dict[str, str] | None = None) -> None:
        self.answers = dict(answers or {})
        self.queries: list[str] = []

    async def find_video_id(self, query: str) -> str | None:
        self.queries.append(query)
        return self.answers.get(query)


class ExplodingSearch:
    def __init__(self) -> None:
        self.calls = 0

    async def search(self, query: str):
        self.calls += 1
        raise RuntimeError("search backend unavailable")


def build_resolver(primary, fallback=None) -> TrailerResolver:
    return TrailerResolver(primary, fallback, embed_base=EMBED_BASE, year=2025)


def test_query_variants_escalate_towards_the_bare_title() -> None:
    assert build_query_variants("Dune", year=2025) == [
        "Dune official trailer",
        "Dune trailer",
        "Dune teaser",
        "Dune movie trailer",
        "Dune (2025) trailer",
        "Dune",
    ]


def test_query_variants_for_blank_title_are_empty() -> None:
    assert build_query_variants("   ", year=2025) == []


@pytest.mark.anyio
async def test_first_usable_variant_short_circuits() -> None:
    youtube = FakeYouTube(
        {
            "Dune official trailer": [video("Way9Dexny3w", "Dune | Official Trailer")],
            "Dune": [video("bareresult1", "Dune")],
        }
    )
    piped = FakePiped({"Dune official trailer": "pipedresult"})

    result = await build_resolver(youtube, piped).resolve("Dune")

    assert result == trailer("Way9Dexny3w")
    assert youtube.queries == ["Dune official trailer"]
    assert piped.queries == []


@pytest.mark.anyio
async def test_later_variants_are_tried_in_order() -> None:
    youtube = FakeYouTube({"Dune": [video("bareresult1", "Dune")]})

    result = await build_resolver(youtube).resolve("Dune")

    assert result == trailer("bareresult1")
    assert youtube.queries == build_query_variants("Dune", year=2025)
    assert youtube.queries.index("Dune official trailer") < youtube.queries.index("Dune")


@pytest.mark.anyio
async def test_prefers_results_titled_as_trailers() -> None:
    youtube = FakeYouTube(
        {
            "Dune official trailer": [
                video("clip000001", "Dune clip"),
                video("trailer0001", "Dune Official Trailer"),
            ]
        }
    )

    result = await build_resolver(youtube).resolve("Dune")

    assert result is not None
    assert result.video_id == "trailer0001"
    assert result.embed_url == f"{EMBED_BASE}/trailer0001"


@pytest.mark.anyio
async def test_falls_back_to_first_result_without_trailer_titles() -> None:
    youtube = FakeYouTube(
        {"Heat official trailer": [video("firstclip1", "Heat clip"), video("second0001", "Heat scene")]}
    )

    result = await build_resolver(youtube).resolve("Heat")

    assert result == trailer("firstclip1")


@pytest.mark.anyio
async def test_short_identifier_moves_on_to_the_next_variant() -> None:
    youtube = FakeYouTube(
        {
            "Heat official trailer": [video("abc", "Heat trailer")],
            "Heat trailer": [video("heat123456", "Heat trailer")],
        }
    )

    result = await build_resolver(youtube).resolve("Heat")

    assert result == trailer("heat123456")


@pytest.mark.anyio
async def test_fallback_used_only_after_primary_exhausts_all_variants() -> None:
    youtube = FakeYouTube()
    piped = FakePiped({"Heat trailer": "pipedheat01"})

    result = await build_resolver(youtube, piped).resolve("Heat")

    assert result == trailer("pipedheat01")
    assert youtube.queries == build_query_variants("Heat", year=2025)
    assert piped.queries == ["Heat official trailer", "Heat trailer"]


@pytest.mark.anyio
async def test_not_found_when_every_provider_is_empty() -> None:
    youtube = FakeYouTube()
    piped = FakePiped()

    result = await build_resolver(youtube, piped).resolve("Nonexistent Film")

    assert result is None
    assert len(piped.queries) == 6


@pytest.mark.anyio
async def test_provider_errors_are_treated_as_no_result() -> None:
    primary = ExplodingSearch()
    piped = FakePiped({"Alien teaser": "alienteaser"})

    result = await build_resolver(primary, piped).resolve("Alien")

    assert result == trailer("alienteaser")
    assert primary.calls == 6


@pytest.mark.anyio
async def test_blank_title_skips_providers() -> None:
    youtube = FakeYouTube()

    assert await build_resolver(youtube).resolve("  ") is None
    assert youtube.queries == []


class ExplodingFallback:
    def __init__(self) -> None:
        self.calls = 0

    async def find_video_id(self, query: str) -> str | None:
        self.calls += 1
        raise RuntimeError("every instance is down")


@pytest.mark.anyio
async def test_fallback_errors_end_in_not_found() -> None:
    fallback = ExplodingFallback()

    result = await build_resolver(FakeYouTube(), fallback).resolve("Heat")

    assert result is None
    assert fallback.calls == 6


@pytest.mark.anyio
async def test_without_fallback_primary_exhaustion_is_not_found() -> None:
    youtube = FakeYouTube()

    assert await build_resolver(youtube, None).resolve("Heat") is None
    assert len(youtube.queries) == 6
