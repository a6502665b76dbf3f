"""Application configuration models."""

from __future__ import annotations

from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Iterable, Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_PIPED_INSTANCES: tuple[str, ...] = (
    "https://piped.video",
    "https://piped.lunar.icu",
    "https://piped.projectsegfau.lt",
    "https://piped.privacydev.net",
)


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="Trailer Deck", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    catalog_path: Path = Field(
        default=Path("./data/movies.json"), alias="CATALOG_PATH"
    )
    embed_base_url: HttpUrl = Field(
        default="https://www.youtube.com/embed", alias="EMBED_BASE_URL"
    )
    trailer_year: int = Field(
        default_factory=lambda: date.today().year,
        alias="TRAILER_YEAR",
        ge=1888,
        le=2200,
    )

    youtube_search_results: int = Field(
        default=10, alias="YOUTUBE_SEARCH_RESULTS", ge=1, le=50
    )
    piped_instances: Annotated[tuple[str, ...], NoDecode] = Field(
        default=DEFAULT_PIPED_INSTANCES, alias="PIPED_INSTANCES"
    )
    piped_timeout_seconds: float = Field(
        default=8.0, alias="PIPED_TIMEOUT", gt=0, le=120
    )
    search_region: str = Field(default="US", alias="SEARCH_REGION")
    search_language: str = Field(default="en", alias="SEARCH_LANGUAGE")

    enrichment_delay_seconds: float = Field(
        default=1.0, alias="ENRICHMENT_DELAY_SECONDS", ge=0, le=60
    )
    enrichment_queue_size: int = Field(
        default=1_000, alias="ENRICHMENT_QUEUE_SIZE", ge=1, le=100_000
    )

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("piped_instances", mode="before")
    @classmethod
    def _parse_piped_instances(cls, value: object) -> tuple[str, ...]:
        """Normalise Piped instance lists from environment values."""

        if value is None:
            return DEFAULT_PIPED_INSTANCES
        if isinstance(value, str):
            raw_values = [part.strip() for part in value.split(",")]
        elif isinstance(value, Iterable):
            raw_values = [str(part).strip() for part in value]
        else:
            raise TypeError("PIPED_INSTANCES must be a string or iterable of strings")

        cleaned: list[str] = []
        for entry in raw_values:
            entry = entry.rstrip("/")
            if not entry:
                continue
            if not entry.startswith(("http://", "https://")):
                raise ValueError("Piped instances must be absolute http(s) URLs")
            if entry not in cleaned:
                cleaned.append(entry)
        if not cleaned:
            return DEFAULT_PIPED_INSTANCES
        return tuple(cleaned)

    @property
    def embed_base(self) -> str:
        """Return the embed URL prefix without a trailing slash."""

        return str(self.embed_base_url).rstrip("/")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
