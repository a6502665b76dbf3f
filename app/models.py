"""Pydantic models describing the persisted catalog document."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .utils import accept_video_id, clean_title, title_key


class TitleKey(str):
    """Case-insensitive identity of a catalog title.

    Only used for lookups and equality; the display name keeps its casing.
    """

    __slots__ = ()

    def __new__(cls, name: str) -> "TitleKey":
        return super().__new__(cls, title_key(name))


class TrailerRef(BaseModel):
    """A resolved YouTube trailer."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    video_id: str = Field(alias="videoId", min_length=1)
    embed_url: str = Field(alias="embedUrl", min_length=1)

    @classmethod
    def for_video(cls, video_id: str, embed_base: str) -> "TrailerRef":
        """Build a reference whose embed URL is derived from ``video_id``."""

        accepted = accept_video_id(video_id)
        if accepted is None:
            raise ValueError(f"Invalid video identifier: {video_id!r}")
        return cls(
            video_id=accepted,
            embed_url=f"{embed_base.rstrip('/')}/{accepted}",
        )


class CatalogEntry(BaseModel):
    """A single title in the catalog."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    trailer: TrailerRef | None = None
    watched: bool = False

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = clean_title(value)
        if not value:
            raise ValueError("Catalog entries require a non-blank name")
        return value

    @property
    def key(self) -> TitleKey:
        return TitleKey(self.name)

    @property
    def has_trailer(self) -> bool:
        return self.trailer is not None

    def to_summary(self) -> dict[str, object]:
        """Return the API representation of the entry."""

        return {
            "name": self.name,
            "hasTrailer": self.trailer is not None,
            "embedUrl": self.trailer.embed_url if self.trailer else None,
            "videoId": self.trailer.video_id if self.trailer else None,
            "watched": self.watched,
        }


class Catalog(BaseModel):
    """Ordered collection of titles, unique by case-insensitive name."""

    movies: list[CatalogEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def _drop_duplicate_titles(self) -> "Catalog":
        """Keep the first entry for every case-insensitive title."""

        seen: set[TitleKey] = set()
        unique: list[CatalogEntry] = []
        for entry in self.movies:
            if entry.key in seen:
                continue
            seen.add(entry.key)
            unique.append(entry)
        if len(unique) != len(self.movies):
            self.movies = unique
        return self

    def find(self, name: str) -> CatalogEntry | None:
        """Return the entry matching ``name`` case-insensitively."""

        key = TitleKey(name)
        for entry in self.movies:
            if entry.key == key:
                return entry
        return None

    def index(self) -> dict[TitleKey, CatalogEntry]:
        return {entry.key: entry for entry in self.movies}

    def names(self) -> list[str]:
        return [entry.name for entry in self.movies]

    def ready(self) -> list[CatalogEntry]:
        """Return entries that already have a trailer."""

        return [entry for entry in self.movies if entry.trailer is not None]

    def unresolved_names(self) -> list[str]:
        return [entry.name for entry in self.movies if entry.trailer is None]

    def to_document(self) -> dict[str, object]:
        """Return the JSON document persisted by the catalog store."""

        return self.model_dump(mode="json", by_alias=True)

    def to_summary(self) -> dict[str, object]:
        return {
            "movies": [entry.to_summary() for entry in self.movies],
            "total": len(self.movies),
            "trailersReady": len(self.ready()),
        }
