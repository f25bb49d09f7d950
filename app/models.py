"""Pydantic models describing playlist entries and catalog payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

EntryCategory = Literal["Movie", "Series", "LiveStream"]

_CATEGORY_ALIASES: dict[str, EntryCategory] = {
    "movie": "Movie",
    "movies": "Movie",
    "series": "Series",
    "tvshow": "Series",
    "tv": "Series",
    "livestream": "LiveStream",
    "live": "LiveStream",
}


class PlaylistEntry(BaseModel):
    """A single parsed playlist record handed over by the playlist parser."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    title: str = Field(min_length=1, validation_alias=AliasChoices("title", "name"))
    url: str = Field(min_length=1)
    group: str = Field(
        default="",
        validation_alias=AliasChoices("group", "groupLabel", "group_label", "group-title"),
    )
    logo: str | None = Field(
        default=None, validation_alias=AliasChoices("logo", "tvg-logo", "tvgLogo")
    )
    category: EntryCategory = "Movie"
    year: int | None = None
    season: int | None = None
    episode: int | None = None
    series_title: str | None = Field(
        default=None,
        validation_alias=AliasChoices("series_title", "seriesTitle", "series"),
    )

    @field_validator("group", mode="before")
    @classmethod
    def _blank_group(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("category", mode="before")
    @classmethod
    def _normalise_category(cls, value: object) -> object:
        """Accept the category in any casing and a few common spellings."""

        if isinstance(value, str):
            key = value.replace("_", "").replace("-", "").replace(" ", "").lower()
            return _CATEGORY_ALIASES.get(key, value)
        return value

    @property
    def series_name(self) -> str:
        """Return the title episodes of this entry are grouped under."""

        return (self.series_title or self.title or "").strip()


class Annotation(BaseModel):
    """Per-user annotation attached to a leaf item through its URL."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    favorite: bool = False
    watched: bool = False
    progress: float = Field(default=0.0, ge=0.0, le=100.0)
    last_watched_at: datetime | None = None


class CoverImage(BaseModel):
    """Minimal projection of a leaf item used for folder thumbnails."""

    model_config = ConfigDict(frozen=True)

    name: str
    thumbnail: str = ""
    hot: bool = False


class CatalogStats(BaseModel):
    """Recursive counters describing a loaded catalog."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    total_count: int = 0
    group_count: int = 0
    movie_count: int = 0
    live_stream_count: int = 0
    tv_show_count: int = 0
    tv_show_season_count: int = 0
    tv_show_episode_count: int = 0


class LoadRequest(BaseModel):
    """Payload accepted by the catalog load endpoint."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    # Entries stay raw so malformed ones can be skipped individually.
    entries: list[dict[str, Any]] = Field(default_factory=list)
    annotations: dict[str, Annotation] = Field(default_factory=dict)
    recently_added: dict[str, datetime] = Field(default_factory=dict)
    strict: bool | None = None


class LeafItemView(BaseModel):
    """Leaf item as exposed to listing consumers."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    id: int
    kind: Literal["item", "episode"]
    name: str
    url: str
    group: str
    category: EntryCategory
    title: str
    icon: str
    thumbnail: str = ""
    sticky: bool = False
    hot: bool = False
    added_at: datetime | None = None
    year: int | None = None
    season: int | None = None
    episode: int | None = None
    possible_live_stream: bool = False
    annotation: Annotation | None = None


class GroupView(BaseModel):
    """Folder summary used when listing a parent folder."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    id: int
    kind: Literal["folder", "series", "season"]
    name: str
    title: str
    icon: str
    sticky: bool = False
    season: int | None = None
    total_count: int = 0
    cover_images: list[CoverImage] = Field(default_factory=list)


class FolderListing(BaseModel):
    """A folder together with its visible children."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    folder: GroupView
    parent_id: int | None = None
    groups: list[GroupView] = Field(default_factory=list)
    items: list[LeafItemView] = Field(default_factory=list)


class SearchResponse(BaseModel):
    """Outcome of a token search across the content sections."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    query: str
    completed: bool
    groups: list[GroupView] = Field(default_factory=list)
    items: list[LeafItemView] = Field(default_factory=list)
