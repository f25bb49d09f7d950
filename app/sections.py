"""Top level catalog sections created for every load."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .models import EntryCategory

SectionKey = Literal[
    "recent", "watched", "favorites", "movies", "tv-shows", "live-streams"
]


@dataclass(frozen=True)
class SectionDefinition:
    """Describes a fixed root folder of the catalog."""

    key: SectionKey
    title: str
    icon: str
    category: EntryCategory | None = None


CATALOG_SECTIONS: tuple[SectionDefinition, ...] = (
    SectionDefinition(key="recent", title="Recently", icon="time-past"),
    SectionDefinition(key="watched", title="Watched", icon="check"),
    SectionDefinition(key="favorites", title="Favorites", icon="heart"),
    SectionDefinition(key="movies", title="Movies", icon="film", category="Movie"),
    SectionDefinition(key="tv-shows", title="Tv Shows", icon="tv", category="Series"),
    SectionDefinition(
        key="live-streams", title="Live Streams", icon="livestream", category="LiveStream"
    ),
)

CONTENT_SECTIONS: tuple[SectionDefinition, ...] = tuple(
    definition for definition in CATALOG_SECTIONS if definition.category is not None
)

SECTION_FOR_CATEGORY: dict[EntryCategory, SectionKey] = {
    definition.category: definition.key
    for definition in CONTENT_SECTIONS
    if definition.category is not None
}
