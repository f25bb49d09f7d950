"""High level orchestration of catalog loads, listings and searches."""

from __future__ import annotations

import asyncio
import itertools
import logging
import random
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, NamedTuple

from pydantic import ValidationError

from ..catalog import (
    CatalogTree,
    GroupNode,
    LeafItem,
    SearchResults,
    add,
    clear_cover_cache,
    finalize,
    find_by_url,
    get_cover_images,
    get_episode,
    search_into,
    total_count,
)
from ..catalog.ingest import resolve_folder
from ..catalog.stats import (
    live_stream_count,
    movie_count,
    tv_show_count,
    tv_show_episode_count,
    tv_show_season_count,
)
from ..config import Settings
from ..models import (
    Annotation,
    CatalogStats,
    CoverImage,
    FolderListing,
    GroupView,
    LeafItemView,
    PlaylistEntry,
    SearchResponse,
)
from ..sections import CATALOG_SECTIONS, CONTENT_SECTIONS, SECTION_FOR_CATEGORY
from ..utils import as_utc, tokenize_query

logger = logging.getLogger(__name__)


class _LoadedCatalog(NamedTuple):
    """The tree of one load with the lookups that belong to it."""

    tree: CatalogTree
    sections: dict[str, int]
    annotations: dict[str, Annotation]


class CatalogService:
    """Owns the catalog tree of the current load and answers queries on it.

    The tree is rebuilt from scratch by :meth:`load` and swapped in as a
    whole. Queries work on the tree that was current when they started, and
    node ids are never reused across loads.
    """

    def __init__(self, settings: Settings, *, rng: random.Random | None = None):
        self._settings = settings
        self._rng = rng or random.Random()
        self._search_lock = threading.Lock()
        self._search_cancel: threading.Event | None = None
        self._ids = itertools.count(1)
        self._current = _LoadedCatalog(*self._new_tree(), {})
        self.loaded = False

    @property
    def tree(self) -> CatalogTree:
        return self._current.tree

    def section_id(self, key: str) -> int:
        try:
            return self._current.sections[key]
        except KeyError:
            raise KeyError(f"Unknown catalog section {key}") from None

    def load(
        self,
        entries: Iterable[PlaylistEntry | Mapping[str, Any]],
        *,
        annotations: Mapping[str, Annotation] | None = None,
        recently_added: Mapping[str, datetime] | None = None,
        strict: bool | None = None,
        now: datetime | None = None,
    ) -> CatalogStats:
        """Discard the current tree and build a new one from ``entries``.

        Malformed entries are skipped with a warning, or abort the load with
        ``ValueError`` when running strict.
        """

        strict = self._settings.strict_entries if strict is None else strict
        self.cancel_search()
        tree, sections = self._new_tree()

        by_url: dict[str, LeafItem] = {}
        skipped = 0
        for position, raw in enumerate(entries):
            try:
                entry = (
                    raw
                    if isinstance(raw, PlaylistEntry)
                    else PlaylistEntry.model_validate(raw)
                )
            except ValidationError as exc:
                if strict:
                    raise ValueError(f"Invalid playlist entry at position {position}") from exc
                logger.warning("Skipping invalid playlist entry at position %s: %s", position, exc)
                skipped += 1
                continue
            section = sections[SECTION_FOR_CATEGORY[entry.category]]
            if entry.category == "Series":
                # Series are grouped by their playlist group before the show title.
                section = resolve_folder(tree, section, entry.group).id
            item = add(tree, entry, section)
            by_url.setdefault(item.url, item)

        annotations = dict(annotations or {})
        for url, annotation in annotations.items():
            item = by_url.get(url)
            if item is None:
                continue
            if annotation.favorite:
                tree.link_item(sections["favorites"], item.id)
            if annotation.watched:
                tree.link_item(sections["watched"], item.id)

        now = now or datetime.now(timezone.utc)
        window = timedelta(days=self._settings.recent_window_days)
        for url, added_at in (recently_added or {}).items():
            item = by_url.get(url)
            if item is None or _age(now, added_at) > window:
                continue
            item.added_at = added_at
            tree.link_item(sections["recent"], item.id)

        # Sections keep their fixed order and stay even when empty.
        for section_id in sections.values():
            finalize(tree, section_id)

        self._current = _LoadedCatalog(tree, sections, annotations)
        self.loaded = True
        stats = self.stats()
        logger.info(
            "Catalog loaded: %s items, %s movies, %s shows, %s live streams (%s skipped)",
            stats.total_count,
            stats.movie_count,
            stats.tv_show_count,
            stats.live_stream_count,
            skipped,
        )
        return stats

    def stats(self) -> CatalogStats:
        tree, sections, _ = self._current
        movies = sections["movies"]
        shows = sections["tv-shows"]
        streams = sections["live-streams"]
        return CatalogStats(
            total_count=sum(
                total_count(tree, sections[definition.key])
                for definition in CONTENT_SECTIONS
            ),
            group_count=_group_count(tree, sections),
            movie_count=movie_count(tree, movies),
            live_stream_count=live_stream_count(tree, streams),
            tv_show_count=tv_show_count(tree, shows),
            tv_show_season_count=tv_show_season_count(tree, shows),
            tv_show_episode_count=tv_show_episode_count(tree, shows),
        )

    def group_count(self) -> int:
        """Number of distinct group names across the content sections."""

        tree, sections, _ = self._current
        return _group_count(tree, sections)

    def listing(self, node_id: int | None = None) -> FolderListing:
        """Describe a folder and its visible children."""

        tree, _, annotations = self._current
        folder = tree.group(tree.root_id if node_id is None else node_id)
        if tree.is_hidden(folder.id):
            raise KeyError(f"Catalog folder {folder.id} is hidden")
        return FolderListing(
            folder=self._group_view(tree, folder),
            parent_id=folder.parent_id,
            groups=[
                self._group_view(tree, group)
                for group in tree.child_groups(folder.id)
                if not tree.is_hidden(group.id)
            ],
            items=[
                self._item_view(item, annotations)
                for item in tree.child_items(folder.id)
                if not tree.is_hidden(item.id)
            ],
        )

    def find_by_url(self, url: str) -> LeafItemView | None:
        tree, sections, annotations = self._current
        for definition in CONTENT_SECTIONS:
            item = find_by_url(tree, url, sections[definition.key])
            if item is not None:
                return self._item_view(item, annotations)
        return None

    def episode(self, series_id: int, season: int, episode: int) -> LeafItemView | None:
        tree, _, annotations = self._current
        series = tree.group(series_id)
        if series.kind != "series":
            raise ValueError(f"Catalog folder {series_id} is not a series")
        item = get_episode(tree, series.id, season, episode)
        return self._item_view(item, annotations) if item is not None else None

    def covers(self, node_id: int, limit: int | None = None) -> tuple[CoverImage, ...]:
        return self._covers(self._current.tree, node_id, limit)

    def refresh_covers(self, node_id: int) -> tuple[CoverImage, ...]:
        tree = self._current.tree
        clear_cover_cache(tree, node_id)
        return self._covers(tree, node_id)

    def begin_search(self) -> threading.Event:
        """Cancel the in-flight search, if any, and hand out a fresh token."""

        with self._search_lock:
            if self._search_cancel is not None:
                self._search_cancel.set()
            self._search_cancel = threading.Event()
            return self._search_cancel

    def cancel_search(self) -> None:
        with self._search_lock:
            if self._search_cancel is not None:
                self._search_cancel.set()
                self._search_cancel = None

    def search(
        self, text: str, cancel: threading.Event | None = None
    ) -> tuple[bool, SearchResults]:
        """Search the content sections; returns ``(completed, results)``."""

        tree, sections, _ = self._current
        return self._search(tree, sections, text, cancel or self.begin_search())

    async def search_async(self, text: str) -> SearchResponse:
        """Run :meth:`search` in a worker thread, superseding older queries.

        Views are built from the tree the search ran on, even when a load
        replaced it in the meantime.
        """

        cancel = self.begin_search()
        tree, sections, annotations = self._current
        completed, results = await asyncio.to_thread(
            self._search, tree, sections, text, cancel
        )
        return SearchResponse(
            query=text,
            completed=completed,
            groups=[
                self._group_view(tree, group)
                for group in results.groups
                if not tree.is_hidden(group.id)
            ],
            items=[
                self._item_view(item, annotations)
                for item in results.items
                if not tree.is_hidden(item.id)
            ],
        )

    def _search(
        self,
        tree: CatalogTree,
        sections: Mapping[str, int],
        text: str,
        cancel: threading.Event,
    ) -> tuple[bool, SearchResults]:
        tokens = tokenize_query(text)
        results = SearchResults()
        for definition in CONTENT_SECTIONS:
            completed = search_into(tree, results, tokens, cancel, sections[definition.key])
            if not completed:
                logger.info("Search for %r cancelled after %s hits", text, len(results))
                return False, results
        return True, results

    def _covers(
        self, tree: CatalogTree, node_id: int, limit: int | None = None
    ) -> tuple[CoverImage, ...]:
        return get_cover_images(
            tree,
            node_id,
            self._settings.cover_image_limit if limit is None else limit,
            self._rng,
        )

    def _new_tree(self) -> tuple[CatalogTree, dict[str, int]]:
        tree = CatalogTree(
            pinned_groups=self._settings.pinned_groups,
            hidden_groups=self._settings.hidden_groups,
            default_group_name=self._settings.default_group_name,
            default_series_name=self._settings.default_series_name,
            ids=self._ids,
        )
        sections = {
            definition.key: tree.new_group(
                tree.root_id, definition.title, icon=definition.icon
            ).id
            for definition in CATALOG_SECTIONS
        }
        return tree, sections

    def _group_view(self, tree: CatalogTree, group: GroupNode) -> GroupView:
        return GroupView(
            id=group.id,
            kind=group.kind,
            name=group.name,
            title=group.title,
            icon=group.icon,
            sticky=group.sticky,
            season=group.season,
            total_count=total_count(tree, group.id),
            cover_images=list(self._covers(tree, group.id)),
        )

    def _item_view(self, item: LeafItem, annotations: Mapping[str, Annotation]) -> LeafItemView:
        return LeafItemView(
            id=item.id,
            kind=item.kind,
            name=item.name,
            url=item.url,
            group=item.group,
            category=item.category,
            title=item.title,
            icon=item.icon,
            thumbnail=item.thumbnail,
            sticky=item.sticky,
            hot=item.hot,
            added_at=item.added_at,
            year=item.year,
            season=item.season,
            episode=item.episode,
            possible_live_stream=item.possible_live_stream,
            annotation=annotations.get(item.annotation_key),
        )


def _age(now: datetime, moment: datetime) -> timedelta:
    return as_utc(now) - as_utc(moment)


def _group_count(tree: CatalogTree, sections: Mapping[str, int]) -> int:
    names: set[str] = set()
    for definition in CONTENT_SECTIONS:
        names.update(group.name for group in tree.child_groups(sections[definition.key]))
    return len(names)
