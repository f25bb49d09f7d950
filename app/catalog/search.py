"""Cancellable token search and direct series lookups."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, Sequence

from ..utils import has_match
from .tree import CatalogTree, GroupNode, LeafItem

Matcher = Callable[[Sequence[str], str], bool]


@dataclass
class SearchResults:
    """Caller-owned, folder-shaped accumulator for search hits."""

    groups: list[GroupNode] = field(default_factory=list)
    items: list[LeafItem] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.groups) + len(self.items)


def search_into(
    tree: CatalogTree,
    results: SearchResults,
    tokens: Sequence[str],
    cancel: threading.Event | None = None,
    node_id: int | None = None,
    matcher: Matcher = has_match,
) -> bool:
    """Append every match below ``node_id`` to ``results``.

    ``cancel`` is polled before each child folder and before the folder's
    item batch; once set the walk stops and whatever was already appended is
    left in place. Series are matched on their own name only and appended
    whole. Returns ``False`` when the walk was cut short.
    """

    if not tokens:
        return True
    start = tree.root_id if node_id is None else node_id
    return _search(tree, start, results, tokens, cancel, matcher)


def _search(
    tree: CatalogTree,
    node_id: int,
    results: SearchResults,
    tokens: Sequence[str],
    cancel: threading.Event | None,
    matcher: Matcher,
) -> bool:
    for group in tree.child_groups(node_id):
        if cancel is not None and cancel.is_set():
            return False
        if group.kind == "series":
            if matcher(tokens, group.name):
                results.groups.append(group)
        elif not _search(tree, group.id, results, tokens, cancel, matcher):
            return False

    if cancel is not None and cancel.is_set():
        return False
    results.items.extend(
        item for item in tree.child_items(node_id) if matcher(tokens, item.name)
    )
    return True


def get_season(tree: CatalogTree, series_id: int, season: int) -> GroupNode | None:
    for child in tree.child_groups(series_id):
        if child.kind == "season" and child.season == season:
            return child
    return None


def get_season_episode(tree: CatalogTree, season_id: int, episode: int) -> LeafItem | None:
    for item in tree.child_items(season_id):
        if item.kind == "episode" and item.episode == episode:
            return item
    return None


def get_episode(
    tree: CatalogTree, series_id: int, season: int, episode: int
) -> LeafItem | None:
    season_node = get_season(tree, series_id, season)
    if season_node is None:
        return None
    return get_season_episode(tree, season_node.id, episode)
