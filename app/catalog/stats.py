"""Recursive, read-only counters over the current tree shape.

Nothing here is cached; every call walks the subtree again.
"""

from __future__ import annotations

from ..models import CatalogStats
from .tree import CatalogTree


def total_count(tree: CatalogTree, node_id: int) -> int:
    return sum(
        total_count(tree, child) for child in tree.child_group_ids(node_id)
    ) + len(tree.child_item_ids(node_id))


def live_stream_count(tree: CatalogTree, node_id: int) -> int:
    local = sum(1 for item in tree.child_items(node_id) if item.category == "LiveStream")
    return local + sum(
        live_stream_count(tree, child) for child in tree.child_group_ids(node_id)
    )


def movie_count(tree: CatalogTree, node_id: int) -> int:
    """Count movies, ignoring anything below series and season folders."""

    total = sum(1 for item in tree.child_items(node_id) if item.category == "Movie")
    for child in tree.child_groups(node_id):
        if child.kind == "folder":
            total += movie_count(tree, child.id)
    return total


def tv_show_count(tree: CatalogTree, node_id: int) -> int:
    total = 0
    for child in tree.child_groups(node_id):
        if child.kind == "series":
            total += 1
        elif child.kind == "folder":
            total += tv_show_count(tree, child.id)
    return total


def series_season_count(tree: CatalogTree, series_id: int) -> int:
    return sum(1 for child in tree.child_groups(series_id) if child.kind == "season")


def series_episode_count(tree: CatalogTree, series_id: int) -> int:
    return len(tree.child_item_ids(series_id)) + sum(
        len(tree.child_item_ids(child.id))
        for child in tree.child_groups(series_id)
        if child.kind == "season"
    )


def tv_show_season_count(tree: CatalogTree, node_id: int) -> int:
    total = 0
    for child in tree.child_groups(node_id):
        if child.kind == "series":
            total += series_season_count(tree, child.id)
        elif child.kind == "folder":
            total += tv_show_season_count(tree, child.id)
    return total


def tv_show_episode_count(tree: CatalogTree, node_id: int) -> int:
    total = 0
    for child in tree.child_groups(node_id):
        if child.kind == "series":
            total += series_episode_count(tree, child.id)
        elif child.kind == "folder":
            total += tv_show_episode_count(tree, child.id)
    return total


def collect_stats(tree: CatalogTree, node_id: int | None = None) -> CatalogStats:
    """Return every counter for ``node_id`` (the root by default)."""

    node_id = tree.root_id if node_id is None else node_id
    return CatalogStats(
        total_count=total_count(tree, node_id),
        group_count=len(tree.child_group_ids(node_id)),
        movie_count=movie_count(tree, node_id),
        live_stream_count=live_stream_count(tree, node_id),
        tv_show_count=tv_show_count(tree, node_id),
        tv_show_season_count=tv_show_season_count(tree, node_id),
        tv_show_episode_count=tv_show_episode_count(tree, node_id),
    )
