"""Catalog tree construction and queries."""

from __future__ import annotations

from .covers import clear_all_cover_caches, clear_cover_cache, get_cover_images
from .finalize import finalize
from .ingest import add, find_by_url
from .search import SearchResults, get_episode, get_season, search_into
from .stats import collect_stats, total_count
from .tree import CatalogTree, GroupNode, LeafItem

__all__ = [
    "CatalogTree",
    "GroupNode",
    "LeafItem",
    "SearchResults",
    "add",
    "clear_all_cover_caches",
    "clear_cover_cache",
    "collect_stats",
    "finalize",
    "find_by_url",
    "get_cover_images",
    "get_episode",
    "get_season",
    "search_into",
    "total_count",
]
