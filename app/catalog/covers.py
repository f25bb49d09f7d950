"""Randomised, memoized cover-image samples per folder."""

from __future__ import annotations

import random
from typing import Sequence, TypeVar

from ..config import DEFAULT_COVER_LIMIT
from ..models import CoverImage
from .tree import CatalogTree, LeafItem

T = TypeVar("T")

_default_rng = random.Random()


def draw_without_replacement(
    population: Sequence[T], count: int, rng: random.Random
) -> list[T]:
    """Pick up to ``count`` distinct elements uniformly at random.

    A pool of not-yet-drawn indices shrinks by one on every pick (swap with
    the last slot, then pop), so the loop always ends after ``count`` steps.
    """

    pool = list(range(len(population)))
    picked: list[T] = []
    for _ in range(min(count, len(pool))):
        index = rng.randrange(len(pool))
        pool[index], pool[-1] = pool[-1], pool[index]
        picked.append(population[pool.pop()])
    return picked


def _cover_for(item: LeafItem) -> tuple[int, CoverImage]:
    return item.id, CoverImage(name=item.name, thumbnail=item.thumbnail, hot=item.hot)


def _sample(
    tree: CatalogTree, node_id: int, limit: int, rng: random.Random
) -> tuple[tuple[int, CoverImage], ...]:
    cached = tree.cover_cache.get(node_id, {}).get(limit)
    if cached is not None:
        return cached

    picked = [
        _cover_for(item)
        for item in draw_without_replacement(tree.child_items(node_id), limit, rng)
    ]
    if len(picked) < limit:
        seen = {item_id for item_id, _ in picked}
        pooled: list[tuple[int, CoverImage]] = []
        for child_id in tree.child_group_ids(node_id):
            for entry in _sample(tree, child_id, limit, rng):
                if entry[0] not in seen:
                    seen.add(entry[0])
                    pooled.append(entry)
        picked.extend(draw_without_replacement(pooled, limit - len(picked), rng))

    sample = tuple(picked)
    tree.cover_cache.setdefault(node_id, {})[limit] = sample
    return sample


def get_cover_images(
    tree: CatalogTree,
    node_id: int | None = None,
    limit: int = DEFAULT_COVER_LIMIT,
    rng: random.Random | None = None,
) -> tuple[CoverImage, ...]:
    """Return up to ``limit`` covers for a folder.

    The folder's own items are drawn first; remaining slots are filled from
    the (already capped) samples of its child folders. The result is kept
    until :func:`clear_cover_cache` is called for the folder.
    """

    node_id = tree.root_id if node_id is None else node_id
    tree.group(node_id)
    if limit < 1:
        return ()
    return tuple(cover for _, cover in _sample(tree, node_id, limit, rng or _default_rng))


def clear_cover_cache(tree: CatalogTree, node_id: int) -> None:
    """Forget the samples of ``node_id`` and of every folder enclosing it."""

    tree.cover_cache.pop(node_id, None)
    for ancestor in tree.ancestors(node_id):
        tree.cover_cache.pop(ancestor.id, None)


def clear_all_cover_caches(tree: CatalogTree) -> None:
    tree.cover_cache.clear()
