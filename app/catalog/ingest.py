"""Turn parsed playlist entries into catalog tree mutations."""

from __future__ import annotations

from ..models import PlaylistEntry
from .tree import CatalogTree, GroupKind, GroupNode, LeafItem


def resolve_group(
    tree: CatalogTree,
    parent_id: int,
    name: str,
    *,
    kind: GroupKind = "folder",
    season: int | None = None,
) -> GroupNode:
    """Return the child folder called ``name``, creating it when missing."""

    existing = tree.find_child_group(parent_id, name)
    if existing is None:
        return tree.new_group(parent_id, name, kind=kind, season=season)
    if existing.kind != kind:
        raise ValueError(
            f"Cannot use {name!r} as a {kind}: it already exists as a {existing.kind}"
        )
    return existing


def resolve_folder(tree: CatalogTree, parent_id: int, label: str | None) -> GroupNode:
    return resolve_group(tree, parent_id, (label or "").strip() or tree.default_group_name)


def resolve_series(tree: CatalogTree, parent_id: int, title: str | None) -> GroupNode:
    name = (title or "").strip() or tree.default_series_name
    return resolve_group(tree, parent_id, name, kind="series")


def resolve_season(tree: CatalogTree, series_id: int, season: int | None) -> GroupNode:
    """Return the season folder of a series; missing or invalid numbers become 1."""

    number = max(1, season or 1)
    return resolve_group(
        tree, series_id, f"Season {number}", kind="season", season=number
    )


def add(tree: CatalogTree, entry: PlaylistEntry, parent_id: int | None = None) -> LeafItem:
    """Insert ``entry`` below ``parent_id`` (the root by default).

    Movies and live streams land in the folder named after the entry's group
    label and are skipped when that folder already lists the same URL; the
    existing item is returned instead. Series entries always append a new
    episode to ``<series>/Season N``.
    """

    parent = tree.group(tree.root_id if parent_id is None else parent_id)
    if parent.kind != "folder":
        raise ValueError(f"Entries can only be added to folders, not to a {parent.kind}")

    if entry.category == "Series":
        series = resolve_series(tree, parent.id, entry.series_name)
        season = resolve_season(tree, series.id, entry.season)
        return tree.new_item(
            season.id,
            kind="episode",
            name=entry.title,
            url=entry.url,
            group=entry.group,
            category=entry.category,
            thumbnail=entry.logo or "",
            year=entry.year,
            season=season.season,
            episode=entry.episode if entry.episode is not None else 1,
        )

    folder = resolve_folder(tree, parent.id, entry.group)
    for existing in tree.child_items(folder.id):
        if existing.url == entry.url:
            return existing
    return tree.new_item(
        folder.id,
        name=entry.title,
        url=entry.url,
        group=entry.group,
        category=entry.category,
        thumbnail=entry.logo or "",
        year=entry.year,
    )


def find_by_url(tree: CatalogTree, url: str, parent_id: int | None = None) -> LeafItem | None:
    """Depth-first lookup: child folders first, then the folder's own items."""

    node_id = tree.root_id if parent_id is None else parent_id
    for child_id in tree.child_group_ids(node_id):
        found = find_by_url(tree, url, child_id)
        if found is not None:
            return found
    for item in tree.child_items(node_id):
        if item.url == url:
            return item
    return None
