"""In-memory catalog tree stored as a node arena.

Every node lives in an id keyed table owned by :class:`CatalogTree`. Parents
own their children through two ordered id lists (child folders and leaf
items); a node only keeps the id of its enclosing folder, which is used for
policy lookups such as hidden-group checks and cover cache invalidation.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from datetime import datetime
from functools import cached_property
from typing import Any, Collection, Iterator, Literal

from ..config import DEFAULT_GROUP_NAME, DEFAULT_SERIES_NAME
from ..models import CoverImage, EntryCategory
from ..utils import looks_like_live_stream

GroupKind = Literal["folder", "series", "season"]
LeafKind = Literal["item", "episode"]

_GROUP_DISPLAY: dict[GroupKind, tuple[str, str]] = {
    "folder": ("Group", "folder"),
    "series": ("Tv Show", "tv"),
    "season": ("Season", "tv"),
}


@dataclass(eq=False, kw_only=True)
class CatalogNode:
    """Fields shared by folders and leaf items."""

    id: int
    name: str
    thumbnail: str = ""
    sticky: bool = False
    added_at: datetime | None = None
    parent_id: int | None = None

    @property
    def hot(self) -> bool:
        """Recently added nodes carry a timestamp."""

        return self.added_at is not None


@dataclass(eq=False, kw_only=True)
class GroupNode(CatalogNode):
    """A folder; ``kind`` tells plain folders, series and seasons apart."""

    kind: GroupKind = "folder"
    season: int | None = None
    icon_override: str | None = None

    @property
    def title(self) -> str:
        return _GROUP_DISPLAY[self.kind][0]

    @property
    def icon(self) -> str:
        return self.icon_override or _GROUP_DISPLAY[self.kind][1]

    @property
    def is_series(self) -> bool:
        return self.kind == "series"

    @property
    def is_season(self) -> bool:
        return self.kind == "season"


@dataclass(eq=False, kw_only=True)
class LeafItem(CatalogNode):
    """A playable entry; episodes additionally carry season/episode numbers."""

    url: str
    kind: LeafKind = "item"
    group: str = ""
    category: EntryCategory = "Movie"
    year: int | None = None
    season: int | None = None
    episode: int | None = None

    @cached_property
    def possible_live_stream(self) -> bool:
        return looks_like_live_stream(self.url)

    @property
    def annotation_key(self) -> str:
        """Key of this item in the external per-user annotation store."""

        return self.url

    @property
    def title(self) -> str:
        if self.kind == "episode":
            return "Tv Shows"
        return "Live Stream" if self.possible_live_stream else "Movie"

    @property
    def icon(self) -> str:
        if self.kind == "episode":
            return "tv"
        return "podcast" if self.possible_live_stream else "theater"


class CatalogTree:
    """Arena owning every folder and leaf item of one loaded catalog."""

    def __init__(
        self,
        *,
        root_name: str = "Catalog",
        pinned_groups: Collection[str] = (),
        hidden_groups: Collection[str] = (),
        default_group_name: str = DEFAULT_GROUP_NAME,
        default_series_name: str = DEFAULT_SERIES_NAME,
        ids: Iterator[int] | None = None,
    ):
        self.pinned_groups = frozenset(pinned_groups)
        self.hidden_groups = frozenset(hidden_groups)
        self.default_group_name = default_group_name
        self.default_series_name = default_series_name
        # node id -> cover limit -> sampled (leaf id, cover) pairs
        self.cover_cache: dict[int, dict[int, tuple[tuple[int, CoverImage], ...]]] = {}
        # Shared id sources keep ids unique across successive trees.
        self._ids = ids if ids is not None else itertools.count(1)
        self._group_nodes: dict[int, GroupNode] = {}
        self._leaf_nodes: dict[int, LeafItem] = {}
        self._child_groups: dict[int, list[int]] = {}
        self._child_items: dict[int, list[int]] = {}
        self._root = self._register_group(GroupNode(id=next(self._ids), name=root_name))

    def __len__(self) -> int:
        return len(self._group_nodes) + len(self._leaf_nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._group_nodes or node_id in self._leaf_nodes

    @property
    def root(self) -> GroupNode:
        return self._root

    @property
    def root_id(self) -> int:
        return self._root.id

    # -- lookups ---------------------------------------------------------

    def group(self, node_id: int) -> GroupNode:
        try:
            return self._group_nodes[node_id]
        except KeyError:
            raise KeyError(f"Unknown catalog folder {node_id}") from None

    def item(self, node_id: int) -> LeafItem:
        try:
            return self._leaf_nodes[node_id]
        except KeyError:
            raise KeyError(f"Unknown catalog item {node_id}") from None

    def node(self, node_id: int) -> GroupNode | LeafItem:
        if node_id in self._group_nodes:
            return self._group_nodes[node_id]
        return self.item(node_id)

    def parent(self, node: CatalogNode) -> GroupNode | None:
        if node.parent_id is None:
            return None
        return self._group_nodes.get(node.parent_id)

    def ancestors(self, node_id: int) -> Iterator[GroupNode]:
        """Yield enclosing folders from the direct parent up to the root."""

        parent = self.parent(self.node(node_id))
        while parent is not None:
            yield parent
            parent = self.parent(parent)

    def child_group_ids(self, node_id: int) -> list[int]:
        self.group(node_id)
        return list(self._child_groups[node_id])

    def child_item_ids(self, node_id: int) -> list[int]:
        self.group(node_id)
        return list(self._child_items[node_id])

    def child_groups(self, node_id: int) -> list[GroupNode]:
        return [self._group_nodes[child] for child in self.child_group_ids(node_id)]

    def child_items(self, node_id: int) -> list[LeafItem]:
        return [self._leaf_nodes[child] for child in self.child_item_ids(node_id)]

    def find_child_group(self, node_id: int, name: str) -> GroupNode | None:
        for child in self.child_groups(node_id):
            if child.name == name:
                return child
        return None

    def walk(self, node_id: int | None = None) -> Iterator[GroupNode]:
        """Yield ``node_id`` and every folder below it in pre-order."""

        start = self.group(self.root_id if node_id is None else node_id)
        yield start
        for child_id in self._child_groups[start.id]:
            yield from self.walk(child_id)

    def is_hidden(self, node_id: int) -> bool:
        """Return whether the node or any enclosing folder is hidden."""

        if not self.hidden_groups:
            return False
        group = self._group_nodes.get(node_id)
        if group is not None and group.name in self.hidden_groups:
            return True
        return any(parent.name in self.hidden_groups for parent in self.ancestors(node_id))

    # -- structural mutation ---------------------------------------------

    def new_group(
        self,
        parent_id: int,
        name: str,
        *,
        kind: GroupKind = "folder",
        season: int | None = None,
        icon: str | None = None,
    ) -> GroupNode:
        """Create a folder under ``parent_id`` without checking for siblings."""

        self.group(parent_id)
        group = GroupNode(
            id=next(self._ids),
            name=name,
            kind=kind,
            season=season,
            icon_override=icon,
            parent_id=parent_id,
            sticky=kind == "folder" and name in self.pinned_groups,
        )
        self._register_group(group)
        self._child_groups[parent_id].append(group.id)
        return group

    def new_item(self, parent_id: int, **fields: Any) -> LeafItem:
        """Create a leaf item and append it to ``parent_id``."""

        self.group(parent_id)
        item = LeafItem(id=next(self._ids), parent_id=parent_id, **fields)
        self._leaf_nodes[item.id] = item
        self._child_items[parent_id].append(item.id)
        return item

    def link_item(self, folder_id: int, item_id: int) -> bool:
        """List an existing leaf in another folder without moving it.

        Returns ``False`` when the folder already lists the item.
        """

        self.item(item_id)
        items = self._child_items[self.group(folder_id).id]
        if item_id in items:
            return False
        items.append(item_id)
        return True

    def remove_group(self, parent_id: int, group_id: int) -> None:
        """Detach ``group_id`` from its parent and drop its subtree."""

        siblings = self._child_groups[self.group(parent_id).id]
        siblings.remove(group_id)
        self._drop_subtree(group_id)

    def reorder(self, node_id: int, group_ids: list[int], item_ids: list[int]) -> None:
        """Replace the child order of ``node_id`` with a permutation of it."""

        self.group(node_id)
        if sorted(group_ids) != sorted(self._child_groups[node_id]):
            raise ValueError("Reordered folders must match the existing children")
        if sorted(item_ids) != sorted(self._child_items[node_id]):
            raise ValueError("Reordered items must match the existing children")
        self._child_groups[node_id] = list(group_ids)
        self._child_items[node_id] = list(item_ids)

    # -- serialisation ---------------------------------------------------

    def snapshot(self, node_id: int | None = None) -> dict[str, Any]:
        """Return a nested plain-dict view of the subtree for diffing."""

        group = self.group(self.root_id if node_id is None else node_id)
        return {
            "name": group.name,
            "kind": group.kind,
            "season": group.season,
            "sticky": group.sticky,
            "addedAt": group.added_at.isoformat() if group.added_at else None,
            "groups": [self.snapshot(child) for child in self._child_groups[group.id]],
            "items": [
                {
                    "name": item.name,
                    "url": item.url,
                    "kind": item.kind,
                    "category": item.category,
                    "sticky": item.sticky,
                    "addedAt": item.added_at.isoformat() if item.added_at else None,
                    "season": item.season,
                    "episode": item.episode,
                }
                for item in self.child_items(group.id)
            ],
        }

    def _register_group(self, group: GroupNode) -> GroupNode:
        self._group_nodes[group.id] = group
        self._child_groups[group.id] = []
        self._child_items[group.id] = []
        return group

    def _drop_subtree(self, group_id: int) -> None:
        for child_id in self._child_groups.pop(group_id):
            self._drop_subtree(child_id)
        for item_id in self._child_items.pop(group_id):
            item = self._leaf_nodes.get(item_id)
            if item is None or item.parent_id != group_id:
                continue
            # Items linked into another folder outlive their home folder.
            if not any(item_id in items for items in self._child_items.values()):
                del self._leaf_nodes[item_id]
        self.cover_cache.pop(group_id, None)
        del self._group_nodes[group_id]
