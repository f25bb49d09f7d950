"""One-shot prune and sort pass run after ingestion."""

from __future__ import annotations

from ..utils import as_utc
from .stats import total_count
from .tree import CatalogNode, CatalogTree


def sort_key(node: CatalogNode) -> tuple[bool, bool, float, str, str]:
    """Canonical sibling order.

    Sticky nodes first, then timestamped before untimed, newest first, then
    by name (case-insensitive, with the exact spelling as tie-break).
    """

    timestamp = as_utc(node.added_at).timestamp() if node.added_at is not None else 0.0
    return (
        not node.sticky,
        node.added_at is None,
        -timestamp,
        node.name.casefold(),
        node.name,
    )


def finalize(tree: CatalogTree, node_id: int | None = None) -> None:
    """Drop empty folders bottom-up and sort every tier below ``node_id``.

    Running it again on a finalized tree changes nothing.
    """

    node_id = tree.root_id if node_id is None else node_id
    for child_id in tree.child_group_ids(node_id):
        finalize(tree, child_id)
        if total_count(tree, child_id) == 0:
            tree.remove_group(node_id, child_id)

    groups = sorted(tree.child_groups(node_id), key=sort_key)
    items = sorted(tree.child_items(node_id), key=sort_key)
    tree.reorder(node_id, [group.id for group in groups], [item.id for item in items])
