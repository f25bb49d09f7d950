from __future__ import annotations

import itertools

import pytest

from app.catalog import CatalogTree, add
from app.catalog.tree import LeafItem


def test_new_group_links_parent_and_child(tree: CatalogTree) -> None:
    folder = tree.new_group(tree.root_id, "Action")

    assert folder.parent_id == tree.root_id
    assert tree.parent(folder) is tree.root
    assert tree.child_groups(tree.root_id) == [folder]
    assert tree.child_items(folder.id) == []
    assert len(tree) == 2


def test_child_id_lists_are_copies(tree: CatalogTree) -> None:
    folder = tree.new_group(tree.root_id, "Action")

    ids = tree.child_group_ids(tree.root_id)
    ids.clear()

    assert tree.child_group_ids(tree.root_id) == [folder.id]


def test_unknown_ids_raise_key_error(tree: CatalogTree) -> None:
    with pytest.raises(KeyError, match="Unknown catalog folder"):
        tree.group(999)
    with pytest.raises(KeyError, match="Unknown catalog item"):
        tree.node(999)


def test_group_display_depends_on_kind(tree: CatalogTree) -> None:
    folder = tree.new_group(tree.root_id, "Drama")
    series = tree.new_group(folder.id, "Show", kind="series")
    season = tree.new_group(series.id, "Season 1", kind="season", season=1)

    assert (folder.title, folder.icon) == ("Group", "folder")
    assert (series.title, series.icon) == ("Tv Show", "tv")
    assert (season.title, season.icon) == ("Season", "tv")
    assert series.is_series and season.is_season


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("http://provider.tv/live/user/pass/1234", True),
        ("http://provider.tv/movie/user/pass/1234.mkv", False),
        ("no-slashes-at-all", False),
    ],
)
def test_possible_live_stream_uses_last_path_segment(url: str, expected: bool) -> None:
    item = LeafItem(id=1, name="Channel", url=url)

    assert item.possible_live_stream is expected
    assert item.title == ("Live Stream" if expected else "Movie")
    assert item.icon == ("podcast" if expected else "theater")


def test_possible_live_stream_is_computed_once() -> None:
    item = LeafItem(id=1, name="Channel", url="http://provider.tv/live/1234")

    assert item.possible_live_stream is True
    item.url = "http://provider.tv/movie/1234.mp4"
    assert item.possible_live_stream is True


def test_annotation_key_is_the_url() -> None:
    item = LeafItem(id=1, name="Movie", url="http://example.com/a.mkv")

    assert item.annotation_key == "http://example.com/a.mkv"


def test_pinned_folders_are_sticky() -> None:
    tree = CatalogTree(pinned_groups={"Favourites"})

    pinned = tree.new_group(tree.root_id, "Favourites")
    plain = tree.new_group(tree.root_id, "Other")

    assert pinned.sticky is True
    assert plain.sticky is False


def test_hidden_groups_hide_their_descendants(make_entry) -> None:
    tree = CatalogTree(hidden_groups={"Adult"})
    hidden_item = add(tree, make_entry("Secret", group="Adult"))
    visible_item = add(tree, make_entry("Public", group="Family"))

    assert tree.is_hidden(hidden_item.parent_id)
    assert tree.is_hidden(hidden_item.id)
    assert not tree.is_hidden(visible_item.id)


def test_link_item_keeps_home_folder(tree: CatalogTree, make_entry) -> None:
    item = add(tree, make_entry("Die Hard"))
    favorites = tree.new_group(tree.root_id, "Favorites")

    assert tree.link_item(favorites.id, item.id) is True
    assert tree.link_item(favorites.id, item.id) is False
    assert tree.child_items(favorites.id) == [item]
    assert tree.parent(item).name == "Action"


def test_reorder_rejects_foreign_ids(tree: CatalogTree) -> None:
    tree.new_group(tree.root_id, "A")

    with pytest.raises(ValueError, match="must match"):
        tree.reorder(tree.root_id, [12345], [])


def test_snapshot_describes_the_subtree(tree: CatalogTree, make_entry) -> None:
    add(tree, make_entry("Die Hard"))

    snapshot = tree.snapshot()

    assert snapshot["name"] == "Catalog"
    assert [group["name"] for group in snapshot["groups"]] == ["Action"]
    assert snapshot["groups"][0]["items"][0]["url"] == "http://example.com/die-hard.mkv"


def test_walk_yields_folders_in_pre_order(tree: CatalogTree) -> None:
    first = tree.new_group(tree.root_id, "First")
    nested = tree.new_group(first.id, "Nested")
    second = tree.new_group(tree.root_id, "Second")

    assert [group.id for group in tree.walk()] == [
        tree.root_id,
        first.id,
        nested.id,
        second.id,
    ]


def test_group_icon_override(tree: CatalogTree) -> None:
    section = tree.new_group(tree.root_id, "Favorites", icon="heart")
    plain = tree.new_group(tree.root_id, "Drama")

    assert section.icon == "heart"
    assert section.title == "Group"
    assert plain.icon == "folder"


def test_trees_can_share_an_id_source() -> None:
    ids = itertools.count(1)
    first = CatalogTree(ids=ids)
    first.new_group(first.root_id, "Drama")
    second = CatalogTree(ids=ids)
    group = second.new_group(second.root_id, "Drama")

    assert second.root_id not in first
    assert group.id not in first
