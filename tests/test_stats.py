from __future__ import annotations

from app.catalog import CatalogTree, add, collect_stats
from app.catalog.stats import (
    live_stream_count,
    movie_count,
    total_count,
    tv_show_count,
    tv_show_episode_count,
    tv_show_season_count,
)


def _populate(tree: CatalogTree, make_entry) -> None:
    add(tree, make_entry("Die Hard", group="Action"))
    add(tree, make_entry("Heat", group="Action"))
    add(tree, make_entry("News 24", group="News", category="LiveStream", url="http://x/live/24"))
    drama = tree.new_group(tree.root_id, "Drama")
    add(tree, make_entry("Lost", category="Series", season=1, episode=1, url="http://x/l11"), drama.id)
    add(tree, make_entry("Lost", category="Series", season=1, episode=2, url="http://x/l12"), drama.id)
    add(tree, make_entry("Lost", category="Series", season=2, episode=1, url="http://x/l21"), drama.id)
    add(tree, make_entry("Fargo", category="Series", season=1, episode=1, url="http://x/f11"))


def test_total_count_sums_every_descendant(tree: CatalogTree, make_entry) -> None:
    _populate(tree, make_entry)

    assert total_count(tree, tree.root_id) == 7
    action = tree.find_child_group(tree.root_id, "Action")
    assert total_count(tree, action.id) == 2


def test_movie_count_skips_series_subtrees(tree: CatalogTree, make_entry) -> None:
    _populate(tree, make_entry)
    lost = tree.find_child_group(tree.find_child_group(tree.root_id, "Drama").id, "Lost")
    season = tree.child_groups(lost.id)[0]
    # A stray movie inside a season is not credited to the movie counter.
    tree.new_item(season.id, name="Bonus", url="http://x/bonus.mkv", category="Movie")

    assert movie_count(tree, tree.root_id) == 2


def test_live_stream_count(tree: CatalogTree, make_entry) -> None:
    _populate(tree, make_entry)

    assert live_stream_count(tree, tree.root_id) == 1


def test_tv_show_counts_recurse_through_plain_folders(tree: CatalogTree, make_entry) -> None:
    _populate(tree, make_entry)

    assert tv_show_count(tree, tree.root_id) == 2
    assert tv_show_season_count(tree, tree.root_id) == 3
    assert tv_show_episode_count(tree, tree.root_id) == 4


def test_counts_are_derived_from_current_shape(tree: CatalogTree, make_entry) -> None:
    _populate(tree, make_entry)
    action = tree.find_child_group(tree.root_id, "Action")

    tree.remove_group(tree.root_id, action.id)

    assert total_count(tree, tree.root_id) == 5
    assert movie_count(tree, tree.root_id) == 0


def test_collect_stats_bundles_counters(tree: CatalogTree, make_entry) -> None:
    _populate(tree, make_entry)

    stats = collect_stats(tree)

    assert stats.total_count == 7
    assert stats.movie_count == 2
    assert stats.live_stream_count == 1
    assert stats.tv_show_count == 2
    assert stats.tv_show_season_count == 3
    assert stats.tv_show_episode_count == 4
    assert stats.group_count == 4
