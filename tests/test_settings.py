"""Configuration settings behaviour tests."""

from __future__ import annotations

import pytest

from app.config import DEFAULT_COVER_LIMIT, DEFAULT_GROUP_NAME, Settings


def test_defaults_match_catalog_constants() -> None:
    settings = Settings(_env_file=None)

    assert settings.default_group_name == DEFAULT_GROUP_NAME
    assert settings.default_series_name == "unnamed tvshow"
    assert settings.cover_image_limit == DEFAULT_COVER_LIMIT
    assert settings.recent_window_days == 31
    assert settings.pinned_groups == ()
    assert settings.strict_entries is False


def test_group_lists_parse_comma_separated_values() -> None:
    """Pinned and hidden groups should be split, trimmed and de-duplicated."""

    settings = Settings(
        _env_file=None,
        PINNED_GROUPS=" Sports , News,,Sports",
        HIDDEN_GROUPS=["Adult", " Adult "],
    )

    assert settings.pinned_groups == ("Sports", "News")
    assert settings.hidden_groups == ("Adult",)


def test_group_lists_are_read_from_the_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PINNED_GROUPS", "Kids,Docs")

    settings = Settings(_env_file=None)

    assert settings.pinned_groups == ("Kids", "Docs")


def test_group_lists_reject_other_types() -> None:
    with pytest.raises(ValueError, match="PINNED_GROUPS must be a string"):
        Settings(_env_file=None, PINNED_GROUPS=42)


def test_cover_limit_is_bounded() -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, COVER_IMAGE_LIMIT=0)
