"""Pytest configuration and shared catalog fixtures."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import pytest


# Ensure the application package is importable when running tests without an
# editable install. This mirrors the expected runtime layout where ``app`` sits
# at the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


from app.catalog import CatalogTree  # noqa: E402
from app.models import PlaylistEntry  # noqa: E402


@pytest.fixture()
def tree() -> CatalogTree:
    return CatalogTree()


@pytest.fixture()
def make_entry() -> Callable[..., PlaylistEntry]:
    """Build playlist entries with sensible defaults for the fields under test."""

    def _make(title: str, **overrides: Any) -> PlaylistEntry:
        data: dict[str, Any] = {
            "title": title,
            "url": f"http://example.com/{title.lower().replace(' ', '-')}.mkv",
            "group": "Action",
            "category": "Movie",
        }
        data.update(overrides)
        return PlaylistEntry.model_validate(data)

    return _make
