"""Utility helpers for the StreamShelf service."""

from __future__ import annotations

import unicodedata
from datetime import datetime, timezone
from typing import Sequence

# Letters NFKD leaves untouched but which readers type without the accent.
_FOLD_TABLE = str.maketrans({"ı": "i", "ø": "o", "đ": "d", "ł": "l"})


def fold_text(value: str) -> str:
    """Return a case and accent insensitive form of ``value`` for matching."""

    value = unicodedata.normalize("NFKD", value.casefold())
    value = "".join(char for char in value if not unicodedata.combining(char))
    return value.translate(_FOLD_TABLE)


def tokenize_query(text: str) -> list[str]:
    """Split free text into folded search tokens, dropping empty parts."""

    return [part for part in fold_text(text or "").split() if part]


def has_match(tokens: Sequence[str], name: str) -> bool:
    """Return ``True`` when every token occurs somewhere in ``name``.

    An empty token list matches nothing so that a blank query never lists the
    whole catalog.
    """

    needles = [fold_text(token) for token in tokens if token and token.strip()]
    if not needles:
        return False
    haystack = fold_text(name or "")
    return all(needle in haystack for needle in needles)


def looks_like_live_stream(url: str) -> bool:
    """Guess whether ``url`` points at a live stream.

    Streams usually end in a bare channel id while files carry an extension
    in their last path segment.
    """

    index = url.rfind("/")
    if index < 0:
        return False
    return url.find(".", index) == -1


def as_utc(moment: datetime) -> datetime:
    """Return ``moment`` as an aware UTC datetime; naive values are UTC already."""

    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
