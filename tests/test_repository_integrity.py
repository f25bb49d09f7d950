"""Repository-level integrity checks."""

from __future__ import annotations

import re
from pathlib import Path

CONFLICT_PATTERN = re.compile(r"^(<<<<<<<|=======|>>>>>>>)", re.MULTILINE)
IGNORED_PARTS = {".git", "__pycache__", ".mypy_cache", ".pytest_cache", ".venv"}
REPO_ROOT = Path(__file__).resolve().parents[1]


def _tracked_files(pattern: str) -> list[Path]:
    return [
        path
        for path in REPO_ROOT.rglob(pattern)
        if path.is_file() and not any(part in IGNORED_PARTS for part in path.parts)
    ]


def test_repository_has_no_merge_conflict_markers() -> None:
    offending = [
        path.relative_to(REPO_ROOT)
        for path in _tracked_files("*")
        if CONFLICT_PATTERN.search(path.read_text(encoding="utf-8", errors="ignore"))
    ]

    assert not offending, f"Conflict markers found in: {', '.join(map(str, offending))}"


def test_python_sources_compile() -> None:
    """Every module should at least be syntactically valid."""

    for path in _tracked_files("*.py"):
        compile(path.read_text(encoding="utf-8"), str(path), "exec")
