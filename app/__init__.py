"""StreamShelf catalog application package."""

from __future__ import annotations

from importlib import import_module
from typing import Any

# Imported on first access so that ``app.catalog`` stays usable without FastAPI.
_LAZY_EXPORTS = {
    "app": "app.main",
    "create_app": "app.main",
    "CatalogService": "app.services.catalog_service",
}

__all__ = sorted(_LAZY_EXPORTS)


def __getattr__(name: str) -> Any:
    module_name = _LAZY_EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module 'app' has no attribute {name}")
    return getattr(import_module(module_name), name)
