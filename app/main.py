"""Entry point for the FastAPI-powered catalog service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .models import (
    CatalogStats,
    CoverImage,
    FolderListing,
    LeafItemView,
    LoadRequest,
    SearchResponse,
)
from .services.catalog_service import CatalogService

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app: FastAPI


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    if not isinstance(getattr(fastapi_app.state, "catalog_service", None), CatalogService):
        fastapi_app.state.catalog_service = CatalogService(settings)
    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        fastapi_app.state.catalog_service.cancel_search()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Browsable catalog built from playlist entries",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_catalog_service(app: FastAPI) -> CatalogService:
    service = getattr(app.state, "catalog_service", None)
    if not isinstance(service, CatalogService):
        raise RuntimeError("Catalog service not initialised")
    return service


def register_routes(fastapi_app: FastAPI) -> None:
    # Catalog calls are CPU bound, so those handlers are plain functions that
    # FastAPI runs in its threadpool.
    def _dump(model: Any) -> Any:
        return model.model_dump(mode="json", by_alias=True)

    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.post("/catalog")
    def load_catalog(payload: LoadRequest) -> dict[str, Any]:
        service = get_catalog_service(fastapi_app)
        try:
            stats = service.load(
                payload.entries,
                annotations=payload.annotations,
                recently_added=payload.recently_added,
                strict=payload.strict,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _dump(stats)

    @fastapi_app.get("/catalog/stats")
    def catalog_stats() -> dict[str, Any]:
        stats: CatalogStats = get_catalog_service(fastapi_app).stats()
        return _dump(stats)

    @fastapi_app.get("/catalog")
    def root_listing() -> dict[str, Any]:
        listing: FolderListing = get_catalog_service(fastapi_app).listing()
        return _dump(listing)

    @fastapi_app.get("/catalog/nodes/{node_id}")
    def node_listing(node_id: int) -> dict[str, Any]:
        service = get_catalog_service(fastapi_app)
        try:
            listing = service.listing(node_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return _dump(listing)

    @fastapi_app.get("/catalog/nodes/{node_id}/covers")
    def node_covers(
        node_id: int, limit: int | None = Query(default=None, ge=1, le=50)
    ) -> list[dict[str, Any]]:
        service = get_catalog_service(fastapi_app)
        try:
            covers: tuple[CoverImage, ...] = service.covers(node_id, limit)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return [_dump(cover) for cover in covers]

    @fastapi_app.post("/catalog/nodes/{node_id}/covers/refresh")
    def refresh_node_covers(node_id: int) -> list[dict[str, Any]]:
        service = get_catalog_service(fastapi_app)
        try:
            covers = service.refresh_covers(node_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return [_dump(cover) for cover in covers]

    @fastapi_app.get("/catalog/items")
    def item_by_url(url: str = Query(min_length=1)) -> dict[str, Any]:
        item: LeafItemView | None = get_catalog_service(fastapi_app).find_by_url(url)
        if item is None:
            raise HTTPException(status_code=404, detail=f"No catalog item for {url}")
        return _dump(item)

    @fastapi_app.get("/catalog/series/{node_id}/seasons/{season}/episodes/{episode}")
    def series_episode(node_id: int, season: int, episode: int) -> dict[str, Any]:
        service = get_catalog_service(fastapi_app)
        try:
            item = service.episode(node_id, season, episode)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        if item is None:
            raise HTTPException(
                status_code=404,
                detail=f"Season {season} episode {episode} not found",
            )
        return _dump(item)

    @fastapi_app.get("/search")
    async def search(q: str = Query(default="")) -> dict[str, Any]:
        response: SearchResponse = await get_catalog_service(fastapi_app).search_async(q)
        return _dump(response)


app = create_app()
