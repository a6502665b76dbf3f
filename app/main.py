"""Entry point for the FastAPI-powered trailer catalog."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError, field_validator

from .config import settings
from .services.catalog import CatalogService
from .services.piped import PipedSearchClient
from .services.trailers import TrailerResolver
from .services.youtube import YouTubeSearchClient
from .store import CatalogStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI


class UpdateListRequest(BaseModel):
    """Body accepted by ``POST /api/update_list``."""

    movies: list[str] = Field(min_length=1)

    @field_validator("movies")
    @classmethod
    def _require_names(cls, value: list[str]) -> list[str]:
        if not any(name.strip() for name in value):
            raise ValueError("At least one non-blank movie name is required")
        return value


class MarkWatchedRequest(BaseModel):
    """Body accepted by ``POST /api/mark_watched``."""

    name: str = Field(min_length=1)


@asynccontextmanager
async def lifespan(_: FastAPI):
    exit_stack = AsyncExitStack()
    piped_http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            timeout=httpx.Timeout(settings.piped_timeout_seconds, connect=5.0),
            follow_redirects=True,
        )
    )

    youtube = YouTubeSearchClient(max_results=settings.youtube_search_results)
    piped = PipedSearchClient(
        piped_http_client,
        settings.piped_instances,
        timeout=settings.piped_timeout_seconds,
        region=settings.search_region,
        language=settings.search_language,
    )
    resolver = TrailerResolver(
        youtube,
        piped,
        embed_base=settings.embed_base,
        year=settings.trailer_year,
    )
    catalog_service = CatalogService(
        CatalogStore(settings.catalog_path),
        resolver,
        delay_seconds=settings.enrichment_delay_seconds,
        max_pending=settings.enrichment_queue_size,
    )

    app.state.catalog_service = catalog_service
    logger.info("Serving catalog from %s", settings.catalog_path)
    await catalog_service.start()

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await catalog_service.stop()
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Movie list with automatically resolved YouTube trailers",
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


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid JSON body") from exc


def register_routes(fastapi_app: FastAPI) -> None:
    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/api/movies")
    async def list_movies() -> dict[str, Any]:
        service = get_catalog_service(fastapi_app)
        return service.load_catalog().to_summary()

    @fastapi_app.post("/api/update_list")
    async def update_list(request: Request) -> dict[str, Any]:
        service = get_catalog_service(fastapi_app)
        payload = await _read_json(request)
        try:
            body = UpdateListRequest.model_validate(payload)
        except ValidationError as exc:
            raise HTTPException(
                status_code=400, detail=exc.errors(include_url=False, include_context=False)
            ) from exc

        result = await service.update_list(body.movies)
        return {
            "movies": result.catalog.names(),
            "trailersReady": len(result.catalog.ready()),
            "total": len(result.catalog.movies),
            "queued": result.queued,
        }

    @fastapi_app.post("/api/mark_watched")
    async def mark_watched(request: Request) -> dict[str, bool]:
        service = get_catalog_service(fastapi_app)
        payload = await _read_json(request)
        try:
            body = MarkWatchedRequest.model_validate(payload)
        except ValidationError as exc:
            raise HTTPException(
                status_code=400, detail="Movie name is required"
            ) from exc

        if not await service.mark_watched(body.name):
            raise HTTPException(status_code=404, detail="Movie not found")
        return {"success": True}

    @fastapi_app.get("/api/trailer")
    async def trailer(q: str | None = None) -> dict[str, Any]:
        service = get_catalog_service(fastapi_app)
        if q is not None:
            if not q.strip():
                raise HTTPException(status_code=400, detail="Missing q")
            resolved = await service.resolve_one(q)
            if resolved is None:
                raise HTTPException(status_code=404, detail="No trailer found")
            return {"videoId": resolved.video_id, "embedUrl": resolved.embed_url}

        entry = service.random_trailer()
        if entry is None or entry.trailer is None:
            raise HTTPException(status_code=404, detail="No trailers available")
        return {
            "movie": entry.name,
            "videoId": entry.trailer.video_id,
            "embedUrl": entry.trailer.embed_url,
        }


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )
