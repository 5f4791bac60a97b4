"""FastAPI application for the property listing site."""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response

from .core.config import settings
from .routers import properties as properties_router
from .services.property_store import build_property_store

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the property store once and load the first snapshot."""

    logger.info("Starting listings API (%s)", settings.app_env)
    store = build_property_store(settings)
    await store.refresh()
    app.state.property_store = store
    try:
        yield
    finally:
        await store.close()


app = FastAPI(title="Estate Listings API", version="0.1.0", lifespan=lifespan)

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(properties_router.router, prefix="/api/properties", tags=["properties"])
app.include_router(properties_router.admin_router, prefix="/api/admin/properties", tags=["admin"])


@app.get("/api/health", tags=["meta"])
async def health() -> dict[str, str]:
    """Simple liveness probe reporting the persistence mode."""

    store = getattr(app.state, "property_store", None)
    return {"status": "ok", "mode": store.mode if store is not None else "starting"}


@app.head("/api/health", tags=["meta"])
async def health_head() -> Response:
    """Allow HEAD for uptime monitors that only need the status code."""

    return Response(status_code=200)


@app.get("/robots.txt", response_class=PlainTextResponse, include_in_schema=False)
async def robots() -> PlainTextResponse:
    """Serve a minimal robots.txt to avoid 404 noise."""

    return PlainTextResponse("User-agent: *\nDisallow: /api/admin/")
