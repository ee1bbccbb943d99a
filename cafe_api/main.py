"""
Cafe Review API — FastAPI application entry point.
Lifespan: create DB tables → verify connectivity → ensure the upload directory.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from cafe_api.config import settings
from cafe_api.database import check_db_connectivity, engine
from cafe_api.exceptions import CafeApiError, cafe_api_exception_handler
from cafe_api.models import Base
from cafe_api.routers import auth, cafes, health, photos, reviews
from cafe_api.services.photo_storage import PUBLIC_PREFIX

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.
    1. Create all tables (idempotent — IF NOT EXISTS).
    2. Verify DB connectivity.
    """
    logger.info("Starting Cafe Review API (env=%s)", settings.app_env)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created/verified.")

    if not await check_db_connectivity():
        logger.error("Database connectivity check FAILED at startup.")
    else:
        logger.info("Database connectivity verified.")

    yield

    logger.info("Shutting down Cafe Review API.")
    await engine.dispose()


app = FastAPI(
    title="Cafe Review API",
    description="List cafes, upload photos and roll multi-dimensional reviews into per-cafe averages.",
    version=health.VERSION,
    lifespan=lifespan,
)

# ── CORS ─────────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────────────────────

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(cafes.router)
app.include_router(reviews.router)
app.include_router(photos.router)

# Uploaded photos
Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
app.mount(PUBLIC_PREFIX, StaticFiles(directory=settings.upload_dir), name="uploads")


# ── Exception handlers ───────────────────────────────────────────────────────

app.add_exception_handler(CafeApiError, cafe_api_exception_handler)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a machine-readable error for any unhandled exception."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "code": "INTERNAL_ERROR"},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cafe_api.main:app", host="0.0.0.0", port=8000)
