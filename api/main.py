"""
Cinemax API.

Serves `GET /api/movies?query=...`, a TMDb passthrough that keeps the key on the
server, plus liveness routes.
"""
from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routers import movies

logger = logging.getLogger(__name__)


def cors_origins_from_env() -> list[str]:
    """Comma-separated `CORS_ALLOW_ORIGINS`, e.g. `http://localhost:5173,https://cinemax.example`."""
    raw = os.getenv("CORS_ALLOW_ORIGINS", "")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def create_app() -> FastAPI:
    application = FastAPI(title="Cinemax API", description="Movie discovery proxy for TMDb", version="0.1.0")

    # Wildcard origin when none are configured; browsers reject "*" with credentials.
    origins = cors_origins_from_env()
    application.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials=bool(origins),
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )
    application.include_router(movies.router, prefix="/api")

    @application.get("/")
    def root():
        return {"status": "ok", "service": "cinemax"}

    @application.get("/health")
    def health():
        return {"status": "healthy"}

    logger.debug("Cinemax API configured (CORS origins: %s)", origins or "*")
    return application


app = create_app()
