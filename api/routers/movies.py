"""
Passthrough proxy to the movie-data provider.

Exists only so the provider key stays server-side; the provider JSON is
returned unchanged.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.deps import TmdbClientDep
from cinemax.errors import ParseError, UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["movies"])


class ProxyError(BaseModel):
    error: str


class MoviePage(BaseModel):
    """Documents the TMDb list shape; extra provider fields pass through untouched."""

    model_config = {"extra": "allow"}

    page: int | None = None
    results: list[dict[str, Any]] = []
    total_pages: int | None = None
    total_results: int | None = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ProxyError(error=message).model_dump())


@router.get(
    "/movies",
    response_model=MoviePage,
    responses={500: {"model": ProxyError}, 502: {"model": ProxyError}},
)
def proxy_movies(
    tmdb: TmdbClientDep,
    query: str = Query(default="", description="Free-text title search; blank lists popular movies."),
) -> JSONResponse:
    """Forward to TMDb search (or popular discover) and return its JSON as-is."""
    try:
        payload = tmdb.search_payload(query)
    except ParseError as exc:
        logger.warning("TMDb returned an unreadable body: %s", exc)
        return _error(500, "Internal server error")
    except UpstreamError as exc:
        logger.warning("TMDb proxy failed for query=%r: %s", query, exc)
        return _error(exc.status_code or 500, "Failed to fetch movies")
    except Exception:
        logger.exception("TMDb proxy error for query=%r", query)
        return _error(500, "Internal server error")
    return JSONResponse(status_code=200, content=payload)
