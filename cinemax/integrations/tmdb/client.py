from __future__ import annotations

import logging
from typing import Any

import requests

from cinemax.config import ProviderConfig
from cinemax.integrations.http import build_session, request_json

logger = logging.getLogger(__name__)


def parse_tmdb_movie_id(value: str | int) -> int:
    if isinstance(value, int):
        return value

    raw = str(value).strip()
    if not raw.isdigit():
        raise ValueError(f"Unable to parse TMDb movie id from: {value!r}")
    return int(raw)


def _results(payload: dict[str, Any]) -> list[dict[str, Any]]:
    items = payload.get("results")
    if not isinstance(items, list):
        return []
    return [i for i in items if isinstance(i, dict)]


class TmdbClient:
    """
    Thin TMDb v3 client.

    Auth is a bearer token header when configured, otherwise the `api_key`
    query parameter. Credentials are checked per call so the client can be
    built before keys are known.
    """

    provider_name = "TMDb"

    def __init__(self, config: ProviderConfig, *, session: requests.Session | None = None) -> None:
        self.config = config
        self.session = session or build_session()

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        api_key, bearer = self.config.require_tmdb_auth()
        query: dict[str, Any] = dict(params or {})
        headers: dict[str, str] = {}
        if bearer:
            headers["authorization"] = f"Bearer {bearer}"
        else:
            query["api_key"] = api_key
        url = f"{self.config.tmdb_base_url.rstrip('/')}/{path.lstrip('/')}"
        return request_json(
            self.session,
            url,
            params=query,
            headers=headers,
            timeout_seconds=self.config.http_timeout_seconds,
            provider=self.provider_name,
        )

    def search_payload(self, query: str = "") -> dict[str, Any]:
        """Raw search (or popular discover when `query` is blank) payload, as the proxy returns it."""

        query = (query or "").strip()
        if query:
            return self._get("/search/movie", {"query": query, "region": self.config.region})
        return self._get("/discover/movie", {"sort_by": "popularity.desc", "region": self.config.region})

    def search_movies(self, query: str) -> list[dict[str, Any]]:
        return _results(self.search_payload(query))

    def discover_popular(self) -> list[dict[str, Any]]:
        return _results(self.search_payload(""))

    def fetch_movie_details(self, movie_id: str | int, *, append_to_response: list[str] | None = None) -> dict[str, Any]:
        movie_id_int = parse_tmdb_movie_id(movie_id)
        if append_to_response is None:
            append_to_response = ["credits"]
        append = [p.strip() for p in append_to_response if p and p.strip()]
        params: dict[str, Any] = {}
        if append:
            params["append_to_response"] = ",".join(sorted(set(append)))
        return self._get(f"/movie/{movie_id_int}", params)

    def fetch_movie_videos(self, movie_id: str | int) -> list[dict[str, Any]]:
        movie_id_int = parse_tmdb_movie_id(movie_id)
        return _results(self._get(f"/movie/{movie_id_int}/videos"))
