"""
Provider strategies: one async surface over two differently shaped upstreams.

- `TokenSearchStrategy` (TMDb): a single query call returns fully populated matches.
- `TitleThenDetailStrategy` (OMDb): a first call resolves IMDb ids, then one detail
  call per id is fanned out concurrently. Failed items are logged and dropped; only
  a batch where every item fails raises `BatchFetchError`.

The HTTP clients are synchronous (`requests`), so each call runs in a worker
thread via `asyncio.to_thread`; the event loop only ever awaits.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping

import requests

from cinemax.config import Provider, ProviderConfig
from cinemax.errors import BatchFetchError, NotFoundError
from cinemax.integrations.omdb.client import OmdbClient
from cinemax.integrations.tmdb.client import TmdbClient
from cinemax.models import Movie
from cinemax.normalize import normalize_omdb_movie, normalize_tmdb_movie

logger = logging.getLogger(__name__)

# Shown when there is no search term and the provider has no "popular" endpoint.
POPULAR_MOVIE_TITLES = (
    "The Dark Knight",
    "Inception",
    "Pulp Fiction",
    "The Godfather",
    "Avengers: Endgame",
    "Spider-Man: No Way Home",
    "Top Gun: Maverick",
    "Dune",
    "Interstellar",
    "The Matrix",
    "Forrest Gump",
    "The Shawshank Redemption",
    "Joker",
    "Black Panther",
    "Wonder Woman",
    "Iron Man",
)


class ProviderStrategy(ABC):
    """Async movie source returning canonical movies in upstream order."""

    provider: Provider

    @abstractmethod
    async def search(self, query: str) -> list[Movie]:
        """Movies matching a free-text query."""

    @abstractmethod
    async def popular(self) -> list[Movie]:
        """Default listing shown when there is no query."""

    @abstractmethod
    async def details(self, movie_id: str) -> Movie:
        """Fully populated movie for a details view."""

    async def fetch(self, term: str) -> list[Movie]:
        term = (term or "").strip()
        if term:
            return await self.search(term)
        return await self.popular()


def _dedupe_ids(ids: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for raw in ids:
        movie_id = str(raw or "").strip()
        if not movie_id or movie_id in seen:
            continue
        seen.add(movie_id)
        ordered.append(movie_id)
    return ordered


class TokenSearchStrategy(ProviderStrategy):
    provider = Provider.TMDB

    def __init__(self, client: TmdbClient, *, result_limit: int = 12) -> None:
        self.client = client
        self.result_limit = result_limit

    def _normalize_all(self, items: list[dict[str, Any]]) -> list[Movie]:
        movies: list[Movie] = []
        seen: set[str] = set()
        for item in items:
            movie = normalize_tmdb_movie(item, image_base_url=self.client.config.tmdb_image_base_url)
            if not movie.id or movie.id in seen:
                logger.warning("Dropping TMDb result without a usable id: %r", item.get("title"))
                continue
            seen.add(movie.id)
            movies.append(movie)
            if len(movies) >= self.result_limit:
                break
        return movies

    async def search(self, query: str) -> list[Movie]:
        items = await asyncio.to_thread(self.client.search_movies, query)
        return self._normalize_all(items)

    async def popular(self) -> list[Movie]:
        items = await asyncio.to_thread(self.client.discover_popular)
        return self._normalize_all(items)

    async def details(self, movie_id: str) -> Movie:
        payload = await asyncio.to_thread(self.client.fetch_movie_details, movie_id)
        movie = normalize_tmdb_movie(payload, image_base_url=self.client.config.tmdb_image_base_url)
        if not movie.id:
            raise NotFoundError(f"TMDb returned no movie for id {movie_id!r}")
        return movie


class TitleThenDetailStrategy(ProviderStrategy):
    provider = Provider.OMDB

    def __init__(
        self,
        client: OmdbClient,
        *,
        result_limit: int = 12,
        popular_titles: Iterable[str] = POPULAR_MOVIE_TITLES,
        popular_title_limit: int = 8,
    ) -> None:
        self.client = client
        self.result_limit = result_limit
        self.popular_titles = tuple(popular_titles)[:popular_title_limit]

    async def search(self, query: str) -> list[Movie]:
        hits = await asyncio.to_thread(self.client.search, query)
        ids = _dedupe_ids(h.get("imdbID") for h in hits)[: self.result_limit]
        if not ids:
            raise NotFoundError("No movies found")
        return await self._fetch_details_batch(ids)

    async def popular(self) -> list[Movie]:
        lookups = await asyncio.gather(
            *(asyncio.to_thread(self.client.lookup_title, title) for title in self.popular_titles),
            return_exceptions=True,
        )
        ids: list[str] = []
        for title, result in zip(self.popular_titles, lookups):
            if isinstance(result, Exception):
                logger.warning("Error searching for %s: %s", title, result)
                continue
            if isinstance(result, BaseException):
                raise result
            ids.append(str(_as_mapping(result).get("imdbID") or ""))
        ids = _dedupe_ids(ids)
        if not ids:
            raise NotFoundError("No movies found")
        return await self._fetch_details_batch(ids)

    async def details(self, movie_id: str) -> Movie:
        payload = await asyncio.to_thread(self.client.fetch_details, movie_id)
        return normalize_omdb_movie(payload)

    async def _fetch_details_batch(self, ids: list[str]) -> list[Movie]:
        logger.info("Fetching OMDb details for %d movies", len(ids))
        results = await asyncio.gather(
            *(asyncio.to_thread(self.client.fetch_details, movie_id) for movie_id in ids),
            return_exceptions=True,
        )

        movies: list[Movie] = []
        failures: list[BaseException] = []
        for movie_id, result in zip(ids, results):
            if isinstance(result, Exception):
                logger.warning("Error fetching details for %s: %s", movie_id, result)
                failures.append(result)
                continue
            if isinstance(result, BaseException):
                raise result
            movie = normalize_omdb_movie(_as_mapping(result))
            if not movie.id:
                logger.warning("Dropping OMDb detail payload without imdbID (requested %s)", movie_id)
                failures.append(NotFoundError(f"No imdbID in payload for {movie_id}"))
                continue
            movies.append(movie)

        if failures:
            logger.info("Detail fan-out: %d of %d succeeded", len(movies), len(ids))
        if not movies:
            raise BatchFetchError(f"All {len(ids)} detail fetches failed.", failures=failures)
        return movies


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def build_strategy(config: ProviderConfig, *, session: requests.Session | None = None) -> ProviderStrategy:
    if config.provider is Provider.OMDB:
        return TitleThenDetailStrategy(
            OmdbClient(config, session=session),
            result_limit=config.result_limit,
            popular_title_limit=config.popular_title_limit,
        )
    return TokenSearchStrategy(TmdbClient(config, session=session), result_limit=config.result_limit)
