from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable

from cinemax.config import Provider
from cinemax.errors import NotFoundError
from cinemax.models import Movie, MovieDetailsState, TrailerState, TrailerStatus
from cinemax.normalize import NA, format_release_year
from cinemax.providers import ProviderStrategy
from cinemax.search import describe_error
from cinemax.trailers import TrailerResolver

logger = logging.getLogger(__name__)


class MovieDetailsView:
    """
    State for a single movie-details view.

    The trailer lives in its own slice: whatever happens while resolving it,
    `state.movie` and `state.error` are left alone.
    """

    def __init__(
        self,
        strategy: ProviderStrategy,
        trailer_resolver: TrailerResolver | None = None,
        *,
        on_change: Callable[[MovieDetailsState], Any] | None = None,
    ) -> None:
        self.strategy = strategy
        self.trailer_resolver = trailer_resolver
        self._state = MovieDetailsState()
        self._generation = 0
        self._on_change = on_change

    @property
    def state(self) -> MovieDetailsState:
        return self._state

    def _set(self, state: MovieDetailsState) -> None:
        self._state = state
        if self._on_change is None:
            return
        try:
            self._on_change(state)
        except Exception:
            logger.exception("Error in details state listener")

    async def load(self, movie_id: str) -> MovieDetailsState:
        self._generation += 1
        generation = self._generation
        self._set(MovieDetailsState(movie_id=movie_id, is_loading=True))

        try:
            movie = await self.strategy.details(movie_id)
        except (NotFoundError, ValueError) as exc:
            # ValueError: the id is not a TMDb number or IMDb tt-id.
            logger.info("No movie for id %r: %s", movie_id, exc)
            if generation == self._generation:
                self._set(replace(self._state, is_loading=False, error="Movie not found"))
            return self._state
        except Exception as exc:
            logger.warning("Failed to fetch movie details for %s: %s", movie_id, exc)
            if generation == self._generation:
                self._set(replace(self._state, is_loading=False, error=describe_error(exc)))
            return self._state

        if generation != self._generation:
            return self._state
        self._set(
            replace(
                self._state,
                movie=movie,
                is_loading=False,
                trailer=TrailerState(status=TrailerStatus.LOADING) if self.trailer_resolver else TrailerState(),
            )
        )

        if self.trailer_resolver is None:
            return self._state
        trailer = await self._resolve_trailer(movie)
        if generation == self._generation:
            self._set(replace(self._state, trailer=trailer))
        return self._state

    async def _resolve_trailer(self, movie: Movie) -> TrailerState:
        resolver = self.trailer_resolver
        assert resolver is not None
        try:
            if self.strategy.provider is Provider.TMDB and resolver.tmdb_client is not None:
                by_id = await resolver.resolve_by_id(movie.id)
                if by_id.status is TrailerStatus.FOUND:
                    return by_id
            year = format_release_year(movie.release_date)
            return await resolver.resolve(movie.title, None if year == NA else year)
        except Exception as exc:
            logger.exception("Trailer resolution failed for %s", movie.id)
            return TrailerState(status=TrailerStatus.ERROR, error=f"Failed to fetch trailer: {exc}")

    def close(self) -> None:
        """Unmount: discard state and ignore anything still in flight."""

        self._generation += 1
        self._state = MovieDetailsState()
