"""
Debounced search orchestration.

Keystrokes update `raw_term` immediately. A `Debouncer` owns the quiet-period
timer; only when it fires does `debounced_term` change, and a change of
`debounced_term` is the only thing that starts a fetch cycle.

Every fetch cycle takes a generation number. A response whose generation is no
longer the latest is dropped, so a slow reply for an old term can never
overwrite the results of a newer one. The old request itself is not cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Any, Callable, Generic, TypeVar

from cinemax.errors import (
    BatchFetchError,
    ConfigurationError,
    MovieClientError,
    NetworkError,
    NotFoundError,
    RequestTimeoutError,
    UpstreamError,
)
from cinemax.models import SearchState, SearchStatus
from cinemax.providers import ProviderStrategy

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_DEBOUNCE_SECONDS = 0.5
GENERIC_FETCH_ERROR = "Failed to fetch movies. Please try again later."


def describe_error(exc: BaseException) -> str:
    """User-displayable message for any error raised while fetching movies."""

    if isinstance(exc, NotFoundError):
        return "No movies found"
    if isinstance(exc, RequestTimeoutError):
        return "The movie service took too long to respond. Please try again."
    if isinstance(exc, NetworkError):
        return "Could not reach the movie service. Check your connection and try again."
    if isinstance(exc, ConfigurationError):
        return "The movie service is not configured."
    if isinstance(exc, BatchFetchError):
        return GENERIC_FETCH_ERROR
    if isinstance(exc, UpstreamError) and exc.provider_message:
        return f"Failed to fetch movies: {exc.provider_message}"
    return GENERIC_FETCH_ERROR


class Debouncer(Generic[T]):
    """
    Timer that calls `callback(value)` once `delay_seconds` pass without a new `trigger`.

    Each `trigger` resets the timer; at most one callback fires per quiet period.
    Must be used from inside a running event loop unless `loop` is given.
    """

    def __init__(
        self,
        delay_seconds: float,
        callback: Callable[[T], None],
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.delay_seconds = delay_seconds
        self._callback = callback
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._value: T | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self, value: T) -> None:
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._value = value
        self._handle = loop.call_later(self.delay_seconds, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> None:
        """Fire a pending callback now instead of waiting out the delay."""

        if self._handle is None:
            return
        self.cancel()
        self._fire()

    def _fire(self) -> None:
        self._handle = None
        value = self._value
        self._value = None
        self._callback(value)  # type: ignore[arg-type]


class SearchOrchestrator:
    """
    Owns `SearchState` for one search view.

    `on_change` (if given) is called with every new state snapshot.
    """

    def __init__(
        self,
        strategy: ProviderStrategy,
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        on_change: Callable[[SearchState], Any] | None = None,
    ) -> None:
        self.strategy = strategy
        self._state = SearchState()
        self._generation = 0
        self._tasks: set[asyncio.Task] = set()
        self._on_change = on_change
        self._debouncer: Debouncer[str] = Debouncer(debounce_seconds, self._on_debounced)

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    def _update(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        if self._on_change is None:
            return
        try:
            self._on_change(self._state)
        except Exception:
            logger.exception("Error in search state listener")

    # --- input ---

    def set_term(self, raw_term: str) -> None:
        """Record a keystroke. No network effect until the debounce window elapses."""

        self._update(raw_term=raw_term)
        self._debouncer.trigger(raw_term)

    def _on_debounced(self, term: str) -> None:
        if term == self._state.debounced_term:
            return
        self._update(debounced_term=term)
        task = asyncio.get_running_loop().create_task(self.load(term))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # --- fetch cycle ---

    async def start(self) -> SearchState:
        """Initial load on mount: the default (popular) listing."""

        return await self.load(self._state.debounced_term)

    async def load(self, term: str) -> SearchState:
        self._generation += 1
        generation = self._generation
        logger.info("Fetching movies for %r (generation %d)", term, generation)
        self._update(is_loading=True, error=None, status=SearchStatus.LOADING, no_results=False)

        try:
            movies = await self.strategy.fetch(term)
        except NotFoundError:
            if self._is_stale(generation, term):
                return self._state
            self._update(results=(), is_loading=False, error=None, status=SearchStatus.SUCCESS, no_results=True)
            return self._state
        except Exception as exc:
            if self._is_stale(generation, term):
                return self._state
            if isinstance(exc, MovieClientError):
                logger.warning("Error fetching movies for %r: %s", term, exc)
            else:
                logger.exception("Unexpected error fetching movies for %r", term)
            self._update(results=(), is_loading=False, error=describe_error(exc), status=SearchStatus.ERROR)
            return self._state

        if self._is_stale(generation, term):
            return self._state
        self._update(
            results=tuple(movies),
            is_loading=False,
            error=None,
            status=SearchStatus.SUCCESS,
            no_results=not movies,
        )
        return self._state

    def _is_stale(self, generation: int, term: str) -> bool:
        if generation == self._generation:
            return False
        logger.debug("Discarding stale response for %r (generation %d < %d)", term, generation, self._generation)
        return True

    async def wait_idle(self) -> SearchState:
        """Await any fetch cycles started by the debouncer."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        return self._state

    def close(self) -> None:
        """Drop the pending timer and ignore any response still in flight."""

        self._debouncer.cancel()
        self._generation += 1
