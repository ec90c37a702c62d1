from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

from cinemax.config import Provider, ProviderConfig
from cinemax.details import MovieDetailsView
from cinemax.errors import NetworkError, NotFoundError
from cinemax.integrations.tmdb.client import TmdbClient
from cinemax.models import Movie, TrailerState, TrailerStatus
from cinemax.providers import ProviderStrategy, TokenSearchStrategy


def _run_async(coro):
    """Helper to run async code in sync tests."""
    return asyncio.run(coro)


class _DetailsStrategy(ProviderStrategy):
    def __init__(self, provider: Provider, answer) -> None:
        self.provider = provider
        self.answer = answer

    async def search(self, query: str) -> list[Movie]:
        return []

    async def popular(self) -> list[Movie]:
        return []

    async def details(self, movie_id: str) -> Movie:
        if isinstance(self.answer, BaseException):
            raise self.answer
        return self.answer


INCEPTION = Movie(id="tt1375666", title="Inception", release_date="2010-07-16")


def _resolver(*, by_title: TrailerState | Exception, by_id: TrailerState | None = None, tmdb: bool = False) -> MagicMock:
    resolver = MagicMock()
    resolver.tmdb_client = MagicMock() if tmdb else None
    if isinstance(by_title, Exception):
        resolver.resolve = AsyncMock(side_effect=by_title)
    else:
        resolver.resolve = AsyncMock(return_value=by_title)
    resolver.resolve_by_id = AsyncMock(return_value=by_id or TrailerState(status=TrailerStatus.NOT_FOUND))
    return resolver


def test_details_and_trailer_load_into_separate_slices() -> None:
    found = TrailerState(status=TrailerStatus.FOUND, embed_url="https://www.youtube.com/embed/x")
    resolver = _resolver(by_title=found)
    view = MovieDetailsView(_DetailsStrategy(Provider.OMDB, INCEPTION), resolver)

    state = _run_async(view.load("tt1375666"))

    assert state.movie == INCEPTION
    assert state.error is None
    assert state.trailer == found
    resolver.resolve.assert_awaited_once_with("Inception", "2010")
    resolver.resolve_by_id.assert_not_awaited()


def test_trailer_failure_never_errors_the_details_view() -> None:
    view = MovieDetailsView(
        _DetailsStrategy(Provider.OMDB, INCEPTION),
        _resolver(by_title=RuntimeError("youtube exploded")),
    )

    state = _run_async(view.load("tt1375666"))

    assert state.movie == INCEPTION
    assert state.error is None
    assert state.trailer.status is TrailerStatus.ERROR


def test_tmdb_provider_prefers_trailer_by_id() -> None:
    by_id = TrailerState(status=TrailerStatus.FOUND, embed_url="https://www.youtube.com/embed/tmdb")
    resolver = _resolver(by_title=TrailerState(status=TrailerStatus.NOT_FOUND), by_id=by_id, tmdb=True)
    movie = Movie(id="27205", title="Inception", release_date="2010-07-15")
    view = MovieDetailsView(_DetailsStrategy(Provider.TMDB, movie), resolver)

    state = _run_async(view.load("27205"))

    assert state.trailer == by_id
    resolver.resolve_by_id.assert_awaited_once_with("27205")
    resolver.resolve.assert_not_awaited()


def test_tmdb_trailer_by_id_miss_falls_back_to_search() -> None:
    found = TrailerState(status=TrailerStatus.FOUND, embed_url="https://www.youtube.com/embed/yt")
    resolver = _resolver(by_title=found, tmdb=True)
    movie = Movie(id="27205", title="Inception", release_date="")
    view = MovieDetailsView(_DetailsStrategy(Provider.TMDB, movie), resolver)

    state = _run_async(view.load("27205"))

    assert state.trailer == found
    resolver.resolve.assert_awaited_once_with("Inception", None)


def test_details_errors_are_user_facing() -> None:
    not_found = _run_async(MovieDetailsView(_DetailsStrategy(Provider.OMDB, NotFoundError("Incorrect IMDb ID."))).load("tt0"))
    assert not_found.movie is None
    assert not_found.error == "Movie not found"

    down = _run_async(MovieDetailsView(_DetailsStrategy(Provider.OMDB, NetworkError("down"))).load("tt1"))
    assert down.movie is None
    assert down.error and "Could not reach" in down.error
    assert down.trailer.status is TrailerStatus.IDLE


def test_close_discards_state() -> None:
    view = MovieDetailsView(_DetailsStrategy(Provider.OMDB, INCEPTION))
    _run_async(view.load("tt1375666"))
    assert view.state.movie is not None

    view.close()

    assert view.state.movie is None
    assert view.state.movie_id == ""


def test_unparseable_tmdb_id_reads_as_movie_not_found() -> None:
    session = MagicMock()
    strategy = TokenSearchStrategy(TmdbClient(ProviderConfig(tmdb_api_key="k"), session=session))

    state = _run_async(MovieDetailsView(strategy).load("not-a-number"))

    assert state.movie is None
    assert state.error == "Movie not found"
    session.get.assert_not_called()
