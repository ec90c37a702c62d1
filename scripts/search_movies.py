#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from cinemax.config import Provider, ProviderConfig
from cinemax.details import MovieDetailsView
from cinemax.errors import ConfigurationError
from cinemax.integrations.tmdb.client import TmdbClient
from cinemax.integrations.youtube.client import YoutubeClient
from cinemax.models import Movie, SearchState, SearchStatus, TrailerState
from cinemax.normalize import (
    format_money,
    format_rating,
    format_release_date,
    format_release_year,
    format_runtime,
    format_vote_count,
)
from cinemax.providers import build_strategy
from cinemax.search import SearchOrchestrator
from cinemax.trailers import TrailerResolver


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="search_movies",
        description="Search or browse movies through the configured provider (TMDb or OMDb).",
    )
    parser.add_argument(
        "--provider",
        choices=[p.value for p in Provider],
        default=None,
        help="Override CINEMAX_PROVIDER for this run.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")

    sub = parser.add_subparsers(dest="command", required=True)
    search = sub.add_parser("search", help="Search movies by title.")
    search.add_argument("term", help="Free-text search term.")
    sub.add_parser("popular", help="List popular movies.")
    details = sub.add_parser("details", help="Show details and trailer for one movie id.")
    details.add_argument("movie_id", help="TMDb numeric id or IMDb tt-id, depending on provider.")
    trailer = sub.add_parser("trailer", help="Resolve a trailer by title and year.")
    trailer.add_argument("title")
    trailer.add_argument("--year", default=None)
    return parser.parse_args(argv)


def _card_line(movie: Movie) -> str:
    return (
        f"{movie.id:>12}  {movie.title}  "
        f"* {format_rating(movie.vote_average)}  "
        f"{movie.original_language}  {format_release_year(movie.release_date)}"
    )


def _print_results(state: SearchState) -> int:
    if state.status is SearchStatus.ERROR:
        print(f"ERROR: {state.error}")
        return 1
    if state.no_results:
        print("No movies found")
        return 0
    for movie in state.results:
        print(_card_line(movie))
    return 0


def _print_trailer(trailer: TrailerState) -> None:
    if trailer.embed_url:
        print(f"Trailer: {trailer.video_title or ''} {trailer.embed_url}".rstrip())
    else:
        print(f"Trailer: {trailer.status.value} {trailer.error or ''}".rstrip())


def _print_details(view: MovieDetailsView) -> int:
    state = view.state
    if state.movie is None:
        print(f"ERROR: {state.error or 'Movie not found'}")
        return 1
    movie = state.movie
    extras = movie.extras
    print(movie.title)
    print(f"  Rating:    {format_rating(movie.vote_average)} ({format_vote_count(movie.vote_count)} votes)")
    print(f"  Released:  {format_release_date(movie.release_date)}")
    print(f"  Runtime:   {format_runtime(extras.runtime)}")
    print(f"  Genres:    {', '.join(movie.genres) or 'N/A'}")
    print(f"  Director:  {extras.director or 'N/A'}")
    print(f"  Cast:      {extras.actors or 'N/A'}")
    print(f"  Box office: {format_money(extras.box_office or extras.revenue)}")
    if extras.ratings:
        print("  Ratings:   " + "; ".join(f"{source} {value}" for source, value in extras.ratings))
    print(f"  Plot:      {movie.overview}")
    _print_trailer(state.trailer)
    return 0


async def _run(args: argparse.Namespace, config: ProviderConfig) -> int:
    strategy = build_strategy(config)

    if args.command in ("search", "popular"):
        orchestrator = SearchOrchestrator(strategy, debounce_seconds=config.debounce_seconds)
        term = args.term if args.command == "search" else ""
        state = await orchestrator.load(term)
        orchestrator.close()
        return _print_results(state)

    resolver = TrailerResolver(
        YoutubeClient(config),
        TmdbClient(config) if config.provider is Provider.TMDB else None,
    )
    if args.command == "trailer":
        _print_trailer(await resolver.resolve(args.title, args.year))
        return 0

    view = MovieDetailsView(strategy, resolver)
    await view.load(args.movie_id)
    return _print_details(view)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv or sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ProviderConfig.from_env()
    except ConfigurationError as exc:
        print(f"ERROR: {exc}")
        return 2
    if args.provider:
        config = config.with_overrides(provider=Provider(args.provider))

    return asyncio.run(_run(args, config))


if __name__ == "__main__":
    raise SystemExit(main())
