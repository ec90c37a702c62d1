"""
Canonical, provider-agnostic records and the UI state snapshots built on them.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

NO_PLOT = "No plot available"


@dataclass(frozen=True)
class MovieExtras:
    """Provider-specific passthrough fields; presence depends on the provider."""

    rated: str | None = None
    runtime: str | None = None
    director: str | None = None
    writer: str | None = None
    actors: str | None = None
    awards: str | None = None
    metascore: int | None = None
    box_office: str | None = None
    production: str | None = None
    country: str | None = None
    language: str | None = None
    budget: int | None = None
    revenue: int | None = None
    tagline: str | None = None
    imdb_id: str | None = None
    ratings: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class Movie:
    id: str
    title: str
    poster_url: str | None = None
    backdrop_url: str | None = None
    release_date: str = ""  # YYYY-MM-DD when known; may be a synthesized year-01-01
    vote_average: float = 0.0  # 0.0 means "no rating"
    vote_count: int = 0
    popularity: float = 0.0
    adult: bool = False
    original_language: str = "en"
    genres: tuple[str, ...] = ()
    overview: str = NO_PLOT
    extras: MovieExtras = field(default_factory=MovieExtras)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["genres"] = list(self.genres)
        return data


class SearchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class SearchState:
    raw_term: str = ""
    debounced_term: str = ""
    results: tuple[Movie, ...] = ()
    is_loading: bool = False
    error: str | None = None
    status: SearchStatus = SearchStatus.IDLE
    no_results: bool = False


class TrailerStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class TrailerState:
    status: TrailerStatus = TrailerStatus.IDLE
    embed_url: str | None = None
    video_title: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "embed_url": self.embed_url,
            "video_title": self.video_title,
            "error": self.error,
        }


@dataclass(frozen=True)
class MovieDetailsState:
    movie_id: str = ""
    movie: Movie | None = None
    is_loading: bool = False
    error: str | None = None
    trailer: TrailerState = field(default_factory=TrailerState)
