"""
TMDb integration client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cinemax.integrations.tmdb.client import TmdbClient, parse_tmdb_movie_id

__all__ = [
    "TmdbClient",
    "parse_tmdb_movie_id",
]


def __getattr__(name: str):
    if name in __all__:
        from cinemax.integrations.tmdb import client

        return getattr(client, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
