"""
OMDb integration client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cinemax.integrations.omdb.client import OmdbClient, is_imdb_title_id

__all__ = [
    "OmdbClient",
    "is_imdb_title_id",
]


def __getattr__(name: str):
    if name in __all__:
        from cinemax.integrations.omdb import client

        return getattr(client, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
