from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Sequence

from cinemax.errors import ConfigurationError, MovieClientError, UpstreamError
from cinemax.integrations.tmdb.client import TmdbClient
from cinemax.integrations.youtube.client import YoutubeClient
from cinemax.models import TrailerState, TrailerStatus

logger = logging.getLogger(__name__)

YOUTUBE_EMBED_BASE_URL = "https://www.youtube.com/embed"
TRAILER_KEYWORDS = ("trailer", "official")


def build_trailer_query(title: str, year: str | int | None) -> str:
    parts = [str(title or "").strip(), str(year or "").strip(), "official trailer"]
    return " ".join(p for p in parts if p)


def embed_url(video_id: str) -> str:
    return f"{YOUTUBE_EMBED_BASE_URL}/{video_id}?rel=0&modestbranding=1&autoplay=1"


def _video_title(item: Mapping[str, Any]) -> str:
    snippet = item.get("snippet")
    if isinstance(snippet, Mapping) and isinstance(snippet.get("title"), str):
        return snippet["title"]
    name = item.get("name")
    return name if isinstance(name, str) else ""


def _video_id(item: Mapping[str, Any]) -> str | None:
    # YouTube search: {"id": {"videoId": ...}}; TMDb videos: {"key": ...}
    ident = item.get("id")
    if isinstance(ident, Mapping) and isinstance(ident.get("videoId"), str):
        return ident["videoId"]
    key = item.get("key")
    return key if isinstance(key, str) and key else None


def pick_trailer(items: Sequence[Mapping[str, Any]]) -> Mapping[str, Any] | None:
    """First item whose title mentions "trailer" or "official", else the first item."""

    playable = [i for i in items if isinstance(i, Mapping) and _video_id(i)]
    if not playable:
        return None
    for item in playable:
        title = _video_title(item).lower()
        if any(word in title for word in TRAILER_KEYWORDS):
            return item
    return playable[0]


def _found(item: Mapping[str, Any]) -> TrailerState:
    return TrailerState(
        status=TrailerStatus.FOUND,
        embed_url=embed_url(_video_id(item) or ""),
        video_title=_video_title(item) or None,
    )


class TrailerResolver:
    """
    Resolves a playable trailer for a movie. Never raises: every failure ends
    up as a `TrailerState` with status `error` or `not_found`.
    """

    def __init__(self, youtube_client: YoutubeClient | None = None, tmdb_client: TmdbClient | None = None) -> None:
        self.youtube_client = youtube_client
        self.tmdb_client = tmdb_client

    async def resolve(self, title: str, year: str | int | None) -> TrailerState:
        if self.youtube_client is None or not self.youtube_client.configured:
            logger.warning("YouTube API key not provided")
            return TrailerState(status=TrailerStatus.ERROR, error="YouTube API key not configured")

        query = build_trailer_query(title, year)
        logger.info("Searching for trailer: %s", query)
        try:
            items = await asyncio.to_thread(self.youtube_client.search_videos, query)
        except ConfigurationError as exc:
            return TrailerState(status=TrailerStatus.ERROR, error=str(exc))
        except UpstreamError as exc:
            logger.warning("YouTube rejected trailer search for %r: %s", query, exc)
            message = f"YouTube API Error: {exc.provider_message}" if exc.provider_message else str(exc)
            return TrailerState(status=TrailerStatus.ERROR, error=message)
        except MovieClientError as exc:
            logger.warning("Failed to fetch trailer for %r: %s", query, exc)
            return TrailerState(status=TrailerStatus.ERROR, error=f"Failed to fetch trailer: {exc}")
        except Exception as exc:
            logger.exception("Unexpected error fetching trailer for %r", query)
            return TrailerState(status=TrailerStatus.ERROR, error=f"Failed to fetch trailer: {exc}")

        best = pick_trailer(items)
        if best is None:
            logger.info("No trailer found for: %s", query)
            return TrailerState(status=TrailerStatus.NOT_FOUND, error="No trailer found")
        return _found(best)

    async def resolve_by_id(self, tmdb_movie_id: str | int) -> TrailerState:
        if self.tmdb_client is None:
            return TrailerState(status=TrailerStatus.ERROR, error="TMDb client not configured")
        try:
            videos = await asyncio.to_thread(self.tmdb_client.fetch_movie_videos, tmdb_movie_id)
        except (MovieClientError, ValueError) as exc:
            logger.warning("Failed to fetch TMDb videos for %s: %s", tmdb_movie_id, exc)
            return TrailerState(status=TrailerStatus.ERROR, error=f"Failed to fetch trailer: {exc}")

        youtube_videos = [v for v in videos if str(v.get("site") or "").lower() == "youtube"]
        best = pick_trailer(youtube_videos)
        if best is None:
            return TrailerState(status=TrailerStatus.NOT_FOUND, error="No trailer found")
        return _found(best)
