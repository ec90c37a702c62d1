from __future__ import annotations

import asyncio
import json
from pathlib import Path
from unittest.mock import MagicMock

from cinemax.config import ProviderConfig
from cinemax.errors import NetworkError, UpstreamError
from cinemax.integrations.youtube.client import YoutubeClient
from cinemax.models import TrailerStatus
from cinemax.trailers import TrailerResolver, build_trailer_query, embed_url, pick_trailer

REPO_ROOT = Path(__file__).resolve().parents[1]


def _run_async(coro):
    """Helper to run async code in sync tests."""
    return asyncio.run(coro)


def _youtube_items() -> list[dict]:
    payload = json.loads((REPO_ROOT / "tests" / "fixtures" / "youtube" / "search_sample.json").read_text())
    return payload["items"]


def _youtube(items=None, *, error: Exception | None = None) -> MagicMock:
    client = MagicMock(spec=YoutubeClient)
    client.configured = True
    if error is not None:
        client.search_videos.side_effect = error
    else:
        client.search_videos.return_value = items if items is not None else []
    return client


def test_build_trailer_query() -> None:
    assert build_trailer_query("Inception", "2010") == "Inception 2010 official trailer"
    assert build_trailer_query("Inception", None) == "Inception official trailer"


def test_pick_trailer_prefers_trailer_or_official_title() -> None:
    items = _youtube_items()
    assert pick_trailer(items) is items[2]


def test_pick_trailer_falls_back_to_first_item() -> None:
    items = _youtube_items()[:2]
    assert pick_trailer(items) is items[0]
    assert pick_trailer([]) is None


def test_pick_trailer_handles_tmdb_video_shape() -> None:
    videos = [
        {"key": "teaser1", "name": "Behind the scenes", "site": "YouTube"},
        {"key": "YoHD9XEInc0", "name": "Official Trailer", "site": "YouTube"},
    ]
    assert pick_trailer(videos) is videos[1]


def test_resolve_selects_official_trailer() -> None:
    youtube = _youtube(_youtube_items())

    state = _run_async(TrailerResolver(youtube).resolve("Inception", "2010"))

    youtube.search_videos.assert_called_once_with("Inception 2010 official trailer")
    assert state.status is TrailerStatus.FOUND
    assert state.embed_url == embed_url("YoHD9XEInc0")
    assert state.embed_url == "https://www.youtube.com/embed/YoHD9XEInc0?rel=0&modestbranding=1&autoplay=1"
    assert "Official Trailer" in (state.video_title or "")


def test_resolve_not_found_when_no_items() -> None:
    state = _run_async(TrailerResolver(_youtube([])).resolve("Obscure", "1901"))
    assert state.status is TrailerStatus.NOT_FOUND
    assert state.embed_url is None


def test_resolve_missing_key_is_error_state() -> None:
    resolver = TrailerResolver(YoutubeClient(ProviderConfig(), session=MagicMock()))
    state = _run_async(resolver.resolve("Inception", "2010"))
    assert state.status is TrailerStatus.ERROR
    assert state.error == "YouTube API key not configured"

    assert _run_async(TrailerResolver(None).resolve("Inception", "2010")).status is TrailerStatus.ERROR


def test_resolve_failures_never_raise() -> None:
    upstream = _run_async(
        TrailerResolver(_youtube(error=UpstreamError("x", status_code=403, provider_message="quotaExceeded"))).resolve(
            "Inception", "2010"
        )
    )
    assert upstream.status is TrailerStatus.ERROR
    assert upstream.error == "YouTube API Error: quotaExceeded"

    network = _run_async(TrailerResolver(_youtube(error=NetworkError("down"))).resolve("Inception", "2010"))
    assert network.status is TrailerStatus.ERROR
    assert network.error == "Failed to fetch trailer: down"

    unexpected = _run_async(TrailerResolver(_youtube(error=KeyError("items"))).resolve("Inception", "2010"))
    assert unexpected.status is TrailerStatus.ERROR


def test_resolve_by_id_uses_tmdb_youtube_videos() -> None:
    tmdb = MagicMock()
    tmdb.fetch_movie_videos.return_value = [
        {"key": "vimeo1", "name": "Official Trailer", "site": "Vimeo"},
        {"key": "clip1", "name": "Clip", "site": "YouTube"},
        {"key": "tr1", "name": "Trailer 2", "site": "YouTube"},
    ]

    state = _run_async(TrailerResolver(tmdb_client=tmdb).resolve_by_id(27205))

    tmdb.fetch_movie_videos.assert_called_once_with(27205)
    assert state.status is TrailerStatus.FOUND
    assert state.embed_url == embed_url("tr1")


def test_resolve_by_id_without_videos_is_not_found() -> None:
    tmdb = MagicMock()
    tmdb.fetch_movie_videos.return_value = []
    state = _run_async(TrailerResolver(tmdb_client=tmdb).resolve_by_id(1))
    assert state.status is TrailerStatus.NOT_FOUND


def test_resolve_reports_youtube_error_body_verbatim() -> None:
    resp = MagicMock()
    resp.status_code = 200
    resp.json.return_value = {"error": {"code": 400, "message": "API key not valid. Please pass a valid API key."}}
    session = MagicMock()
    session.get.return_value = resp
    youtube = YoutubeClient(ProviderConfig(youtube_api_key="bad"), session=session)

    state = _run_async(TrailerResolver(youtube).resolve("Inception", "2010"))

    assert state.status is TrailerStatus.ERROR
    assert state.error == "YouTube API Error: API key not valid. Please pass a valid API key."
