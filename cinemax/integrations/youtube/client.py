from __future__ import annotations

from typing import Any

import requests

from cinemax.config import ProviderConfig
from cinemax.errors import UpstreamError
from cinemax.integrations.http import build_session, request_json


class YoutubeClient:
    provider_name = "YouTube"

    def __init__(self, config: ProviderConfig, *, session: requests.Session | None = None) -> None:
        self.config = config
        self.session = session or build_session()

    @property
    def configured(self) -> bool:
        return bool(self.config.youtube_api_key)

    def search_videos(self, query: str, *, max_results: int = 5) -> list[dict[str, Any]]:
        api_key = self.config.require_youtube_key()
        url = f"{self.config.youtube_base_url.rstrip('/')}/search"
        payload = request_json(
            self.session,
            url,
            params={
                "part": "snippet",
                "maxResults": max_results,
                "q": query,
                "type": "video",
                "key": api_key,
            },
            timeout_seconds=self.config.http_timeout_seconds,
            provider=self.provider_name,
        )
        error = payload.get("error")
        if isinstance(error, dict):
            message = str(error.get("message") or "Unknown YouTube error")
            raise UpstreamError(f"YouTube API Error: {message}", status_code=error.get("code"), provider_message=message)

        items = payload.get("items")
        if not isinstance(items, list):
            return []
        return [i for i in items if isinstance(i, dict)]
