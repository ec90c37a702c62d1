from __future__ import annotations

import logging
import re
from typing import Any

import requests

from cinemax.config import ProviderConfig
from cinemax.errors import NotFoundError, UpstreamError
from cinemax.integrations.http import DEFAULT_POOL_MAXSIZE, build_session, request_json

logger = logging.getLogger(__name__)

_IMDB_TITLE_ID_RE = re.compile(r"^tt[0-9]+$")


def is_imdb_title_id(value: str) -> bool:
    return bool(_IMDB_TITLE_ID_RE.match((value or "").strip()))


def _check_in_band(payload: dict[str, Any]) -> dict[str, Any]:
    # OMDb answers HTTP 200 with {"Response": "False", "Error": "..."} for most failures.
    if str(payload.get("Response", "True")) == "True":
        return payload
    message = str(payload.get("Error") or "Unknown OMDb error").strip()
    if "not found" in message.lower():
        raise NotFoundError(message)
    raise UpstreamError(f"OMDb error: {message}", status_code=200, provider_message=message)


class OmdbClient:
    """
    OMDb client. Search returns loose identifiers only; full fields need a
    per-id `fetch_details` call.
    """

    provider_name = "OMDb"

    def __init__(self, config: ProviderConfig, *, session: requests.Session | None = None) -> None:
        self.config = config
        # fetch_details fans out up to result_limit calls on this one session.
        self.session = session or build_session(
            pool_maxsize=max(DEFAULT_POOL_MAXSIZE, config.result_limit, config.popular_title_limit)
        )

    def _get(self, params: dict[str, Any]) -> dict[str, Any]:
        api_key = self.config.require_omdb_key()
        payload = request_json(
            self.session,
            self.config.omdb_base_url,
            params={"apikey": api_key, **params},
            timeout_seconds=self.config.http_timeout_seconds,
            provider=self.provider_name,
        )
        return _check_in_band(payload)

    def search(self, query: str) -> list[dict[str, Any]]:
        payload = self._get({"s": query.strip(), "type": "movie"})
        items = payload.get("Search")
        if not isinstance(items, list):
            return []
        return [i for i in items if isinstance(i, dict) and i.get("imdbID")]

    def lookup_title(self, title: str) -> dict[str, Any]:
        return self._get({"t": title.strip(), "type": "movie"})

    def fetch_details(self, imdb_id: str) -> dict[str, Any]:
        imdb_id = (imdb_id or "").strip()
        if not is_imdb_title_id(imdb_id):
            raise ValueError(f"Not an IMDb title id: {imdb_id!r}")
        return self._get({"i": imdb_id, "plot": "full"})
