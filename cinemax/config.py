from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum

from cinemax.errors import ConfigurationError
from cinemax.utils.env import env_str, load_env

TMDB_API_BASE_URL = "https://api.themoviedb.org/3"
TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w500"
OMDB_API_BASE_URL = "https://www.omdbapi.com/"
YOUTUBE_API_BASE_URL = "https://www.googleapis.com/youtube/v3"


class Provider(str, Enum):
    TMDB = "tmdb"
    OMDB = "omdb"


@dataclass(frozen=True)
class ProviderConfig:
    """
    Explicit provider settings injected into every client.

    Build one with `ProviderConfig.from_env()` for app/CLI use, or construct it
    directly in tests.
    """

    provider: Provider = Provider.TMDB
    tmdb_api_key: str | None = None
    tmdb_bearer_token: str | None = None
    omdb_api_key: str | None = None
    youtube_api_key: str | None = None
    tmdb_base_url: str = TMDB_API_BASE_URL
    tmdb_image_base_url: str = TMDB_IMAGE_BASE_URL
    omdb_base_url: str = OMDB_API_BASE_URL
    youtube_base_url: str = YOUTUBE_API_BASE_URL
    region: str = "US"
    http_timeout_seconds: float = 10.0
    result_limit: int = 12
    popular_title_limit: int = 8
    debounce_seconds: float = 0.5

    @classmethod
    def from_env(cls, *, load_dotenv_file: bool = True) -> ProviderConfig:
        if load_dotenv_file:
            load_env()

        provider_raw = (env_str("CINEMAX_PROVIDER", Provider.TMDB.value) or "").lower()
        try:
            provider = Provider(provider_raw)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown CINEMAX_PROVIDER: {provider_raw!r}") from exc

        return cls(
            provider=provider,
            tmdb_api_key=env_str("TMDB_API_KEY"),
            tmdb_bearer_token=env_str("TMDB_BEARER_TOKEN"),
            omdb_api_key=env_str("OMDB_API_KEY"),
            youtube_api_key=env_str("YOUTUBE_API_KEY"),
            region=env_str("CINEMAX_REGION", "US") or "US",
            http_timeout_seconds=_env_float("CINEMAX_HTTP_TIMEOUT_SECONDS", 10.0),
            result_limit=_env_int("CINEMAX_RESULT_LIMIT", 12),
            debounce_seconds=_env_float("CINEMAX_DEBOUNCE_SECONDS", 0.5),
        )

    def with_overrides(self, **changes) -> ProviderConfig:
        return replace(self, **changes)

    def require_tmdb_auth(self) -> tuple[str | None, str | None]:
        if not self.tmdb_api_key and not self.tmdb_bearer_token:
            raise ConfigurationError("TMDB_BEARER_TOKEN or TMDB_API_KEY must be set.")
        return self.tmdb_api_key, self.tmdb_bearer_token

    def require_omdb_key(self) -> str:
        if not self.omdb_api_key:
            raise ConfigurationError("OMDB_API_KEY is not set.")
        return self.omdb_api_key

    def require_youtube_key(self) -> str:
        if not self.youtube_api_key:
            raise ConfigurationError("YouTube API key not configured")
        return self.youtube_api_key


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ConfigurationError(f"{name} must be >= 0, got {raw!r}")
    return value


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    if not raw.isdigit() or int(raw) <= 0:
        raise ConfigurationError(f"{name} must be a positive integer, got {raw!r}")
    return int(raw)
