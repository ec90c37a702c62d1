from __future__ import annotations

import pytest

from cinemax.config import Provider, ProviderConfig
from cinemax.errors import ConfigurationError

_ENV_VARS = (
    "CINEMAX_PROVIDER",
    "TMDB_API_KEY",
    "TMDB_BEARER_TOKEN",
    "OMDB_API_KEY",
    "YOUTUBE_API_KEY",
    "CINEMAX_REGION",
    "CINEMAX_HTTP_TIMEOUT_SECONDS",
    "CINEMAX_RESULT_LIMIT",
    "CINEMAX_DEBOUNCE_SECONDS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_env() -> None:
    config = ProviderConfig.from_env(load_dotenv_file=False)

    assert config.provider is Provider.TMDB
    assert config.tmdb_api_key is None
    assert config.region == "US"
    assert config.http_timeout_seconds == 10.0
    assert config.result_limit == 12
    assert config.debounce_seconds == 0.5


def test_reads_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CINEMAX_PROVIDER", "OMDb")
    monkeypatch.setenv("OMDB_API_KEY", " omdb-key ")
    monkeypatch.setenv("YOUTUBE_API_KEY", "yt")
    monkeypatch.setenv("CINEMAX_RESULT_LIMIT", "5")
    monkeypatch.setenv("CINEMAX_DEBOUNCE_SECONDS", "0.25")

    config = ProviderConfig.from_env(load_dotenv_file=False)

    assert config.provider is Provider.OMDB
    assert config.require_omdb_key() == "omdb-key"
    assert config.require_youtube_key() == "yt"
    assert config.result_limit == 5
    assert config.debounce_seconds == 0.25


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("CINEMAX_PROVIDER", "imdb"),
        ("CINEMAX_RESULT_LIMIT", "0"),
        ("CINEMAX_RESULT_LIMIT", "ten"),
        ("CINEMAX_HTTP_TIMEOUT_SECONDS", "soon"),
        ("CINEMAX_DEBOUNCE_SECONDS", "-1"),
    ],
)
def test_bad_values_raise(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError):
        ProviderConfig.from_env(load_dotenv_file=False)


def test_require_methods_raise_when_missing() -> None:
    config = ProviderConfig()

    with pytest.raises(ConfigurationError):
        config.require_tmdb_auth()
    with pytest.raises(ConfigurationError):
        config.require_omdb_key()
    with pytest.raises(ConfigurationError, match="YouTube API key not configured"):
        config.require_youtube_key()


def test_tmdb_auth_accepts_bearer_or_key() -> None:
    assert ProviderConfig(tmdb_bearer_token="b").require_tmdb_auth() == (None, "b")
    assert ProviderConfig(tmdb_api_key="k").require_tmdb_auth() == ("k", None)


def test_with_overrides_returns_new_config() -> None:
    base = ProviderConfig()
    changed = base.with_overrides(provider=Provider.OMDB)

    assert changed.provider is Provider.OMDB
    assert base.provider is Provider.TMDB
