"""
Dependency injection for provider configuration and clients.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from cinemax.config import ProviderConfig
from cinemax.integrations.tmdb.client import TmdbClient

logger = logging.getLogger(__name__)


@lru_cache
def get_config() -> ProviderConfig:
    """
    Provider settings loaded once per process from the environment / `.env`.
    """
    config = ProviderConfig.from_env()
    if not config.tmdb_api_key and not config.tmdb_bearer_token:
        logger.warning("TMDB_API_KEY / TMDB_BEARER_TOKEN not set; /api/movies will fail upstream calls")
    return config


def get_tmdb_client(config: Annotated[ProviderConfig, Depends(get_config)]) -> TmdbClient:
    """
    Returns a TMDb client holding the server-side key. The key never leaves the server.
    """
    return TmdbClient(config)


TmdbClientDep = Annotated[TmdbClient, Depends(get_tmdb_client)]
