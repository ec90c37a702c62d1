from __future__ import annotations

import logging
from typing import Any, Mapping

import requests
from requests.adapters import HTTPAdapter

from cinemax.errors import NetworkError, ParseError, RequestTimeoutError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "accept": "application/json",
    "user-agent": "cinemax/0.1 (+https://github.com/cinemax)",
}

# urllib3's per-host pool default; fan-outs wider than this need a bigger pool.
DEFAULT_POOL_MAXSIZE = 10


def build_session(*, pool_maxsize: int = DEFAULT_POOL_MAXSIZE) -> requests.Session:
    """Session whose per-host connection pool holds `pool_maxsize` connections. No retries."""

    session = requests.Session()
    adapter = HTTPAdapter(pool_maxsize=max(1, pool_maxsize))
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _provider_message(payload: Any) -> str | None:
    if not isinstance(payload, Mapping):
        return None
    # TMDb: {"status_message": ...}; OMDb: {"Error": ...}; Google: {"error": {"message": ...}}
    for key in ("status_message", "Error", "message"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    error = payload.get("error")
    if isinstance(error, Mapping):
        message = error.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    if isinstance(error, str) and error.strip():
        return error.strip()
    return None


def request_json(
    session: requests.Session,
    url: str,
    *,
    params: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
    timeout_seconds: float = 10.0,
    provider: str = "upstream",
) -> dict[str, Any]:
    """
    Issue one GET and decode a JSON object body.

    No retries: a transport failure raises `NetworkError` (or `RequestTimeoutError`),
    a non-2xx raises `UpstreamError`, and a non-object body raises `ParseError`.
    """

    merged_headers = dict(DEFAULT_HEADERS)
    if headers:
        merged_headers.update(headers)

    try:
        resp = session.get(url, params=params, headers=merged_headers, timeout=timeout_seconds)
    except requests.Timeout as exc:
        raise RequestTimeoutError(f"{provider} request timed out after {timeout_seconds:g}s.") from exc
    except requests.RequestException as exc:
        raise NetworkError(f"{provider} request failed: {exc}") from exc

    if not 200 <= resp.status_code < 300:
        snippet = (resp.text or "")[:400]
        try:
            message = _provider_message(resp.json())
        except ValueError:
            message = None
        logger.debug("%s responded HTTP %s: %s", provider, resp.status_code, message or snippet)
        raise UpstreamError(
            f"{provider} request failed with HTTP {resp.status_code}.",
            status_code=resp.status_code,
            provider_message=message or snippet or None,
            body_snippet=snippet,
        )

    try:
        payload = resp.json()
    except ValueError as exc:
        raise ParseError(
            f"{provider} returned non-JSON response.",
            status_code=resp.status_code,
            body_snippet=(resp.text or "")[:400],
        ) from exc

    if not isinstance(payload, dict):
        raise ParseError(f"{provider} returned unexpected JSON shape (not an object).", status_code=resp.status_code)
    return payload
