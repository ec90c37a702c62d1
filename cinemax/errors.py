"""
Error taxonomy for upstream movie/video providers.

Clients raise these; `cinemax.search.describe_error` is the one place that turns
them into user-facing text.
"""

from __future__ import annotations


class MovieClientError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, body_snippet: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_snippet = body_snippet


class ConfigurationError(MovieClientError):
    """A required key or setting is missing or invalid."""


class NetworkError(MovieClientError):
    """Transport-level failure: DNS, connection reset, unreachable host."""


class RequestTimeoutError(NetworkError):
    """The request did not complete within the configured timeout."""


class UpstreamError(MovieClientError):
    """The provider answered with a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        provider_message: str | None = None,
        body_snippet: str | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, body_snippet=body_snippet)
        self.provider_message = provider_message


class ParseError(UpstreamError):
    """The provider body was not the JSON object we expected."""


class NotFoundError(MovieClientError):
    """The provider returned an empty result set. Not a hard failure."""


class BatchFetchError(MovieClientError):
    """Every per-item detail fetch in a fan-out failed."""

    def __init__(self, message: str, *, failures: list[BaseException] | None = None) -> None:
        super().__init__(message)
        self.failures = list(failures or [])
