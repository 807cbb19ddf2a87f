"""Typed errors raised by the shared outbound HTTP client."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HttpClientError(Exception):
    """Base error for outbound HTTP call failures."""

    message: str
    method: str
    url: str
    retryable: bool = False

    def __str__(self) -> str:
        """Return the human-readable error message."""
        return self.message


@dataclass(frozen=True)
class HttpRequestError(HttpClientError):
    """Transport-level failure (DNS, connect, read timeout)."""

    cause: Exception | None = None


@dataclass(frozen=True)
class HttpStatusError(HttpClientError):
    """Non-success status code returned by the remote service."""

    status_code: int = 0
    response_body: str = ""


@dataclass(frozen=True)
class HttpJsonDecodeError(HttpClientError):
    """Successful response whose body is not valid JSON."""

    status_code: int = 0
    response_body: str = ""
    cause: Exception | None = None
