"""Synchronous JSON-over-HTTP client for outbound adapters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from .errors import HttpJsonDecodeError, HttpRequestError, HttpStatusError


class HttpClient:
    """``httpx.Client`` wrapper raising ``HttpClientError`` subclasses.

    Transport failures are always marked retryable; status failures are
    retryable for 5xx and 429. Retry policy itself belongs to the caller.
    """

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout_seconds: float = 10.0,
        headers: Mapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout_seconds,
            headers=dict(headers or {}),
            transport=transport,
        )

    def close(self) -> None:
        """Close pooled connections."""
        self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def get(
        self, path: str, *, params: Mapping[str, str] | None = None
    ) -> httpx.Response:
        """Send one GET and return the response if its status is 2xx or 3xx."""
        request = self._client.build_request("GET", path, params=params)
        url = str(request.url)
        try:
            response = self._client.send(request)
        except httpx.RequestError as exc:
            raise HttpRequestError(
                message=f"HTTP request failed for GET {url}",
                method="GET",
                url=url,
                retryable=True,
                cause=exc,
            ) from exc

        if response.is_error:
            code = response.status_code
            raise HttpStatusError(
                message=f"HTTP {code} for GET {url}",
                method="GET",
                url=url,
                retryable=code >= 500 or code == 429,
                status_code=code,
                response_body=response.text,
            )
        return response

    def get_json(self, path: str, *, params: Mapping[str, str] | None = None) -> Any:
        """Send one GET and decode its JSON body."""
        response = self.get(path, params=params)
        try:
            return response.json()
        except ValueError as exc:
            raise HttpJsonDecodeError(
                message=f"Invalid JSON response for GET {response.request.url}",
                method="GET",
                url=str(response.request.url),
                status_code=response.status_code,
                response_body=response.text,
                cause=exc,
            ) from exc
