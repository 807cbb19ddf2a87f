"""In-process geocoder adapter over the Nominatim search API."""

from __future__ import annotations

from typing import Any

import httpx

from packages.beacon_shared.errors import (
    ComputeFailure,
    MalformedGeocodeResponse,
    ServiceUnavailable,
)
from packages.beacon_shared.http import (
    HttpClient,
    HttpClientError,
    HttpJsonDecodeError,
    HttpStatusError,
)
from packages.beacon_shared.logging import get_logger, public_api_instrumented
from resources.adapters.geocoder.adapter import Geocoder, GeocoderHealthResult
from resources.adapters.geocoder.component import RESOURCE_COMPONENT_ID
from resources.adapters.geocoder.config import GeocoderSettings

_LOGGER = get_logger(__name__)


class NominatimGeocoder(Geocoder):
    """Geocoder backed by ``GET /search`` on a Nominatim instance."""

    def __init__(
        self,
        *,
        settings: GeocoderSettings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._client = HttpClient(
            base_url=settings.base_url.rstrip("/"),
            timeout_seconds=settings.timeout_seconds,
            headers={
                "User-Agent": settings.user_agent,
                "Accept": "application/json",
            },
            transport=transport,
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("location_name",),
    )
    def geocode(self, location_name: str) -> list[Any]:
        """Return raw Nominatim candidates for ``location_name``.

        Candidates keep Nominatim's shape, with ``lat`` and ``lon`` as
        strings; an empty list means no match.
        """
        payload = self._search(location_name)
        if not isinstance(payload, list):
            raise MalformedGeocodeResponse(
                "nominatim search response must be a JSON array",
                key=location_name,
            )
        return payload

    def health(self) -> GeocoderHealthResult:
        """Probe the Nominatim ``/status`` endpoint."""
        try:
            self._client.get("/status", params={"format": "json"})
        except HttpClientError as exc:
            return GeocoderHealthResult(
                adapter_ready=False,
                detail=f"nominatim status failed: {exc}",
            )
        return GeocoderHealthResult(adapter_ready=True, detail="ok")

    def close(self) -> None:
        """Release pooled HTTP connections."""
        self._client.close()

    def _search(self, location_name: str) -> Any:
        """Issue the search request with retries for transient failures."""
        params = {
            "q": location_name,
            "format": "json",
            "limit": str(self._settings.result_limit),
        }
        attempts = self._settings.max_retries + 1
        last_error: HttpClientError | None = None
        for attempt in range(attempts):
            try:
                return self._client.get_json("/search", params=params)
            except HttpJsonDecodeError as exc:
                raise MalformedGeocodeResponse(
                    f"nominatim returned invalid JSON: {exc}",
                    key=location_name,
                    cause=exc,
                ) from exc
            except HttpStatusError as exc:
                if not exc.retryable:
                    raise ComputeFailure(
                        f"nominatim rejected search with HTTP {exc.status_code}",
                        key=location_name,
                        cause=exc,
                    ) from exc
                last_error = exc
            except HttpClientError as exc:
                last_error = exc
            _LOGGER.warning(
                "nominatim search attempt %d/%d failed: %s",
                attempt + 1,
                attempts,
                last_error,
            )
        assert last_error is not None
        raise ServiceUnavailable(
            f"nominatim unavailable after {attempts} attempt(s): {last_error}",
            key=location_name,
            cause=last_error,
        ) from last_error
