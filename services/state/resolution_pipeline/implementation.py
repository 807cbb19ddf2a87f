"""Concrete Resolution Pipeline Service implementation.

Stage one maps raw text to a place name under the locate namespace, keyed by
the SHA-256 of the text. Stage two maps the place name to coordinates under
the geocode namespace. Both stages go through the resolution cache, so a
failure in either stage is never cached.
"""

from __future__ import annotations

import hashlib
from collections.abc import Mapping, Sequence

from pydantic import JsonValue

from packages.beacon_shared.errors import (
    ComputeFailure,
    MalformedGeocodeResponse,
    NoGeocodeResult,
)
from packages.beacon_shared.logging import get_logger, public_api_instrumented
from resources.adapters.geocoder import Geocoder
from resources.adapters.location_extractor import LocationExtractor
from services.state.resolution_cache.domain import build_resolution_key
from services.state.resolution_cache.service import ResolutionCacheService
from services.state.resolution_pipeline.component import SERVICE_COMPONENT_ID
from services.state.resolution_pipeline.config import ResolutionPipelineSettings
from services.state.resolution_pipeline.domain import (
    Coordinates,
    PipelineHealthStatus,
    ResolvedLocation,
    parse_coordinates,
)
from services.state.resolution_pipeline.service import ResolutionPipelineService

_LOGGER = get_logger(__name__)


class DefaultResolutionPipelineService(ResolutionPipelineService):
    """Two-stage locate/geocode pipeline over the resolution cache."""

    def __init__(
        self,
        *,
        settings: ResolutionPipelineSettings,
        cache: ResolutionCacheService,
        extractor: LocationExtractor,
        geocoder: Geocoder,
    ) -> None:
        self._settings = settings
        self._cache = cache
        self._extractor = extractor
        self._geocoder = geocoder

    @public_api_instrumented(logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID))
    def locate(self, *, raw_text: str) -> str:
        """Resolve the place named in ``raw_text`` through the locate cache."""
        return self._locate(_require_text(raw_text, field_name="raw_text"))

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("location_name",),
    )
    def geocode(self, *, location_name: str) -> Coordinates:
        """Resolve coordinates for one place name through the geocode cache."""
        name = _require_text(location_name, field_name="location_name").strip()
        return self._geocode(name)

    @public_api_instrumented(logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID))
    def resolve_coordinates(self, *, raw_text: str) -> Coordinates:
        """Run both stages and return only the coordinates."""
        location_name = self._locate(_require_text(raw_text, field_name="raw_text"))
        return self._geocode(location_name)

    @public_api_instrumented(logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID))
    def resolve_location(self, *, raw_text: str) -> ResolvedLocation:
        """Run both stages and return the place name with its coordinates."""
        location_name = self._locate(_require_text(raw_text, field_name="raw_text"))
        coordinates = self._geocode(location_name)
        return ResolvedLocation(
            location_name=location_name,
            lat=coordinates.lat,
            lon=coordinates.lon,
        )

    def health(self) -> PipelineHealthStatus:
        """Return pipeline readiness from its resolution cache."""
        cache_status = self._cache.health()
        return PipelineHealthStatus(
            service_ready=True,
            cache_ready=cache_status.service_ready and cache_status.store_ready,
            detail=cache_status.detail,
        )

    def _locate(self, raw_text: str) -> str:
        """Resolve stage one for already-validated text."""
        digest = hashlib.sha256(raw_text.encode("utf-8")).hexdigest()
        key = build_resolution_key(self._settings.locate_namespace, digest)
        value = self._cache.resolve(
            key=key,
            compute=lambda: self._extract(raw_text, key=key),
            ttl_seconds=self._settings.locate_ttl_seconds,
        )
        if not isinstance(value, str) or value.strip() == "":
            raise ComputeFailure(f"cached location for '{key}' is not a name", key=key)
        return value

    def _geocode(self, location_name: str) -> Coordinates:
        """Resolve stage two for an already-normalized place name."""
        key = build_resolution_key(self._settings.geocode_namespace, location_name)
        value = self._cache.resolve(
            key=key,
            compute=lambda: self._lookup_coordinates(location_name, key=key),
            ttl_seconds=self._settings.geocode_ttl_seconds,
        )
        return parse_coordinates(value, key=key)

    def _extract(self, raw_text: str, *, key: str) -> str:
        """Call the extractor and normalize its answer to a place name."""
        result = self._extractor.extract_location(raw_text=raw_text)
        if isinstance(result, Mapping):
            result = result.get("location")
        if not isinstance(result, str) or result.strip() == "":
            raise ComputeFailure(
                "location extractor returned no usable location name",
                key=key,
            )
        return result.strip()

    def _lookup_coordinates(self, location_name: str, *, key: str) -> JsonValue:
        """Call the geocoder and reduce its answer to one coordinate pair."""
        result = self._geocoder.geocode(location_name=location_name)
        if result is None:
            raise NoGeocodeResult(f"no geocode result for '{location_name}'", key=key)
        if isinstance(result, Mapping):
            candidate: object = result
        elif isinstance(result, Sequence) and not isinstance(result, (str, bytes)):
            if len(result) == 0:
                raise NoGeocodeResult(
                    f"no geocode result for '{location_name}'", key=key
                )
            candidate = result[0]
        else:
            raise MalformedGeocodeResponse(
                f"geocoder returned unsupported {type(result).__name__}",
                key=key,
            )
        coordinates = parse_coordinates(candidate, key=key)
        _LOGGER.info(
            "geocoded %s to (%s, %s)", location_name, coordinates.lat, coordinates.lon
        )
        return coordinates.model_dump(mode="json")


def _require_text(value: str, *, field_name: str) -> str:
    """Reject non-string or blank inputs before any cache access."""
    if not isinstance(value, str) or value.strip() == "":
        raise ValueError(f"{field_name} must be a non-blank string")
    return value
