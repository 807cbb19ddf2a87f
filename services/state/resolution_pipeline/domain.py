"""Domain contracts for Resolution Pipeline Service payloads."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from packages.beacon_shared.errors import MalformedGeocodeResponse


class Coordinates(BaseModel):
    """Validated WGS84 coordinate pair."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    lat: float = Field(ge=-90.0, le=90.0, allow_inf_nan=False)
    lon: float = Field(ge=-180.0, le=180.0, allow_inf_nan=False)

    @field_validator("lat", "lon", mode="before")
    @classmethod
    def _reject_booleans(cls, value: object) -> object:
        if isinstance(value, bool):
            raise ValueError("coordinate must be numeric, not boolean")
        if isinstance(value, str):
            return value.strip()
        return value


class PipelineHealthStatus(BaseModel):
    """Pipeline readiness payload derived from the resolution cache."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_ready: bool
    cache_ready: bool
    detail: str


class ResolvedLocation(BaseModel):
    """Location name plus coordinates resolved from free-form text."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    location_name: str
    lat: float
    lon: float


def parse_coordinates(candidate: object, *, key: str) -> Coordinates:
    """Validate one geocoder candidate into ``Coordinates``.

    Extra candidate fields (``display_name`` and friends) are ignored.
    """
    if not isinstance(candidate, Mapping):
        raise MalformedGeocodeResponse(
            f"geocode candidate must be an object, got {type(candidate).__name__}",
            key=key,
        )
    try:
        return Coordinates.model_validate(
            {"lat": candidate.get("lat"), "lon": candidate.get("lon")}
        )
    except ValidationError as exc:
        raise MalformedGeocodeResponse(
            f"geocode candidate has invalid coordinates: {exc.error_count()} error(s)",
            key=key,
            cause=exc,
        ) from exc
