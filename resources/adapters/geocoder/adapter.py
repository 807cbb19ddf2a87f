"""Transport-agnostic geocoder adapter protocol and DTOs."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


class GeocoderHealthResult(BaseModel):
    """Readiness payload for geocoder adapter dependencies."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    adapter_ready: bool
    detail: str


@runtime_checkable
class Geocoder(Protocol):
    """Protocol for turning a place name into coordinate candidates."""

    def geocode(self, location_name: str) -> Any:
        """Return one ``{lat, lon}`` mapping, a candidate list, or ``None``."""
