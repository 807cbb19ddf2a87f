"""Pydantic settings for the geocoder adapter resource."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from packages.beacon_shared.config import BeaconSettings, resolve_component_settings
from resources.adapters.geocoder.component import RESOURCE_COMPONENT_ID


class GeocoderSettings(BaseModel):
    """Runtime settings for Nominatim search API access."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str = "https://nominatim.openstreetmap.org"
    # Nominatim's usage policy requires an identifying User-Agent.
    user_agent: str = "beacon-geocoder/0.1"
    timeout_seconds: float = Field(default=10.0, gt=0)
    max_retries: int = Field(default=1, ge=0)
    result_limit: int = Field(default=1, ge=1, le=50)


def resolve_geocoder_settings(settings: BeaconSettings) -> GeocoderSettings:
    """Resolve adapter settings from ``components.adapter.geocoder``."""
    return resolve_component_settings(
        settings=settings,
        component_id=str(RESOURCE_COMPONENT_ID),
        model=GeocoderSettings,
    )
