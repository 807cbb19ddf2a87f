"""Pydantic settings for the location extractor adapter resource."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from packages.beacon_shared.config import BeaconSettings, resolve_component_settings
from resources.adapters.location_extractor.component import RESOURCE_COMPONENT_ID


class LocationExtractorSettings(BaseModel):
    """Runtime settings for the static location extractor."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_location: str = "Manhattan, NYC"

    @field_validator("default_location")
    @classmethod
    def _validate_default_location(cls, value: str) -> str:
        normalized = value.strip()
        if normalized == "":
            raise ValueError("default_location must be non-empty")
        return normalized


def resolve_location_extractor_settings(
    settings: BeaconSettings,
) -> LocationExtractorSettings:
    """Resolve settings from ``components.adapter.location_extractor``."""
    return resolve_component_settings(
        settings=settings,
        component_id=str(RESOURCE_COMPONENT_ID),
        model=LocationExtractorSettings,
    )
