"""Pydantic settings for Resolution Pipeline Service behavior."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from packages.beacon_shared.config import BeaconSettings, resolve_component_settings
from services.state.resolution_cache.domain import validate_namespace
from services.state.resolution_pipeline.component import SERVICE_COMPONENT_ID


class ResolutionPipelineSettings(BaseModel):
    """Namespaces and TTLs for the locate and geocode stages."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    locate_namespace: str = "locate"
    geocode_namespace: str = "geocode"
    locate_ttl_seconds: int = Field(default=3600, gt=0)
    geocode_ttl_seconds: int = Field(default=3600, gt=0)

    @field_validator("locate_namespace", "geocode_namespace")
    @classmethod
    def _validate_namespace(cls, value: str) -> str:
        return validate_namespace(value)

    @model_validator(mode="after")
    def _validate_distinct_namespaces(self) -> "ResolutionPipelineSettings":
        if self.locate_namespace == self.geocode_namespace:
            raise ValueError("locate_namespace and geocode_namespace must differ")
        return self


def resolve_resolution_pipeline_settings(
    settings: BeaconSettings,
) -> ResolutionPipelineSettings:
    """Resolve settings from ``components.service.resolution_pipeline``."""
    return resolve_component_settings(
        settings=settings,
        component_id=str(SERVICE_COMPONENT_ID),
        model=ResolutionPipelineSettings,
    )
