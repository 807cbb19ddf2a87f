"""Pydantic settings for Resolution Cache Service behavior."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.beacon_shared.config import BeaconSettings, resolve_component_settings
from services.state.resolution_cache.component import SERVICE_COMPONENT_ID


class ResolutionCacheSettings(BaseModel):
    """Resolution cache runtime behavior settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key_prefix: str = "beacon"
    default_ttl_seconds: int = Field(default=3600, gt=0)
    # Backend-only housekeeping TTL added past logical expiry; None keeps keys.
    expired_retention_seconds: int | None = Field(default=86400, ge=0)
    coalesce_concurrent_misses: bool = True
    compute_timeout_seconds: float | None = Field(default=None, gt=0)
    compute_workers: int = Field(default=8, gt=0)

    @field_validator("key_prefix", mode="before")
    @classmethod
    def _validate_key_prefix(cls, value: object) -> object:
        """Reject blank key prefixes used for store key generation."""
        if isinstance(value, str):
            normalized = value.strip()
            if normalized == "":
                raise ValueError("key_prefix must be non-empty")
            return normalized
        return value


def resolve_resolution_cache_settings(
    settings: BeaconSettings,
) -> ResolutionCacheSettings:
    """Resolve settings from ``components.service.resolution_cache``."""
    return resolve_component_settings(
        settings=settings,
        component_id=str(SERVICE_COMPONENT_ID),
        model=ResolutionCacheSettings,
    )
