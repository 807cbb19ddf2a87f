"""Pydantic settings for Broadcast Service behavior."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.beacon_shared.config import BeaconSettings, resolve_component_settings
from services.action.broadcast.component import SERVICE_COMPONENT_ID


class BroadcastSettings(BaseModel):
    """Broadcast channel queueing, delivery and transport settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_pending_events: int = Field(default=1000, gt=0)
    send_timeout_seconds: float = Field(default=5.0, gt=0)
    shutdown_timeout_seconds: float = Field(default=5.0, ge=0)
    websocket_path: str = "/v1/events"

    @field_validator("websocket_path")
    @classmethod
    def _validate_websocket_path(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized.startswith("/"):
            raise ValueError("websocket_path must start with '/'")
        return normalized


def resolve_broadcast_settings(settings: BeaconSettings) -> BroadcastSettings:
    """Resolve settings from ``components.service.broadcast``."""
    return resolve_component_settings(
        settings=settings,
        component_id=str(SERVICE_COMPONENT_ID),
        model=BroadcastSettings,
    )
