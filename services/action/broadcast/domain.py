"""Domain contracts for Broadcast Service payloads."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Final, Protocol, runtime_checkable
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, JsonValue, field_validator

ENTITY_UPDATED: Final[str] = "entity_updated"
DERIVED_DATA_UPDATED: Final[str] = "derived_data_updated"
SUBSCRIBED: Final[str] = "subscribed"


@runtime_checkable
class SubscriberHandle(Protocol):
    """Transport-level connection able to receive one text frame at a time."""

    def send_text(self, message: str) -> None:
        """Deliver one serialized event; raise on failure."""


class SubscriberState(str, Enum):
    """Lifecycle state of one registered subscriber."""

    LIVE = "live"
    DISCONNECTED = "disconnected"


@dataclass(slots=True, eq=False)
class Subscriber:
    """Registry record for one connected handle."""

    handle: SubscriberHandle
    subscriber_id: str = field(default_factory=lambda: uuid4().hex)
    connected_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    state: SubscriberState = SubscriberState.LIVE


class BroadcastEvent(BaseModel):
    """One named state-change notification."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    event_name: str
    payload: JsonValue = None

    @field_validator("event_name")
    @classmethod
    def _validate_event_name(cls, value: str) -> str:
        normalized = value.strip()
        if normalized == "":
            raise ValueError("event_name must be non-empty")
        return normalized

    def to_message(self) -> str:
        """Serialize to the wire form ``{"event": ..., "data": ...}``."""
        return json.dumps(
            {"event": self.event_name, "data": self.payload},
            allow_nan=False,
        )


class BroadcastHealthStatus(BaseModel):
    """Broadcast channel readiness payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_ready: bool
    worker_alive: bool
    subscriber_count: int
    queue_depth: int
    detail: str
