"""Transport-agnostic substrate contract for Redis-backed key/value storage."""

from __future__ import annotations

from typing import Protocol

from pydantic import BaseModel, ConfigDict


class RedisHealthStatus(BaseModel):
    """Redis substrate readiness payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ready: bool
    detail: str


class RedisSubstrate(Protocol):
    """Protocol for direct Redis string operations used by the resolution cache."""

    def set_value(self, *, key: str, value: str, ttl_seconds: int | None) -> None:
        """Upsert one serialized value with an optional backend TTL in seconds."""

    def get_value(self, *, key: str) -> str | None:
        """Get one serialized value by key or ``None`` when missing."""

    def ping(self) -> bool:
        """Return substrate liveness from Redis ``PING``."""

    def health(self) -> RedisHealthStatus:
        """Probe Redis substrate readiness and detail."""
