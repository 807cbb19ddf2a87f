"""Redis client-backed substrate implementation."""

from __future__ import annotations

from packages.beacon_shared.logging import get_logger, public_api_instrumented
from resources.substrates.redis.client import create_redis_client
from resources.substrates.redis.component import RESOURCE_COMPONENT_ID
from resources.substrates.redis.config import RedisSettings
from resources.substrates.redis.substrate import RedisHealthStatus, RedisSubstrate

_LOGGER = get_logger(__name__)


class RedisClientSubstrate(RedisSubstrate):
    """Concrete Redis substrate using redis-py string operations."""

    def __init__(self, *, settings: RedisSettings) -> None:
        self._client = create_redis_client(settings)
        self._health_client = create_redis_client(
            settings, timeout_seconds=settings.health_timeout_seconds
        )

    @public_api_instrumented(logger=_LOGGER, component_id=str(RESOURCE_COMPONENT_ID))
    def set_value(self, *, key: str, value: str, ttl_seconds: int | None) -> None:
        """Upsert one value, replacing any prior value and TTL for ``key``."""
        if ttl_seconds is None:
            self._client.set(name=key, value=value)
            return
        self._client.set(name=key, value=value, ex=ttl_seconds)

    @public_api_instrumented(logger=_LOGGER, component_id=str(RESOURCE_COMPONENT_ID))
    def get_value(self, *, key: str) -> str | None:
        """Read one value by key."""
        value = self._client.get(name=key)
        if value is None:
            return None
        return str(value)

    def ping(self) -> bool:
        """Return Redis ping status from the short-timeout health client."""
        return bool(self._health_client.ping())

    def health(self) -> RedisHealthStatus:
        """Return Redis substrate readiness and concise detail."""
        try:
            ready = self.ping()
        except Exception as exc:  # noqa: BLE001
            return RedisHealthStatus(
                ready=False,
                detail=f"redis ping failed: {type(exc).__name__}",
            )
        return RedisHealthStatus(
            ready=ready,
            detail="ok" if ready else "redis ping returned false",
        )

    def close(self) -> None:
        """Release pooled connections held by both clients."""
        self._client.close()
        self._health_client.close()
