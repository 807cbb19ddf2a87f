"""Authoritative in-process Python API for the Resolution Cache Service."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import JsonValue

from packages.beacon_shared.config import BeaconSettings
from resources.substrates.redis import RedisSubstrate
from services.state.resolution_cache.domain import ComputeFn, HealthStatus


class ResolutionCacheService(ABC):
    """Public API for cache-aside resolution of expensive lookups."""

    @abstractmethod
    def resolve(
        self,
        *,
        key: str,
        compute: ComputeFn,
        ttl_seconds: int | None = None,
        timeout_seconds: float | None = None,
    ) -> JsonValue:
        """Return the live cached value for ``key`` or compute and store it."""

    @abstractmethod
    def health(self) -> HealthStatus:
        """Return resolution cache and store readiness."""

    @abstractmethod
    def close(self) -> None:
        """Release compute workers owned by the service."""


def build_resolution_cache_service(
    *,
    settings: BeaconSettings,
    backend: RedisSubstrate | None = None,
) -> ResolutionCacheService:
    """Build default resolution cache implementation from typed settings."""
    from resources.substrates.redis import (
        RedisClientSubstrate,
        resolve_redis_settings,
    )
    from services.state.resolution_cache.config import (
        resolve_resolution_cache_settings,
    )
    from services.state.resolution_cache.implementation import (
        DefaultResolutionCacheService,
    )
    from services.state.resolution_cache.store import ExpiringStore

    service_settings = resolve_resolution_cache_settings(settings)
    store = ExpiringStore(
        backend=backend
        or RedisClientSubstrate(settings=resolve_redis_settings(settings)),
        key_prefix=service_settings.key_prefix,
        expired_retention_seconds=service_settings.expired_retention_seconds,
    )
    return DefaultResolutionCacheService(settings=service_settings, store=store)
