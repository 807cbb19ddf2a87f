"""Resolution Cache Service native package exports."""

from packages.beacon_shared.errors import (
    ComputeFailure,
    ComputeTimeout,
    StoreUnavailable,
)
from services.state.resolution_cache.component import MANIFEST, SERVICE_COMPONENT_ID
from services.state.resolution_cache.config import (
    ResolutionCacheSettings,
    resolve_resolution_cache_settings,
)
from services.state.resolution_cache.domain import (
    ComputeFn,
    HealthStatus,
    StoredEntry,
    build_resolution_key,
    utc_now,
    validate_namespace,
)
from services.state.resolution_cache.implementation import (
    DefaultResolutionCacheService,
)
from services.state.resolution_cache.service import (
    ResolutionCacheService,
    build_resolution_cache_service,
)
from services.state.resolution_cache.store import ExpiringStore

__all__ = [
    "MANIFEST",
    "SERVICE_COMPONENT_ID",
    "ComputeFailure",
    "ComputeFn",
    "ComputeTimeout",
    "DefaultResolutionCacheService",
    "ExpiringStore",
    "HealthStatus",
    "ResolutionCacheService",
    "ResolutionCacheSettings",
    "StoreUnavailable",
    "StoredEntry",
    "build_resolution_cache_service",
    "build_resolution_key",
    "resolve_resolution_cache_settings",
    "utc_now",
    "validate_namespace",
]
