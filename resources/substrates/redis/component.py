"""Component declaration for the Redis substrate resource."""

from __future__ import annotations

from collections.abc import Mapping

from packages.beacon_shared.config import BeaconSettings
from packages.beacon_shared.manifest import (
    ComponentId,
    ModuleRoot,
    ResourceManifest,
    register_component,
)

RESOURCE_COMPONENT_ID = ComponentId("substrate_redis")

MANIFEST = register_component(
    ResourceManifest(
        id=RESOURCE_COMPONENT_ID,
        layer=0,
        system="state",
        kind="substrate",
        module_roots=frozenset({ModuleRoot("resources.substrates.redis")}),
        owner_service_id=ComponentId("service_resolution_cache"),
    )
)


def build_component(
    *, settings: BeaconSettings, components: Mapping[str, object]
) -> object:
    """Build the Redis substrate from ``components.substrate.redis``."""
    del components
    from resources.substrates.redis.config import resolve_redis_settings
    from resources.substrates.redis.redis_substrate import RedisClientSubstrate

    return RedisClientSubstrate(settings=resolve_redis_settings(settings))
