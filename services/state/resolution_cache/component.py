"""Component declaration for the Resolution Cache Service."""

from __future__ import annotations

from collections.abc import Mapping

from packages.beacon_shared.config import BeaconSettings
from packages.beacon_shared.manifest import (
    ComponentId,
    ModuleRoot,
    ServiceManifest,
    register_component,
)

SERVICE_COMPONENT_ID = ComponentId("service_resolution_cache")

MANIFEST = register_component(
    ServiceManifest(
        id=SERVICE_COMPONENT_ID,
        layer=1,
        system="state",
        module_roots=frozenset({ModuleRoot("services.state.resolution_cache")}),
        public_api_roots=frozenset(
            {ModuleRoot("services.state.resolution_cache.service")}
        ),
        depends_on=frozenset({ComponentId("substrate_redis")}),
    )
)


def build_component(
    *, settings: BeaconSettings, components: Mapping[str, object]
) -> object:
    """Build the resolution cache over the already-built Redis substrate."""
    from services.state.resolution_cache.service import build_resolution_cache_service

    return build_resolution_cache_service(
        settings=settings,
        backend=components["substrate_redis"],
    )
