"""Component declaration for the Broadcast Service."""

from __future__ import annotations

from collections.abc import Mapping

from packages.beacon_shared.config import BeaconSettings
from packages.beacon_shared.manifest import (
    ComponentId,
    ModuleRoot,
    ServiceManifest,
    register_component,
)

SERVICE_COMPONENT_ID = ComponentId("service_broadcast")

MANIFEST = register_component(
    ServiceManifest(
        id=SERVICE_COMPONENT_ID,
        layer=1,
        system="action",
        module_roots=frozenset({ModuleRoot("services.action.broadcast")}),
        public_api_roots=frozenset({ModuleRoot("services.action.broadcast.service")}),
    )
)


def build_component(
    *, settings: BeaconSettings, components: Mapping[str, object]
) -> object:
    """Build the broadcast channel with its own subscriber registry."""
    del components
    from services.action.broadcast.service import build_broadcast_service

    return build_broadcast_service(settings=settings)
