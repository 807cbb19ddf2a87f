"""Component declaration for the location extractor adapter resource."""

from __future__ import annotations

from collections.abc import Mapping

from packages.beacon_shared.config import BeaconSettings
from packages.beacon_shared.manifest import (
    ComponentId,
    ModuleRoot,
    ResourceManifest,
    register_component,
)

RESOURCE_COMPONENT_ID = ComponentId("adapter_location_extractor")

MANIFEST = register_component(
    ResourceManifest(
        id=RESOURCE_COMPONENT_ID,
        layer=0,
        system="state",
        kind="adapter",
        module_roots=frozenset({ModuleRoot("resources.adapters.location_extractor")}),
        owner_service_id=ComponentId("service_resolution_pipeline"),
    )
)


def build_component(
    *, settings: BeaconSettings, components: Mapping[str, object]
) -> object:
    """Build the configured static location extractor."""
    del components
    from resources.adapters.location_extractor.config import (
        resolve_location_extractor_settings,
    )
    from resources.adapters.location_extractor.static_extractor import (
        StaticLocationExtractor,
    )

    return StaticLocationExtractor(
        settings=resolve_location_extractor_settings(settings)
    )
