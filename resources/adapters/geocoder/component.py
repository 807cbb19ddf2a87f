"""Component declaration for the geocoder adapter resource."""

from __future__ import annotations

from collections.abc import Mapping

from packages.beacon_shared.config import BeaconSettings
from packages.beacon_shared.manifest import (
    ComponentId,
    ModuleRoot,
    ResourceManifest,
    register_component,
)

RESOURCE_COMPONENT_ID = ComponentId("adapter_geocoder")

MANIFEST = register_component(
    ResourceManifest(
        id=RESOURCE_COMPONENT_ID,
        layer=0,
        system="state",
        kind="adapter",
        module_roots=frozenset({ModuleRoot("resources.adapters.geocoder")}),
        owner_service_id=ComponentId("service_resolution_pipeline"),
    )
)


def build_component(
    *, settings: BeaconSettings, components: Mapping[str, object]
) -> object:
    """Build the Nominatim-backed geocoder adapter."""
    del components
    from resources.adapters.geocoder.config import resolve_geocoder_settings
    from resources.adapters.geocoder.nominatim_adapter import NominatimGeocoder

    return NominatimGeocoder(settings=resolve_geocoder_settings(settings))
