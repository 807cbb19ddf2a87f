"""Component declaration for the Resolution Pipeline Service."""

from __future__ import annotations

from collections.abc import Mapping

from packages.beacon_shared.config import BeaconSettings
from packages.beacon_shared.manifest import (
    ComponentId,
    ModuleRoot,
    ServiceManifest,
    register_component,
)

SERVICE_COMPONENT_ID = ComponentId("service_resolution_pipeline")

MANIFEST = register_component(
    ServiceManifest(
        id=SERVICE_COMPONENT_ID,
        layer=1,
        system="state",
        module_roots=frozenset({ModuleRoot("services.state.resolution_pipeline")}),
        public_api_roots=frozenset(
            {ModuleRoot("services.state.resolution_pipeline.service")}
        ),
        depends_on=frozenset(
            {
                ComponentId("service_resolution_cache"),
                ComponentId("adapter_location_extractor"),
                ComponentId("adapter_geocoder"),
            }
        ),
    )
)


def build_component(
    *, settings: BeaconSettings, components: Mapping[str, object]
) -> object:
    """Build the pipeline over the cache and both resolution adapters."""
    from services.state.resolution_pipeline.service import (
        build_resolution_pipeline_service,
    )

    return build_resolution_pipeline_service(
        settings=settings,
        cache=components["service_resolution_cache"],
        extractor=components["adapter_location_extractor"],
        geocoder=components["adapter_geocoder"],
    )
