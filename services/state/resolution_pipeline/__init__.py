"""Resolution Pipeline Service native package exports."""

from packages.beacon_shared.errors import MalformedGeocodeResponse, NoGeocodeResult
from services.state.resolution_pipeline.component import (
    MANIFEST,
    SERVICE_COMPONENT_ID,
)
from services.state.resolution_pipeline.config import (
    ResolutionPipelineSettings,
    resolve_resolution_pipeline_settings,
)
from services.state.resolution_pipeline.domain import (
    Coordinates,
    PipelineHealthStatus,
    ResolvedLocation,
    parse_coordinates,
)
from services.state.resolution_pipeline.implementation import (
    DefaultResolutionPipelineService,
)
from services.state.resolution_pipeline.service import (
    ResolutionPipelineService,
    build_resolution_pipeline_service,
)

__all__ = [
    "MANIFEST",
    "SERVICE_COMPONENT_ID",
    "Coordinates",
    "DefaultResolutionPipelineService",
    "MalformedGeocodeResponse",
    "NoGeocodeResult",
    "PipelineHealthStatus",
    "ResolutionPipelineService",
    "ResolutionPipelineSettings",
    "ResolvedLocation",
    "build_resolution_pipeline_service",
    "parse_coordinates",
    "resolve_resolution_pipeline_settings",
]
