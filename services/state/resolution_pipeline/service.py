"""Authoritative in-process Python API for the Resolution Pipeline Service."""

from __future__ import annotations

from abc import ABC, abstractmethod

from packages.beacon_shared.config import BeaconSettings
from resources.adapters.geocoder import Geocoder
from resources.adapters.location_extractor import LocationExtractor
from services.state.resolution_cache.service import ResolutionCacheService
from services.state.resolution_pipeline.domain import (
    Coordinates,
    PipelineHealthStatus,
    ResolvedLocation,
)


class ResolutionPipelineService(ABC):
    """Public API resolving free-form text into cached coordinates."""

    @abstractmethod
    def locate(self, *, raw_text: str) -> str:
        """Resolve the place named in ``raw_text`` through the locate cache."""

    @abstractmethod
    def geocode(self, *, location_name: str) -> Coordinates:
        """Resolve coordinates for one place name through the geocode cache."""

    @abstractmethod
    def resolve_coordinates(self, *, raw_text: str) -> Coordinates:
        """Run both stages and return only the coordinates."""

    @abstractmethod
    def resolve_location(self, *, raw_text: str) -> ResolvedLocation:
        """Run both stages and return the place name with its coordinates."""

    @abstractmethod
    def health(self) -> PipelineHealthStatus:
        """Return pipeline readiness from its resolution cache."""


def build_resolution_pipeline_service(
    *,
    settings: BeaconSettings,
    cache: ResolutionCacheService,
    extractor: LocationExtractor,
    geocoder: Geocoder,
) -> ResolutionPipelineService:
    """Build default pipeline implementation from typed settings."""
    from services.state.resolution_pipeline.config import (
        resolve_resolution_pipeline_settings,
    )
    from services.state.resolution_pipeline.implementation import (
        DefaultResolutionPipelineService,
    )

    return DefaultResolutionPipelineService(
        settings=resolve_resolution_pipeline_settings(settings),
        cache=cache,
        extractor=extractor,
        geocoder=geocoder,
    )
