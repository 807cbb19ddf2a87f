"""Location extractor that answers one configured place for any text."""

from __future__ import annotations

from packages.beacon_shared.logging import get_logger, public_api_instrumented
from resources.adapters.location_extractor.adapter import (
    LocationExtractor,
    LocationExtractorHealthResult,
)
from resources.adapters.location_extractor.component import RESOURCE_COMPONENT_ID
from resources.adapters.location_extractor.config import LocationExtractorSettings

_LOGGER = get_logger(__name__)


class StaticLocationExtractor(LocationExtractor):
    """Stand-in for a model-backed extractor."""

    def __init__(self, *, settings: LocationExtractorSettings) -> None:
        self._settings = settings

    @public_api_instrumented(logger=_LOGGER, component_id=str(RESOURCE_COMPONENT_ID))
    def extract_location(self, raw_text: str) -> dict[str, str]:
        """Return ``{"location": <default_location>}``."""
        del raw_text
        return {"location": self._settings.default_location}

    def health(self) -> LocationExtractorHealthResult:
        """Static extraction has no dependencies to probe."""
        return LocationExtractorHealthResult(adapter_ready=True, detail="static")
