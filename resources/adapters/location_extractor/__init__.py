"""Location extractor adapter resource exports."""

from resources.adapters.location_extractor.adapter import (
    LocationExtractor,
    LocationExtractorHealthResult,
)
from resources.adapters.location_extractor.component import (
    MANIFEST,
    RESOURCE_COMPONENT_ID,
)
from resources.adapters.location_extractor.config import (
    LocationExtractorSettings,
    resolve_location_extractor_settings,
)
from resources.adapters.location_extractor.static_extractor import (
    StaticLocationExtractor,
)

__all__ = [
    "MANIFEST",
    "RESOURCE_COMPONENT_ID",
    "LocationExtractor",
    "LocationExtractorHealthResult",
    "LocationExtractorSettings",
    "StaticLocationExtractor",
    "resolve_location_extractor_settings",
]
