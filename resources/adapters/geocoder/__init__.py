"""Geocoder adapter resource exports."""

from resources.adapters.geocoder.adapter import Geocoder, GeocoderHealthResult
from resources.adapters.geocoder.component import MANIFEST, RESOURCE_COMPONENT_ID
from resources.adapters.geocoder.config import (
    GeocoderSettings,
    resolve_geocoder_settings,
)
from resources.adapters.geocoder.nominatim_adapter import NominatimGeocoder

__all__ = [
    "MANIFEST",
    "RESOURCE_COMPONENT_ID",
    "Geocoder",
    "GeocoderHealthResult",
    "GeocoderSettings",
    "NominatimGeocoder",
    "resolve_geocoder_settings",
]
