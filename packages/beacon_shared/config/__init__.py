"""Public API for shared Beacon configuration utilities."""

from .loader import load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    BeaconSettings,
    ComponentsSettings,
    CoreHttpSettings,
    LoggingSettings,
    resolve_component_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "BeaconSettings",
    "ComponentsSettings",
    "CoreHttpSettings",
    "LoggingSettings",
    "load_settings",
    "resolve_component_settings",
]
