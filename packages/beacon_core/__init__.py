"""Public API for the Beacon core runtime."""

from packages.beacon_core.health import (
    ComponentHealthResult,
    CoreHealthResult,
    evaluate_core_health,
)
from packages.beacon_core.runtime import BeaconRuntime

__all__ = [
    "BeaconRuntime",
    "ComponentHealthResult",
    "CoreHealthResult",
    "evaluate_core_health",
]
