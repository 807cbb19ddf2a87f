"""Public shared error API for Beacon components."""

from . import codes
from .exceptions import (
    BeaconError,
    ComputeFailure,
    ComputeTimeout,
    DeliveryFailure,
    MalformedGeocodeResponse,
    NoGeocodeResult,
    ServiceUnavailable,
    StoreUnavailable,
)
from .types import ErrorCategory

__all__ = [
    "BeaconError",
    "ComputeFailure",
    "ComputeTimeout",
    "DeliveryFailure",
    "ErrorCategory",
    "MalformedGeocodeResponse",
    "NoGeocodeResult",
    "ServiceUnavailable",
    "StoreUnavailable",
    "codes",
]
