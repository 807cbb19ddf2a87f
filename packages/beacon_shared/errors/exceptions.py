"""Exception taxonomy raised by the resolution and broadcast components."""

from __future__ import annotations

from . import codes
from .types import ErrorCategory


class BeaconError(Exception):
    """Base exception carrying a stable code, category and retry hint."""

    code: str = codes.DEPENDENCY_FAILURE
    category: ErrorCategory = ErrorCategory.INTERNAL
    retryable: bool = False

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.key = key


class StoreUnavailable(BeaconError):
    """The backing key/value store could not be reached."""

    code = codes.DEPENDENCY_UNAVAILABLE
    category = ErrorCategory.DEPENDENCY
    retryable = True


class ComputeFailure(BeaconError):
    """A resolver callback failed; the failure is never cached."""

    code = codes.COMPUTE_FAILED
    category = ErrorCategory.DEPENDENCY
    retryable = True

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, key=key)
        self.cause = cause


class ComputeTimeout(ComputeFailure):
    """A resolver callback exceeded its configured time bound."""

    code = codes.DEPENDENCY_TIMEOUT


class ServiceUnavailable(ComputeFailure):
    """An external resolution service (geocoder, extractor) is unreachable."""

    code = codes.DEPENDENCY_UNAVAILABLE


class NoGeocodeResult(ComputeFailure):
    """The geocoding service returned zero candidates for a location."""

    code = codes.NO_GEOCODE_RESULT
    category = ErrorCategory.NOT_FOUND
    retryable = False


class MalformedGeocodeResponse(ComputeFailure):
    """The geocoding service answered with unusable coordinates."""

    code = codes.MALFORMED_GEOCODE_RESPONSE
    category = ErrorCategory.INTERNAL
    retryable = False


class DeliveryFailure(BeaconError):
    """Sending one broadcast message to one subscriber failed."""

    code = codes.DELIVERY_FAILED
    category = ErrorCategory.DEPENDENCY
    retryable = False
