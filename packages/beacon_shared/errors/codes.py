"""Shared error code constants.

Codes are stable machine-readable identifiers attached to every Beacon
exception so façade layers can map failures without string matching.
"""

# Dependency / external system
DEPENDENCY_FAILURE = "DEPENDENCY_FAILURE"
DEPENDENCY_TIMEOUT = "DEPENDENCY_TIMEOUT"
DEPENDENCY_UNAVAILABLE = "DEPENDENCY_UNAVAILABLE"

# Resolution
COMPUTE_FAILED = "COMPUTE_FAILED"
NO_GEOCODE_RESULT = "NO_GEOCODE_RESULT"
MALFORMED_GEOCODE_RESPONSE = "MALFORMED_GEOCODE_RESPONSE"

# Broadcast
DELIVERY_FAILED = "DELIVERY_FAILED"
