"""Canonical logging field names shared by every Beacon component.

Keeping names centralized prevents drift between the resolution and broadcast
services when log lines are queried together.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"

# Public API invocation fields.
COMPONENT_ID = "component_id"
API_NAME = "api_name"
PUBLIC_API_INVOCATION_EVENT = "public_api_invocation"
PUBLIC_API_COMPLETION_EVENT = "public_api_completion"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERRORS = "errors"
ERROR_CATEGORY = "error_category"

# Resolution cache fields.
RESOLUTION_KEY = "resolution_key"
CACHE_OUTCOME = "cache_outcome"

# Broadcast fields.
BROADCAST_EVENT = "broadcast_event"
SUBSCRIBER_ID = "subscriber_id"
RECIPIENTS = "recipients"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
