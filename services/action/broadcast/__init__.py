"""Broadcast Service native package exports."""

from packages.beacon_shared.errors import DeliveryFailure
from services.action.broadcast.component import MANIFEST, SERVICE_COMPONENT_ID
from services.action.broadcast.config import (
    BroadcastSettings,
    resolve_broadcast_settings,
)
from services.action.broadcast.domain import (
    DERIVED_DATA_UPDATED,
    ENTITY_UPDATED,
    SUBSCRIBED,
    BroadcastEvent,
    BroadcastHealthStatus,
    Subscriber,
    SubscriberHandle,
    SubscriberState,
)
from services.action.broadcast.implementation import DefaultBroadcastChannel
from services.action.broadcast.registry import SubscriberRegistry
from services.action.broadcast.service import (
    BroadcastService,
    build_broadcast_service,
)

__all__ = [
    "DERIVED_DATA_UPDATED",
    "ENTITY_UPDATED",
    "MANIFEST",
    "SERVICE_COMPONENT_ID",
    "SUBSCRIBED",
    "BroadcastEvent",
    "BroadcastHealthStatus",
    "BroadcastService",
    "BroadcastSettings",
    "DefaultBroadcastChannel",
    "DeliveryFailure",
    "Subscriber",
    "SubscriberHandle",
    "SubscriberRegistry",
    "SubscriberState",
    "build_broadcast_service",
    "resolve_broadcast_settings",
]
