"""Authoritative in-process Python API for the Broadcast Service."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import JsonValue

from packages.beacon_shared.config import BeaconSettings
from services.action.broadcast.config import BroadcastSettings
from services.action.broadcast.domain import (
    BroadcastHealthStatus,
    Subscriber,
    SubscriberHandle,
)


class BroadcastService(ABC):
    """Public API for fanning state-change events out to live subscribers."""

    @property
    @abstractmethod
    def settings(self) -> BroadcastSettings:
        """Return resolved broadcast settings."""

    @abstractmethod
    def register_subscriber(self, *, handle: SubscriberHandle) -> Subscriber:
        """Start delivering future events to ``handle``."""

    @abstractmethod
    def unregister_subscriber(self, *, handle: SubscriberHandle) -> bool:
        """Stop delivering events to ``handle``."""

    @abstractmethod
    def publish(self, *, event_name: str, payload: JsonValue) -> None:
        """Queue one event for every subscriber live right now; never raises."""

    @abstractmethod
    def publish_entity_updated(self, *, entity: JsonValue) -> None:
        """Publish ``entity_updated`` carrying the mutated entity."""

    @abstractmethod
    def publish_derived_data_updated(
        self, *, entity_id: str, data: JsonValue
    ) -> None:
        """Publish ``derived_data_updated`` for one entity."""

    @abstractmethod
    def start(self) -> None:
        """Start the delivery worker if it is not running."""

    @abstractmethod
    def flush(self, *, timeout_seconds: float | None = None) -> bool:
        """Wait for queued events to be delivered; ``False`` on timeout."""

    @abstractmethod
    def close(self, *, timeout_seconds: float | None = None) -> None:
        """Drain pending events, stop the worker and disconnect subscribers."""

    @abstractmethod
    def health(self) -> BroadcastHealthStatus:
        """Return worker, subscriber and queue state."""


def build_broadcast_service(*, settings: BeaconSettings) -> BroadcastService:
    """Build default broadcast channel from typed settings."""
    from services.action.broadcast.config import resolve_broadcast_settings
    from services.action.broadcast.implementation import DefaultBroadcastChannel
    from services.action.broadcast.registry import SubscriberRegistry

    return DefaultBroadcastChannel(
        settings=resolve_broadcast_settings(settings),
        registry=SubscriberRegistry(),
    )
