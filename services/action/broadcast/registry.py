"""Process-local registry of live broadcast subscribers.

Handles are tracked by identity, so transport objects that are unhashable or
define their own equality still register one subscriber each.
"""

from __future__ import annotations

from threading import Lock

from packages.beacon_shared.logging import fields, get_logger
from services.action.broadcast.domain import (
    Subscriber,
    SubscriberHandle,
    SubscriberState,
)

_LOGGER = get_logger(__name__)


class SubscriberRegistry:
    """Thread-safe set of live subscriber handles."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._subscribers: dict[int, Subscriber] = {}

    def register(self, handle: SubscriberHandle) -> Subscriber:
        """Add ``handle`` as live; registering a live handle is a no-op."""
        with self._lock:
            existing = self._subscribers.get(id(handle))
            if existing is not None:
                return existing
            subscriber = Subscriber(handle=handle)
            self._subscribers[id(handle)] = subscriber
            count = len(self._subscribers)
        _LOGGER.info(
            "subscriber registered",
            extra={
                fields.SUBSCRIBER_ID: subscriber.subscriber_id,
                "subscribers": count,
            },
        )
        return subscriber

    def unregister(self, handle: SubscriberHandle) -> bool:
        """Mark ``handle`` disconnected and drop it; ``False`` if not live."""
        with self._lock:
            subscriber = self._subscribers.get(id(handle))
            if subscriber is None:
                return False
            del self._subscribers[id(handle)]
            subscriber.state = SubscriberState.DISCONNECTED
            count = len(self._subscribers)
        _LOGGER.info(
            "subscriber unregistered",
            extra={
                fields.SUBSCRIBER_ID: subscriber.subscriber_id,
                "subscribers": count,
            },
        )
        return True

    def subscriber_for(self, handle: SubscriberHandle) -> Subscriber | None:
        """Return the live record for ``handle`` or ``None``."""
        with self._lock:
            return self._subscribers.get(id(handle))

    def live_handles(self) -> tuple[SubscriberHandle, ...]:
        """Snapshot of handles live at call time, in registration order."""
        with self._lock:
            return tuple(item.handle for item in self._subscribers.values())

    def count(self) -> int:
        """Return the number of live subscribers."""
        with self._lock:
            return len(self._subscribers)

    def close(self) -> None:
        """Disconnect every subscriber."""
        with self._lock:
            subscribers = list(self._subscribers.values())
            self._subscribers.clear()
        for subscriber in subscribers:
            subscriber.state = SubscriberState.DISCONNECTED
        if subscribers:
            _LOGGER.info(
                "subscriber registry closed",
                extra={"subscribers": len(subscribers)},
            )
