"""Concrete Broadcast Service implementation.

Publishing serializes the event once, snapshots the live handles and enqueues
a single delivery job. One daemon worker drains jobs in publish order, so
every subscriber sees events in the order they were published. A handle whose
send fails is unregistered; the rest of the job still goes out.
"""

from __future__ import annotations

import queue
from dataclasses import dataclass
from threading import Condition, Event, Lock, Thread

from pydantic import JsonValue, ValidationError

from packages.beacon_shared.errors import DeliveryFailure
from packages.beacon_shared.logging import (
    fields,
    get_logger,
    log_context,
    public_api_instrumented,
)
from services.action.broadcast.component import SERVICE_COMPONENT_ID
from services.action.broadcast.config import BroadcastSettings
from services.action.broadcast.domain import (
    DERIVED_DATA_UPDATED,
    ENTITY_UPDATED,
    BroadcastEvent,
    BroadcastHealthStatus,
    Subscriber,
    SubscriberHandle,
)
from services.action.broadcast.registry import SubscriberRegistry
from services.action.broadcast.service import BroadcastService

_LOGGER = get_logger(__name__)
_POLL_SECONDS = 0.1


@dataclass(frozen=True, slots=True)
class _DeliveryJob:
    """One serialized event and the handles live when it was published."""

    event_name: str
    message: str
    handles: tuple[SubscriberHandle, ...]


class DefaultBroadcastChannel(BroadcastService):
    """Broadcast channel with a bounded queue and one delivery worker."""

    def __init__(
        self,
        *,
        settings: BroadcastSettings,
        registry: SubscriberRegistry,
    ) -> None:
        self._settings = settings
        self._registry = registry
        self._queue: queue.Queue[_DeliveryJob] = queue.Queue(
            maxsize=settings.max_pending_events
        )
        self._lock = Lock()
        self._idle = Condition()
        self._pending = 0
        self._worker: Thread | None = None
        self._stop_event = Event()
        self._closed = False

    @property
    def settings(self) -> BroadcastSettings:
        """Return resolved broadcast settings."""
        return self._settings

    @property
    def registry(self) -> SubscriberRegistry:
        """Return the registry this channel delivers to."""
        return self._registry

    def register_subscriber(self, *, handle: SubscriberHandle) -> Subscriber:
        """Start delivering future events to ``handle``."""
        return self._registry.register(handle)

    def unregister_subscriber(self, *, handle: SubscriberHandle) -> bool:
        """Stop delivering events to ``handle``."""
        return self._registry.unregister(handle)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("event_name",),
    )
    def publish(self, *, event_name: str, payload: JsonValue) -> None:
        """Queue one event for every subscriber live right now.

        Invalid events and queue overflow are logged and dropped; the caller
        never sees an exception and never waits on subscriber I/O.
        """
        try:
            event = BroadcastEvent(event_name=event_name, payload=payload)
            message = event.to_message()
        except (ValidationError, TypeError, ValueError) as exc:
            _LOGGER.warning(
                "broadcast event dropped: invalid event %r: %s",
                event_name,
                exc,
                extra={fields.BROADCAST_EVENT: str(event_name)},
            )
            return

        job = _DeliveryJob(
            event_name=event.event_name,
            message=message,
            handles=self._registry.live_handles(),
        )
        with self._lock:
            if self._closed:
                _LOGGER.warning(
                    "broadcast event dropped: channel closed",
                    extra={fields.BROADCAST_EVENT: job.event_name},
                )
                return
            self._ensure_worker_started_locked()
            with self._idle:
                self._pending += 1
            try:
                self._queue.put_nowait(job)
            except queue.Full:
                self._job_done()
                _LOGGER.warning(
                    "broadcast event dropped: %d events already pending",
                    self._settings.max_pending_events,
                    extra={fields.BROADCAST_EVENT: job.event_name},
                )

    def publish_entity_updated(self, *, entity: JsonValue) -> None:
        """Publish ``entity_updated`` carrying the mutated entity."""
        self.publish(event_name=ENTITY_UPDATED, payload=entity)

    def publish_derived_data_updated(
        self, *, entity_id: str, data: JsonValue
    ) -> None:
        """Publish ``derived_data_updated`` for one entity."""
        self.publish(
            event_name=DERIVED_DATA_UPDATED,
            payload={"entity_id": entity_id, "data": data},
        )

    def start(self) -> None:
        """Start the delivery worker if it is not running."""
        with self._lock:
            if self._closed:
                raise RuntimeError("broadcast channel is closed")
            self._ensure_worker_started_locked()

    def flush(self, *, timeout_seconds: float | None = None) -> bool:
        """Wait for queued events to be delivered; ``False`` on timeout."""
        with self._idle:
            return self._idle.wait_for(lambda: self._pending == 0, timeout_seconds)

    def close(self, *, timeout_seconds: float | None = None) -> None:
        """Drain pending events, stop the worker and disconnect subscribers."""
        timeout = (
            self._settings.shutdown_timeout_seconds
            if timeout_seconds is None
            else timeout_seconds
        )
        with self._lock:
            if self._closed:
                return
            self._closed = True
            worker = self._worker

        if not self.flush(timeout_seconds=timeout):
            _LOGGER.warning(
                "broadcast channel closed with %d undelivered events", self._pending
            )
        self._stop_event.set()
        if worker is not None:
            worker.join(timeout=max(timeout, _POLL_SECONDS * 2))
        self._registry.close()

    def health(self) -> BroadcastHealthStatus:
        """Return worker, subscriber and queue state."""
        with self._lock:
            closed = self._closed
            worker_alive = self._worker is not None and self._worker.is_alive()
        loop_state = "running" if worker_alive else "stopped"
        return BroadcastHealthStatus(
            service_ready=not closed,
            worker_alive=worker_alive,
            subscriber_count=self._registry.count(),
            queue_depth=self._queue.qsize(),
            detail="closed" if closed else f"ok; worker={loop_state}",
        )

    def _ensure_worker_started_locked(self) -> None:
        """Start the delivery worker once."""
        if self._worker is not None and self._worker.is_alive():
            return
        self._stop_event.clear()
        self._worker = Thread(
            target=self._run_loop,
            name="beacon-broadcast",
            daemon=True,
        )
        self._worker.start()

    def _run_loop(self) -> None:
        """Deliver queued jobs until stopped and drained."""
        while True:
            try:
                job = self._queue.get(timeout=_POLL_SECONDS)
            except queue.Empty:
                if self._stop_event.is_set():
                    return
                continue
            try:
                self._deliver(job)
            except Exception:  # noqa: BLE001
                _LOGGER.exception(
                    "broadcast delivery job failed",
                    extra={fields.BROADCAST_EVENT: job.event_name},
                )
            finally:
                self._job_done()

    def _deliver(self, job: _DeliveryJob) -> None:
        """Send one job to each snapshotted handle that is still live."""
        delivered = 0
        with log_context({fields.BROADCAST_EVENT: job.event_name}):
            for handle in job.handles:
                subscriber = self._registry.subscriber_for(handle)
                if subscriber is None:
                    continue
                try:
                    handle.send_text(job.message)
                except Exception as exc:  # noqa: BLE001
                    self._drop_subscriber(subscriber=subscriber, exc=exc)
                    continue
                delivered += 1
            _LOGGER.debug(
                "broadcast event delivered",
                extra={fields.RECIPIENTS: delivered},
            )

    def _drop_subscriber(self, *, subscriber: Subscriber, exc: Exception) -> None:
        """Log one delivery failure and unregister its handle."""
        failure = DeliveryFailure(
            f"delivery to subscriber {subscriber.subscriber_id} failed: "
            f"{type(exc).__name__}: {exc}",
            key=subscriber.subscriber_id,
        )
        failure.__cause__ = exc
        _LOGGER.warning(
            "%s",
            failure,
            extra={
                fields.SUBSCRIBER_ID: subscriber.subscriber_id,
                fields.ERROR_CATEGORY: failure.category.value,
            },
        )
        self._registry.unregister(subscriber.handle)

    def _job_done(self) -> None:
        """Mark one queued job finished and wake flush waiters."""
        with self._idle:
            self._pending -= 1
            if self._pending == 0:
                self._idle.notify_all()
