"""Concrete Resolution Cache Service implementation."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field

from pydantic import JsonValue

from packages.beacon_shared.errors import ComputeFailure, ComputeTimeout
from packages.beacon_shared.logging import (
    fields,
    get_logger,
    log_context,
    public_api_instrumented,
)
from services.state.resolution_cache.component import SERVICE_COMPONENT_ID
from services.state.resolution_cache.config import ResolutionCacheSettings
from services.state.resolution_cache.domain import (
    ComputeFn,
    HealthStatus,
    StoredEntry,
)
from services.state.resolution_cache.service import ResolutionCacheService
from services.state.resolution_cache.store import ExpiringStore

_LOGGER = get_logger(__name__)


@dataclass
class _InFlight:
    """One in-progress computation shared by concurrent misses on a key."""

    done: threading.Event = field(default_factory=threading.Event)
    value: JsonValue = None
    error: BaseException | None = None


class DefaultResolutionCacheService(ResolutionCacheService):
    """Cache-aside resolver backed by the expiring store adapter."""

    def __init__(
        self,
        *,
        settings: ResolutionCacheSettings,
        store: ExpiringStore,
    ) -> None:
        self._settings = settings
        self._store = store
        self._inflight: dict[str, _InFlight] = {}
        self._inflight_lock = threading.Lock()
        self._executor: ThreadPoolExecutor | None = None
        self._executor_lock = threading.Lock()

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("key",),
    )
    def resolve(
        self,
        *,
        key: str,
        compute: ComputeFn,
        ttl_seconds: int | None = None,
        timeout_seconds: float | None = None,
    ) -> JsonValue:
        """Return the live cached value for ``key`` or compute and store it.

        Failures of ``compute`` are never cached and leave any expired entry
        in place, so the next call retries. ``StoreUnavailable`` from the
        store propagates unchanged.
        """
        if key == "":
            raise ValueError("key must be non-empty")
        ttl = self._resolve_ttl(ttl_seconds)
        timeout = (
            timeout_seconds
            if timeout_seconds is not None
            else self._settings.compute_timeout_seconds
        )

        with log_context({fields.RESOLUTION_KEY: key}):
            cached = self._lookup(key)
            if cached is not None:
                return cached.value
            if not self._settings.coalesce_concurrent_misses:
                return self._compute_and_store(
                    key=key, compute=compute, ttl=ttl, timeout=timeout
                )
            return self._coalesced(key=key, compute=compute, ttl=ttl, timeout=timeout)

    def health(self) -> HealthStatus:
        """Return resolver readiness with store liveness."""
        try:
            store_ready = self._store.ping()
        except Exception as exc:  # noqa: BLE001
            return HealthStatus(
                service_ready=True,
                store_ready=False,
                detail=f"store ping failed: {type(exc).__name__}",
            )
        return HealthStatus(
            service_ready=True,
            store_ready=store_ready,
            detail="ok" if store_ready else "store ping returned false",
        )

    def close(self) -> None:
        """Stop the compute pool without waiting on abandoned computations."""
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)

    def _lookup(self, key: str) -> StoredEntry | None:
        """Return the stored entry when it is still live, else ``None``."""
        entry = self._store.get(key)
        if entry is not None and entry.is_live(self._store.now()):
            _LOGGER.debug("resolution cache hit", extra={fields.CACHE_OUTCOME: "hit"})
            return entry
        outcome = "miss" if entry is None else "expired"
        _LOGGER.debug(
            "resolution cache %s", outcome, extra={fields.CACHE_OUTCOME: outcome}
        )
        return None

    def _coalesced(
        self,
        *,
        key: str,
        compute: ComputeFn,
        ttl: int,
        timeout: float | None,
    ) -> JsonValue:
        """Run one computation per key; concurrent callers wait for it."""
        with self._inflight_lock:
            flight = self._inflight.get(key)
            leader = flight is None
            if flight is None:
                flight = _InFlight()
                self._inflight[key] = flight

        if not leader:
            _LOGGER.debug(
                "joining in-flight resolution",
                extra={fields.CACHE_OUTCOME: "coalesced"},
            )
            flight.done.wait()
            if flight.error is not None:
                raise flight.error
            return flight.value

        try:
            # A leader may have finished between our miss and taking the slot.
            cached = self._lookup(key)
            if cached is not None:
                flight.value = cached.value
            else:
                flight.value = self._compute_and_store(
                    key=key, compute=compute, ttl=ttl, timeout=timeout
                )
            return flight.value
        except BaseException as exc:
            flight.error = exc
            raise
        finally:
            with self._inflight_lock:
                self._inflight.pop(key, None)
            flight.done.set()

    def _compute_and_store(
        self,
        *,
        key: str,
        compute: ComputeFn,
        ttl: int,
        timeout: float | None,
    ) -> JsonValue:
        """Invoke ``compute`` and persist a successful result."""
        try:
            value = self._invoke(key=key, compute=compute, timeout=timeout)
        except ComputeFailure:
            raise
        except Exception as exc:
            raise ComputeFailure(
                f"compute failed for '{key}': {type(exc).__name__}: {exc}",
                key=key,
                cause=exc,
            ) from exc

        try:
            entry = self._store.put(key, value, ttl)
        except (TypeError, ValueError) as exc:
            raise ComputeFailure(
                f"compute result for '{key}' is not JSON-serializable",
                key=key,
                cause=exc,
            ) from exc
        _LOGGER.debug(
            "resolution stored",
            extra={fields.CACHE_OUTCOME: "stored"},
        )
        return entry.value

    def _invoke(
        self,
        *,
        key: str,
        compute: ComputeFn,
        timeout: float | None,
    ) -> JsonValue:
        """Call ``compute`` directly, or on the pool when a bound is set."""
        if timeout is None:
            return compute()
        future = self._pool().submit(compute)
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError as exc:
            if future.done() and future.exception() is exc:
                raise
            future.cancel()
            raise ComputeTimeout(
                f"compute for '{key}' exceeded {timeout:.3f}s",
                key=key,
            ) from None

    def _pool(self) -> ThreadPoolExecutor:
        """Return the lazily created compute pool."""
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._settings.compute_workers,
                    thread_name_prefix="beacon-compute",
                )
            return self._executor

    def _resolve_ttl(self, ttl_seconds: int | None) -> int:
        """Resolve the effective TTL, defaulting from settings."""
        if ttl_seconds is None:
            return self._settings.default_ttl_seconds
        if isinstance(ttl_seconds, bool) or not isinstance(ttl_seconds, int):
            raise ValueError("ttl_seconds must be an integer")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        return ttl_seconds
