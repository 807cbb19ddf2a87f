"""Expiring store adapter over the Redis substrate.

Entries are persisted as JSON ``{"value": ..., "expires_at": ...}``. The
logical ``expires_at`` timestamp is authoritative; the Redis key TTL only
bounds how long expired entries linger as housekeeping.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta

from pydantic import ValidationError

from packages.beacon_shared.errors import StoreUnavailable
from packages.beacon_shared.logging import get_logger
from resources.substrates.redis import RedisSubstrate
from services.state.resolution_cache.domain import (
    Clock,
    StoredEntry,
    utc_now,
)

_LOGGER = get_logger(__name__)


class ExpiringStore:
    """Read and write timestamped JSON entries in the external store."""

    def __init__(
        self,
        *,
        backend: RedisSubstrate,
        key_prefix: str,
        expired_retention_seconds: int | None,
        clock: Clock = utc_now,
    ) -> None:
        self._backend = backend
        self._key_prefix = key_prefix
        self._expired_retention_seconds = expired_retention_seconds
        self._clock = clock

    def now(self) -> datetime:
        """Return the store clock's current time."""
        return self._clock()

    def get(self, key: str) -> StoredEntry | None:
        """Return the stored entry for ``key`` or ``None`` when absent.

        Expired entries are returned as-is; callers compare ``expires_at``
        against :meth:`now`. An undecodable payload reads as absent.
        """
        store_key = self.store_key(key)
        try:
            serialized = self._backend.get_value(key=store_key)
        except Exception as exc:  # noqa: BLE001
            raise _unavailable(operation="get", key=key, exc=exc) from exc
        if serialized is None:
            return None
        return _decode_entry(key=key, serialized=serialized)

    def put(self, key: str, value: object, ttl_seconds: int) -> StoredEntry:
        """Upsert ``value`` expiring ``ttl_seconds`` from now.

        Raises ``TypeError`` or ``ValueError`` when ``value`` is not a JSON
        document, before anything is written.
        """
        expires_at = self.now() + timedelta(seconds=ttl_seconds)
        serialized = json.dumps(
            {"value": value, "expires_at": expires_at.isoformat()},
            allow_nan=False,
        )
        backend_ttl = (
            None
            if self._expired_retention_seconds is None
            else ttl_seconds + self._expired_retention_seconds
        )
        try:
            self._backend.set_value(
                key=self.store_key(key),
                value=serialized,
                ttl_seconds=backend_ttl,
            )
        except Exception as exc:  # noqa: BLE001
            raise _unavailable(operation="put", key=key, exc=exc) from exc
        return StoredEntry(
            key=key,
            value=json.loads(serialized)["value"],
            expires_at=expires_at,
        )

    def ping(self) -> bool:
        """Return backend liveness."""
        return self._backend.ping()

    def store_key(self, key: str) -> str:
        """Compose the canonical backend key for one resolution key."""
        return f"{self._key_prefix}:resolution:{key}"


def _decode_entry(*, key: str, serialized: str) -> StoredEntry | None:
    """Decode one stored payload, treating corruption as a miss."""
    try:
        payload = json.loads(serialized)
    except json.JSONDecodeError:
        _LOGGER.warning("stored payload is not valid JSON; treating as miss: %s", key)
        return None
    if not isinstance(payload, dict):
        _LOGGER.warning("stored payload is not an object; treating as miss: %s", key)
        return None
    try:
        entry = StoredEntry.model_validate({**payload, "key": key})
    except ValidationError:
        _LOGGER.warning("stored payload failed validation; treating as miss: %s", key)
        return None
    return entry


def _unavailable(*, operation: str, key: str, exc: Exception) -> StoreUnavailable:
    """Log and build the store-unavailable error for one backend call."""
    _LOGGER.warning(
        "store %s failed for %s: %s",
        operation,
        key,
        type(exc).__name__,
        exc_info=exc,
    )
    return StoreUnavailable(
        f"store {operation} failed: {type(exc).__name__}: {exc}",
        key=key,
    )
