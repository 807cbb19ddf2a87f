"""Behavior tests for the expiring store adapter."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import pytest

from packages.beacon_shared.errors import StoreUnavailable
from resources.substrates.redis import RedisHealthStatus, RedisSubstrate
from services.state.resolution_cache.store import ExpiringStore

_NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


@dataclass
class _SetCall:
    key: str
    value: str
    ttl_seconds: int | None


class _FakeBackend(RedisSubstrate):
    """In-memory backend fake for store adapter tests."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.set_calls: list[_SetCall] = []
        self.raise_on_set: Exception | None = None
        self.raise_on_get: Exception | None = None

    def set_value(self, *, key: str, value: str, ttl_seconds: int | None) -> None:
        self.set_calls.append(_SetCall(key=key, value=value, ttl_seconds=ttl_seconds))
        if self.raise_on_set is not None:
            raise self.raise_on_set
        self.values[key] = value

    def get_value(self, *, key: str) -> str | None:
        if self.raise_on_get is not None:
            raise self.raise_on_get
        return self.values.get(key)

    def ping(self) -> bool:
        return True

    def health(self) -> RedisHealthStatus:
        return RedisHealthStatus(ready=True, detail="ok")


def _store(
    backend: _FakeBackend, *, retention: int | None = 86400
) -> ExpiringStore:
    return ExpiringStore(
        backend=backend,
        key_prefix="beacon",
        expired_retention_seconds=retention,
        clock=lambda: _NOW,
    )


def test_put_writes_value_with_logical_expiry_and_retention_ttl() -> None:
    """Put should persist expiry metadata and pad the backend TTL."""
    backend = _FakeBackend()

    entry = _store(backend).put("geocode:Manhattan, NYC", {"lat": 1.5}, 60)

    assert entry.expires_at == _NOW + timedelta(seconds=60)
    call = backend.set_calls[0]
    assert call.key == "beacon:resolution:geocode:Manhattan, NYC"
    assert call.ttl_seconds == 60 + 86400
    assert json.loads(call.value) == {
        "value": {"lat": 1.5},
        "expires_at": "2026-01-01T12:01:00+00:00",
    }


def test_put_without_retention_sets_no_backend_ttl() -> None:
    """Disabled retention should leave expired keys in the backend."""
    backend = _FakeBackend()

    _store(backend, retention=None).put("k", "v", 60)

    assert backend.set_calls[0].ttl_seconds is None


def test_get_returns_expired_entries_for_caller_comparison() -> None:
    """Get should return expired entries rather than hiding them."""
    backend = _FakeBackend()
    backend.values["beacon:resolution:k"] = json.dumps(
        {"value": "old", "expires_at": "2025-12-31T00:00:00+00:00"}
    )

    entry = _store(backend).get("k")

    assert entry is not None
    assert entry.value == "old"
    assert entry.is_live(_NOW) is False


def test_get_returns_none_for_missing_key() -> None:
    """Absent keys should read as ``None``."""
    assert _store(_FakeBackend()).get("missing") is None


@pytest.mark.parametrize(
    "payload",
    [
        "not-json",
        json.dumps(["value"]),
        json.dumps({"value": 1}),
        json.dumps({"value": 1, "expires_at": "yesterday"}),
        json.dumps({"value": 1, "expires_at": "2026-01-01T00:00:00"}),
    ],
)
def test_get_treats_corrupt_payload_as_absent(payload: str) -> None:
    """Undecodable stored payloads should read as a miss."""
    backend = _FakeBackend()
    backend.values["beacon:resolution:k"] = payload

    assert _store(backend).get("k") is None


def test_put_rejects_non_json_value_before_backend_write() -> None:
    """Non-serializable values should fail without touching the backend."""
    backend = _FakeBackend()

    with pytest.raises(TypeError):
        _store(backend).put("k", object(), 60)
    with pytest.raises(ValueError):
        _store(backend).put("k", float("nan"), 60)

    assert backend.set_calls == []


def test_backend_failures_map_to_store_unavailable() -> None:
    """Backend exceptions should surface as ``StoreUnavailable``."""
    backend = _FakeBackend()
    backend.raise_on_get = ConnectionError("down")
    backend.raise_on_set = ConnectionError("down")
    store = _store(backend)

    with pytest.raises(StoreUnavailable) as get_error:
        store.get("k")
    with pytest.raises(StoreUnavailable):
        store.put("k", "v", 60)

    assert get_error.value.key == "k"
    assert isinstance(get_error.value.__cause__, ConnectionError)
