"""Behavior tests for the two-stage resolution pipeline."""

from __future__ import annotations

import hashlib
import json
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from pydantic import ValidationError

from packages.beacon_shared.errors import (
    ComputeFailure,
    MalformedGeocodeResponse,
    NoGeocodeResult,
    ServiceUnavailable,
)
from resources.substrates.redis import RedisHealthStatus, RedisSubstrate
from services.state.resolution_cache.config import ResolutionCacheSettings
from services.state.resolution_cache.implementation import (
    DefaultResolutionCacheService,
)
from services.state.resolution_cache.store import ExpiringStore
from services.state.resolution_pipeline import (
    Coordinates,
    DefaultResolutionPipelineService,
    ResolutionPipelineSettings,
    ResolvedLocation,
)


class _FakeBackend(RedisSubstrate):
    """In-memory backend fake shared by both pipeline stages."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}

    def set_value(self, *, key: str, value: str, ttl_seconds: int | None) -> None:
        self.values[key] = value

    def get_value(self, *, key: str) -> str | None:
        return self.values.get(key)

    def ping(self) -> bool:
        return True

    def health(self) -> RedisHealthStatus:
        return RedisHealthStatus(ready=True, detail="ok")


class _FakeClock:
    """Manually advanced clock."""

    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now


class _FakeExtractor:
    """Extractor stub recording inputs and returning a fixed answer."""

    def __init__(self, answer: object = "Manhattan, NYC") -> None:
        self.answer = answer
        self.calls: list[str] = []

    def extract_location(self, raw_text: str) -> Any:
        self.calls.append(raw_text)
        if isinstance(self.answer, BaseException):
            raise self.answer
        return self.answer


class _FakeGeocoder:
    """Geocoder stub recording inputs and replaying queued answers."""

    def __init__(self, *answers: object) -> None:
        self.answers = list(answers) or [{"lat": 40.7831, "lon": -73.9712}]
        self.calls: list[str] = []

    def geocode(self, location_name: str) -> Any:
        self.calls.append(location_name)
        answer = self.answers.pop(0) if len(self.answers) > 1 else self.answers[0]
        if isinstance(answer, BaseException):
            raise answer
        return answer


def _pipeline(
    extractor: _FakeExtractor,
    geocoder: _FakeGeocoder,
    *,
    backend: _FakeBackend | None = None,
    clock: _FakeClock | None = None,
    **overrides: object,
) -> DefaultResolutionPipelineService:
    cache_settings = ResolutionCacheSettings()
    cache = DefaultResolutionCacheService(
        settings=cache_settings,
        store=ExpiringStore(
            backend=backend or _FakeBackend(),
            key_prefix=cache_settings.key_prefix,
            expired_retention_seconds=cache_settings.expired_retention_seconds,
            clock=clock or _FakeClock(),
        ),
    )
    return DefaultResolutionPipelineService(
        settings=ResolutionPipelineSettings(**overrides),
        cache=cache,
        extractor=extractor,
        geocoder=geocoder,
    )


def test_flooding_near_manhattan_resolves_once_within_ttl() -> None:
    """The second identical request should hit both stage caches."""
    extractor = _FakeExtractor()
    geocoder = _FakeGeocoder()
    pipeline = _pipeline(extractor, geocoder)

    first = pipeline.resolve_coordinates(raw_text="Flooding near Manhattan")
    second = pipeline.resolve_coordinates(raw_text="Flooding near Manhattan")

    assert first == second == Coordinates(lat=40.7831, lon=-73.9712)
    assert extractor.calls == ["Flooding near Manhattan"]
    assert geocoder.calls == ["Manhattan, NYC"]


def test_stage_keys_use_text_digest_and_location_name() -> None:
    """Locate keys hash the raw text; geocode keys carry the place name."""
    backend = _FakeBackend()
    pipeline = _pipeline(_FakeExtractor(), _FakeGeocoder(), backend=backend)

    pipeline.resolve_coordinates(raw_text="Flooding near Manhattan")

    digest = hashlib.sha256(b"Flooding near Manhattan").hexdigest()
    assert set(backend.values) == {
        f"beacon:resolution:locate:{digest}",
        "beacon:resolution:geocode:Manhattan, NYC",
    }


def test_resolve_location_returns_name_and_coordinates() -> None:
    """The combined payload should carry the place name and coordinates."""
    pipeline = _pipeline(_FakeExtractor(), _FakeGeocoder())

    resolved = pipeline.resolve_location(raw_text="Flooding near Manhattan")

    assert resolved == ResolvedLocation(
        location_name="Manhattan, NYC", lat=40.7831, lon=-73.9712
    )


def test_extractor_mapping_answer_is_accepted() -> None:
    """A ``{"location": ...}`` extractor answer should be unwrapped."""
    extractor = _FakeExtractor({"location": "  Brooklyn, NYC "})
    geocoder = _FakeGeocoder()

    assert _pipeline(extractor, geocoder).locate(raw_text="Fire in Brooklyn") == (
        "Brooklyn, NYC"
    )


@pytest.mark.parametrize("answer", [None, "  ", {"place": "x"}, 42])
def test_unusable_extractor_answer_is_compute_failure(answer: object) -> None:
    """Missing or blank extracted names should fail and not be cached."""
    backend = _FakeBackend()
    pipeline = _pipeline(_FakeExtractor(answer), _FakeGeocoder(), backend=backend)

    with pytest.raises(ComputeFailure):
        pipeline.locate(raw_text="Something happened")

    assert backend.values == {}


def test_distinct_texts_naming_one_place_share_the_geocode_entry() -> None:
    """Two texts resolving to one place should geocode only once."""
    extractor = _FakeExtractor()
    geocoder = _FakeGeocoder()
    pipeline = _pipeline(extractor, geocoder)

    pipeline.resolve_coordinates(raw_text="Flooding near Manhattan")
    pipeline.resolve_coordinates(raw_text="Power outage in Manhattan")

    assert len(extractor.calls) == 2
    assert geocoder.calls == ["Manhattan, NYC"]


@pytest.mark.parametrize("answer", [None, []])
def test_no_geocode_result_is_not_cached(answer: object) -> None:
    """Empty geocoder answers should raise and be retried next time."""
    geocoder = _FakeGeocoder(answer, [{"lat": "40.7831", "lon": "-73.9712"}])
    pipeline = _pipeline(_FakeExtractor(), geocoder)

    with pytest.raises(NoGeocodeResult):
        pipeline.geocode(location_name="Manhattan, NYC")

    assert pipeline.geocode(location_name="Manhattan, NYC") == Coordinates(
        lat=40.7831, lon=-73.9712
    )
    assert len(geocoder.calls) == 2


def test_nominatim_shaped_candidates_take_the_first_entry() -> None:
    """String coordinates in a candidate list should parse to floats."""
    geocoder = _FakeGeocoder(
        [
            {"lat": "40.7831", "lon": "-73.9712", "display_name": "Manhattan"},
            {"lat": "1", "lon": "1"},
        ]
    )

    coordinates = _pipeline(_FakeExtractor(), geocoder).geocode(
        location_name=" Manhattan, NYC "
    )

    assert coordinates == Coordinates(lat=40.7831, lon=-73.9712)
    assert geocoder.calls == ["Manhattan, NYC"]


@pytest.mark.parametrize(
    "answer",
    [
        {"lat": "north", "lon": 1.0},
        {"lat": True, "lon": 1.0},
        {"lat": 91.0, "lon": 1.0},
        {"lat": 1.0, "lon": -181.0},
        {"lat": "nan", "lon": 1.0},
        {"lon": 1.0},
        ["not-a-candidate"],
        "Manhattan",
    ],
)
def test_malformed_geocode_answers_are_rejected(answer: object) -> None:
    """Unusable coordinates should fail with a malformed-response error."""
    backend = _FakeBackend()
    pipeline = _pipeline(_FakeExtractor(), _FakeGeocoder(answer), backend=backend)

    with pytest.raises(MalformedGeocodeResponse):
        pipeline.geocode(location_name="Manhattan, NYC")

    assert backend.values == {}


def test_corrupt_cached_coordinates_are_revalidated_on_hit() -> None:
    """A cached stage-two value is checked again on every hit."""
    backend = _FakeBackend()
    backend.values["beacon:resolution:geocode:Manhattan, NYC"] = json.dumps(
        {"value": {"lat": 500, "lon": 0}, "expires_at": "2030-01-01T00:00:00+00:00"}
    )
    geocoder = _FakeGeocoder()
    pipeline = _pipeline(_FakeExtractor(), geocoder, backend=backend)

    with pytest.raises(MalformedGeocodeResponse):
        pipeline.geocode(location_name="Manhattan, NYC")

    assert geocoder.calls == []


def test_geocoder_outage_propagates_and_is_retried() -> None:
    """Service outages should propagate uncached."""
    geocoder = _FakeGeocoder(ServiceUnavailable("down"), {"lat": 1.0, "lon": 2.0})
    pipeline = _pipeline(_FakeExtractor(), geocoder)

    with pytest.raises(ServiceUnavailable):
        pipeline.resolve_coordinates(raw_text="Flooding near Manhattan")

    assert pipeline.resolve_coordinates(raw_text="Flooding near Manhattan") == (
        Coordinates(lat=1.0, lon=2.0)
    )


def test_stage_ttls_expire_independently() -> None:
    """A short locate TTL should not force a new geocode."""
    clock = _FakeClock()
    extractor = _FakeExtractor()
    geocoder = _FakeGeocoder()
    pipeline = _pipeline(
        extractor,
        geocoder,
        clock=clock,
        locate_ttl_seconds=60,
        geocode_ttl_seconds=3600,
    )

    pipeline.resolve_coordinates(raw_text="Flooding near Manhattan")
    clock.now += timedelta(seconds=61)
    pipeline.resolve_coordinates(raw_text="Flooding near Manhattan")

    assert len(extractor.calls) == 2
    assert len(geocoder.calls) == 1


@pytest.mark.parametrize("text", ["", "   "])
def test_blank_inputs_are_rejected_before_cache_access(text: str) -> None:
    """Blank text or names should raise ``ValueError`` immediately."""
    extractor = _FakeExtractor()
    geocoder = _FakeGeocoder()
    pipeline = _pipeline(extractor, geocoder)

    with pytest.raises(ValueError):
        pipeline.resolve_location(raw_text=text)
    with pytest.raises(ValueError):
        pipeline.geocode(location_name=text)

    assert extractor.calls == []
    assert geocoder.calls == []


def test_settings_reject_shared_or_invalid_namespaces() -> None:
    """Stage namespaces must be distinct bare identifiers."""
    with pytest.raises(ValidationError):
        ResolutionPipelineSettings(locate_namespace="geo", geocode_namespace="geo")
    with pytest.raises(ValidationError):
        ResolutionPipelineSettings(locate_namespace="Locate:v2")


def test_health_reports_cache_readiness() -> None:
    """Pipeline health should mirror resolution cache store liveness."""
    backend = _FakeBackend()
    pipeline = _pipeline(_FakeExtractor(), _FakeGeocoder(), backend=backend)

    status = pipeline.health()
    assert status.service_ready is True
    assert status.cache_ready is True

    backend.ping = lambda: False  # type: ignore[method-assign]
    status = pipeline.health()
    assert status.cache_ready is False
    assert status.detail == "store ping returned false"
