"""Unit tests for core aggregate health evaluation."""

from __future__ import annotations

import threading

from fastapi import APIRouter, FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel, ConfigDict

from packages.beacon_core.health import evaluate_core_health
from packages.beacon_core.health_api import register_routes
from packages.beacon_shared.config import BeaconSettings
from packages.beacon_shared.manifest import (
    ComponentId,
    ManifestRegistry,
    ModuleRoot,
    ResourceManifest,
    ServiceManifest,
)


class _ServiceHealth(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    service_ready: bool
    store_ready: bool
    detail: str = "ok"


class _HealthyService:
    def health(self) -> _ServiceHealth:
        return _ServiceHealth(service_ready=True, store_ready=True)


class _DegradedService:
    def health(self) -> _ServiceHealth:
        return _ServiceHealth(service_ready=True, store_ready=False, detail="down")


class _HealthyResource:
    def health(self) -> dict[str, object]:
        return {"ready": True, "detail": "ok"}


def _registry() -> ManifestRegistry:
    registry = ManifestRegistry()
    for name in ("service_a", "service_b"):
        registry.register_component(
            ServiceManifest(
                id=ComponentId(name),
                layer=1,
                system="state",
                module_roots=frozenset({ModuleRoot(f"services.state.{name}")}),
                public_api_roots=frozenset(
                    {ModuleRoot(f"services.state.{name}.service")}
                ),
            )
        )
    registry.register_component(
        ResourceManifest(
            id=ComponentId("substrate_redis"),
            layer=0,
            system="state",
            kind="substrate",
            module_roots=frozenset({ModuleRoot("resources.substrates.redis")}),
        )
    )
    return registry


def _settings(health_timeout_seconds: float = 1.0) -> BeaconSettings:
    return BeaconSettings(
        components={"core_http": {"health_timeout_seconds": health_timeout_seconds}}
    )


def test_ready_when_every_component_is_ready() -> None:
    result = evaluate_core_health(
        settings=_settings(),
        components={
            "service_a": _HealthyService(),
            "service_b": _HealthyService(),
            "substrate_redis": _HealthyResource(),
        },
        registry=_registry(),
    )

    assert result.ready is True
    assert set(result.services) == {"service_a", "service_b"}
    assert result.resources["substrate_redis"].detail == "ok"


def test_any_false_ready_field_degrades_the_report() -> None:
    result = evaluate_core_health(
        settings=_settings(),
        components={
            "service_a": _HealthyService(),
            "service_b": _DegradedService(),
            "substrate_redis": _HealthyResource(),
        },
        registry=_registry(),
    )

    assert result.ready is False
    assert result.services["service_b"].ready is False
    assert result.services["service_b"].detail == "down"


def test_missing_raising_and_shapeless_components_are_not_ready() -> None:
    class _Raising:
        def health(self) -> bool:
            raise RuntimeError("boom")

    class _Shapeless:
        def health(self) -> str:
            return "fine"

    result = evaluate_core_health(
        settings=_settings(),
        components={"service_a": _Raising(), "service_b": _Shapeless()},
        registry=_registry(),
    )

    assert result.ready is False
    assert result.services["service_a"].detail == "health() raised RuntimeError"
    assert "unsupported" in result.services["service_b"].detail
    assert result.resources["substrate_redis"].detail == "component not instantiated"


def test_timeout_marks_component_unhealthy() -> None:
    release = threading.Event()

    class _SlowResource:
        def health(self) -> dict[str, object]:
            release.wait(1.0)
            return {"ready": True}

    try:
        result = evaluate_core_health(
            settings=_settings(health_timeout_seconds=0.01),
            components={
                "service_a": _HealthyService(),
                "service_b": _HealthyService(),
                "substrate_redis": _SlowResource(),
            },
            registry=_registry(),
        )
    finally:
        release.set()

    assert result.ready is False
    assert "exceeded global max timeout" in result.resources["substrate_redis"].detail


def test_health_route_answers_503_when_not_ready() -> None:
    components: dict[str, object] = {
        "service_a": _HealthyService(),
        "service_b": _HealthyService(),
        "substrate_redis": _HealthyResource(),
    }
    router = APIRouter()
    register_routes(
        router=router,
        settings=_settings(),
        components=components,
        registry=_registry(),
    )
    app = FastAPI()
    app.include_router(router)
    client = TestClient(app)

    ready = client.get("/health")
    assert ready.status_code == 200
    assert ready.json()["ready"] is True

    components["service_b"] = _DegradedService()
    degraded = client.get("/health")
    assert degraded.status_code == 503
    assert degraded.json()["services"]["service_b"] == {
        "ready": False,
        "detail": "down",
    }
