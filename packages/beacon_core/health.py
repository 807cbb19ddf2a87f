"""Core-level aggregate health evaluation utilities."""

from __future__ import annotations

from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError

from pydantic import BaseModel, ConfigDict, Field

from packages.beacon_shared.config import BeaconSettings
from packages.beacon_shared.manifest import ManifestRegistry, get_registry


class ComponentHealthResult(BaseModel):
    """One component-level readiness result."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ready: bool
    detail: str = ""


class CoreHealthResult(BaseModel):
    """Aggregate core readiness across services and shared resources."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ready: bool
    services: dict[str, ComponentHealthResult] = Field(default_factory=dict)
    resources: dict[str, ComponentHealthResult] = Field(default_factory=dict)


def evaluate_core_health(
    *,
    settings: BeaconSettings,
    components: Mapping[str, object],
    registry: ManifestRegistry | None = None,
) -> CoreHealthResult:
    """Evaluate aggregate core health from instantiated components."""
    manifests = registry or get_registry()
    max_timeout_seconds = settings.components.core_http.health_timeout_seconds

    service_results = {
        str(manifest.id): _evaluate_registered(
            component=components.get(str(manifest.id)),
            max_timeout_seconds=max_timeout_seconds,
        )
        for manifest in manifests.list_services()
    }
    resource_results = {
        str(manifest.id): _evaluate_registered(
            component=components.get(str(manifest.id)),
            max_timeout_seconds=max_timeout_seconds,
        )
        for manifest in manifests.list_resources()
    }

    overall_ready = all(item.ready for item in service_results.values()) and all(
        item.ready for item in resource_results.values()
    )
    return CoreHealthResult(
        ready=overall_ready,
        services=service_results,
        resources=resource_results,
    )


def _evaluate_registered(
    *, component: object | None, max_timeout_seconds: float
) -> ComponentHealthResult:
    if component is None:
        return ComponentHealthResult(ready=False, detail="component not instantiated")
    return _evaluate_component_health(
        component=component,
        max_timeout_seconds=max_timeout_seconds,
    )


def _evaluate_component_health(
    *,
    component: object,
    max_timeout_seconds: float,
) -> ComponentHealthResult:
    """Evaluate one component health with global timeout enforcement."""
    health_fn = getattr(component, "health", None)
    if not callable(health_fn):
        return ComponentHealthResult(
            ready=False,
            detail="component does not expose health()",
        )

    executor = ThreadPoolExecutor(max_workers=1)
    future = executor.submit(health_fn)
    try:
        result = future.result(timeout=max_timeout_seconds)
    except FutureTimeoutError:
        return ComponentHealthResult(
            ready=False,
            detail=f"health() exceeded global max timeout ({max_timeout_seconds:.3f}s)",
        )
    except Exception as exc:  # noqa: BLE001
        return ComponentHealthResult(
            ready=False,
            detail=f"health() raised {type(exc).__name__}",
        )
    finally:
        # A hung probe must not hold the caller past the timeout.
        executor.shutdown(wait=False)

    ready, detail = _coerce_health_result(result)
    return ComponentHealthResult(ready=ready, detail=detail or "ok")


def _coerce_health_result(result: object) -> tuple[bool, str]:
    """Normalize heterogeneous health return shapes into ready/detail."""
    if isinstance(result, bool):
        return result, "ok" if result else "not ready"

    if hasattr(result, "model_dump"):
        values = result.model_dump(mode="python")
    elif isinstance(result, dict):
        values = result
    else:
        return False, "health() returned unsupported result"

    detail_value = values.get("detail")
    detail = detail_value if isinstance(detail_value, str) else ""

    ready_value = values.get("ready")
    if isinstance(ready_value, bool):
        return ready_value, detail

    ready_fields = [
        value
        for key, value in values.items()
        if key.endswith("_ready") and isinstance(value, bool)
    ]
    if len(ready_fields) > 0:
        return all(ready_fields), detail

    return False, "health() result missing readiness fields"
