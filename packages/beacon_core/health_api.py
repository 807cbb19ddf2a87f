"""HTTP adapter for Core aggregate health."""

from __future__ import annotations

from collections.abc import Mapping

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from packages.beacon_core.health import evaluate_core_health
from packages.beacon_shared.config import BeaconSettings
from packages.beacon_shared.manifest import ManifestRegistry


def register_routes(
    *,
    router: APIRouter,
    settings: BeaconSettings,
    components: Mapping[str, object],
    registry: ManifestRegistry | None = None,
) -> None:
    """Register ``GET /health`` on one router."""

    # Health probes block on component I/O, so FastAPI runs this in its pool.
    @router.get("/health")
    def health() -> JSONResponse:
        result = evaluate_core_health(
            settings=settings,
            components=components,
            registry=registry,
        )
        return JSONResponse(
            status_code=200 if result.ready else 503,
            content=result.model_dump(mode="json"),
        )
