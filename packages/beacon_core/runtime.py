"""Component wiring and lifecycle for one Beacon process."""

from __future__ import annotations

import importlib
import importlib.util
from collections.abc import Callable, Mapping
from types import MappingProxyType

from fastapi import APIRouter, FastAPI

from packages.beacon_core.health_api import register_routes
from packages.beacon_shared.config import BeaconSettings
from packages.beacon_shared.http import create_app
from packages.beacon_shared.logging import fields, get_logger
from packages.beacon_shared.manifest import (
    ComponentManifest,
    ManifestRegistry,
    get_registry,
)

_LOGGER = get_logger(__name__)

ComponentBuilder = Callable[..., object]
RouteRegistrar = Callable[..., None]


class BeaconRuntime:
    """Owns every built component and their start/close ordering.

    Components are built in the registry's dependency order. Close runs in
    the reverse of build order so services stop before the resources they
    use.
    """

    def __init__(
        self,
        *,
        settings: BeaconSettings,
        registry: ManifestRegistry | None = None,
    ) -> None:
        self._settings = settings
        self._registry = registry or get_registry()
        self._components: dict[str, object] = {}
        self._started = False
        self._closed = False

    @property
    def settings(self) -> BeaconSettings:
        return self._settings

    @property
    def components(self) -> Mapping[str, object]:
        """Built components keyed by component id, in build order."""
        return MappingProxyType(self._components)

    def component(self, component_id: str) -> object:
        """Return one built component or raise ``KeyError``."""
        return self._components[component_id]

    def build(self) -> Mapping[str, object]:
        """Instantiate every registered component in dependency order.

        A builder runs only after everything its manifest names in
        ``depends_on`` is built, so any exception it raises, ``KeyError``
        included, is a genuine build failure and propagates unchanged.
        """
        if self._components:
            return self.components
        for manifest in self._registry.build_order():
            builder = _resolve_component_builder(manifest)
            try:
                built = builder(settings=self._settings, components=self.components)
            except Exception:
                _LOGGER.exception(
                    "component build failed",
                    extra={fields.COMPONENT_ID: str(manifest.id)},
                )
                raise
            self._components[str(manifest.id)] = built
            _LOGGER.info(
                "component instantiated",
                extra={fields.COMPONENT_ID: str(manifest.id), "layer": manifest.layer},
            )
        return self.components

    def start(self) -> None:
        """Build if needed, then start every component exposing ``start()``."""
        if self._closed:
            raise RuntimeError("runtime is closed")
        if self._started:
            return
        self.build()
        for component_id, component in self._components.items():
            start = getattr(component, "start", None)
            if callable(start):
                start()
                _LOGGER.info(
                    "component started", extra={fields.COMPONENT_ID: component_id}
                )
        self._started = True

    def build_app(self) -> FastAPI:
        """Create the HTTP app with health and every service transport."""
        self.build()
        app = create_app(title="Beacon Core API")
        router = APIRouter()
        register_routes(
            router=router,
            settings=self._settings,
            components=self.components,
            registry=self._registry,
        )

        registered_services: list[str] = []
        services = sorted(self._registry.list_services(), key=lambda m: str(m.id))
        for manifest in services:
            registrar = _resolve_service_http_registrar(manifest)
            if registrar is None:
                continue
            registrar(router=router, service=self._components[str(manifest.id)])
            registered_services.append(str(manifest.id))

        app.include_router(router)
        _LOGGER.info(
            "core HTTP routes registered",
            extra={"registered_services": registered_services},
        )
        return app

    def close(self) -> None:
        """Close components in reverse build order; idempotent."""
        if self._closed:
            return
        self._closed = True
        for component_id in reversed(list(self._components)):
            close = getattr(self._components[component_id], "close", None)
            if not callable(close):
                continue
            try:
                close()
            except Exception:  # noqa: BLE001
                # Remaining components still need their close().
                _LOGGER.exception(
                    "component close failed", extra={fields.COMPONENT_ID: component_id}
                )
            else:
                _LOGGER.info(
                    "component closed", extra={fields.COMPONENT_ID: component_id}
                )


def _resolve_component_builder(manifest: ComponentManifest) -> ComponentBuilder:
    """Load one component module and return its build callable."""
    for module_root in sorted(manifest.module_roots):
        module_name = f"{module_root}.component"
        module = importlib.import_module(module_name)
        builder = getattr(module, "build_component", None)
        if callable(builder):
            return builder
    raise RuntimeError(
        f"component '{manifest.id}' does not expose build_component(...) "
        "in its component module"
    )


def _resolve_service_http_registrar(
    manifest: ComponentManifest,
) -> RouteRegistrar | None:
    """Load one optional service-level HTTP registrar from ``api.py``."""
    for module_root in sorted(manifest.module_roots):
        module_name = f"{module_root}.api"
        if importlib.util.find_spec(module_name) is None:
            continue
        module = importlib.import_module(module_name)
        registrar = getattr(module, "register_routes", None)
        if callable(registrar):
            return registrar
    return None
