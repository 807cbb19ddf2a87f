"""Component-manifest model and process-local registry.

Every resource and service declares one manifest in its ``component.py``.
Resources are leaf components; services name the components they are built
from in ``depends_on``, and ``build_order`` turns that into a sequence the
runtime can build front to back.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from threading import RLock
from typing import Final, FrozenSet, Literal, NewType, Optional

ComponentId = NewType("ComponentId", str)
ModuleRoot = NewType("ModuleRoot", str)

Layer = Literal[0, 1]
System = Literal["state", "action"]
ResourceKind = Literal["substrate", "adapter"]

_SYSTEM_ORDER: Final[dict[System, int]] = {"state": 0, "action": 1}
_COMPONENT_ID_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z][a-z0-9_]{1,62}$")
_MODULE_ROOT_RE: Final[re.Pattern[str]] = re.compile(
    r"^[a-zA-Z_]\w*(\.[a-zA-Z_]\w*)*$", re.ASCII
)


class ManifestError(ValueError):
    """Raised when manifest definitions or registration are invalid."""


@dataclass(frozen=True, slots=True)
class ComponentManifest:
    """Fields shared by resource and service manifests."""

    id: ComponentId
    layer: Layer
    system: System
    module_roots: FrozenSet[ModuleRoot]

    def __post_init__(self) -> None:
        validate_component_id(self.id)
        _validate_roots(self.module_roots, field_name="module_roots")

    @property
    def dependencies(self) -> FrozenSet[ComponentId]:
        """Components that must be built before this one."""
        return frozenset()


@dataclass(frozen=True, slots=True)
class ResourceManifest(ComponentManifest):
    """L0 substrate or adapter; ``owner_service_id`` names its consumer."""

    layer: Literal[0]
    kind: ResourceKind
    owner_service_id: Optional[ComponentId] = None

    def __post_init__(self) -> None:
        super(ResourceManifest, self).__post_init__()
        if self.owner_service_id is not None:
            validate_component_id(self.owner_service_id)


@dataclass(frozen=True, slots=True)
class ServiceManifest(ComponentManifest):
    """L1 service built from the components listed in ``depends_on``."""

    layer: Literal[1]
    public_api_roots: FrozenSet[ModuleRoot]
    depends_on: FrozenSet[ComponentId] = frozenset()

    def __post_init__(self) -> None:
        super(ServiceManifest, self).__post_init__()
        _validate_roots(self.public_api_roots, field_name="public_api_roots")
        for dependency in self.depends_on:
            validate_component_id(dependency)
        if self.id in self.depends_on:
            raise ManifestError(f"service '{self.id}' depends on itself")

    @property
    def dependencies(self) -> FrozenSet[ComponentId]:
        return self.depends_on


@dataclass(slots=True)
class ManifestRegistry:
    """In-memory registry of component manifests."""

    _components: dict[ComponentId, ComponentManifest] = field(default_factory=dict)
    _lock: RLock = field(default_factory=RLock)

    def register_component(self, manifest: ComponentManifest) -> None:
        """Register one manifest; re-registering an identical one is a no-op."""
        with self._lock:
            existing = self._components.setdefault(manifest.id, manifest)
        if existing != manifest:
            raise ManifestError(
                f"duplicate component id with mismatched definition: {manifest.id}"
            )

    def list_resources(self) -> tuple[ResourceManifest, ...]:
        """Resources sorted by id."""
        with self._lock:
            resources = [
                item
                for item in self._components.values()
                if isinstance(item, ResourceManifest)
            ]
        return tuple(sorted(resources, key=lambda item: str(item.id)))

    def list_services(self) -> tuple[ServiceManifest, ...]:
        """Services sorted by system (state before action), then id."""
        with self._lock:
            services = [
                item
                for item in self._components.values()
                if isinstance(item, ServiceManifest)
            ]
        services.sort(key=lambda item: (_SYSTEM_ORDER[item.system], str(item.id)))
        return tuple(services)

    def build_order(self) -> tuple[ComponentManifest, ...]:
        """Return every manifest after all of its dependencies.

        Resources come first in id order. Each service follows the services it
        depends on; ties keep ``list_services`` order. Raises ``ManifestError``
        for an unregistered dependency or a dependency cycle.
        """
        self._check_dependencies_registered()
        ordered: list[ComponentManifest] = list(self.list_resources())
        placed = {item.id for item in ordered}
        waiting = list(self.list_services())
        while waiting:
            ready = [item for item in waiting if item.dependencies <= placed]
            if not ready:
                cycle = ", ".join(str(item.id) for item in waiting)
                raise ManifestError(f"dependency cycle between services: {cycle}")
            for item in ready:
                ordered.append(item)
                placed.add(item.id)
            waiting = [item for item in waiting if item.id not in placed]
        return tuple(ordered)

    def assert_valid(self) -> None:
        """Require registered owners and dependencies, and an acyclic graph."""
        with self._lock:
            known = set(self._components)
        for resource in self.list_resources():
            owner = resource.owner_service_id
            if owner is not None and owner not in known:
                raise ManifestError(
                    f"resource '{resource.id}' references unknown owner "
                    f"service '{owner}'"
                )
        self.build_order()

    def _check_dependencies_registered(self) -> None:
        with self._lock:
            known = set(self._components)
        for service in self.list_services():
            missing = sorted(str(item) for item in service.depends_on - known)
            if missing:
                raise ManifestError(
                    f"service '{service.id}' depends on unregistered "
                    f"components: {missing}"
                )


def validate_component_id(value: ComponentId) -> None:
    """Validate component-id format."""
    raw = str(value)
    if not _COMPONENT_ID_RE.fullmatch(raw):
        raise ManifestError(
            f"invalid component id '{raw}'; expected ^[a-z][a-z0-9_]{{1,62}}$"
        )


def validate_module_root(value: ModuleRoot) -> None:
    """Validate dotted Python module path format."""
    raw = str(value)
    if not _MODULE_ROOT_RE.fullmatch(raw):
        raise ManifestError(f"invalid module root '{raw}'")


def _validate_roots(roots: FrozenSet[ModuleRoot], *, field_name: str) -> None:
    if not roots:
        raise ManifestError(f"{field_name} must not be empty")
    for root in roots:
        validate_module_root(root)


_DEFAULT_REGISTRY = ManifestRegistry()


def register_component(manifest: ComponentManifest) -> ComponentManifest:
    """Register a component manifest in the default process-local registry."""
    _DEFAULT_REGISTRY.register_component(manifest)
    return manifest


def get_registry() -> ManifestRegistry:
    """Return the process-local default manifest registry."""
    return _DEFAULT_REGISTRY
