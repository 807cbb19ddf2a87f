"""Discovery of ``component.py`` declaration modules.

Resources (L0) are discovered before services (L1). A file counts as a
declaration only when it binds ``MANIFEST`` to a ``register_component(...)``
call at module level, so helpers that merely mention the names are skipped.
"""

from __future__ import annotations

import ast
import importlib
from collections.abc import Iterable, Iterator
from pathlib import Path

from packages.beacon_shared.logging import get_logger

_LOGGER = get_logger(__name__)
_LAYER_ROOTS = ("resources", "services")
_SKIPPED_PARTS = frozenset({"tests", "__pycache__"})
_REPO_ROOT = Path(__file__).resolve().parents[2]


def discover_component_modules(repo_root: Path | None = None) -> tuple[str, ...]:
    """Return dotted import paths of every declaration module under the root."""
    root = (repo_root or _REPO_ROOT).resolve()
    return tuple(
        ".".join(path.relative_to(root).with_suffix("").parts)
        for path in _declaration_files(root)
    )


def import_component_modules(modules: Iterable[str]) -> tuple[str, ...]:
    """Import each module so its manifest lands in the default registry."""
    return tuple(importlib.import_module(name).__name__ for name in modules)


def import_registered_component_modules(
    repo_root: Path | None = None,
) -> tuple[str, ...]:
    """Discover and import all component declaration modules."""
    imported = import_component_modules(discover_component_modules(repo_root))
    _LOGGER.debug("component modules imported", extra={"modules": len(imported)})
    return imported


def _declaration_files(root: Path) -> Iterator[Path]:
    for layer_root in _LAYER_ROOTS:
        base = root / layer_root
        if not base.is_dir():
            continue
        for path in sorted(base.rglob("component.py")):
            if _SKIPPED_PARTS.intersection(path.relative_to(root).parts):
                continue
            if _declares_manifest(path):
                yield path


def _declares_manifest(path: Path) -> bool:
    """True when a top-level ``MANIFEST = register_component(...)`` exists."""
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    for node in tree.body:
        if not isinstance(node, ast.Assign) or not isinstance(node.value, ast.Call):
            continue
        names = {target.id for target in node.targets if isinstance(target, ast.Name)}
        func = node.value.func
        called = func.id if isinstance(func, ast.Name) else getattr(func, "attr", "")
        if "MANIFEST" in names and called == "register_component":
            return True
    return False
