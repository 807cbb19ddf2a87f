"""Context-variable storage for structured logging fields.

Fields bound here are attached to every record emitted from the same thread or
task, so request identifiers and component ids do not have to be repeated at
each log call. Worker threads start with an empty context.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Mapping

_LOG_CONTEXT: ContextVar[dict[str, str]] = ContextVar("beacon_log_context", default={})


def get_context() -> dict[str, str]:
    """Return a shallow copy of the current logging context."""
    return dict(_LOG_CONTEXT.get())


def bind_context(**values: object) -> None:
    """Merge non-``None`` values into the current context as strings."""
    merged = _merged(_LOG_CONTEXT.get(), values)
    if merged is not None:
        _LOG_CONTEXT.set(merged)


def clear_context(*keys: str) -> None:
    """Drop the named keys, or every key when none are given."""
    if not keys:
        _LOG_CONTEXT.set({})
        return
    remaining = {
        name: value for name, value in _LOG_CONTEXT.get().items() if name not in keys
    }
    _LOG_CONTEXT.set(remaining)


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[None]:
    """Bind ``values`` for the duration of one block, then restore."""
    token = _LOG_CONTEXT.set(_merged(_LOG_CONTEXT.get(), values) or _LOG_CONTEXT.get())
    try:
        yield
    finally:
        _LOG_CONTEXT.reset(token)


def _merged(
    current: Mapping[str, str], values: Mapping[str, object]
) -> dict[str, str] | None:
    """Return ``current`` extended with stringified values, or ``None`` if no-op."""
    if not values:
        return None
    merged = dict(current)
    for key, value in values.items():
        if value is None:
            continue
        merged[str(key)] = str(value)
    return merged
