"""Invocation logging for public service and resource methods."""

from __future__ import annotations

import logging
from functools import wraps
from time import perf_counter
from typing import Any, Callable

from . import fields
from .context import log_context


def public_api_instrumented(
    *,
    logger: logging.Logger,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Log one debug line per call and one completion line per outcome.

    Keyword arguments named in ``id_fields`` are copied into the log context
    of both lines. Completion is logged at INFO on success and at WARNING
    with the error and its taxonomy category when the call raises; the
    exception itself always propagates unchanged.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        base = {
            fields.COMPONENT_ID: component_id,
            fields.API_NAME: api_name or func.__name__,
        }

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            references = {
                name: str(kwargs[name])
                for name in id_fields
                if kwargs.get(name) not in (None, "")
            }
            with log_context(
                {**base, **references, fields.EVENT: fields.PUBLIC_API_INVOCATION_EVENT}
            ):
                logger.debug("Public API invocation")

            started = perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                _log_completion(
                    logger,
                    {
                        **base,
                        **references,
                        fields.SUCCESS: False,
                        fields.DURATION_MS: _elapsed_ms(started),
                        fields.ERRORS: f"{type(exc).__name__}: {exc}",
                        fields.ERROR_CATEGORY: _exception_category(exc),
                    },
                )
                raise
            _log_completion(
                logger,
                {
                    **base,
                    **references,
                    fields.SUCCESS: True,
                    fields.DURATION_MS: _elapsed_ms(started),
                },
            )
            return result

        return wrapper

    return decorator


def _log_completion(logger: logging.Logger, payload: dict[str, object]) -> None:
    payload[fields.EVENT] = fields.PUBLIC_API_COMPLETION_EVENT
    with log_context(payload):
        if payload[fields.SUCCESS]:
            logger.info("Public API completion")
        else:
            logger.warning("Public API completion")


def _elapsed_ms(started: float) -> float:
    return round((perf_counter() - started) * 1000.0, 3)


def _exception_category(exc: Exception) -> str:
    """Return the taxonomy category carried by ``exc`` or ``internal``."""
    category = getattr(exc, "category", None)
    value = getattr(category, "value", category)
    if value in (None, ""):
        return "internal"
    return str(value)
