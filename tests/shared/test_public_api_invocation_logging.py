"""Tests for public API invocation logging."""

from __future__ import annotations

import logging

import pytest

from packages.beacon_shared.errors import ComputeFailure, ErrorCategory
from packages.beacon_shared.logging import (
    fields,
    get_context,
    public_api_instrumented,
)


class _ContextCapture(logging.Handler):
    """Record each message with the logging context bound when it was emitted."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.entries: list[tuple[int, str, dict[str, str]]] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.entries.append((record.levelno, record.getMessage(), get_context()))


@pytest.fixture
def capture() -> logging.Logger:
    logger = logging.getLogger("tests.public_api")
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.addHandler(_ContextCapture())
    return logger


def _entries(logger: logging.Logger) -> list[tuple[int, str, dict[str, str]]]:
    [handler] = logger.handlers
    assert isinstance(handler, _ContextCapture)
    return handler.entries


def test_success_logs_invocation_and_completion_with_references(
    capture: logging.Logger,
) -> None:
    @public_api_instrumented(
        logger=capture,
        component_id="service_resolution_cache",
        id_fields=("key",),
    )
    def resolve(*, key: str, hint: str = "") -> str:
        return key.upper()

    assert resolve(key="geocode:manhattan", hint="x") == "GEOCODE:MANHATTAN"

    [invocation, completion] = _entries(capture)
    assert invocation[:2] == (logging.DEBUG, "Public API invocation")
    assert invocation[2][fields.API_NAME] == "resolve"
    assert invocation[2]["key"] == "geocode:manhattan"
    assert "hint" not in invocation[2]
    assert completion[:2] == (logging.INFO, "Public API completion")
    assert completion[2][fields.SUCCESS] == "True"
    assert completion[2][fields.EVENT] == fields.PUBLIC_API_COMPLETION_EVENT
    assert float(completion[2][fields.DURATION_MS]) >= 0


def test_failure_completion_carries_error_category(capture: logging.Logger) -> None:
    @public_api_instrumented(logger=capture, component_id="service_pipeline")
    def geocode() -> None:
        raise ComputeFailure("geocoder down", key="geocode:x")

    with pytest.raises(ComputeFailure):
        geocode()

    level, message, context = _entries(capture)[-1]
    assert (level, message) == (logging.WARNING, "Public API completion")
    assert context[fields.SUCCESS] == "False"
    assert context[fields.ERRORS].startswith("ComputeFailure:")
    assert context[fields.ERROR_CATEGORY] == ErrorCategory.DEPENDENCY.value


def test_foreign_exception_is_categorized_internal(capture: logging.Logger) -> None:
    @public_api_instrumented(
        logger=capture, component_id="service_broadcast", api_name="publish_event"
    )
    def publish() -> None:
        raise KeyError("missing")

    with pytest.raises(KeyError):
        publish()

    context = _entries(capture)[-1][2]
    assert context[fields.API_NAME] == "publish_event"
    assert context[fields.ERROR_CATEGORY] == "internal"


def test_context_is_restored_after_call(capture: logging.Logger) -> None:
    @public_api_instrumented(logger=capture, component_id="service_broadcast")
    def publish() -> None:
        return None

    before = get_context()
    publish()

    assert get_context() == before
