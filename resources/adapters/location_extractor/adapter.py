"""Transport-agnostic location extractor adapter protocol."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


class LocationExtractorHealthResult(BaseModel):
    """Readiness payload for location extractor dependencies."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    adapter_ready: bool
    detail: str


@runtime_checkable
class LocationExtractor(Protocol):
    """Protocol for pulling one place name out of free-form text."""

    def extract_location(self, raw_text: str) -> str | Mapping[str, object]:
        """Return a place name, or a mapping carrying it under ``location``."""
