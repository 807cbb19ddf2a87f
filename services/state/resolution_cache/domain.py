"""Domain contracts for Resolution Cache Service payloads."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Callable, Final

from pydantic import AwareDatetime, BaseModel, ConfigDict, JsonValue

ComputeFn = Callable[[], JsonValue]
Clock = Callable[[], datetime]

_NAMESPACE_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z][a-z0-9_]*$")


class StoredEntry(BaseModel):
    """One cache entry as persisted in the external store."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: str
    value: JsonValue
    expires_at: AwareDatetime

    def is_live(self, now: datetime) -> bool:
        """Return whether the entry is still unexpired at ``now``."""
        return self.expires_at > now


class HealthStatus(BaseModel):
    """Resolution cache and backing store readiness payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_ready: bool
    store_ready: bool
    detail: str


def utc_now() -> datetime:
    """Return the current aware UTC timestamp."""
    return datetime.now(UTC)


def validate_namespace(namespace: str) -> str:
    """Return ``namespace`` or raise ``ValueError`` if it is not a bare identifier."""
    if not _NAMESPACE_RE.fullmatch(namespace):
        raise ValueError(
            f"invalid resolution namespace '{namespace}'; expected ^[a-z][a-z0-9_]*$"
        )
    return namespace


def build_resolution_key(namespace: str, natural_key: str) -> str:
    """Compose ``<namespace>:<natural_key>``.

    Namespaces cannot contain ``:``, so the first colon always ends the
    namespace and keys from distinct namespaces never collide.
    """
    validate_namespace(namespace)
    if natural_key == "":
        raise ValueError("natural_key must be non-empty")
    return f"{namespace}:{natural_key}"
