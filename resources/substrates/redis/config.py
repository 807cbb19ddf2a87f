"""Pydantic settings for the Redis substrate component."""

from __future__ import annotations

import os
from urllib.parse import quote_plus

from pydantic import BaseModel, ConfigDict, Field, model_validator

from packages.beacon_shared.config import BeaconSettings, resolve_component_settings
from resources.substrates.redis.component import RESOURCE_COMPONENT_ID


class RedisSettings(BaseModel):
    """Redis connectivity settings for the shared resolution cache backend.

    Either ``url`` is given verbatim, or it is assembled from the split
    host/port/db/credential fields when ``url`` is blank or ``None``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str | None = "redis://localhost:6379/0"
    host: str = "localhost"
    port: int = Field(default=6379, gt=0)
    db: int = Field(default=0, ge=0)
    username: str = ""
    password: str = ""
    password_env: str = ""
    ssl: bool = False
    connect_timeout_seconds: float = Field(default=5.0, gt=0)
    socket_timeout_seconds: float = Field(default=5.0, gt=0)
    health_timeout_seconds: float = Field(default=1.0, gt=0)
    max_connections: int = Field(default=20, gt=0)

    @model_validator(mode="after")
    def _resolve_url(self) -> "RedisSettings":
        """Prefer an explicit URL, otherwise build one from split fields."""
        explicit = (self.url or "").strip()
        if explicit != "":
            object.__setattr__(self, "url", explicit)
            return self

        password = _resolve_password(
            password=self.password, password_env=self.password_env
        )
        object.__setattr__(self, "password", password)
        object.__setattr__(self, "url", _url_from_parts(self))
        return self


def _resolve_password(*, password: str, password_env: str) -> str:
    """Resolve password from inline value or environment variable reference."""
    inline = password.strip()
    env_name = password_env.strip()
    if inline and env_name:
        raise ValueError(
            "components.substrate.redis.password and password_env are mutually exclusive"
        )
    if not env_name:
        return inline

    resolved = os.environ.get(env_name, "").strip()
    if resolved == "":
        raise ValueError(
            f"components.substrate.redis.password_env references missing env var '{env_name}'"
        )
    return resolved


def _url_from_parts(redis: RedisSettings) -> str:
    """Construct a Redis URL from split fields."""
    host = redis.host.strip()
    if host == "":
        raise ValueError("components.substrate.redis.host is required when url is unset")

    username = quote_plus(redis.username.strip())
    password = quote_plus(redis.password.strip())
    if username and password:
        auth = f"{username}:{password}@"
    elif username:
        auth = f"{username}@"
    elif password:
        auth = f":{password}@"
    else:
        auth = ""

    scheme = "rediss" if redis.ssl else "redis"
    return f"{scheme}://{auth}{host}:{redis.port}/{redis.db}"


def resolve_redis_settings(settings: BeaconSettings) -> RedisSettings:
    """Resolve Redis substrate settings from ``components.substrate.redis``."""
    return resolve_component_settings(
        settings=settings,
        component_id=str(RESOURCE_COMPONENT_ID),
        model=RedisSettings,
    )
