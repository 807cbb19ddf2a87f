"""Typed configuration models for Beacon runtime settings.

Component settings live under ``components.<kind>.<name>`` where ``kind`` is
the prefix of the component id (``service_resolution_cache`` reads
``components.service.resolution_cache``). Each component validates its own
subtree with its own model when it is built, so a typo in one component's
settings never blocks loading the rest.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "beacon" / "beacon.yaml"

ComponentKind = Literal["service", "adapter", "substrate"]
_COMPONENT_KINDS: tuple[ComponentKind, ...] = ("service", "adapter", "substrate")

TComponentSettings = TypeVar("TComponentSettings", bound=BaseModel)


class LoggingSettings(BaseModel):
    """Stdout logging configuration shared by every component."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "beacon"
    environment: str = "dev"


class CoreHttpSettings(BaseModel):
    """Bind address of the core HTTP app and its health probe budget."""

    host: str = "127.0.0.1"
    port: int = Field(default=3001, gt=0, lt=65536)
    health_timeout_seconds: float = Field(default=2.0, gt=0)


class ComponentsSettings(BaseModel):
    """The ``components`` subtree: core HTTP plus one raw map per kind."""

    core_http: CoreHttpSettings = Field(default_factory=CoreHttpSettings)
    service: dict[str, Any] = Field(default_factory=dict)
    adapter: dict[str, Any] = Field(default_factory=dict)
    substrate: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _require_grouped_keys(cls, value: object) -> object:
        """Point ``components.service_x`` at its ``components.service.x`` form."""
        if not isinstance(value, dict):
            return value
        for key in value:
            kind, separator, name = str(key).partition("_")
            if separator and kind in _COMPONENT_KINDS:
                raise ValueError(
                    f"components.{key} is invalid; use components.{kind}.{name} instead"
                )
        return value

    def subtree(self, component_id: str) -> tuple[str, object]:
        """Return ``(config path, raw value)`` for one component id."""
        kind, separator, name = component_id.partition("_")
        if not separator or kind not in _COMPONENT_KINDS:
            raise ValueError(
                f"component id '{component_id}' has no settings kind prefix"
            )
        namespace: dict[str, Any] = getattr(self, kind)
        return f"components.{kind}.{name}", namespace.get(name, {})


class BeaconSettings(BaseSettings):
    """Root settings resolved from init, env, YAML, then model defaults."""

    model_config = SettingsConfigDict(
        env_prefix="BEACON_",
        env_nested_delimiter="__",
        extra="ignore",
        nested_model_default_partial_update=True,
        yaml_file=DEFAULT_CONFIG_PATH,
        yaml_file_encoding="utf-8",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    components: ComponentsSettings = Field(default_factory=ComponentsSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Drop dotenv and secrets sources; YAML sits below the environment."""
        del dotenv_settings, file_secret_settings
        return (init_settings, env_settings, YamlConfigSettingsSource(settings_cls))


def resolve_component_settings(
    *,
    settings: BeaconSettings,
    component_id: str,
    model: type[TComponentSettings],
) -> TComponentSettings:
    """Validate one component's ``components.<kind>.<name>`` subtree."""
    path, raw = settings.components.subtree(component_id)
    if not isinstance(raw, dict):
        raise TypeError(f"{path} must resolve to an object mapping")
    return model.model_validate(raw)
