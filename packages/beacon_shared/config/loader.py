"""Settings loading with deterministic precedence.

The cascade is always:
1) CLI params
2) Environment variables
3) ~/.config/beacon/beacon.yaml (or an explicit ``config_path``)
4) Built-in model defaults

Environment variable format:
- Prefix: ``BEACON_``
- Nested keys: ``__`` separator
- Example: ``BEACON_LOGGING__LEVEL=DEBUG`` -> ``logging.level = "DEBUG"``
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from pydantic_settings import SettingsConfigDict

from .models import DEFAULT_CONFIG_PATH, BeaconSettings


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
) -> BeaconSettings:
    """Load root settings by applying the standard Beacon precedence cascade."""
    resolved_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    class _ScopedBeaconSettings(BeaconSettings):
        model_config = SettingsConfigDict(yaml_file=resolved_path)

    return _ScopedBeaconSettings(**dict(cli_params or {}))
