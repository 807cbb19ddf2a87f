"""Process entrypoint for the Beacon coordination core."""

from __future__ import annotations

import os
import signal
import threading
from pathlib import Path
from time import sleep

from packages.beacon_core.runtime import BeaconRuntime
from packages.beacon_shared.component_loader import (
    import_registered_component_modules,
)
from packages.beacon_shared.config import load_settings
from packages.beacon_shared.http import build_server
from packages.beacon_shared.logging import configure_logging, get_logger
from packages.beacon_shared.manifest import get_registry

_LOGGER = get_logger(__name__)
_RUNNING = True


def _handle_shutdown(_signum: int, _frame: object) -> None:
    """Mark process for graceful shutdown when receiving termination signals."""
    global _RUNNING
    _RUNNING = False


def main() -> None:
    """Discover components, build and start them, and serve until signalled."""
    config_path = os.getenv("BEACON_CONFIG_FILE", "").strip()
    settings = load_settings(config_path=Path(config_path) if config_path else None)
    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
    )

    imported = import_registered_component_modules()
    registry = get_registry()
    registry.assert_valid()
    _LOGGER.info(
        "component registration completed",
        extra={
            "imported_count": len(imported),
            "service_count": len(registry.list_services()),
            "resource_count": len(registry.list_resources()),
        },
    )

    runtime = BeaconRuntime(settings=settings, registry=registry)
    try:
        runtime.start()
        http = settings.components.core_http
        server = build_server(
            runtime.build_app(),
            host=http.host,
            port=http.port,
            log_level=settings.logging.level.lower(),
        )
        thread = threading.Thread(target=server.run, name="beacon-http", daemon=True)
        thread.start()
        _LOGGER.info(
            "core HTTP runtime started",
            extra={"host": http.host, "port": http.port},
        )

        signal.signal(signal.SIGINT, _handle_shutdown)
        signal.signal(signal.SIGTERM, _handle_shutdown)
        try:
            while _RUNNING and thread.is_alive():
                sleep(1.0)
        finally:
            server.should_exit = True
            thread.join(timeout=5.0)
            _LOGGER.info("core HTTP runtime stopped")
    finally:
        runtime.close()


if __name__ == "__main__":
    main()
