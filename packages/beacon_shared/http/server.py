"""Minimal FastAPI and uvicorn helpers for the Beacon HTTP runtime."""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI


def create_app(*, title: str = "beacon", version: str = "0.1.0") -> FastAPI:
    """Create a FastAPI app with project defaults."""
    return FastAPI(title=title, version=version)


def build_server(
    app: FastAPI,
    *,
    host: str = "127.0.0.1",
    port: int = 3001,
    log_level: str = "info",
) -> uvicorn.Server:
    """Build one uvicorn server for ``app`` without starting it."""
    config = uvicorn.Config(app, host=host, port=port, log_level=log_level)
    return uvicorn.Server(config)
