"""Public shared HTTP API for internal Beacon packages."""

from .client import HttpClient
from .errors import (
    HttpClientError,
    HttpJsonDecodeError,
    HttpRequestError,
    HttpStatusError,
)
from .server import build_server, create_app

__all__ = [
    "HttpClient",
    "HttpClientError",
    "HttpJsonDecodeError",
    "HttpRequestError",
    "HttpStatusError",
    "build_server",
    "create_app",
]
