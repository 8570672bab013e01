"""
HTTP Transport Layer

This package provides the transport used by assertion chains to
perform the actual HTTP request.

Usage:
    from httpexpect.transport import HTTPTransport

    # One session per request
    transport = HTTPTransport(timeout_ms=5000)
    response = await transport.request("https://example.org/", {"method": "GET"})

    # Or reuse a session as an async context manager
    async with HTTPTransport() as transport:
        response = await transport.request("https://example.org/")
        print(response.status_code, response.headers["content-type"])
"""

# Factory
from .factory import (
    get_default_transport,
    set_default_transport,
)

# Transport implementations
from .base import BaseTransport
from .http import HTTPTransport

# Models
from .models import HTTPResponse, TransportError

__all__ = [
    # Factory
    "get_default_transport",
    "set_default_transport",
    # Base
    "BaseTransport",
    # Implementations
    "HTTPTransport",
    # Models
    "HTTPResponse",
    "TransportError",
]
