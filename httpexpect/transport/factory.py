"""
Process-wide default transport.

Chains created without an explicit transport use the default one,
which tests can swap for a stub with set_default_transport().
"""

from __future__ import annotations

from .base import BaseTransport
from .http import HTTPTransport

_default_transport: BaseTransport | None = None


def get_default_transport() -> BaseTransport:
    """Return the default transport, creating an HTTPTransport on first use."""
    global _default_transport
    if _default_transport is None:
        _default_transport = HTTPTransport()
    return _default_transport


def set_default_transport(transport: BaseTransport | None) -> None:
    """Replace the default transport. Passing None restores HTTPTransport."""
    global _default_transport
    _default_transport = transport
