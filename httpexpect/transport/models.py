"""
Transport layer models for HTTP requests.

This module defines the response record handed to assertion chains
and the error raised when a request cannot be completed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class HTTPResponse:
    """
    Response record produced by a transport.

    Attributes:
        status_code: HTTP status code
        headers: Header mapping with lowercase names
        body: Raw text, or an already-decoded JSON value
        url: Final URL of the request
        reason: HTTP reason phrase
    """
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = ""
    url: str | None = None
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the directly addressable response fields."""
        return {
            "status_code": self.status_code,
            "headers": self.headers,
            "body": self.body,
            "url": self.url,
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HTTPResponse:
        """Build a response from a plain mapping (used by stub transports)."""
        headers = data.get("headers") or {}
        return cls(
            status_code=data.get("status_code", 200),
            headers={str(k).lower(): v for k, v in headers.items()},
            body=data.get("body", ""),
            url=data.get("url"),
            reason=data.get("reason"),
        )


class TransportError(Exception):
    """Raised when a request could not be completed."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.message = message
        self.url = url

    @classmethod
    def timeout(cls, url: str, timeout_ms: int) -> TransportError:
        return cls(f"Request timed out after {timeout_ms}ms", url=url)

    @classmethod
    def connection(cls, url: str, reason: Any) -> TransportError:
        return cls(f"Connection failed: {reason}", url=url)
