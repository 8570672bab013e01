"""
aiohttp-backed HTTP transport.

This module implements the default transport used by assertion chains:
- One request per call, with options passed through to aiohttp
- Optional long-lived session via connect()/disconnect()
- Header names normalized to lowercase
- Optional JSON decoding of the body (response_type: json)
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp

from .base import BaseTransport
from .models import HTTPResponse, TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30000

# Options consumed by the transport itself; anything else goes to aiohttp
METHOD = "method"
BODY = "body"
TIMEOUT_MS = "timeout_ms"
RESPONSE_TYPE = "response_type"

RESPONSE_TYPES = ("text", "json")


class HTTPTransport(BaseTransport):
    """
    HTTP transport built on aiohttp.

    Recognized options:
    - method: HTTP method (default GET)
    - headers: Request headers, merged over default_headers
    - body: Raw request body (sent as aiohttp ``data``)
    - timeout_ms: Total request timeout in milliseconds
    - response_type: "text" (default) or "json"

    Any other option (json, params, cookies, allow_redirects, ssl, ...)
    is passed to ``aiohttp.ClientSession.request`` unchanged.
    """

    def __init__(
        self,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        default_headers: dict[str, str] | None = None,
    ):
        """
        Initialize HTTP transport.

        Args:
            timeout_ms: Default timeout when a request sets none
            default_headers: Headers sent with every request
        """
        self.timeout_ms = timeout_ms
        self.default_headers = dict(default_headers or {})
        self._session: aiohttp.ClientSession | None = None

    @property
    def is_connected(self) -> bool:
        return self._session is not None and not self._session.closed

    async def connect(self) -> None:
        """Create a session reused by every request until disconnect()."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()

    async def disconnect(self) -> None:
        """Close the shared session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def request(
        self, url: str, options: dict[str, Any] | None = None
    ) -> HTTPResponse:
        """
        Send a request with aiohttp.

        Args:
            url: Destination URL
            options: Request options, see class docstring

        Returns:
            HTTPResponse with lowercase headers

        Raises:
            TransportError: On timeouts, connection errors or undecodable JSON
        """
        kwargs = dict(options or {})
        method = str(kwargs.pop(METHOD, "GET")).upper()
        timeout_ms = kwargs.pop(TIMEOUT_MS, self.timeout_ms)
        response_type = kwargs.pop(RESPONSE_TYPE, "text")
        if response_type not in RESPONSE_TYPES:
            raise ValueError(
                f"Unsupported response_type {response_type!r}, "
                f"expected one of: {', '.join(RESPONSE_TYPES)}"
            )
        if BODY in kwargs:
            kwargs["data"] = kwargs.pop(BODY)

        headers = dict(self.default_headers)
        headers.update(kwargs.pop("headers", None) or {})
        timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000)

        logger.debug(f"{method} {url}")

        if self.is_connected:
            return await self._send(
                self._session, method, url, headers, timeout, response_type, kwargs
            )

        async with aiohttp.ClientSession() as session:
            return await self._send(
                session, method, url, headers, timeout, response_type, kwargs
            )

    async def _send(
        self,
        session: aiohttp.ClientSession,
        method: str,
        url: str,
        headers: dict[str, str],
        timeout: aiohttp.ClientTimeout,
        response_type: str,
        kwargs: dict[str, Any],
    ) -> HTTPResponse:
        try:
            async with session.request(
                method,
                url,
                headers=headers,
                timeout=timeout,
                **kwargs,
            ) as resp:
                text = await resp.text(errors="replace")
                response = HTTPResponse(
                    status_code=resp.status,
                    headers=_normalize_headers(resp.headers),
                    body=text,
                    url=str(resp.url),
                    reason=resp.reason,
                )

        except asyncio.TimeoutError:
            raise TransportError.timeout(url, int(timeout.total * 1000))
        except aiohttp.ClientConnectorError as e:
            raise TransportError.connection(url, e) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"HTTP error: {e}", url=url) from e

        logger.debug(f"{method} {url} -> {response.status_code}")

        if response_type == "json":
            try:
                response.body = json.loads(text) if text else None
            except json.JSONDecodeError as e:
                raise TransportError(
                    f"Invalid JSON response: {e}", url=url
                ) from e

        return response

    def __repr__(self) -> str:
        status = "connected" if self.is_connected else "disconnected"
        return f"HTTPTransport(timeout_ms={self.timeout_ms}, status={status})"


def _normalize_headers(headers: Any) -> dict[str, str]:
    """Lowercase header names, joining repeated headers with a comma."""
    normalized: dict[str, str] = {}
    for name, value in headers.items():
        name = name.lower()
        if name in normalized:
            normalized[name] = f"{normalized[name]}, {value}"
        else:
            normalized[name] = value
    return normalized
