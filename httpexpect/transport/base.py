"""
Base transport interface for HTTP requests.

This module defines the abstract base class that all transport
implementations must follow.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import HTTPResponse


class BaseTransport(ABC):
    """
    Abstract base class for transports.

    A transport turns a URL and an options mapping into an HTTPResponse.
    The options are opaque to the assertion chain and are handed over
    unchanged.
    """

    @abstractmethod
    async def request(
        self, url: str, options: dict[str, Any] | None = None
    ) -> HTTPResponse:
        """
        Perform a request and return the response.

        Args:
            url: Destination URL
            options: Request options (method, headers, body, ...)

        Returns:
            HTTPResponse with status, headers and body

        Raises:
            TransportError: If the request could not be completed
        """
        pass

    async def connect(self) -> None:
        """Acquire long-lived resources. Optional for most transports."""
        pass

    async def disconnect(self) -> None:
        """Release resources acquired by connect()."""
        pass

    async def __aenter__(self) -> BaseTransport:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.disconnect()
