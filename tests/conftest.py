"""
Shared fixtures for httpexpect tests.

The network is replaced by FakeTransport, which serves canned
responses and records every request it receives.
"""

from typing import Any, Callable, Generator

import pytest

from httpexpect.transport import (
    BaseTransport,
    HTTPResponse,
    TransportError,
    set_default_transport,
)


class FakeTransport(BaseTransport):
    """Serves canned responses by URL, falling back to a default."""

    def __init__(
        self,
        responses: dict[str, Any] | None = None,
        default: Any = None,
    ) -> None:
        self.responses = responses or {}
        self.default = default
        self.requests: list[tuple[str, dict[str, Any] | None]] = []
        self.connected = False

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    async def request(
        self, url: str, options: dict[str, Any] | None = None
    ) -> HTTPResponse:
        self.requests.append((url, options))
        outcome = self.responses.get(url, self.default)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            raise TransportError(f"No stubbed response for {url}", url=url)
        return HTTPResponse.from_dict(outcome)


@pytest.fixture
def stub() -> Generator[Callable[..., FakeTransport], None, None]:
    """
    Install a FakeTransport as the default transport.

    Usage:
        transport = stub({"status_code": 200, "headers": {}, "body": {}})
    """
    def install(
        default: Any = None, responses: dict[str, Any] | None = None
    ) -> FakeTransport:
        transport = FakeTransport(responses=responses, default=default)
        set_default_transport(transport)
        return transport

    yield install
    set_default_transport(None)
