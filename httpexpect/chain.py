"""
Deferred assertion chains for HTTP responses.

A chain performs one request and then runs the assertions appended to
it, in call order, once it is awaited:

    ok = await fetch("https://example.org/").status(200).header("content-type", "text/html")

Awaiting a chain resolves to a bool and never raises for a failed
expectation. ``await chain.ensure()`` raises ExpectationFailed with the
latest diagnostic instead. Usage errors (unknown keys, malformed
predicate results) and transport errors are always raised.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generator

from .assertions import (
    AssertionEvaluator,
    ExpectationFailed,
    HeaderTarget,
    KeyTarget,
    QueryTarget,
    Target,
    Verdict,
    query as make_query,
    render_json,
)
from .transport import BaseTransport, HTTPResponse, get_default_transport

logger = logging.getLogger(__name__)

REDIRECT_STATUS_CODES = frozenset({301, 302, 303, 307, 308})

Step = Callable[[bool], Awaitable[bool]]


@dataclass
class ChainState:
    """Request target, received response and latest diagnostic of one chain."""
    url: str
    options: dict[str, Any] | None = None
    response: HTTPResponse | None = None
    last_error: str | None = None


class Chain:
    """
    A request followed by an ordered list of assertion steps.

    Every assertion method appends a step and returns the chain, so calls
    can be stacked. Steps run strictly in append order; once one yields
    False, later steps resolve to False without being evaluated.
    """

    def __init__(
        self,
        url: str,
        options: dict[str, Any] | None = None,
        transport: BaseTransport | None = None,
    ):
        self.state = ChainState(url=url, options=options)
        self._transport = transport or get_default_transport()
        self._evaluator = AssertionEvaluator()
        self._steps: list[Step] = []
        self._cursor = 0
        self._result = True
        self._failure: BaseException | None = None
        self._lock = asyncio.Lock()
        self._request_task: asyncio.Future | None = None
        self._schedule_request()

    @classmethod
    def create(
        cls,
        url: str,
        options: dict[str, Any] | None = None,
        transport: BaseTransport | None = None,
    ) -> Chain:
        return cls(url, options, transport)

    # ─────────────────────────────────────────────────────────────────────
    # Assertions
    # ─────────────────────────────────────────────────────────────────────

    def expect(
        self, target: Target | str, expected: Any, is_header: bool = False
    ) -> Chain:
        """
        Append an assertion on a response field, header or query.

        Args:
            target: A target, or a plain key name
            expected: Literal value or predicate (actual, location)
            is_header: Treat a plain key name as a header name
        """
        if isinstance(target, str):
            target = HeaderTarget(target) if is_header else KeyTarget(target)

        async def step(previous: bool) -> bool:
            return previous and await self._verify(target, expected)

        return self._append(step)

    def status(self, expected: Any) -> Chain:
        return self.expect("status_code", expected)

    def header(self, name: str, expected: Any) -> Chain:
        """Assert on a header. Non-string literals are compared as their JSON text."""
        if not callable(expected) and not isinstance(expected, str):
            expected = render_json(expected)
        return self.expect(name, expected, is_header=True)

    def body(self, expected: Any, query: QueryTarget | str | None = None) -> Chain:
        """Assert on the whole body, or on what a query selects from it."""
        if query is None:
            return self.expect("body", expected)
        if isinstance(query, str):
            query = make_query(query)
        return self.expect(query, expected)

    def redirects_to(self, url: str) -> Chain:
        """Assert a redirect status code and a matching location header."""
        return self.status(_is_redirect).header("location", url)

    async def ensure(self) -> None:
        """
        Await the chain and raise if it resolved to False.

        Raises:
            ExpectationFailed: With the most recent failure diagnostic
        """
        if not await self:
            raise ExpectationFailed(self.state.last_error or "Expectation failed")

    # ─────────────────────────────────────────────────────────────────────
    # Execution
    # ─────────────────────────────────────────────────────────────────────

    def __await__(self) -> Generator[Any, None, bool]:
        return self._run().__await__()

    def _append(self, step: Step) -> Chain:
        self._steps.append(step)
        return self

    def _schedule_request(self) -> None:
        """Start the request now if a loop is running, else on first await."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._request_task = loop.create_task(self._request())
        self._request_task.add_done_callback(_retrieve_exception)

    async def _request(self) -> None:
        logger.debug(f"Requesting {self.state.url}")
        self.state.response = await self._transport.request(
            self.state.url, self.state.options
        )

    async def _run(self) -> bool:
        async with self._lock:
            if self._request_task is None:
                self._request_task = asyncio.ensure_future(self._request())
            await self._request_task

            if self._failure is not None:
                raise self._failure

            while self._cursor < len(self._steps):
                step = self._steps[self._cursor]
                self._cursor += 1
                try:
                    self._result = await step(self._result)
                except Exception as e:
                    # A hard error ends the chain for good
                    self._result = False
                    self._failure = e
                    raise

            return self._result

    async def _verify(self, target: Target, expected: Any) -> bool:
        value, location = self._evaluator.resolve(target, self.state.response)
        verdict = await self._evaluator.evaluate(value, expected, location)
        if not verdict.result:
            self.state.last_error = verdict.error
            logger.debug(f"Assertion failed for {self.state.url}: {verdict.error}")
        return verdict.result

    def __repr__(self) -> str:
        return f"Chain(url={self.state.url!r}, steps={len(self._steps)})"


def _retrieve_exception(task: asyncio.Future) -> None:
    # Awaiting the chain re-raises the error; this only marks it as seen
    if not task.cancelled():
        task.exception()


def _is_redirect(code: Any, location: str) -> bool | Verdict:
    if code in REDIRECT_STATUS_CODES:
        return True
    return Verdict.failed(
        f"Expected {location} to be a redirect status, but got {render_json(code)}"
    )


def fetch(
    url: str,
    options: dict[str, Any] | None = None,
    *,
    transport: BaseTransport | None = None,
) -> Chain:
    """
    Start a chain for a request.

    Args:
        url: Destination URL
        options: Request options passed to the transport unchanged
        transport: Transport to use instead of the default one

    Example:
        await fetch("https://example.org/old", {"allow_redirects": False}) \\
            .redirects_to("https://example.org/new") \\
            .ensure()
    """
    return Chain.create(url, options, transport)
