"""
Assertion evaluator for HTTP responses.

This module resolves assertion targets against a response and turns
literal values, custom predicates and query results into a single
pass/fail Verdict with a human-readable diagnostic.
"""

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Mapping, Sized
from typing import Any, Callable

from ..transport.models import HTTPResponse
from .models import (
    ContractViolation,
    HeaderTarget,
    KeyTarget,
    MissingKeyError,
    PredicateContractError,
    QueryTarget,
    Target,
    Verdict,
)

logger = logging.getLogger(__name__)

Predicate = Callable[[Any, str], Any]


class AssertionEvaluator:
    """
    Evaluates one expectation against a response.

    Example:
        evaluator = AssertionEvaluator()
        value, location = evaluator.resolve(KeyTarget("status_code"), response)
        verdict = await evaluator.evaluate(value, 200, location)
        if not verdict:
            print(verdict.error)
    """

    def resolve(self, target: Target, response: HTTPResponse) -> tuple[Any, str]:
        """
        Look up the value a target refers to.

        Args:
            target: Key, header or query target
            response: The response to read from

        Returns:
            Tuple of (value, location description)

        Raises:
            MissingKeyError: If a key or header does not exist
            ContractViolation: If a query runs on a body that is not JSON
        """
        if isinstance(target, QueryTarget):
            document = _parse_document(response.body)
            return target.apply(document), f"expression {render_json(target.expression)}"

        if isinstance(target, HeaderTarget):
            fields = response.headers
            name = target.name.lower()
        elif isinstance(target, KeyTarget):
            fields = response.to_dict()
            name = target.name
        else:
            raise TypeError(f"Unsupported assertion target: {target!r}")

        if name not in fields:
            raise MissingKeyError(
                target.name, f"Key {render_json(target.name)} does not exist"
            )

        return fields[name], f"key {render_json(target.name)}"

    async def evaluate(self, actual: Any, expected: Any, location: str) -> Verdict:
        """
        Check an actual value against a literal or a predicate.

        Args:
            actual: The value found in the response
            expected: A literal value, or a predicate (actual, location)
            location: Description of where the value came from

        Returns:
            Verdict with the diagnostic set on failure

        Raises:
            PredicateContractError: If a predicate returns an unsupported shape
        """
        if callable(expected):
            outcome = expected(actual, location)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            verdict = _normalize(outcome, expected)
        elif deep_equal(actual, expected):
            verdict = Verdict.passed()
        else:
            verdict = Verdict.failed(
                f"Expected {location} to be {render_json(expected)}, "
                f"but got {render_json(actual)}"
            )

        logger.debug(f"{location}: {'passed' if verdict.result else 'failed'}")
        return verdict


def exists(actual: Any, location: str) -> bool | Verdict:
    """Predicate that passes when the value is a non-empty string, list or object."""
    if isinstance(actual, Sized) and len(actual) != 0:
        return True

    return Verdict.failed(
        f"Expected {location} to contain a value, but it does not exist"
    )


def deep_equal(actual: Any, expected: Any) -> bool:
    """
    Structural equality for JSON-like values.

    Booleans only equal booleans, so ``True`` does not match ``1``.
    Lists and tuples compare element-wise.
    """
    if isinstance(actual, bool) or isinstance(expected, bool):
        return type(actual) is type(expected) and actual == expected

    if isinstance(actual, Mapping) and isinstance(expected, Mapping):
        if set(actual.keys()) != set(expected.keys()):
            return False
        return all(deep_equal(actual[k], expected[k]) for k in actual)

    if isinstance(actual, (list, tuple)) and isinstance(expected, (list, tuple)):
        if len(actual) != len(expected):
            return False
        return all(deep_equal(a, e) for a, e in zip(actual, expected))

    if isinstance(actual, (Mapping, list, tuple)) or isinstance(expected, (Mapping, list, tuple)):
        return False

    return actual == expected


def render_json(value: Any) -> str:
    """Render a value as compact JSON for diagnostics."""
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)


def _parse_document(body: Any) -> Any:
    """Parse a text body, or round-trip a structured one through JSON."""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    try:
        if isinstance(body, str):
            return json.loads(body)
        return json.loads(json.dumps(body))
    except (TypeError, ValueError) as e:
        raise ContractViolation(f"Response body is not valid JSON: {e}") from e


def _normalize(outcome: Any, predicate: Predicate) -> Verdict:
    """Turn a predicate's return value into a Verdict."""
    default_error = f"Custom assertion failed: {_describe(predicate)}"

    if isinstance(outcome, bool):
        return Verdict(outcome, None if outcome else default_error)

    if isinstance(outcome, Verdict):
        result, error = outcome.result, outcome.error
    elif isinstance(outcome, Mapping) and "result" in outcome:
        result, error = outcome["result"], outcome.get("error")
    else:
        raise PredicateContractError(
            "Custom assertion functions must return a boolean or a {result, error} object"
        )

    result = bool(result)
    if result:
        return Verdict.passed()
    return Verdict.failed(error if error is not None else default_error)


def _describe(predicate: Predicate) -> str:
    try:
        return inspect.getsource(predicate).strip()
    except (OSError, TypeError):
        return repr(predicate)
