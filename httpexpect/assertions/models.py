"""
Assertion models.

This module defines the assertion target variants, the verdict
returned by an evaluation, and the exceptions raised by chains.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from jsonpath_ng import parse as parse_jsonpath
from jsonpath_ng.exceptions import JsonPathParserError


# ─────────────────────────────────────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────────────────────────────────────

class ExpectationFailed(AssertionError):
    """Raised by ensure() when a chain resolved to False."""


class ContractViolation(TypeError):
    """Usage error that is raised immediately, never recorded as a failure."""


class MissingKeyError(ContractViolation):
    """The asserted key is neither a response field nor a header."""

    def __init__(self, key: str, message: str):
        super().__init__(message)
        self.key = key


class PredicateContractError(ContractViolation):
    """A custom predicate returned something other than a bool or a verdict."""


class InvalidQueryError(ContractViolation):
    """A query expression could not be parsed."""


# ─────────────────────────────────────────────────────────────────────────────
# Verdict
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Verdict:
    """
    Outcome of a single check.

    Predicates may return a Verdict (or a {"result", "error"} mapping)
    instead of a bare bool to supply their own diagnostic.
    """
    result: bool
    error: str | None = None

    def __bool__(self) -> bool:
        return self.result

    @classmethod
    def passed(cls) -> Verdict:
        return cls(True)

    @classmethod
    def failed(cls, error: str | None = None) -> Verdict:
        return cls(False, error)


# ─────────────────────────────────────────────────────────────────────────────
# Targets
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class KeyTarget:
    """A direct response field such as status_code or body."""
    name: str


@dataclass(frozen=True)
class HeaderTarget:
    """A response header, looked up by lowercase name."""
    name: str


@dataclass(frozen=True)
class QueryTarget:
    """
    A JSONPath query evaluated against the parsed response body.

    A leading dot is shorthand for the document root, so ``.foo``
    and ``$.foo`` are the same query.
    """
    expression: str
    _compiled: Any = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_compiled", _compile(self.expression))

    def apply(self, document: Any) -> list[Any]:
        """Return every value matched in the document (possibly empty)."""
        return [match.value for match in self._compiled.find(document)]


# Union type for all target variants
Target = Union[KeyTarget, HeaderTarget, QueryTarget]


def key(name: str) -> KeyTarget:
    """Target a direct response field."""
    return KeyTarget(name)


def header_key(name: str) -> HeaderTarget:
    """Target a response header."""
    return HeaderTarget(name)


def query(expression: str) -> QueryTarget:
    """Target the values a JSONPath expression selects from the body."""
    return QueryTarget(expression)


def _compile(expression: str) -> Any:
    path = expression.strip()
    if path == ".":
        path = "$"
    elif path.startswith("."):
        path = "$" + path

    try:
        return parse_jsonpath(path)
    except JsonPathParserError as e:
        raise InvalidQueryError(f"Invalid query expression {expression!r}: {e}") from e
    except Exception as e:
        raise InvalidQueryError(
            f"Failed to parse query expression {expression!r}: {type(e).__name__}: {e}"
        ) from e
