"""
Assertion Evaluator for HTTP Responses

This package resolves assertion targets against a response and
evaluates expectations into pass/fail verdicts.

Targets:
    - key: A direct response field (status_code, headers, body, ...)
    - header_key: A response header
    - query: A JSONPath expression over the parsed body

Expected values:
    - Literals are compared with structural equality
    - Predicates are called with (actual, location) and return a bool,
      a Verdict, or a {"result": ..., "error": ...} mapping

Usage:
    from httpexpect.assertions import AssertionEvaluator, query, exists

    evaluator = AssertionEvaluator()
    value, location = evaluator.resolve(query("$.items"), response)
    verdict = await evaluator.evaluate(value, exists, location)
"""

# Models
from .models import (
    ContractViolation,
    ExpectationFailed,
    HeaderTarget,
    InvalidQueryError,
    KeyTarget,
    MissingKeyError,
    PredicateContractError,
    QueryTarget,
    Target,
    Verdict,
    header_key,
    key,
    query,
)

# Engine
from .engine import AssertionEvaluator, deep_equal, exists, render_json

__all__ = [
    # Models
    "ContractViolation",
    "ExpectationFailed",
    "HeaderTarget",
    "InvalidQueryError",
    "KeyTarget",
    "MissingKeyError",
    "PredicateContractError",
    "QueryTarget",
    "Target",
    "Verdict",
    "header_key",
    "key",
    "query",
    # Engine
    "AssertionEvaluator",
    "deep_equal",
    "exists",
    "render_json",
]
