"""
httpexpect - fluent assertions for HTTP responses

Issue a request and chain expectations against the response:

    from httpexpect import fetch, query, exists

    async def test_api():
        await fetch("https://api.example.org/users", {"response_type": "json"}) \\
            .status(200) \\
            .header("content-type", "application/json") \\
            .body(exists, query("$.users[*].id")) \\
            .ensure()

Awaiting a chain without ensure() resolves to True or False and never
raises for a failed expectation.

Subpackages:
    - assertions: Targets, verdicts and the assertion evaluator
    - transport: HTTP transport (aiohttp) and the default transport
"""

__version__ = "0.1.0"

# Chains
from .chain import Chain, ChainState, REDIRECT_STATUS_CODES, fetch

# Assertions
from .assertions import (
    AssertionEvaluator,
    ContractViolation,
    ExpectationFailed,
    HeaderTarget,
    InvalidQueryError,
    KeyTarget,
    MissingKeyError,
    PredicateContractError,
    QueryTarget,
    Verdict,
    exists,
    header_key,
    key,
    query,
)

# Transport
from .transport import (
    BaseTransport,
    HTTPResponse,
    HTTPTransport,
    TransportError,
    get_default_transport,
    set_default_transport,
)

__all__ = [
    "__version__",
    # Chains
    "Chain",
    "ChainState",
    "REDIRECT_STATUS_CODES",
    "fetch",
    # Assertions
    "AssertionEvaluator",
    "ContractViolation",
    "ExpectationFailed",
    "HeaderTarget",
    "InvalidQueryError",
    "KeyTarget",
    "MissingKeyError",
    "PredicateContractError",
    "QueryTarget",
    "Verdict",
    "exists",
    "header_key",
    "key",
    "query",
    # Transport
    "BaseTransport",
    "HTTPResponse",
    "HTTPTransport",
    "TransportError",
    "get_default_transport",
    "set_default_transport",
]
