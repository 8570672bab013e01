"""Tests for the assertion evaluator, targets and helpers."""

import pytest

from httpexpect.assertions import (
    AssertionEvaluator,
    ContractViolation,
    HeaderTarget,
    InvalidQueryError,
    KeyTarget,
    MissingKeyError,
    PredicateContractError,
    Verdict,
    deep_equal,
    exists,
    header_key,
    key,
    query,
    render_json,
)
from httpexpect.transport import HTTPResponse


@pytest.fixture
def evaluator() -> AssertionEvaluator:
    return AssertionEvaluator()


@pytest.fixture
def response() -> HTTPResponse:
    return HTTPResponse(
        status_code=200,
        headers={"content-type": "application/json", "x-empty": ""},
        body={"users": [{"id": 1, "name": "ada"}, {"id": 2, "name": "bob"}]},
    )


class TestTargets:
    def test_factories_build_tagged_targets(self):
        assert key("body") == KeyTarget("body")
        assert header_key("location") == HeaderTarget("location")
        assert query("$.a").expression == "$.a"

    def test_leading_dot_means_root(self):
        assert query(".foo").apply({"foo": "bar"}) == ["bar"]
        assert query("$.foo").apply({"foo": "bar"}) == ["bar"]
        assert query(".").apply({"foo": "bar"}) == [{"foo": "bar"}]

    def test_query_returns_every_match(self):
        document = {"items": [{"id": 1}, {"id": 2}]}
        assert query("$.items[*].id").apply(document) == [1, 2]

    def test_query_without_match_is_empty(self):
        assert query("$.missing").apply({"foo": "bar"}) == []

    def test_invalid_query_raises(self):
        with pytest.raises(InvalidQueryError):
            query("$.foo[")


class TestResolve:
    def test_key(self, evaluator, response):
        value, location = evaluator.resolve(KeyTarget("status_code"), response)
        assert value == 200
        assert location == 'key "status_code"'

    def test_header(self, evaluator, response):
        value, location = evaluator.resolve(HeaderTarget("Content-Type"), response)
        assert value == "application/json"
        assert location == 'key "Content-Type"'

    def test_query(self, evaluator, response):
        value, location = evaluator.resolve(query("$.users[*].name"), response)
        assert value == ["ada", "bob"]
        assert location == 'expression "$.users[*].name"'

    def test_query_does_not_modify_body(self, evaluator, response):
        evaluator.resolve(query("$.users"), response)
        assert isinstance(response.body, dict)

    def test_query_on_invalid_json_body(self, evaluator):
        response = HTTPResponse(status_code=200, body="<html></html>")
        with pytest.raises(ContractViolation):
            evaluator.resolve(query("$.a"), response)

    def test_missing_key(self, evaluator, response):
        with pytest.raises(MissingKeyError) as exc_info:
            evaluator.resolve(KeyTarget("statusCode"), response)
        assert str(exc_info.value) == 'Key "statusCode" does not exist'
        assert exc_info.value.key == "statusCode"

    def test_header_is_not_a_response_field(self, evaluator, response):
        with pytest.raises(MissingKeyError):
            evaluator.resolve(KeyTarget("content-type"), response)


class TestEvaluate:
    @pytest.mark.asyncio
    async def test_literal_match(self, evaluator):
        verdict = await evaluator.evaluate({"a": [1, 2]}, {"a": [1, 2]}, 'key "body"')
        assert verdict.result is True
        assert verdict.error is None

    @pytest.mark.asyncio
    async def test_literal_mismatch(self, evaluator):
        verdict = await evaluator.evaluate("abc", "abd", 'key "body"')
        assert verdict.result is False
        assert verdict.error == 'Expected key "body" to be "abd", but got "abc"'

    @pytest.mark.asyncio
    async def test_predicate_receives_actual_and_location(self, evaluator):
        seen = []

        def predicate(actual, location):
            seen.append((actual, location))
            return True

        verdict = await evaluator.evaluate(5, predicate, 'key "status_code"')
        assert verdict.result is True
        assert seen == [(5, 'key "status_code"')]

    @pytest.mark.asyncio
    async def test_record_without_error_uses_default(self, evaluator):
        def never(actual, location):
            return {"result": False}

        verdict = await evaluator.evaluate(1, never, 'key "body"')
        assert verdict.result is False
        assert verdict.error.startswith("Custom assertion failed: ")
        assert "def never" in verdict.error

    @pytest.mark.asyncio
    async def test_passing_record_clears_error(self, evaluator):
        verdict = await evaluator.evaluate(
            1, lambda actual, location: {"result": True, "error": "ignored"}, 'key "body"'
        )
        assert verdict == Verdict(True, None)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("outcome", [None, 1, "true", {"error": "x"}, [True]])
    async def test_malformed_predicate_result(self, evaluator, outcome):
        with pytest.raises(PredicateContractError):
            await evaluator.evaluate(1, lambda actual, location: outcome, 'key "body"')


class TestExists:
    @pytest.mark.parametrize("value", ["x", [0], {"a": 1}])
    def test_non_empty(self, value):
        assert exists(value, 'key "body"') is True

    @pytest.mark.parametrize("value", ["", [], {}, None, 0])
    def test_empty(self, value):
        verdict = exists(value, 'key "x-empty"')
        assert verdict.result is False
        assert verdict.error == 'Expected key "x-empty" to contain a value, but it does not exist'


class TestDeepEqual:
    def test_nested_structures(self):
        assert deep_equal({"a": [1, {"b": None}]}, {"a": [1, {"b": None}]})
        assert not deep_equal({"a": [1, {"b": None}]}, {"a": [1, {"b": 0}]})

    def test_booleans_do_not_equal_numbers(self):
        assert not deep_equal(True, 1)
        assert not deep_equal(0, False)
        assert deep_equal(False, False)

    def test_int_and_float(self):
        assert deep_equal(1, 1.0)

    def test_string_does_not_equal_number(self):
        assert not deep_equal("200", 200)

    def test_extra_keys(self):
        assert not deep_equal({"a": 1}, {"a": 1, "b": 2})

    def test_list_and_tuple(self):
        assert deep_equal([1, 2], (1, 2))
        assert not deep_equal([1, 2], [2, 1])

    def test_container_against_scalar(self):
        assert not deep_equal([], "")


def test_render_json_is_compact():
    assert render_json({"foo": ["a", 1, None, True]}) == '{"foo":["a",1,null,true]}'
    assert render_json("ünïcode") == '"ünïcode"'
