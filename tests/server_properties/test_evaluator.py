"""MathEvaluator against a mocked arithmetic service."""

from __future__ import annotations

from typing import Callable, List

import httpx
import pytest

from ServerPropertiesAPI.errors import EvaluatorUnreachableError
from ServerPropertiesAPI.evaluator import MathEvaluator, parse_number
from ServerPropertiesAPI.settings import EvaluatorConfiguration

MATH_URL = "http://math.test/v4/"


def _evaluator(handler: Callable[[httpx.Request], httpx.Response], **config) -> MathEvaluator:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return MathEvaluator(
        EvaluatorConfiguration(math_api_url=MATH_URL, backoff_sec=0.0, **config), client=client
    )


def test_evaluate_sends_expression_as_query_parameter():
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="240000000")

    assert _evaluator(handler).evaluate("30000000*8") == 240000000
    assert len(seen) == 1
    assert seen[0].url.params["expr"] == "30000000*8"
    assert str(seen[0].url).startswith(MATH_URL)


def test_non_number_body_is_an_evaluator_failure():
    evaluator = _evaluator(lambda request: httpx.Response(200, text="Error: Undefined symbol x"))
    with pytest.raises(EvaluatorUnreachableError):
        evaluator.evaluate("x*2")


def test_http_error_is_an_evaluator_failure():
    evaluator = _evaluator(lambda request: httpx.Response(503, text="busy"))
    with pytest.raises(EvaluatorUnreachableError):
        evaluator.evaluate("1+1")


def test_transport_error_is_not_retried_by_default():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(EvaluatorUnreachableError):
        _evaluator(handler).evaluate("1+1")
    assert len(calls) == 1


def test_transport_error_retried_when_configured():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(200, text="2")

    assert _evaluator(handler, max_attempts=2).evaluate("1+1") == 2
    assert len(calls) == 2


@pytest.mark.parametrize(
    ("body", "expected"),
    [("240000000", 240000000), (" 42\n", 42), ("2.4e+8", 240000000), ("7.9", 7)],
)
def test_parse_number(body, expected):
    assert parse_number(body) == expected


@pytest.mark.parametrize("body", ["", "NaN", "Infinity", "twelve"])
def test_parse_number_rejects_non_numbers(body):
    with pytest.raises(EvaluatorUnreachableError):
        parse_number(body)
