# === NAVMAP v1 ===
# {
#   "module": "tests.server_properties.test_values",
#   "purpose": "Type cell classification and integer range resolution",
#   "sections": [
#     {"id": "tests", "name": "Test Cases", "anchor": "TST", "kind": "tests"}
#   ]
# }
# === /NAVMAP ===

"""Type cell classification and integer range resolution."""

from __future__ import annotations

import pytest

from ServerPropertiesAPI.constants import UNBOUNDED
from ServerPropertiesAPI.errors import EvaluatorUnreachableError, RangeMalformedError
from ServerPropertiesAPI.testing import RecordingEvaluator
from ServerPropertiesAPI.values import classify_type, find_range, parse_type, resolve_range


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("boolean", "boolean"),
        ("string", "string"),
        ("integer", "integer"),
        ("integer (0-256)", "integer"),
        ("float", None),
        ("boolean or string", None),
    ],
)
def test_classify_type(raw, expected):
    assert classify_type(raw) == expected


def test_boolean_has_fixed_bounds():
    assert parse_type("boolean") == ("boolean", 0, 1)


def test_string_and_free_integer_are_unbounded():
    assert parse_type("string") == ("string", UNBOUNDED, UNBOUNDED)
    assert parse_type("integer") == ("integer", UNBOUNDED, UNBOUNDED)


def test_unknown_type_yields_no_type():
    assert parse_type("float") == (None, UNBOUNDED, UNBOUNDED)


def test_literal_range_does_not_call_evaluator():
    evaluator = RecordingEvaluator()
    assert parse_type("integer (0-256)", evaluator) == ("integer", 0, 256)
    assert evaluator.calls == []


def test_en_dash_separator():
    assert resolve_range("integer (3–32)", None) == (3, 32)


def test_arithmetic_upper_bound_uses_evaluator():
    evaluator = RecordingEvaluator({"30000000*8": 240000000})
    assert resolve_range("integer (1-(30000000*8))", evaluator) == (1, 240000000)
    assert evaluator.calls == ["30000000*8"]


def test_two_operator_expression_keeps_spacing():
    evaluator = RecordingEvaluator({"2^63 - 1": 9223372036854775807})
    minimum, maximum = resolve_range("integer (0-(2^63 - 1))", evaluator)
    assert (minimum, maximum) == (0, 9223372036854775807)
    assert evaluator.calls == ["2^63 - 1"]


def test_find_range_splits_on_first_dash():
    assert find_range("integer (0-256)") == ("0", "256")
    assert find_range("integer (1-(30000000*8))") == ("1", "(30000000*8)")
    assert find_range("integer") is None


def test_expression_without_evaluator_is_malformed():
    with pytest.raises(RangeMalformedError):
        resolve_range("integer (1-(30000000*8))", None)


def test_evaluator_failure_is_not_defaulted():
    evaluator = RecordingEvaluator(fail=True)
    with pytest.raises(EvaluatorUnreachableError) as excinfo:
        parse_type("integer (1-(30000000*8))", evaluator)
    assert isinstance(excinfo.value, RangeMalformedError)
