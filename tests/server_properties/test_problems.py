"""Problem documents returned for each failure category."""

from __future__ import annotations

import pytest

from ServerPropertiesAPI.errors import (
    AmbiguousTableError,
    EvaluatorUnreachableError,
    PropertyNotFoundError,
    QueryInvalidError,
    RangeMalformedError,
    SourceUnreachableError,
    StructuralDriftError,
)
from ServerPropertiesAPI.problems import problem_for


@pytest.mark.parametrize(
    ("exc", "status"),
    [
        (QueryInvalidError("bad type", field="types", value="float"), 400),
        (PropertyNotFoundError("motd"), 404),
        (SourceUnreachableError("down", url="https://wiki.test", status_code=503), 502),
        (EvaluatorUnreachableError("timeout"), 502),
        (StructuralDriftError("no table"), 500),
        (AmbiguousTableError("two tables", candidates=2), 500),
        (RangeMalformedError("not a number"), 500),
        (KeyError("boom"), 500),
    ],
)
def test_status_by_category(exc, status):
    assert problem_for(exc).status == status


def test_client_faults_carry_their_message():
    problem = problem_for(PropertyNotFoundError("motd"))
    assert problem.to_dict() == {
        "title": "Property not found",
        "status": 404,
        "detail": "Could not find property with name 'motd'",
    }


def test_upstream_detail_is_generic():
    problem = problem_for(SourceUnreachableError("secret internal host unreachable"))
    assert "secret" not in problem.detail
