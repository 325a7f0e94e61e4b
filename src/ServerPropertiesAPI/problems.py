"""RFC 7807 problem documents for failures surfaced at an API boundary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Union

from .errors import (
    EvaluatorUnreachableError,
    PropertyNotFoundError,
    QueryInvalidError,
    RangeMalformedError,
    SourceUnreachableError,
    StructuralDriftError,
)

__all__ = ["Problem", "problem_for"]


@dataclass(frozen=True, slots=True)
class Problem:
    title: str
    status: int
    detail: str

    def to_dict(self) -> Dict[str, Union[str, int]]:
        return {"title": self.title, "status": self.status, "detail": self.detail}


def problem_for(exc: BaseException) -> Problem:
    """Map an exception to the problem document a client should receive.

    Query faults and missing keys carry their own message; upstream and
    drift failures are reported generically since the client cannot act on
    their detail.
    """

    if isinstance(exc, QueryInvalidError):
        return Problem("Invalid query", 400, str(exc))
    if isinstance(exc, PropertyNotFoundError):
        return Problem("Property not found", 404, str(exc))
    if isinstance(exc, (SourceUnreachableError, EvaluatorUnreachableError)):
        return Problem("Upstream unavailable", 502, "The documentation source could not be reached")
    if isinstance(exc, (StructuralDriftError, RangeMalformedError)):
        return Problem("Server error", 500, "The documentation could not be extracted")
    return Problem("Server error", 500, "Something wrong occurred on the server")
