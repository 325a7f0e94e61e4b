"""Typed-value parsing and integer range resolution for the "type" column.

The wiki writes the type column as free text: ``boolean``, ``string``,
``integer``, or ``integer (0-256)``; some upper bounds are arithmetic
expressions such as ``integer (1-(2^31 - 1))``. The source is inconsistent
about hyphen vs. en-dash, so both are accepted.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Tuple

from .constants import BOOLEAN_TYPENAME, INTEGER_TYPENAME, STRING_TYPENAME, UNBOUNDED
from .errors import RangeMalformedError
from .evaluator import ExpressionEvaluator

LOGGER = logging.getLogger(__name__)

__all__ = [
    "EXPRESSION_PATTERN",
    "RANGE_PATTERN",
    "classify_type",
    "find_range",
    "parse_type",
    "resolve_range",
]

_OPERATOR = r"[+\-*/^]"

#: ``lower-upper`` where ``upper`` is digits or a parenthesised expression of up to two operators.
RANGE_PATTERN = re.compile(
    rf"\d+[-–](?:\d+|\(\d+(?: ?{_OPERATOR} ?\d+){{0,2}}\))"
)

#: ``digits operator digits [operator digits]``
EXPRESSION_PATTERN = re.compile(rf"\d+ ?{_OPERATOR} ?\d+(?: ?{_OPERATOR} ?\d+)?")

_RANGE_SEPARATOR = re.compile(r"[-–]")


def classify_type(raw: str) -> Optional[str]:
    """Return the canonical type name for a trimmed type cell, or ``None``.

    Examples:
        >>> classify_type("integer (0-256)")
        'integer'
        >>> classify_type("float") is None
        True
    """

    if raw == BOOLEAN_TYPENAME:
        return BOOLEAN_TYPENAME
    if INTEGER_TYPENAME in raw:
        return INTEGER_TYPENAME
    if raw == STRING_TYPENAME:
        return STRING_TYPENAME
    return None


def find_range(raw: str) -> Optional[Tuple[str, str]]:
    """Locate the first range expression and split it into lower and upper text."""

    match = RANGE_PATTERN.search(raw)
    if match is None:
        return None
    lower, upper = _RANGE_SEPARATOR.split(match.group(0), maxsplit=1)
    return lower, upper


def _parse_literal(text: str, which: str, raw: str) -> int:
    try:
        return int(text.strip().strip("()"))
    except ValueError as exc:
        raise RangeMalformedError(
            f"{which} limit {text!r} in {raw!r} is not an integer", text=raw
        ) from exc


def resolve_range(raw: str, evaluator: Optional[ExpressionEvaluator]) -> Tuple[int, int]:
    """Resolve the documented bounds of an integer type cell.

    Args:
        raw: Trimmed type cell text.
        evaluator: Used only when the upper bound is an arithmetic expression.

    Returns:
        ``(minimum, maximum)``, or ``(UNBOUNDED, UNBOUNDED)`` when no range is documented.

    Raises:
        RangeMalformedError: If a bound cannot be turned into an integer.
        EvaluatorUnreachableError: If the arithmetic service fails.
    """

    parts = find_range(raw)
    if parts is None:
        return UNBOUNDED, UNBOUNDED
    lower_text, upper_text = parts

    expression = EXPRESSION_PATTERN.search(upper_text)
    if expression is not None:
        if evaluator is None:
            raise RangeMalformedError(
                f"upper limit {upper_text!r} needs an expression evaluator", text=raw
            )
        maximum = evaluator.evaluate(expression.group(0))
    else:
        maximum = _parse_literal(upper_text, "upper", raw)
    minimum = _parse_literal(lower_text, "lower", raw)
    return minimum, maximum


def parse_type(
    raw: str, evaluator: Optional[ExpressionEvaluator] = None
) -> Tuple[Optional[str], int, int]:
    """Interpret a type cell.

    Returns:
        ``(type, minimum, maximum)``; ``type`` is ``None`` for unrecognised text,
        in which case the bounds are unbounded.

    Raises:
        RangeMalformedError: Propagated from :func:`resolve_range`.
    """

    kind = classify_type(raw)
    if kind == BOOLEAN_TYPENAME:
        return kind, 0, 1
    if kind == INTEGER_TYPENAME:
        minimum, maximum = resolve_range(raw, evaluator)
        return kind, minimum, maximum
    return kind, UNBOUNDED, UNBOUNDED
