"""Query model: turn flexible caller input into a validated :class:`QuerySpec`.

List inputs may be repeated, comma-joined, or both (``["a", "b,c"]`` equals
``["a", "b", "c"]``). A leading ``!`` negates a ``contains`` or ``types``
entry; a leading ``-`` makes a ``sort`` key descending. Validation completes
before any network access so an invalid request never partially applies.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .constants import (
    CONTAINS_NEGATION,
    SORT_DESCENDING,
    SORT_FIELDS,
    TYPE_NAMES,
    TYPES_NEGATION,
)
from .errors import QueryInvalidError
from .locales import is_valid_tag, normalize_tag
from .models import QuerySpec, SortRule

__all__ = [
    "QueryParams",
    "close_types",
    "flatten_values",
    "parse_query",
    "polarity_map",
]

QueryParams = Mapping[str, Union[str, Sequence[str]]]


def flatten_values(values: Iterable[str]) -> List[str]:
    """Split comma-joined entries, preserving order and dropping empty items.

    Examples:
        >>> flatten_values(["a", "b,c", "d,e,f"])
        ['a', 'b', 'c', 'd', 'e', 'f']
    """

    flat: List[str] = []
    for value in values:
        flat.extend(item.strip() for item in value.split(",") if item.strip())
    return flat


def polarity_map(values: Iterable[str], marker: str, *, field: str) -> Dict[str, bool]:
    """Map each entry to ``True``, or ``False`` when it starts with ``marker``.

    Later duplicates override earlier ones but keep the first position.

    Raises:
        QueryInvalidError: If an entry is only the marker.
    """

    result: Dict[str, bool] = {}
    for value in values:
        positive = not value.startswith(marker)
        key = value if positive else value[len(marker):]
        if not key:
            raise QueryInvalidError(f"empty {field} entry {value!r}", field=field, value=value)
        result[key] = positive
    return result


def close_types(types: Mapping[str, bool]) -> Dict[str, bool]:
    """Validate type names and add the unmentioned ones.

    Unmentioned types take the inverse polarity of the mentioned ones, so
    ``{"string": True}`` becomes ``{"string": True, "boolean": False,
    "integer": False}``. When mentioned entries disagree the missing types
    cannot be inferred and the filter is rejected.

    Raises:
        QueryInvalidError: On unknown type names or an ambiguous mixed filter.
    """

    if not types:
        return {}
    for name in types:
        if name not in TYPE_NAMES:
            raise QueryInvalidError(
                f"unknown type {name!r}; expected one of {', '.join(TYPE_NAMES)}",
                field="types",
                value=name,
            )
    polarities = set(types.values())
    missing = [name for name in TYPE_NAMES if name not in types]
    if missing and len(polarities) > 1:
        raise QueryInvalidError(
            "the type filter contains mixed allowed and disallowed values",
            field="types",
            value=",".join(missing),
        )
    closed = dict(types)
    if missing:
        fill = not polarities.pop()
        for name in missing:
            closed[name] = fill
    return closed


def _values(params: QueryParams, key: str) -> List[str]:
    raw = params.get(key)
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw]
    return [str(item) for item in raw]


def _parse_sort(values: Sequence[str]) -> Tuple[SortRule, ...]:
    rules = polarity_map(values, SORT_DESCENDING, field="sort")
    for name in rules:
        if name not in SORT_FIELDS:
            raise QueryInvalidError(
                f"unknown sort key {name!r}; expected one of {', '.join(SORT_FIELDS)}",
                field="sort",
                value=name,
            )
    return tuple(SortRule(field=name, ascending=ascending) for name, ascending in rules.items())


def _parse_upcoming(values: Sequence[str]) -> Optional[bool]:
    if not values:
        return None
    value = values[0]
    if value == "true":
        return True
    if value == "false":
        return False
    raise QueryInvalidError(
        f"upcoming must be 'true' or 'false', got {value!r}", field="upcoming", value=value
    )


def _parse_locale(locale: Optional[str]) -> Optional[str]:
    if not locale:
        return None
    if not is_valid_tag(locale):
        raise QueryInvalidError(f"invalid language tag {locale!r}", field="lang", value=locale)
    return normalize_tag(locale)


def parse_query(
    params: Optional[QueryParams] = None,
    *,
    exact_name: Optional[str] = None,
    locale: Optional[str] = None,
) -> QuerySpec:
    """Build a validated query from URL-style parameters.

    Args:
        params: Mapping with optional ``contains``, ``types``, ``upcoming``
            and ``sort`` entries, each a string or a list of strings.
        exact_name: Out-of-band exact key lookup; makes every other rule inert.
        locale: Out-of-band language preference.

    Returns:
        Self-consistent :class:`QuerySpec`.

    Raises:
        QueryInvalidError: When any part of the request is invalid.

    Examples:
        >>> spec = parse_query({"types": "string", "sort": "-name"})
        >>> spec.types == {"string": True, "boolean": False, "integer": False}
        True
        >>> spec.sort[0].ascending
        False
    """

    params = params or {}
    contains = polarity_map(
        flatten_values(_values(params, "contains")), CONTAINS_NEGATION, field="contains"
    )
    types = close_types(
        polarity_map(flatten_values(_values(params, "types")), TYPES_NEGATION, field="types")
    )
    sort = _parse_sort(flatten_values(_values(params, "sort")))
    upcoming = _parse_upcoming(_values(params, "upcoming"))
    return QuerySpec(
        contains=contains,
        types=types,
        upcoming=upcoming,
        exact_name=exact_name or None,
        sort=sort,
        locale=_parse_locale(locale),
    )
