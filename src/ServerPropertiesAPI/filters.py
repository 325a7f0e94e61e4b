"""Filter and sort engine applied to extracted records.

Filtering order: exact name (short circuit), type allow/deny, name
substring rules, upcoming tri-state. The row-level predicates are shared
with the record builder, which uses them to skip column work early.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .constants import SORT_NAME, SORT_TYPE, SORT_UPCOMING
from .models import Property, QuerySpec, SortRule

__all__ = [
    "filter_properties",
    "matches",
    "name_allowed",
    "sort_properties",
    "type_allowed",
    "upcoming_allowed",
]

_SORT_KEYS: Dict[str, Callable[[Property], Any]] = {
    SORT_NAME: lambda prop: prop.name,
    SORT_TYPE: lambda prop: prop.type,
    SORT_UPCOMING: lambda prop: prop.upcoming,
}


def type_allowed(type_name: str, types: Mapping[str, bool]) -> bool:
    return not types or types.get(type_name, False)


def name_allowed(name: str, contains: Mapping[str, bool]) -> bool:
    """Every rule must hold; one violated rule eliminates the name."""

    return all((substring in name) == required for substring, required in contains.items())


def upcoming_allowed(upcoming: bool, wanted: Optional[bool]) -> bool:
    return wanted is None or upcoming == wanted


def matches(prop: Property, spec: QuerySpec) -> bool:
    if spec.exact_name:
        return prop.name == spec.exact_name
    return (
        type_allowed(prop.type, spec.types)
        and name_allowed(prop.name, spec.contains)
        and upcoming_allowed(prop.upcoming, spec.upcoming)
    )


def filter_properties(properties: Sequence[Property], spec: QuerySpec) -> List[Property]:
    """Return the records satisfying ``spec`` in their original order.

    With ``exact_name`` set the result holds at most one record.
    """

    if spec.exact_name:
        for prop in properties:
            if prop.name == spec.exact_name:
                return [prop]
        return []
    if not spec.has_filters:
        return list(properties)
    return [prop for prop in properties if matches(prop, spec)]


def sort_properties(properties: List[Property], rules: Sequence[SortRule]) -> List[Property]:
    """Stable multi-key sort in place; the first rule is the primary key.

    Each rule is applied with a stable sort, last rule first, so later rules
    only break ties left by earlier ones. ``upcoming`` orders ``False`` before
    ``True`` when ascending.
    """

    for rule in reversed(rules):
        properties.sort(key=_SORT_KEYS[rule.field], reverse=not rule.ascending)
    return properties
