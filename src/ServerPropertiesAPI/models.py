"""
Canonical record and query types

Frozen dataclasses used as contracts between the record builder, the query
model, and the filter/sort engine.

Data Flow:
  records.build_properties(table) → Property[]
  query.parse_query(params) → QuerySpec
  filters.filter_properties(Property[], QuerySpec) → Property[]
  filters.sort_properties(Property[], QuerySpec.sort) → Property[] (in place)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from .constants import SORT_FIELDS, TYPE_NAMES, UNBOUNDED

__all__ = ["PropertyValues", "Property", "SortRule", "QuerySpec"]


@dataclass(frozen=True, slots=True)
class PropertyValues:
    """
    Value-space envelope of one configuration key.

    ``minimum`` and ``maximum`` are both :data:`UNBOUNDED` or both documented.
    ``possible`` lists enumerated literals mentioned in the description; it is
    always empty for boolean keys.
    """

    default: str = ""
    """Literal default as written in the documentation (not coerced)."""

    minimum: int = UNBOUNDED
    maximum: int = UNBOUNDED
    possible: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if (self.minimum == UNBOUNDED) != (self.maximum == UNBOUNDED):
            raise ValueError(
                f"minimum and maximum must both be bounded or both unbounded, "
                f"got {self.minimum} and {self.maximum}"
            )

    @property
    def bounded(self) -> bool:
        return self.minimum != UNBOUNDED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "default": self.default,
            "min": self.minimum,
            "max": self.maximum,
            "possible": list(self.possible),
        }


@dataclass(frozen=True, slots=True)
class Property:
    """One documented ``server.properties`` key."""

    name: str
    type: str
    values: PropertyValues
    description: str
    upcoming: bool = False
    upcoming_version: str = ""

    def __post_init__(self) -> None:
        if self.type not in TYPE_NAMES:
            raise ValueError(f"{self.name}: unknown type {self.type!r}")
        if self.upcoming != bool(self.upcoming_version):
            raise ValueError(
                f"{self.name}: upcoming flag and upcoming version disagree "
                f"({self.upcoming!r}, {self.upcoming_version!r})"
            )

    def with_description(self, description: str) -> "Property":
        """Return a copy carrying ``description`` and every other field unchanged."""

        return replace(self, description=description)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise using the field names downstream API consumers expect."""

        return {
            "name": self.name,
            "type": self.type,
            "values": self.values.to_dict(),
            "description": self.description,
            "upcoming": self.upcoming,
            "upcomingVersion": self.upcoming_version,
        }


@dataclass(frozen=True, slots=True)
class SortRule:
    """Single sort key; rules earlier in a sequence take precedence."""

    field: str
    ascending: bool = True

    def __post_init__(self) -> None:
        if self.field not in SORT_FIELDS:
            raise ValueError(f"unknown sort field {self.field!r}")


@dataclass(frozen=True)
class QuerySpec:
    """
    Validated, canonical filter/sort request.

    Instances are produced by :func:`ServerPropertiesAPI.query.parse_query`,
    which guarantees that ``types`` is either empty or mentions all three
    known type names.
    """

    contains: Mapping[str, bool] = field(default_factory=dict)
    """Substring → ``True`` when the name must contain it, ``False`` when it must not."""

    types: Mapping[str, bool] = field(default_factory=dict)
    """Type name → allowed. Empty means every type is allowed."""

    upcoming: Optional[bool] = None
    exact_name: Optional[str] = None
    sort: Tuple[SortRule, ...] = ()
    locale: Optional[str] = None

    @property
    def has_filters(self) -> bool:
        """Return ``True`` when any rule could drop a record."""

        return bool(self.exact_name or self.types or self.contains or self.upcoming is not None)
