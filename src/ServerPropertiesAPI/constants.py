"""Process-wide constants describing the documented value space.

The three type names and the unbounded sentinel are shared by the extraction
pipeline, the query validator, and callers interpreting ``min``/``max``. They
are initialised once at import time and never mutated.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Literal, Mapping, Tuple, Union

BOOLEAN_TYPENAME = "boolean"
INTEGER_TYPENAME = "integer"
STRING_TYPENAME = "string"

#: Closed vocabulary of property types.
PropertyType = Literal["boolean", "integer", "string"]

TYPE_NAMES: Tuple[str, ...] = (BOOLEAN_TYPENAME, INTEGER_TYPENAME, STRING_TYPENAME)

#: Minimum signed 32-bit integer; marks a key without a documented numeric range.
UNBOUNDED = -(2**31)

SORT_NAME = "name"
SORT_TYPE = "type"
SORT_UPCOMING = "upcoming"

SORT_FIELDS: Tuple[str, ...] = (SORT_NAME, SORT_TYPE, SORT_UPCOMING)

CONTAINS_NEGATION = "!"
TYPES_NEGATION = "!"
SORT_DESCENDING = "-"

DEFAULT_LOCALE = "en"

METADATA: Mapping[str, Union[str, int]] = MappingProxyType(
    {
        "minecraftBooleanTypename": BOOLEAN_TYPENAME,
        "minecraftIntegerTypename": INTEGER_TYPENAME,
        "minecraftStringTypename": STRING_TYPENAME,
        "propertyDefaultLimitValue": UNBOUNDED,
    }
)

__all__ = [
    "BOOLEAN_TYPENAME",
    "CONTAINS_NEGATION",
    "DEFAULT_LOCALE",
    "INTEGER_TYPENAME",
    "METADATA",
    "PropertyType",
    "SORT_DESCENDING",
    "SORT_FIELDS",
    "SORT_NAME",
    "SORT_TYPE",
    "SORT_UPCOMING",
    "STRING_TYPENAME",
    "TYPES_NEGATION",
    "TYPE_NAMES",
    "UNBOUNDED",
]
