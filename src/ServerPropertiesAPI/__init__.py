"""Public API for ServerPropertiesAPI.

Extracts the ``server.properties`` documentation table from the wiki into
typed records and exposes them through a filterable, sortable query layer.
"""

from __future__ import annotations

from .constants import (
    BOOLEAN_TYPENAME,
    INTEGER_TYPENAME,
    METADATA,
    STRING_TYPENAME,
    TYPE_NAMES,
    UNBOUNDED,
)
from .errors import (
    AmbiguousTableError,
    ConfigurationError,
    EvaluatorUnreachableError,
    PropertyNotFoundError,
    QueryInvalidError,
    RangeMalformedError,
    ServerPropertiesError,
    SourceUnreachableError,
    StructuralDriftError,
)
from .models import Property, PropertyValues, QuerySpec, SortRule
from .query import parse_query
from .service import ServerPropertiesService
from .settings import Settings, load_settings

__version__ = "2.0.0"

__all__ = [
    "AmbiguousTableError",
    "BOOLEAN_TYPENAME",
    "ConfigurationError",
    "EvaluatorUnreachableError",
    "INTEGER_TYPENAME",
    "METADATA",
    "Property",
    "PropertyNotFoundError",
    "PropertyValues",
    "QueryInvalidError",
    "QuerySpec",
    "RangeMalformedError",
    "STRING_TYPENAME",
    "ServerPropertiesError",
    "ServerPropertiesService",
    "Settings",
    "SortRule",
    "SourceUnreachableError",
    "StructuralDriftError",
    "TYPE_NAMES",
    "UNBOUNDED",
    "__version__",
    "load_settings",
    "parse_query",
]
