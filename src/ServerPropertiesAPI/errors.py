"""Exception hierarchy shared across extraction, range resolution, and querying.

Extraction spans an HTTP fetch of the wiki page, HTML table traversal,
numeric range resolution (possibly through a remote arithmetic service), and
validation of caller supplied filters. This module groups the failure modes
so caller code can react to high-level categories (client fault vs. upstream
outage vs. structural drift) while keeping the detail needed for messages.
"""

from __future__ import annotations

from typing import Optional, Sequence

__all__ = [
    "ServerPropertiesError",
    "ConfigurationError",
    "SourceUnreachableError",
    "StructuralDriftError",
    "AmbiguousTableError",
    "RangeMalformedError",
    "EvaluatorUnreachableError",
    "QueryInvalidError",
    "PropertyNotFoundError",
]


class ServerPropertiesError(RuntimeError):
    """Base exception for extraction and query failures."""


class ConfigurationError(ServerPropertiesError):
    """Raised when settings or environment overrides are invalid."""


class SourceUnreachableError(ServerPropertiesError):
    """Raised when the wiki page or one of its localized mirrors cannot be fetched."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class StructuralDriftError(ServerPropertiesError):
    """Raised when the document no longer matches the extraction assumptions."""

    def __init__(
        self,
        message: str,
        *,
        row_index: Optional[int] = None,
        missing: Optional[Sequence[str]] = None,
    ) -> None:
        super().__init__(message)
        self.row_index = row_index
        self.missing = tuple(missing or ())


class AmbiguousTableError(StructuralDriftError):
    """Raised in strict mode when more than one table satisfies the locator predicate."""

    def __init__(self, message: str, *, candidates: int) -> None:
        super().__init__(message)
        self.candidates = candidates


class RangeMalformedError(ServerPropertiesError):
    """Raised when a documented numeric range cannot be resolved to two integers."""

    def __init__(self, message: str, *, text: Optional[str] = None) -> None:
        super().__init__(message)
        self.text = text


class EvaluatorUnreachableError(RangeMalformedError):
    """Raised when the arithmetic service fails or answers with a non-number."""


class QueryInvalidError(ServerPropertiesError):
    """Raised when caller supplied filter, sort, or locale values fail validation."""

    def __init__(self, message: str, *, field: str, value: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class PropertyNotFoundError(ServerPropertiesError):
    """Raised by single-key lookups that matched no documented property."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Could not find property with name {name!r}")
        self.name = name
