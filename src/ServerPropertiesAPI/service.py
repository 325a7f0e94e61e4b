"""Service façade binding settings, document fetcher, and evaluator together.

A :class:`ServerPropertiesService` is constructed once (typically at process
start) and answers any number of independent calls. Calls share no mutable
state; each one fetches what it needs and builds fresh records.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Union

from bs4 import BeautifulSoup

from .constants import METADATA
from .errors import PropertyNotFoundError
from .evaluator import ExpressionEvaluator, MathEvaluator
from .filters import filter_properties, sort_properties
from .locales import LocaleMatch, advertised_locales, locale_url, match_locale
from .models import Property, QuerySpec
from .net import fetch_document
from .query import parse_query
from .records import ExtractionMode, apply_descriptions, build_properties
from .settings import Settings, load_settings
from .tables import find_english_table, find_localized_table, localized_descriptions

LOGGER = logging.getLogger(__name__)

DocumentFetcher = Callable[[str], BeautifulSoup]

__all__ = ["DocumentFetcher", "ServerPropertiesService"]


class ServerPropertiesService:
    """Extract, filter, and sort documented ``server.properties`` keys.

    Attributes:
        settings: Source, HTTP, evaluator, and logging configuration.
        fetch: Callable returning a parsed document for a URL.
        evaluator: Arithmetic evaluator for expression upper bounds.

    Examples:
        >>> service = ServerPropertiesService(fetch=lambda url: BeautifulSoup("", "lxml"))
        >>> service.metadata()["propertyDefaultLimitValue"]
        -2147483648
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        fetch: Optional[DocumentFetcher] = None,
        evaluator: Optional[ExpressionEvaluator] = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.fetch = fetch or (lambda url: fetch_document(url, self.settings.http))
        self.evaluator = evaluator or MathEvaluator(self.settings.evaluator)

    def _resolve_locale(self, document: BeautifulSoup, requested: Optional[str]) -> LocaleMatch:
        available = advertised_locales(document, self.settings.source.language_link_selector)
        return match_locale(available, requested)

    def _localized_overlay(self, language: str) -> Dict[str, str]:
        source = self.settings.source
        document = self.fetch(locale_url(source.wiki_locale_url_template, language))
        table = find_localized_table(
            document,
            columns=source.localized_header_columns,
            strict=source.strict_table_match,
        )
        return localized_descriptions(table)

    def properties(self, spec: Optional[QuerySpec] = None) -> List[Property]:
        """Return the documented keys matching ``spec``, sorted by its rules.

        Without filters every row must parse (full extraction). With filters
        rows are skipped as soon as they contradict the query and unresolvable
        ranges are left unbounded.

        Raises:
            SourceUnreachableError: If a page cannot be fetched.
            StructuralDriftError: If the page no longer has the expected shape.
            RangeMalformedError: In full extraction, if a bound cannot be resolved.
        """

        spec = spec or QuerySpec()
        source = self.settings.source
        document = self.fetch(source.wiki_url)

        match: Optional[LocaleMatch] = None
        if spec.locale:
            match = self._resolve_locale(document, spec.locale)

        mode = ExtractionMode.FILTERED if spec.has_filters else ExtractionMode.FULL
        table = find_english_table(document, source.english_table_selector)
        records = build_properties(table, evaluator=self.evaluator, mode=mode, spec=spec)

        if match is not None and not match.is_default and records:
            records = apply_descriptions(records, self._localized_overlay(match.language))

        records = filter_properties(records, spec)
        sort_properties(records, spec.sort)
        LOGGER.info(
            "properties extracted",
            extra={
                "mode": mode.value,
                "records": len(records),
                "locale": match.tag if match is not None else None,
            },
        )
        return records

    def property(self, name: str, locale: Optional[str] = None) -> Property:
        """Return the key documented as exactly ``name`` (case-sensitive).

        Raises:
            PropertyNotFoundError: If no key has that name.
            QueryInvalidError: If ``locale`` is not a language tag.
        """

        found = self.properties(parse_query(exact_name=name, locale=locale))
        if not found:
            raise PropertyNotFoundError(name)
        return found[0]

    def available_locales(self) -> List[str]:
        document = self.fetch(self.settings.source.wiki_url)
        return advertised_locales(document, self.settings.source.language_link_selector)

    def metadata(self) -> Dict[str, Union[str, int]]:
        """Return the type names and unbounded sentinel callers need to read records."""

        return dict(METADATA)
