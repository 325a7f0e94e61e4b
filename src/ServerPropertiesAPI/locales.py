"""Locale negotiation against the languages a wiki page advertises.

The English page lists its translations as cross-language links, each
carrying a BCP-47 ``lang`` attribute. A requested tag is matched exactly
first, then by primary language subtag, and finally falls back to English.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from bs4 import BeautifulSoup

from .constants import DEFAULT_LOCALE

LOGGER = logging.getLogger(__name__)

__all__ = [
    "LocaleMatch",
    "advertised_locales",
    "is_valid_tag",
    "locale_url",
    "match_locale",
    "normalize_tag",
    "primary_language",
]

# language[-script][-region][-variant...]; private-use and extensions are not needed here.
_TAG_PATTERN = re.compile(
    r"^[A-Za-z]{2,3}(?:-[A-Za-z]{4})?(?:-(?:[A-Za-z]{2}|\d{3}))?(?:-(?:[A-Za-z\d]{5,8}|\d[A-Za-z\d]{3}))*$"
)


@dataclass(frozen=True, slots=True)
class LocaleMatch:
    """Outcome of negotiating a requested locale."""

    tag: str
    """Advertised tag that was selected (``en`` when nothing matched)."""

    language: str
    """Primary language subtag of ``tag``; used to build the mirror URL."""

    @property
    def is_default(self) -> bool:
        return self.language == DEFAULT_LOCALE


def is_valid_tag(tag: str) -> bool:
    """Return ``True`` when ``tag`` is shaped like a BCP-47 language tag.

    Examples:
        >>> is_valid_tag("es-419"), is_valid_tag("pt-BR"), is_valid_tag("not a tag")
        (True, True, False)
    """

    return bool(_TAG_PATTERN.match(tag.replace("_", "-")))


def normalize_tag(tag: str) -> str:
    """Canonical casing: lowercase language, titlecase script, uppercase region."""

    parts = tag.replace("_", "-").split("-")
    normalized = [parts[0].lower()]
    for part in parts[1:]:
        if len(part) == 4 and part.isalpha():
            normalized.append(part.title())
        elif len(part) == 2 and part.isalpha():
            normalized.append(part.upper())
        else:
            normalized.append(part.lower() if part.isalpha() else part)
    return "-".join(normalized)


def primary_language(tag: str) -> str:
    return normalize_tag(tag).split("-", 1)[0]


def advertised_locales(document: BeautifulSoup, selector: str) -> List[str]:
    """Collect the locales a page links to; English is always first.

    Links without a usable ``lang`` attribute are skipped.
    """

    tags: List[str] = [DEFAULT_LOCALE]
    for link in document.select(selector):
        lang = (link.get("lang") or "").strip()
        if not lang or not is_valid_tag(lang):
            LOGGER.debug("skipping language link", extra={"lang": lang})
            continue
        tag = normalize_tag(lang)
        if tag not in tags:
            tags.append(tag)
    return tags


def match_locale(available: Iterable[str], requested: Optional[str]) -> LocaleMatch:
    """Pick the best advertised locale for ``requested``.

    Args:
        available: Advertised tags; English is added when missing.
        requested: Caller preference, ``None`` for the default.

    Returns:
        Selected locale.

    Examples:
        >>> match_locale(["en", "es", "pt-BR"], "es-419").tag
        'es'
        >>> match_locale(["en", "fr"], "de").tag
        'en'
    """

    tags: Sequence[str] = [normalize_tag(tag) for tag in available]
    if DEFAULT_LOCALE not in tags:
        tags = [DEFAULT_LOCALE, *tags]
    default = LocaleMatch(tag=DEFAULT_LOCALE, language=DEFAULT_LOCALE)
    if not requested:
        return default

    wanted = normalize_tag(requested)
    if wanted in tags:
        match = LocaleMatch(tag=wanted, language=primary_language(wanted))
    else:
        language = primary_language(wanted)
        candidates = [tag for tag in tags if primary_language(tag) == language]
        if candidates:
            # the bare language tag is preferred over a regional sibling
            chosen = language if language in candidates else candidates[0]
            match = LocaleMatch(tag=chosen, language=language)
        else:
            match = default
    LOGGER.info(
        "locale resolved",
        extra={"requested": requested, "resolved": match.tag},
    )
    return match


def locale_url(template: str, language: str) -> str:
    """Build the mirror page URL for ``language``."""

    return template.format(language=language)
