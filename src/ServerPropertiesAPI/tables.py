# === NAVMAP v1 ===
# {
#   "module": "ServerPropertiesAPI.tables",
#   "purpose": "Locate documentation tables in English and localized wiki pages",
#   "sections": [
#     {"id": "helpers", "name": "Node helpers", "anchor": "HELP", "kind": "helpers"},
#     {"id": "locators", "name": "Table locators", "anchor": "LOC", "kind": "api"},
#     {"id": "overlay", "name": "Localized description overlay", "anchor": "OVL", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Table location for the English page and its localized mirrors.

The English page tags its documentation table with a stable
``data-description`` marker. Localized mirrors carry no such marker, so the
table is recognised by the shape of its header row instead.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Sequence, TypeVar

from bs4 import BeautifulSoup, Tag

from .errors import AmbiguousTableError, StructuralDriftError

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

__all__ = [
    "child_text",
    "data_rows",
    "find_english_table",
    "find_localized_table",
    "header_columns",
    "localized_descriptions",
    "node_text",
    "select_unique",
]

# --- Node helpers --------------------------------------------------------------


def node_text(node: Tag) -> str:
    """Return the trimmed text content of ``node``."""

    return node.get_text().strip()


def child_text(node: Tag, selector: str) -> str:
    """Concatenate the text of every descendant matching ``selector``, trimmed."""

    return "".join(match.get_text() for match in node.select(selector)).strip()


def data_rows(table: Tag) -> List[Tag]:
    """Return the rows of ``table`` itself after the header row.

    Rows of tables nested inside a cell are not included.
    """

    rows = [row for row in table.find_all("tr") if row.find_parent("table") is table]
    return rows[1:]


def header_columns(table: Tag) -> int:
    """Count the header cells of the first row of ``table``."""

    first = table.find("tr")
    if first is None:
        return 0
    return len(first.find_all("th", recursive=False))


# --- Table locators ------------------------------------------------------------


def select_unique(
    candidates: Sequence[T],
    predicate: Callable[[T], bool],
    *,
    description: str,
    strict: bool = False,
) -> T:
    """Return the single candidate satisfying ``predicate``.

    Args:
        candidates: Elements in document order.
        predicate: Structural test each element must pass.
        description: Human-readable name used in messages.
        strict: Raise when several candidates match instead of keeping the first.

    Raises:
        StructuralDriftError: If nothing matches.
        AmbiguousTableError: If several match and ``strict`` is set.
    """

    matches = [candidate for candidate in candidates if predicate(candidate)]
    if not matches:
        raise StructuralDriftError(f"no {description} found in document")
    if len(matches) > 1:
        if strict:
            raise AmbiguousTableError(
                f"{len(matches)} candidates match the {description}", candidates=len(matches)
            )
        LOGGER.warning(
            "ambiguous table match, keeping the first",
            extra={"description": description, "candidates": len(matches)},
        )
    return matches[0]


def find_english_table(document: BeautifulSoup, selector: str) -> Tag:
    """Return the first element carrying the documentation section marker.

    Raises:
        StructuralDriftError: If the marker is absent.
    """

    table = document.select_one(selector)
    if table is None:
        LOGGER.error("documentation table missing", extra={"selector": selector})
        raise StructuralDriftError(f"no element matches {selector!r}")
    return table


def find_localized_table(
    document: BeautifulSoup, *, columns: int = 4, strict: bool = False
) -> Tag:
    """Return the localized documentation table, recognised by its header width."""

    return select_unique(
        document.find_all("table"),
        lambda table: header_columns(table) == columns,
        description=f"table with {columns} header columns",
        strict=strict,
    )


# --- Localized description overlay ---------------------------------------------


def localized_descriptions(table: Tag) -> Dict[str, str]:
    """Map documented key names to their translated descriptions.

    Some translations move the key name into a header cell (``th > span > b``);
    the data cells then start at the type column and the description is the
    third ``td``. Otherwise the name sits in the first ``td`` and the
    description in the fourth.
    """

    descriptions: Dict[str, str] = {}
    for row in data_rows(table):
        cells = row.find_all("td", recursive=False)
        header = row.find("th", recursive=False)
        name = child_text(header, "span > b") if header is not None else ""
        index = 2
        if not name:
            if not cells:
                continue
            name = child_text(cells[0], "b")
            index = 3
        if not name or len(cells) <= index:
            continue
        descriptions[name] = node_text(cells[index])
    return descriptions
