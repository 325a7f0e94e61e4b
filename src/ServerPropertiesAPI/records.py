# === NAVMAP v1 ===
# {
#   "module": "ServerPropertiesAPI.records",
#   "purpose": "Build Property records from documentation table rows",
#   "sections": [
#     {"id": "modes", "name": "Extraction modes", "anchor": "MODE", "kind": "constants"},
#     {"id": "columns", "name": "Column readers", "anchor": "COL", "kind": "helpers"},
#     {"id": "builder", "name": "Record builder", "anchor": "BLD", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Record builder for the ``server.properties`` documentation table.

Row layout (the header row is skipped):

* column 0 - key name in ``<b>``, optional ``sup > i`` upcoming footnote
* column 1 - type text, interpreted by :mod:`ServerPropertiesAPI.values`
* column 2 - default value
* column 3 - description; ``dl dd`` entries with a bold lead term list the
  enumerated values of non-boolean keys

Two modes exist. ``FULL`` extraction is used for bulk listing: every row must
parse completely and any range failure aborts the call. ``FILTERED``
extraction stops working on a row as soon as it contradicts the query and
leaves bounds unbounded when a range cannot be resolved.
"""

from __future__ import annotations

import enum
import logging
from typing import List, Mapping, Optional, Sequence, Tuple

from bs4 import Tag

from .constants import BOOLEAN_TYPENAME, UNBOUNDED
from .errors import RangeMalformedError, StructuralDriftError
from .evaluator import ExpressionEvaluator
from .filters import name_allowed, type_allowed, upcoming_allowed
from .models import Property, PropertyValues, QuerySpec
from .tables import child_text, data_rows, node_text
from .values import classify_type, parse_type

LOGGER = logging.getLogger(__name__)

__all__ = [
    "ExtractionMode",
    "apply_descriptions",
    "build_properties",
    "build_property",
    "possible_values",
]

# --- Extraction modes ----------------------------------------------------------


class ExtractionMode(enum.Enum):
    """How strictly rows are parsed."""

    FULL = "full"
    FILTERED = "filtered"


UPCOMING_MARKER = "upcoming"
NOTE_LEAD = "Note:"

# --- Column readers ------------------------------------------------------------


def _read_upcoming(cell: Tag) -> Tuple[bool, str]:
    if UPCOMING_MARKER not in child_text(cell, "sup > i > span"):
        return False, ""
    return True, child_text(cell, "sup > i > a")


def possible_values(cell: Tag) -> Tuple[str, ...]:
    """Collect the bold lead terms of definition-list entries in a description cell."""

    found: List[str] = []
    for entry in cell.select("dl dd"):
        term = child_text(entry, "b:first-child")
        if not term or term == NOTE_LEAD:
            continue
        found.append(term)
    return tuple(found)


def _drift(index: int, name: str, missing: Sequence[str]) -> StructuralDriftError:
    LOGGER.error(
        "documentation row incomplete",
        extra={"row_index": index, "property": name, "missing": list(missing)},
    )
    return StructuralDriftError(
        f"row {index} ({name or '<unnamed>'}) is missing {', '.join(missing)}; "
        "check whether the page layout changed",
        row_index=index,
        missing=missing,
    )


# --- Record builder ------------------------------------------------------------


def build_property(
    row: Tag,
    index: int,
    *,
    evaluator: Optional[ExpressionEvaluator] = None,
    mode: ExtractionMode = ExtractionMode.FULL,
    spec: Optional[QuerySpec] = None,
) -> Optional[Property]:
    """Build one record from a data row.

    Args:
        row: ``tr`` element.
        index: Row position, used in error messages.
        evaluator: Arithmetic evaluator for expression upper bounds.
        mode: Extraction policy.
        spec: Active query; only consulted in ``FILTERED`` mode.

    Returns:
        The record, or ``None`` when a filtered row does not match.

    Raises:
        StructuralDriftError: In ``FULL`` mode, when a required field is empty.
        RangeMalformedError: In ``FULL`` mode, when bounds cannot be resolved.
    """

    filtered = mode is ExtractionMode.FILTERED and spec is not None
    cells = row.find_all("td", recursive=False)
    if len(cells) < 4 and not filtered:
        name = child_text(cells[0], "b") if cells else ""
        raise _drift(index, name, ["columns"])

    name = child_text(cells[0], "b") if cells else ""
    upcoming, upcoming_version = _read_upcoming(cells[0]) if cells else (False, "")
    if upcoming and not upcoming_version:
        if not filtered:
            raise _drift(index, name, ["upcomingVersion"])
        upcoming = False
    if filtered:
        if not name:
            return None
        if spec.exact_name:
            if name != spec.exact_name:
                return None
        elif not name_allowed(name, spec.contains) or not upcoming_allowed(
            upcoming, spec.upcoming
        ):
            return None
        if len(cells) < 2:
            return None

    raw_type = node_text(cells[1])
    if filtered:
        kind = classify_type(raw_type)
        if kind is None:
            return None
        if not spec.exact_name and not type_allowed(kind, spec.types):
            return None
        try:
            kind, minimum, maximum = parse_type(raw_type, evaluator)
        except RangeMalformedError as exc:
            LOGGER.warning(
                "range unresolved, leaving bounds unbounded",
                extra={"property": name, "type_text": raw_type, "error": str(exc)},
            )
            minimum = maximum = UNBOUNDED
    else:
        kind, minimum, maximum = parse_type(raw_type, evaluator)

    default = node_text(cells[2]) if len(cells) > 2 else ""
    description_cell = cells[3] if len(cells) > 3 else None
    description = node_text(description_cell) if description_cell is not None else ""
    possible: Tuple[str, ...] = ()
    if description_cell is not None and kind != BOOLEAN_TYPENAME:
        possible = possible_values(description_cell)

    if not filtered:
        missing = [
            label
            for label, value in (
                ("name", name),
                ("type", kind),
                ("default", default),
                ("description", description),
            )
            if not value
        ]
        if missing:
            raise _drift(index, name, missing)

    return Property(
        name=name,
        type=kind,
        values=PropertyValues(
            default=default, minimum=minimum, maximum=maximum, possible=possible
        ),
        description=description,
        upcoming=upcoming,
        upcoming_version=upcoming_version if upcoming else "",
    )


def build_properties(
    table: Tag,
    *,
    evaluator: Optional[ExpressionEvaluator] = None,
    mode: ExtractionMode = ExtractionMode.FULL,
    spec: Optional[QuerySpec] = None,
) -> List[Property]:
    """Build records for every data row of ``table`` in document order."""

    properties: List[Property] = []
    rows = data_rows(table)
    for index, row in enumerate(rows, start=1):
        prop = build_property(row, index, evaluator=evaluator, mode=mode, spec=spec)
        if prop is None:
            continue
        properties.append(prop)
        if spec is not None and spec.exact_name and mode is ExtractionMode.FILTERED:
            break
    LOGGER.debug(
        "records built",
        extra={"mode": mode.value, "rows": len(rows), "records": len(properties)},
    )
    return properties


def apply_descriptions(
    properties: Sequence[Property], overlay: Mapping[str, str]
) -> List[Property]:
    """Replace descriptions by key name; records absent from ``overlay`` are kept as-is."""

    overlaid: List[Property] = []
    replaced = 0
    for prop in properties:
        translated = overlay.get(prop.name)
        if translated:
            overlaid.append(prop.with_description(translated))
            replaced += 1
        else:
            overlaid.append(prop)
    LOGGER.debug("descriptions overlaid", extra={"replaced": replaced, "records": len(overlaid)})
    return overlaid
