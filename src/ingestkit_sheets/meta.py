"""Meta directive parser for the first physical row of a sheet.

The meta line starts with the literal marker ``##`` followed by zero or more
``key:value`` (or ``key=value``) cells::

    ## | orientation:row | title_rows:4

A sheet whose first row lacks the marker is not applicable: the parser
returns ``None`` and the caller skips the sheet.  Anything after a valid
marker that cannot be understood is a hard error.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any

from ingestkit_sheets.errors import InvalidMetaError
from ingestkit_sheets.models import (
    TITLE_MAX_ROWS,
    TITLE_MIN_ROWS,
    Orientation,
    SheetMeta,
)

logger = logging.getLogger("ingestkit_sheets")

META_MARKER = "##"

_ORIENTATIONS: dict[str, Orientation] = {
    "row": Orientation.ROW_MAJOR,
    "r": Orientation.ROW_MAJOR,
    "landscape": Orientation.ROW_MAJOR,
    "l": Orientation.ROW_MAJOR,
    "column": Orientation.COLUMN_MAJOR,
    "c": Orientation.COLUMN_MAJOR,
    "portrait": Orientation.COLUMN_MAJOR,
    "p": Orientation.COLUMN_MAJOR,
}

_SPLIT = re.compile(r"[:=]")


def parse_meta(row: Sequence[Any] | None) -> SheetMeta | None:
    """Parse the meta line of a sheet.

    Args:
        row: Raw cell values of physical row 0, or ``None`` when the sheet
            has no rows at all.

    Returns:
        The parsed :class:`SheetMeta`, or ``None`` when the row is absent,
        empty, or does not start with the ``##`` marker.

    Raises:
        InvalidMetaError: If a directive is malformed, unknown, or carries
            an unsupported value.
    """
    if not row:
        return None
    first = row[0]
    if first is None or str(first) != META_MARKER:
        return None

    orientation = Orientation.ROW_MAJOR
    title_rows = SheetMeta().title_rows

    for column, raw in enumerate(row[1:], start=1):
        if raw is None:
            continue
        attr = str(raw)
        if not attr.strip():
            continue

        parts = _SPLIT.split(attr)
        if len(parts) != 2:
            raise InvalidMetaError(
                f"malformed meta attribute '{attr}', expected key:value",
                row=0,
                column=column,
                stage="meta",
            )
        key = parts[0].strip().lower()
        value = parts[1].strip().lower()

        if key == "orientation":
            orientation = _parse_orientation(value, column)
        elif key == "title_rows":
            title_rows = _parse_title_rows(value, column)
        else:
            raise InvalidMetaError(
                f"unknown meta attribute '{attr}'; valid attributes are "
                "orientation=landscape|l|row|r|portrait|p|column|c and "
                f"title_rows=<{TITLE_MIN_ROWS}..{TITLE_MAX_ROWS}>",
                row=0,
                column=column,
                field_name=key,
                stage="meta",
            )

    meta = SheetMeta(orientation=orientation, title_rows=title_rows)
    logger.debug(
        "Parsed meta line: orientation=%s title_rows=%d",
        meta.orientation.value,
        meta.title_rows,
    )
    return meta


def _parse_orientation(value: str, column: int) -> Orientation:
    try:
        return _ORIENTATIONS[value]
    except KeyError:
        raise InvalidMetaError(
            f"orientation '{value}' must be landscape (l, row, r) "
            "or portrait (p, column, c)",
            row=0,
            column=column,
            field_name="orientation",
            stage="meta",
        ) from None


def _parse_title_rows(value: str, column: int) -> int:
    try:
        rows = int(value)
    except ValueError:
        raise InvalidMetaError(
            f"title_rows '{value}' must be an integer in "
            f"[{TITLE_MIN_ROWS},{TITLE_MAX_ROWS}]",
            row=0,
            column=column,
            field_name="title_rows",
            stage="meta",
        ) from None
    if rows < TITLE_MIN_ROWS or rows > TITLE_MAX_ROWS:
        raise InvalidMetaError(
            f"title_rows {rows} out of range [{TITLE_MIN_ROWS},{TITLE_MAX_ROWS}]",
            row=0,
            column=column,
            field_name="title_rows",
            stage="meta",
        )
    return rows
