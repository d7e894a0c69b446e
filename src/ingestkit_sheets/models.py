"""Data models and enumerations for ingestkit-sheets.

Pydantic models cover everything that is handed across the package boundary
(meta directives, merge geometry, records).  ``Cell`` is a frozen dataclass:
a grid holds one per physical cell, so it stays a lightweight value type.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

TITLE_MIN_ROWS = 2
TITLE_MAX_ROWS = 10
TITLE_DEFAULT_ROWS = 3


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Orientation(str, Enum):
    """Whether records run along physical rows or physical columns."""

    ROW_MAJOR = "row"
    COLUMN_MAJOR = "column"


# ---------------------------------------------------------------------------
# Cells and geometry
# ---------------------------------------------------------------------------


def column_letters(column: int) -> str:
    """Convert a 0-based column index to spreadsheet letters (0 -> ``A``)."""
    letters = ""
    n = column + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def is_blank_value(value: Any) -> bool:
    """True for ``None`` and for text that is empty or whitespace only."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


@dataclass(frozen=True)
class Cell:
    """A single addressed value.

    ``row`` is the physical row in the source sheet (row 0 is the meta line)
    and ``column`` the 0-based physical column.  Both keep pointing at the
    source position after a column-major grid is transposed.
    """

    row: int
    column: int
    value: Any = None

    @property
    def is_blank(self) -> bool:
        return is_blank_value(self.value)

    @property
    def text(self) -> str | None:
        """Stripped string form of the value, ``None`` for empty cells."""
        if self.value is None:
            return None
        return str(self.value).strip()

    @property
    def address(self) -> str:
        """Spreadsheet-style address, e.g. ``C5``."""
        return f"{column_letters(self.column)}{self.row + 1}"

    def __str__(self) -> str:
        return f"[{self.address}] {self.value}"


class MergeRange(BaseModel):
    """A merged rectangle in 0-based inclusive coordinates."""

    model_config = ConfigDict(frozen=True)

    from_row: int
    to_row: int
    from_column: int
    to_column: int

    @model_validator(mode="after")
    def _check_bounds(self) -> MergeRange:
        if self.from_row > self.to_row or self.from_column > self.to_column:
            raise ValueError(
                f"inverted merge range rows [{self.from_row},{self.to_row}] "
                f"columns [{self.from_column},{self.to_column}]"
            )
        if self.from_row < 0 or self.from_column < 0:
            raise ValueError("merge range coordinates must be non-negative")
        return self

    @property
    def height(self) -> int:
        return self.to_row - self.from_row + 1

    def transposed(self) -> MergeRange:
        """Map a physical rectangle into the coordinates of a transposed grid.

        Grid row ``i`` of a column-major sheet is physical column ``i`` and
        grid column ``j`` is physical row ``j + 1``.  The result is expressed
        the same way physical ranges are (header line 1 is the first grid row).
        """
        return MergeRange(
            from_row=self.from_column + 1,
            to_row=self.to_column + 1,
            from_column=self.from_row - 1,
            to_column=self.to_row - 1,
        )


# ---------------------------------------------------------------------------
# Sheet-level models
# ---------------------------------------------------------------------------


class SheetMeta(BaseModel):
    """Directives parsed from the meta line of a sheet."""

    model_config = ConfigDict(frozen=True)

    orientation: Orientation = Orientation.ROW_MAJOR
    title_rows: int = TITLE_DEFAULT_ROWS

    @property
    def is_row_major(self) -> bool:
        return self.orientation is Orientation.ROW_MAJOR


class Record(BaseModel):
    """One decoded logical record and where it came from."""

    data: Any
    source_location: str
    is_test_only: bool = False
    row: int | None = None
