"""Immutable cell grid: construction, orientation and header trimming.

A grid is an ordered sequence of rows of :class:`Cell`; rows may differ in
length.  Grids never change once built -- transposition and trimming return
new grids.  Column 0 of every row is the row tag (comment / ignore / test
marker) and is never part of a data range.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any

from ingestkit_sheets.errors import EmptySheetError
from ingestkit_sheets.models import Cell, Orientation

logger = logging.getLogger("ingestkit_sheets")

Row = Sequence[Cell]


class CellGrid:
    """Read-only rectangular (ragged-tolerant) collection of cells."""

    def __init__(self, rows: Iterable[Iterable[Cell]]) -> None:
        self._rows: tuple[tuple[Cell, ...], ...] = tuple(tuple(r) for r in rows)

    # -- construction --------------------------------------------------------

    @classmethod
    def from_values(
        cls, value_rows: Iterable[Sequence[Any]], first_row: int = 1
    ) -> CellGrid:
        """Wrap raw value rows, numbering them from physical row *first_row*."""
        return cls(
            [Cell(row_index, column, value) for column, value in enumerate(values)]
            for row_index, values in enumerate(value_rows, start=first_row)
        )

    def transposed(self) -> CellGrid:
        """Return the grid with rows and columns swapped.

        Row ``i`` of the result collects column ``i`` of every row.  Missing
        cells of short rows are padded with empty placeholders so every new
        row is as long as this grid has rows.
        """
        width = self.max_columns
        out: list[list[Cell]] = []
        for i in range(width):
            out.append(
                [
                    row[i] if i < len(row) else Cell(j + 1, i, None)
                    for j, row in enumerate(self._rows)
                ]
            )
        return CellGrid(out)

    # -- access --------------------------------------------------------------

    @property
    def rows(self) -> tuple[tuple[Cell, ...], ...]:
        return self._rows

    @property
    def max_columns(self) -> int:
        return max((len(r) for r in self._rows), default=0)

    def __len__(self) -> int:
        return len(self._rows)

    def __getitem__(self, index: int) -> tuple[Cell, ...]:
        return self._rows[index]

    def __iter__(self) -> Iterator[tuple[Cell, ...]]:
        return iter(self._rows)

    def values(self) -> list[list[Any]]:
        """Plain values, row by row."""
        return [[c.value for c in row] for row in self._rows]

    # -- trimming ------------------------------------------------------------

    def drop_leading(self, count: int) -> CellGrid:
        """Return a grid without the first *count* rows."""
        return CellGrid(self._rows[max(0, count):])

    def without(self, predicate: Callable[[Row], bool]) -> CellGrid:
        """Return a grid without the rows matching *predicate*."""
        return CellGrid(r for r in self._rows if not predicate(r))


def build_grid(
    value_rows: Iterable[Sequence[Any]], orientation: Orientation
) -> CellGrid:
    """Build the oriented grid from the rows following the meta line.

    Raises:
        EmptySheetError: If the resulting grid has no rows.
    """
    grid = CellGrid.from_values(value_rows)
    if orientation is Orientation.COLUMN_MAJOR:
        logger.debug(
            "Transposing column-major grid of %d physical rows", len(grid)
        )
        grid = grid.transposed()
    if len(grid) == 0:
        raise EmptySheetError("sheet has no rows after the meta line", row=1, stage="grid")
    return grid


# ---------------------------------------------------------------------------
# Row predicates
# ---------------------------------------------------------------------------


def is_blank_row(row: Row, from_column: int = 1, to_column: int | None = None) -> bool:
    """True if every cell in ``[from_column, to_column]`` is blank.

    Column 0 is always excluded; a range beyond the row end counts as blank.
    """
    last = len(row) - 1 if to_column is None else min(to_column, len(row) - 1)
    for i in range(max(1, from_column), last + 1):
        if not row[i].is_blank:
            return False
    return True


def has_main_key(row: Row) -> bool:
    """True if the main key column (index 1) has a value."""
    return len(row) > 1 and not row[1].is_blank


def row_tag(row: Row) -> str | None:
    """Stripped text of the row tag cell (column 0), if any."""
    if not row:
        return None
    return row[0].text
