"""Forward-only record cursor over the body of a sheet.

Each cursor carries its own position, so several cursors may scan the same
immutable grid independently.  A single cursor is not thread-safe.
"""

from __future__ import annotations

from collections.abc import Iterator

from ingestkit_sheets.grid import CellGrid, Row, has_main_key, is_blank_row


class RecordCursor:
    """Groups the physical rows of a trimmed grid into logical records.

    In single-row mode every non-blank row is a record.  In multi-row mode a
    record starts at a non-blank row and absorbs the following rows whose
    main key column is blank; the next row with a main key starts the next
    record and is left unconsumed.
    """

    def __init__(self, grid: CellGrid, position: int = 0) -> None:
        self._grid = grid
        self._position = position

    @property
    def position(self) -> int:
        return self._position

    @property
    def exhausted(self) -> bool:
        return self._position >= len(self._grid)

    def _skip_blank(self) -> None:
        while self._position < len(self._grid) and is_blank_row(self._grid[self._position]):
            self._position += 1

    def next_record_row(self) -> Row | None:
        """Return the next non-blank row, or ``None`` at the end of the grid."""
        self._skip_blank()
        if self.exhausted:
            return None
        row = self._grid[self._position]
        self._position += 1
        return row

    def next_record_rows(self) -> list[Row] | None:
        """Return the physical rows of the next multi-row record, or ``None``."""
        first = self.next_record_row()
        if first is None:
            return None
        rows = [first]
        while True:
            self._skip_blank()
            if self.exhausted:
                break
            candidate = self._grid[self._position]
            if has_main_key(candidate):
                break
            rows.append(candidate)
            self._position += 1
        return rows

    def iter_records(self, multi_row: bool = False) -> Iterator[list[Row]]:
        """Yield the physical rows of each remaining record."""
        while True:
            if multi_row:
                rows = self.next_record_rows()
            else:
                row = self.next_record_row()
                rows = None if row is None else [row]
            if rows is None:
                return
            yield rows
