"""openpyxl-backed sheet reader for ``.xlsx`` worksheets."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from openpyxl.worksheet.worksheet import Worksheet

from ingestkit_sheets.models import MergeRange


class OpenpyxlSheetReader:
    """Adapt an openpyxl :class:`Worksheet` to the ``SheetReader`` protocol.

    openpyxl coordinates are 1-based; merges are converted to the 0-based
    coordinates used throughout this package.  Non-anchor cells of a merge
    read as ``None``, as openpyxl reports them.
    """

    def __init__(self, worksheet: Worksheet) -> None:
        self._ws = worksheet

    @property
    def name(self) -> str:
        return self._ws.title

    def iter_rows(self) -> Iterator[tuple[Any, ...]]:
        return self._ws.iter_rows(values_only=True)

    def merge_ranges(self) -> list[MergeRange]:
        return [
            MergeRange(
                from_row=mr.min_row - 1,
                to_row=mr.max_row - 1,
                from_column=mr.min_col - 1,
                to_column=mr.max_col - 1,
            )
            for mr in self._ws.merged_cells.ranges
        ]
