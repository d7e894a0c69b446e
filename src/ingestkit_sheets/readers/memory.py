"""In-memory sheet reader over plain Python lists."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from ingestkit_sheets.models import MergeRange


class MemorySheetReader:
    """Serve rows and merges that are already in memory.

    *merges* accepts :class:`MergeRange` objects or
    ``(from_row, to_row, from_column, to_column)`` tuples, all 0-based and
    inclusive in physical coordinates.
    """

    def __init__(
        self,
        name: str,
        rows: Iterable[Sequence[Any]],
        merges: Iterable[MergeRange | tuple[int, int, int, int]] = (),
    ) -> None:
        self._name = name
        self._rows = [list(r) for r in rows]
        self._merges = [
            m if isinstance(m, MergeRange) else MergeRange(
                from_row=m[0], to_row=m[1], from_column=m[2], to_column=m[3]
            )
            for m in merges
        ]

    @property
    def name(self) -> str:
        return self._name

    def iter_rows(self) -> Iterator[list[Any]]:
        return iter(self._rows)

    def merge_ranges(self) -> list[MergeRange]:
        return list(self._merges)
