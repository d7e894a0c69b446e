"""Row views handed to the external decoder.

A :class:`NamedRow` binds one node of the title tree to the physical rows of
a logical record and resolves field names to :class:`CellStream` value
ranges.  Views are transient: they borrow the tree and the grid rows and are
dropped once the decoder has consumed them.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

from ingestkit_sheets.errors import MissingColumnError, UnexpectedMultiRowValueError
from ingestkit_sheets.grid import Row, is_blank_row
from ingestkit_sheets.models import Cell
from ingestkit_sheets.titles import TitleNode, TitleTree


class CellStream:
    """Forward-only stream over the values of a cell range.

    With a non-empty *separator*, every text cell is split on each of the
    separator's characters and empty fragments are dropped; other values pass
    through unchanged.  *named* is a decoding hint for the consumer (values
    are addressed by name rather than by position) and does not change what
    the stream yields.
    """

    def __init__(self, cells: Sequence[Cell], separator: str = "", named: bool = False) -> None:
        self.cells: tuple[Cell, ...] = tuple(cells)
        self.separator = separator
        self.named = named
        self._values = self._split(self.cells, separator)
        self._pos = 0

    @staticmethod
    def _split(cells: Sequence[Cell], separator: str) -> list[Any]:
        if not separator:
            return [c.value for c in cells]
        values: list[Any] = []
        for c in cells:
            if isinstance(c.value, str):
                parts = [c.value]
                for sep in separator:
                    parts = [p for part in parts for p in part.split(sep)]
                values.extend(p for p in parts if p.strip())
            elif c.value is not None:
                values.append(c.value)
        return values

    @property
    def location(self) -> str:
        """Address of the first source cell, or ``""`` for an empty range."""
        return self.cells[0].address if self.cells else ""

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._values)

    @property
    def remaining(self) -> list[Any]:
        return self._values[self._pos:]

    def peek(self) -> Any:
        if self.at_end:
            raise IndexError(f"read past end of cell range at {self.location or '<empty>'}")
        return self._values[self._pos]

    def read(self) -> Any:
        value = self.peek()
        self._pos += 1
        return value

    def __iter__(self) -> Iterator[Any]:
        while not self.at_end:
            yield self.read()

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"CellStream({self.location!r}, values={self._values!r})"


class NamedRow:
    """A title node bound to one or more physical rows.

    Parameters
    ----------
    tree:
        The sheet's title tree (borrowed).
    node:
        The title this view is bound to; the root for whole records.
    rows:
        Physical rows of the logical record, first row first.
    """

    def __init__(self, tree: TitleTree, node: TitleNode, rows: Sequence[Row]) -> None:
        self.tree = tree
        self.title = node
        self.rows: tuple[Row, ...] = tuple(rows)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def titles(self) -> list[TitleNode]:
        """Child titles, left to right."""
        return self.tree.children(self.title.id)

    @property
    def first_row(self) -> int | None:
        """Physical row of the first bound row, for diagnostics."""
        if not self.rows or not self.rows[0]:
            return None
        return self.rows[0][0].row

    def get_title(self, name: str) -> TitleNode | None:
        return self.tree.child(self.title.id, name)

    def has_title(self, name: str) -> bool:
        return self.get_title(name) is not None

    def _require(self, name: str) -> TitleNode:
        node = self.tree.child(self.title.id, name)
        if node is None:
            raise MissingColumnError(
                f"sheet is missing column '{name}'; check for a typo or an omitted header",
                row=self.first_row,
                field_name=name,
                stage="decode",
            )
        return node

    def _check_blank_since_second_row(self, node: TitleNode) -> None:
        for row in self.rows[1:]:
            if not is_blank_row(row, node.from_column, node.to_column):
                raise UnexpectedMultiRowValueError(
                    f"field '{node.name}' is not a multi-row field; "
                    "only the first row of a record may carry its value",
                    row=row[0].row if row else None,
                    column=node.from_column,
                    field_name=node.name,
                    stage="decode",
                )

    @staticmethod
    def _range(row: Row, node: TitleNode) -> list[Cell]:
        return list(row[node.from_column:node.to_column + 1])

    # -- lookups -------------------------------------------------------------

    def column(self, name: str, separator: str = "", named: bool = False) -> CellStream:
        """Value range of field *name* on the first row.

        Raises:
            MissingColumnError: If *name* is not a child title.
            UnexpectedMultiRowValueError: If a continuation row has data in
                the field's range.
        """
        node = self._require(name)
        self._check_blank_since_second_row(node)
        return CellStream(self._range(self.rows[0], node), separator, named)

    def sub_tree(self, name: str, multi_rows: bool = False) -> NamedRow:
        """View bound to child title *name*.

        A single-row sub-structure is bound to the first row only and must be
        blank on continuation rows; a multi-row one keeps every bound row.
        """
        node = self._require(name)
        if multi_rows:
            return NamedRow(self.tree, node, self.rows)
        self._check_blank_since_second_row(node)
        return NamedRow(self.tree, node, self.rows[:1])

    def expand_rows(self) -> Iterator[NamedRow]:
        """One view per bound row that is not blank within this title's range."""
        for row in self.rows:
            if is_blank_row(row, self.title.from_column, self.title.to_column):
                continue
            yield NamedRow(self.tree, self.title, [row])

    def column_across_rows(self, name: str, separator: str = "") -> Iterator[CellStream]:
        """One stream per bound row that has data in field *name*."""
        node = self._require(name)
        for row in self.rows:
            if is_blank_row(row, node.from_column, node.to_column):
                continue
            yield CellStream(self._range(row, node), separator)

    def flattened_column(self, name: str, separator: str = "") -> CellStream:
        """All non-blank cells of field *name* across every bound row, as one stream."""
        node = self._require(name)
        cells = [
            c for row in self.rows for c in self._range(row, node) if not c.is_blank
        ]
        return CellStream(cells, separator)

    def __repr__(self) -> str:
        return f"NamedRow(title={self.title.name!r}, rows={self.row_count})"
