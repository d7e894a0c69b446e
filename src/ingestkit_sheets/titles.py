"""Title hierarchy: an arena-backed tree of named column ranges.

Header cells map field names to column ranges.  A merged header cell spans
several columns and owns the sub-headers written beneath it, so the header
band of a sheet describes a tree::

    ##    | id | pos       | name
          |    | x  | y    |

becomes ``_root_ -> [id [1,1], pos [2,3] -> [x [2,2], y [3,3]], name [4,4]]``.

Nodes live in a flat list inside :class:`TitleTree` and refer to each other
by index, with a per-node name index for constant-time lookup.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from ingestkit_sheets.errors import (
    DuplicateTitleError,
    NoColumnsDefinedError,
    NoFieldsDefinedError,
)
from ingestkit_sheets.grid import CellGrid
from ingestkit_sheets.models import Cell, MergeRange

logger = logging.getLogger("ingestkit_sheets")

ROOT_TITLE_NAME = "_root_"


@dataclass
class TitleNode:
    """A named column range in the header hierarchy."""

    id: int
    name: str
    from_column: int
    to_column: int
    parent: int | None = None
    children: list[int] = field(default_factory=list)
    by_name: dict[str, int] = field(default_factory=dict)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def width(self) -> int:
        return self.to_column - self.from_column + 1


class TitleTree:
    """Arena of :class:`TitleNode` objects rooted at node 0."""

    root_id = 0

    def __init__(self, from_column: int, to_column: int) -> None:
        self._nodes: list[TitleNode] = [
            TitleNode(id=0, name=ROOT_TITLE_NAME, from_column=from_column, to_column=to_column)
        ]

    # -- access --------------------------------------------------------------

    @property
    def root(self) -> TitleNode:
        return self._nodes[self.root_id]

    def node(self, node_id: int) -> TitleNode:
        return self._nodes[node_id]

    def children(self, node_id: int) -> list[TitleNode]:
        return [self._nodes[i] for i in self._nodes[node_id].children]

    def child(self, node_id: int, name: str) -> TitleNode | None:
        index = self._nodes[node_id].by_name.get(name)
        return None if index is None else self._nodes[index]

    def walk(self, node_id: int | None = None, depth: int = 0) -> Iterator[tuple[int, TitleNode]]:
        """Yield ``(depth, node)`` pairs depth-first below *node_id* (root by default)."""
        start = self.root_id if node_id is None else node_id
        for child_id in self._nodes[start].children:
            yield depth, self._nodes[child_id]
            yield from self.walk(child_id, depth + 1)

    def __len__(self) -> int:
        return len(self._nodes)

    # -- construction --------------------------------------------------------

    def add_child(
        self,
        parent_id: int,
        name: str,
        from_column: int,
        to_column: int,
        cell: Cell | None = None,
    ) -> int:
        """Register a child title and return its id.

        Re-declaring an existing name with the same column range returns the
        existing node.

        Raises:
            DuplicateTitleError: If *name* already exists under the parent
                with a different column range.
        """
        parent = self._nodes[parent_id]
        existing = parent.by_name.get(name)
        if existing is not None:
            old = self._nodes[existing]
            if old.from_column == from_column and old.to_column == to_column:
                return existing
            raise DuplicateTitleError(
                f"title '{name}' declared at columns [{from_column},{to_column}] "
                f"already exists at [{old.from_column},{old.to_column}]",
                row=cell.row if cell is not None else None,
                column=cell.column if cell is not None else None,
                field_name=name,
                stage="titles",
            )
        node_id = len(self._nodes)
        self._nodes.append(
            TitleNode(
                id=node_id,
                name=name,
                from_column=from_column,
                to_column=to_column,
                parent=parent_id,
            )
        )
        parent.children.append(node_id)
        parent.by_name[name] = node_id
        return node_id

    def sort_children(self) -> None:
        """Order every node's children left to right by ``from_column``."""
        for node in self._nodes:
            node.children.sort(key=lambda i: self._nodes[i].from_column)

    # -- export --------------------------------------------------------------

    def to_dict(self, node_id: int | None = None) -> dict[str, Any]:
        """Nested plain-dict form, convenient for schema tooling and logs."""
        node = self._nodes[self.root_id if node_id is None else node_id]
        return {
            "name": node.name,
            "from_column": node.from_column,
            "to_column": node.to_column,
            "children": [self.to_dict(i) for i in node.children],
        }


class TitleTreeBuilder:
    """Builds a :class:`TitleTree` from the header rows of a grid.

    Merge rectangles must already be in grid coordinates: ``from_row == 1``
    means the first grid row (the field-name row), since physical row 0 is
    the meta line.

    Parameters
    ----------
    grid:
        The oriented grid, header rows first.
    merges:
        Merged rectangles of the sheet.
    """

    def __init__(self, grid: CellGrid, merges: Sequence[MergeRange]) -> None:
        self._grid = grid
        self._merges = list(merges)

    def header_band_height(self) -> int:
        """Number of header rows, derived from merges anchored at the field-name row."""
        height = 1
        for merge in self._merges:
            if merge.from_row == 1:
                height = max(height, merge.height)
        return height

    def build(self) -> tuple[TitleTree, int]:
        """Build the tree.

        Returns:
            The title tree and the header band height (rows to strip).

        Raises:
            NoFieldsDefinedError: If there is no field-name row.
            NoColumnsDefinedError: If no title could be derived, including a
                header with no column beyond the row tag column.
            DuplicateTitleError: If a name claims two column ranges.
        """
        if len(self._grid) < 1:
            raise NoFieldsDefinedError("sheet defines no field-name row", stage="titles")
        max_columns = self._grid.max_columns
        if max_columns < 2:
            raise NoColumnsDefinedError(
                "field-name row has no column after the row tag column",
                row=self._grid[0][0].row if self._grid[0] else None,
                stage="titles",
            )

        band = self.header_band_height()
        tree = TitleTree(1, max_columns - 1)
        self._init_children(
            tree, tree.root_id, 0, band, 1, max_columns - 1, recurse_bare=False
        )

        if not tree.root.children:
            raise NoColumnsDefinedError("sheet defines no valid title column", stage="titles")

        tree.sort_children()
        logger.debug(
            "Built title tree: %d titles, header band %d row(s)", len(tree) - 1, band
        )
        return tree, band

    def _header_row(self, depth: int) -> Sequence[Cell]:
        if depth < len(self._grid):
            return self._grid[depth]
        return ()

    def _init_children(
        self,
        tree: TitleTree,
        parent_id: int,
        depth: int,
        max_depth: int,
        from_column: int,
        to_column: int,
        recurse_bare: bool = True,
    ) -> None:
        row = self._header_row(depth)
        claimed: set[int] = set()

        # Merged headers first, in declaration order.
        for merge in self._merges:
            if (
                merge.from_row != depth + 1
                or merge.from_column < from_column
                or merge.to_column > to_column
            ):
                continue
            claimed.update(range(merge.from_column, merge.to_column + 1))
            if merge.from_column >= len(row):
                continue
            cell = row[merge.from_column]
            if cell.is_blank:
                continue
            child_id = tree.add_child(
                parent_id, cell.text, merge.from_column, merge.to_column, cell
            )
            if depth + 1 < max_depth:
                self._init_children(
                    tree, child_id, depth + 1, max_depth, merge.from_column, merge.to_column
                )

        # Then single-column headers not covered by a merge.  At the root
        # these are always leaves; only merged titles own a header band.
        for i in range(from_column, min(to_column, len(row) - 1) + 1):
            if i in claimed:
                continue
            cell = row[i]
            if cell.is_blank:
                continue
            child_id = tree.add_child(parent_id, cell.text, i, i, cell)
            if recurse_bare and depth + 1 < max_depth:
                self._init_children(tree, child_id, depth + 1, max_depth, i, i)
