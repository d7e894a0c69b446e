"""Sheet -- the load pipeline and record stream for one spreadsheet sheet.

Loading runs strictly in order:

1. Parse the meta line (row 0); a sheet without the ``##`` marker is not
   applicable and :meth:`Sheet.load` returns ``False``.
2. Build the oriented :class:`~ingestkit_sheets.grid.CellGrid`.
3. Build the title tree from the header band and merge geometry.
4. Strip header rows (and, in full mode, ignore-tagged rows).

Afterwards the grid and title tree are read-only; records are produced by
independent :class:`~ingestkit_sheets.cursor.RecordCursor` instances.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Iterator, Sequence
from typing import Any

from ingestkit_sheets.config import SheetLoaderConfig
from ingestkit_sheets.cursor import RecordCursor
from ingestkit_sheets.grid import CellGrid, build_grid, row_tag
from ingestkit_sheets.meta import parse_meta
from ingestkit_sheets.models import MergeRange, Orientation, Record, SheetMeta
from ingestkit_sheets.named_row import NamedRow
from ingestkit_sheets.protocols import RecordDecoder, SheetReader
from ingestkit_sheets.titles import TitleNode, TitleTree, TitleTreeBuilder

logger = logging.getLogger("ingestkit_sheets")

TagPredicate = Callable[[str | None], bool]


class Sheet:
    """One loaded sheet: meta directives, body grid and title tree.

    Parameters
    ----------
    raw_url:
        Source identifier stamped on every record (e.g. ``"Items@items.xlsx"``).
    name:
        Sheet name, used in diagnostics.
    config:
        Loader configuration; defaults when *None*.
    is_ignore_tag:
        Predicate on the row tag selecting rows to drop in full mode.
        Defaults to ``config.is_ignore_tag``.
    is_test_tag:
        Predicate on the row tag marking test-only records.
        Defaults to ``config.is_test_tag``.
    """

    def __init__(
        self,
        raw_url: str,
        name: str,
        config: SheetLoaderConfig | None = None,
        is_ignore_tag: TagPredicate | None = None,
        is_test_tag: TagPredicate | None = None,
    ) -> None:
        self.raw_url = raw_url
        self.name = name
        self._config = config or SheetLoaderConfig()
        self._is_ignore_tag = is_ignore_tag or self._config.is_ignore_tag
        self._is_test_tag = is_test_tag or self._config.is_test_tag

        self._meta: SheetMeta | None = None
        self._grid: CellGrid | None = None
        self._tree: TitleTree | None = None
        self._title_row_num = 0
        self._header_only = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, reader: SheetReader, header_only: bool = False) -> bool:
        """Load the sheet from *reader*.

        Args:
            reader: Source of physical rows and merge geometry.
            header_only: Keep the description rows following the header band
                and skip ignore-tag filtering; for row-major sheets, stop
                reading after ``config.header_probe_rows`` rows.

        Returns:
            ``False`` if the sheet has no meta marker and should be skipped.

        Raises:
            SheetIngestException: Any structural error; the sheet is unusable.
        """
        rows = iter(reader.iter_rows())
        meta = parse_meta(next(rows, None))
        if meta is None:
            logger.info("Sheet '%s' has no meta marker; not applicable", self.name)
            return False
        self._meta = meta
        self._header_only = header_only

        if header_only and meta.is_row_major:
            body = list(itertools.islice(rows, max(0, self._config.header_probe_rows - 1)))
        else:
            body = list(rows)

        grid = build_grid(body, meta.orientation)
        merges = self._oriented_merges(reader.merge_ranges(), meta.orientation)
        self._tree, self._title_row_num = TitleTreeBuilder(grid, merges).build()

        if header_only:
            grid = grid.drop_leading(self._title_row_num)
        else:
            grid = grid.drop_leading(meta.title_rows + self._title_row_num - 1)
            grid = grid.without(lambda row: self._is_ignore_tag(row_tag(row)))
        self._grid = grid

        if self._config.log_sample_data and len(grid):
            logger.debug("Sheet '%s' first body row: %s", self.name, grid.values()[0])
        logger.info(
            "Loaded sheet '%s': orientation=%s, header band %d row(s), "
            "%d root field(s), %d body row(s)",
            self.name,
            meta.orientation.value,
            self._title_row_num,
            len(self.root_fields),
            len(grid),
        )
        return True

    @staticmethod
    def _oriented_merges(
        merges: Sequence[MergeRange] | None, orientation: Orientation
    ) -> list[MergeRange]:
        # Merges touching the meta line carry no header information.
        usable = [m for m in merges or () if m.from_row >= 1]
        if orientation is Orientation.COLUMN_MAJOR:
            return [m.transposed() for m in usable]
        return usable

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def _require_loaded(self) -> None:
        if self._tree is None or self._grid is None:
            raise RuntimeError(f"sheet '{self.name}' has not been loaded")

    @property
    def is_loaded(self) -> bool:
        return self._tree is not None

    @property
    def meta(self) -> SheetMeta:
        self._require_loaded()
        assert self._meta is not None
        return self._meta

    @property
    def grid(self) -> CellGrid:
        """Body rows left after header trimming."""
        self._require_loaded()
        assert self._grid is not None
        return self._grid

    @property
    def title_tree(self) -> TitleTree:
        self._require_loaded()
        assert self._tree is not None
        return self._tree

    @property
    def root_fields(self) -> list[TitleNode]:
        return self.title_tree.children(TitleTree.root_id)

    @property
    def title_row_num(self) -> int:
        """Height of the merge-derived header band."""
        return self._title_row_num

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def cursor(self) -> RecordCursor:
        """Return a fresh cursor over the body rows."""
        return RecordCursor(self.grid)

    def read_one(
        self,
        cursor: RecordCursor,
        decoder: RecordDecoder,
        type_descriptor: Any,
        multi_row: bool = False,
    ) -> Record | None:
        """Decode the next record at *cursor*, or return ``None`` when exhausted."""
        if multi_row:
            rows = cursor.next_record_rows()
        else:
            row = cursor.next_record_row()
            rows = None if row is None else [row]
        if rows is None:
            return None
        tree = self.title_tree
        data = decoder.decode(NamedRow(tree, tree.root, rows), type_descriptor)
        first = rows[0]
        return Record(
            data=data,
            source_location=self.raw_url,
            is_test_only=self._is_test_tag(row_tag(first)),
            row=first[0].row if first else None,
        )

    def iter_records(
        self,
        decoder: RecordDecoder,
        type_descriptor: Any,
        multi_row: bool = False,
    ) -> Iterator[Record]:
        """Yield every record of the sheet from a fresh cursor."""
        if self._header_only:
            logger.warning(
                "Sheet '%s' was loaded header-only; body rows include descriptions",
                self.name,
            )
        cursor = self.cursor()
        while True:
            record = self.read_one(cursor, decoder, type_descriptor, multi_row)
            if record is None:
                return
            yield record

    def read_multi(
        self,
        decoder: RecordDecoder,
        type_descriptor: Any,
        multi_row: bool = False,
    ) -> list[Record]:
        """Decode all records of the sheet."""
        return list(self.iter_records(decoder, type_descriptor, multi_row))

    def __repr__(self) -> str:
        return f"Sheet(name={self.name!r}, raw_url={self.raw_url!r}, loaded={self.is_loaded})"
