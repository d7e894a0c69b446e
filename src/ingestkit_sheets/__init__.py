"""ingestkit-sheets -- title hierarchies and record streams for annotated sheets.

Public API exports for models, errors, configuration, the load pipeline
(``Sheet``, ``WorkbookLoader``), row views and reader adapters.
"""

from ingestkit_sheets.config import SheetLoaderConfig
from ingestkit_sheets.cursor import RecordCursor
from ingestkit_sheets.errors import (
    DuplicateTitleError,
    EmptySheetError,
    InvalidMetaError,
    MissingColumnError,
    NoColumnsDefinedError,
    NoFieldsDefinedError,
    SheetErrorCode,
    SheetIngestError,
    SheetIngestException,
    UnexpectedMultiRowValueError,
)
from ingestkit_sheets.grid import CellGrid, build_grid, is_blank_row, row_tag
from ingestkit_sheets.loader import WorkbookLoader
from ingestkit_sheets.meta import parse_meta
from ingestkit_sheets.models import Cell, MergeRange, Orientation, Record, SheetMeta
from ingestkit_sheets.named_row import CellStream, NamedRow
from ingestkit_sheets.protocols import RecordDecoder, SheetReader
from ingestkit_sheets.readers import (
    DataFrameSheetReader,
    MemorySheetReader,
    OpenpyxlSheetReader,
)
from ingestkit_sheets.sheet import Sheet
from ingestkit_sheets.titles import TitleNode, TitleTree, TitleTreeBuilder

__all__ = [
    # Enums / models
    "Orientation",
    "SheetMeta",
    "Cell",
    "MergeRange",
    "Record",
    # Grid
    "CellGrid",
    "build_grid",
    "is_blank_row",
    "row_tag",
    # Meta
    "parse_meta",
    # Titles
    "TitleNode",
    "TitleTree",
    "TitleTreeBuilder",
    # Records
    "RecordCursor",
    "NamedRow",
    "CellStream",
    "Sheet",
    "WorkbookLoader",
    # Readers
    "MemorySheetReader",
    "OpenpyxlSheetReader",
    "DataFrameSheetReader",
    # Errors
    "SheetErrorCode",
    "SheetIngestError",
    "SheetIngestException",
    "InvalidMetaError",
    "EmptySheetError",
    "NoFieldsDefinedError",
    "NoColumnsDefinedError",
    "DuplicateTitleError",
    "MissingColumnError",
    "UnexpectedMultiRowValueError",
    # Config
    "SheetLoaderConfig",
    # Protocols
    "SheetReader",
    "RecordDecoder",
]
