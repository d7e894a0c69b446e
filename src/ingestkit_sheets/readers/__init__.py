"""Reader adapters turning concrete spreadsheet sources into ``SheetReader``s."""

from ingestkit_sheets.readers.frame import DataFrameSheetReader
from ingestkit_sheets.readers.memory import MemorySheetReader
from ingestkit_sheets.readers.xlsx import OpenpyxlSheetReader

__all__ = ["MemorySheetReader", "OpenpyxlSheetReader", "DataFrameSheetReader"]
