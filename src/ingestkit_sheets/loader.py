"""WorkbookLoader -- batch entry point over every sheet of a file.

Opens ``.xlsx`` / ``.xlsm`` workbooks with openpyxl and ``.csv`` files with
pandas, then loads each sheet through :class:`~ingestkit_sheets.sheet.Sheet`.
Failures are isolated per sheet: a structural error in one sheet is recorded
as a :class:`~ingestkit_sheets.errors.SheetIngestError` and the remaining
sheets still load, unless ``fail_fast`` is configured.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any

import openpyxl
from openpyxl.chartsheet import Chartsheet
from openpyxl.worksheet.worksheet import Worksheet

from ingestkit_sheets.config import SheetLoaderConfig
from ingestkit_sheets.errors import SheetErrorCode, SheetIngestError, SheetIngestException
from ingestkit_sheets.models import Record
from ingestkit_sheets.protocols import RecordDecoder, SheetReader
from ingestkit_sheets.readers import DataFrameSheetReader, OpenpyxlSheetReader
from ingestkit_sheets.readers.frame import read_csv_frame
from ingestkit_sheets.sheet import Sheet

logger = logging.getLogger("ingestkit_sheets")

_WORKBOOK_SUFFIXES = (".xlsx", ".xlsm")
_CSV_SUFFIXES = (".csv",)


class WorkbookLoader:
    """Load every applicable sheet of a spreadsheet file.

    Parameters
    ----------
    config:
        Loader configuration. Uses defaults when *None*.
    """

    def __init__(self, config: SheetLoaderConfig | None = None) -> None:
        self._config = config or SheetLoaderConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load(
        self, file_path: str, header_only: bool = False
    ) -> tuple[list[Sheet], list[SheetIngestError]]:
        """Load all sheets of *file_path*.

        Returns
        -------
        tuple[list[Sheet], list[SheetIngestError]]
            The loaded sheets in workbook order, and the errors and warnings
            collected for sheets that were skipped or failed.

        Raises
        ------
        FileNotFoundError
            If *file_path* does not exist.
        SheetIngestException
            The first sheet error, when ``fail_fast`` is set.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        start = time.monotonic()
        errors: list[SheetIngestError] = []
        sheets: list[Sheet] = []

        for reader in self._open_readers(path, errors):
            sheet = self._load_sheet(path, reader, header_only, errors)
            if sheet is not None:
                sheets.append(sheet)

        logger.info(
            "Loaded %d sheet(s) from %s with %d issue(s) (%.3fs, %s)",
            len(sheets),
            file_path,
            len(errors),
            time.monotonic() - start,
            self._config.parser_version,
        )
        return sheets, errors

    def read_records(
        self,
        file_path: str,
        decoder: RecordDecoder,
        type_descriptor: Any,
        multi_row: bool = False,
    ) -> tuple[list[Record], list[SheetIngestError]]:
        """Load *file_path* and decode the records of every loaded sheet.

        A record-level error aborts the remaining records of that sheet only.
        """
        sheets, errors = self.load(file_path)
        records: list[Record] = []
        for sheet in sheets:
            try:
                records.extend(sheet.iter_records(decoder, type_descriptor, multi_row))
            except SheetIngestException as exc:
                self._record_failure(sheet.name, exc, errors)
        return records, errors

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _open_readers(
        self, path: Path, errors: list[SheetIngestError]
    ) -> list[SheetReader]:
        suffix = path.suffix.lower()
        try:
            if suffix in _CSV_SUFFIXES:
                frame = read_csv_frame(path, self._config.csv_encoding)
                return [DataFrameSheetReader(path.stem, frame)]
            if suffix in _WORKBOOK_SUFFIXES:
                wb = openpyxl.load_workbook(path, data_only=True)
                return self._worksheet_readers(wb, errors)
        except Exception as exc:
            if self._config.fail_fast:
                raise
            errors.append(
                SheetIngestError(
                    code=SheetErrorCode.E_PARSE_OPEN_FAIL,
                    message=f"Could not open {path.name}: {exc}",
                    stage="open",
                    recoverable=False,
                )
            )
            logger.error("Could not open %s: %s", path, exc)
            return []
        raise ValueError(
            f"Unsupported file extension '{suffix}'. Use .xlsx, .xlsm, or .csv."
        )

    def _worksheet_readers(
        self, wb: Any, errors: list[SheetIngestError]
    ) -> list[SheetReader]:
        readers: list[SheetReader] = []
        for sheet_name in wb.sheetnames:
            ws = wb[sheet_name]
            if isinstance(ws, Chartsheet):
                errors.append(
                    SheetIngestError(
                        code=SheetErrorCode.W_SHEET_SKIPPED_CHART,
                        message=f"Sheet '{ws.title}' is chart-only; skipped.",
                        sheet_name=ws.title,
                        stage="open",
                        recoverable=True,
                    )
                )
                logger.info("Skipped chart-only sheet '%s'", ws.title)
                continue
            if not isinstance(ws, Worksheet):
                continue
            if self._config.skip_hidden_sheets and ws.sheet_state != "visible":
                errors.append(
                    SheetIngestError(
                        code=SheetErrorCode.W_SHEET_SKIPPED_HIDDEN,
                        message=f"Sheet '{ws.title}' is hidden; skipped.",
                        sheet_name=ws.title,
                        stage="open",
                        recoverable=True,
                    )
                )
                logger.info("Skipped hidden sheet '%s'", ws.title)
                continue
            max_row = ws.max_row or 0
            if max_row > self._config.max_rows_in_memory:
                errors.append(
                    SheetIngestError(
                        code=SheetErrorCode.W_ROWS_TRUNCATED,
                        message=(
                            f"Sheet '{ws.title}' has {max_row} rows, exceeding "
                            f"max_rows_in_memory ({self._config.max_rows_in_memory}). "
                            "Sheet skipped."
                        ),
                        sheet_name=ws.title,
                        stage="open",
                        recoverable=True,
                    )
                )
                logger.warning(
                    "Sheet '%s' exceeds max_rows_in_memory (%d > %d); skipped",
                    ws.title,
                    max_row,
                    self._config.max_rows_in_memory,
                )
                continue
            readers.append(OpenpyxlSheetReader(ws))
        return readers

    def _load_sheet(
        self,
        path: Path,
        reader: SheetReader,
        header_only: bool,
        errors: list[SheetIngestError],
    ) -> Sheet | None:
        sheet = Sheet(f"{reader.name}@{path.name}", reader.name, self._config)
        try:
            applicable = sheet.load(reader, header_only=header_only)
        except SheetIngestException as exc:
            self._record_failure(reader.name, exc, errors)
            return None
        if not applicable:
            errors.append(
                SheetIngestError(
                    code=SheetErrorCode.W_SHEET_NOT_APPLICABLE,
                    message=f"Sheet '{reader.name}' has no '##' meta line; skipped.",
                    sheet_name=reader.name,
                    row=0,
                    stage="meta",
                    recoverable=True,
                )
            )
            return None
        return sheet

    def _record_failure(
        self,
        sheet_name: str,
        exc: SheetIngestException,
        errors: list[SheetIngestError],
    ) -> None:
        if self._config.fail_fast:
            raise exc
        error = exc.with_sheet(sheet_name)
        errors.append(error)
        logger.error(
            "Sheet '%s' failed [%s] at row=%s column=%s: %s",
            sheet_name,
            error.code.value,
            error.row,
            error.column,
            error.message,
        )
