"""Normalized error codes, structured error model and raisable exceptions.

The core never formats diagnostics into opaque strings only: every failure
carries a :class:`SheetErrorCode` plus the row, column and field name that
triggered it, so callers can localize or aggregate diagnostics.

``SheetIngestError`` is the data model (serializable, collected by the
workbook loader).  ``SheetIngestException`` and its subclasses wrap that model
for ``raise``/``except`` control flow.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class SheetErrorCode(str, Enum):
    """Normalized error codes for the ingestkit-sheets pipeline.

    Codes prefixed with ``E_`` are errors and terminal for the sheet or record
    that raised them; codes prefixed with ``W_`` are non-fatal warnings that
    only the workbook loader emits.
    """

    # Structural errors
    E_META_INVALID = "E_META_INVALID"
    E_SHEET_EMPTY = "E_SHEET_EMPTY"
    E_NO_FIELDS = "E_NO_FIELDS"
    E_NO_COLUMNS = "E_NO_COLUMNS"
    E_TITLE_DUPLICATE = "E_TITLE_DUPLICATE"

    # Record errors
    E_COLUMN_MISSING = "E_COLUMN_MISSING"
    E_MULTI_ROW_VALUE = "E_MULTI_ROW_VALUE"

    # File errors
    E_PARSE_OPEN_FAIL = "E_PARSE_OPEN_FAIL"

    # Warnings (non-fatal)
    W_SHEET_NOT_APPLICABLE = "W_SHEET_NOT_APPLICABLE"
    W_SHEET_SKIPPED_HIDDEN = "W_SHEET_SKIPPED_HIDDEN"
    W_SHEET_SKIPPED_CHART = "W_SHEET_SKIPPED_CHART"
    W_ROWS_TRUNCATED = "W_ROWS_TRUNCATED"


class SheetIngestError(BaseModel):
    """Structured error with code, message, and cell-level context.

    ``row`` is the physical row of the source sheet (row 0 is the meta line)
    and ``column`` the 0-based physical column, when known.
    """

    code: SheetErrorCode
    message: str
    sheet_name: str | None = None
    row: int | None = None
    column: int | None = None
    field_name: str | None = None
    stage: str | None = None
    recoverable: bool = False


class SheetIngestException(Exception):
    """Raisable exception wrapping a :class:`SheetIngestError`.

    Subclasses pin ``default_code`` so call sites only pass context.  The
    structured model is available as ``.error``.
    """

    default_code: SheetErrorCode | None = None

    def __init__(self, message: str, **kwargs: object) -> None:
        if "code" not in kwargs:
            kwargs["code"] = self.default_code
        self.error = SheetIngestError(message=message, **kwargs)  # type: ignore[arg-type]
        super().__init__(self.error.message)

    @property
    def code(self) -> SheetErrorCode:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def row(self) -> int | None:
        return self.error.row

    @property
    def column(self) -> int | None:
        return self.error.column

    @property
    def field_name(self) -> str | None:
        return self.error.field_name

    def with_sheet(self, sheet_name: str) -> SheetIngestError:
        """Return a copy of the error model tagged with *sheet_name*."""
        return self.error.model_copy(update={"sheet_name": sheet_name})


class InvalidMetaError(SheetIngestException):
    """Malformed or unrecognized meta directive on row 0."""

    default_code = SheetErrorCode.E_META_INVALID


class EmptySheetError(SheetIngestException):
    """The sheet has no physical rows after the meta line."""

    default_code = SheetErrorCode.E_SHEET_EMPTY


class NoFieldsDefinedError(SheetIngestException):
    """The field-name row has no column beyond the row tag column."""

    default_code = SheetErrorCode.E_NO_FIELDS


class NoColumnsDefinedError(SheetIngestException):
    """Header processing produced no titles at all."""

    default_code = SheetErrorCode.E_NO_COLUMNS


class DuplicateTitleError(SheetIngestException):
    """The same title name claims two different column ranges."""

    default_code = SheetErrorCode.E_TITLE_DUPLICATE


class MissingColumnError(SheetIngestException):
    """A decoder asked for a field that the title tree does not define."""

    default_code = SheetErrorCode.E_COLUMN_MISSING


class UnexpectedMultiRowValueError(SheetIngestException):
    """A single-row field carries data on a continuation row."""

    default_code = SheetErrorCode.E_MULTI_ROW_VALUE
