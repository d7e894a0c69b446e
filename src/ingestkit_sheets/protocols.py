"""Collaborator protocols for the ingestkit-sheets pipeline.

The raw spreadsheet reader and the typed value decoder live outside this
package.  Both are structural-subtyping interfaces; they are
``@runtime_checkable`` so callers can optionally verify conformance with
``isinstance`` checks.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ingestkit_sheets.models import MergeRange
    from ingestkit_sheets.named_row import NamedRow


@runtime_checkable
class SheetReader(Protocol):
    """Sequential access to the physical rows of one sheet."""

    @property
    def name(self) -> str:
        """Sheet name used in diagnostics."""
        ...

    def iter_rows(self) -> Iterable[Sequence[Any]]:
        """Yield physical rows in order, starting with the meta line (row 0)."""
        ...

    def merge_ranges(self) -> Sequence[MergeRange]:
        """Return merged rectangles in 0-based physical coordinates."""
        ...


@runtime_checkable
class RecordDecoder(Protocol):
    """Turns a bound row view into a strongly-typed value."""

    def decode(self, row: NamedRow, type_descriptor: Any) -> Any:
        """Decode *row* according to *type_descriptor*."""
        ...
