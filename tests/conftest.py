"""Shared test fixtures for ingestkit-sheets tests.

Provides a default config, in-memory sheet builders for the common header
layouts (flat, merged, column-major, multi-row) and a decoder that records
the views it receives.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

import pytest

from ingestkit_sheets.config import SheetLoaderConfig
from ingestkit_sheets.named_row import NamedRow
from ingestkit_sheets.readers import MemorySheetReader
from ingestkit_sheets.sheet import Sheet


# ---------------------------------------------------------------------------
# Sheet layouts
# ---------------------------------------------------------------------------

FLAT_ROWS: list[list[Any]] = [
    ["##", "orientation:row", "title_rows:3"],
    ["#", "id", "name"],
    ["##type", "int", "string"],
    ["##", "ID", "Name"],
    [None, 1, "apple"],
    [None, 2, "pear"],
]

# ``pos`` is merged over C2:D2 and owns the sub-headers x / y on the next
# line; the tag column is merged over A2:A3 to declare a two-line header band.
MERGED_ROWS: list[list[Any]] = [
    ["##"],
    ["##var", "id", "pos", None, "name"],
    [None, None, "x", "y", None],
    ["##type", "int", "float", "float", "string"],
    ["##", "ID", "X", "Y", "Name"],
    [None, 1, 1.5, 2.5, "apple"],
    [None, 2, 3.5, 4.5, "pear"],
]
MERGED_MERGES: list[tuple[int, int, int, int]] = [
    (1, 2, 0, 0),
    (1, 1, 2, 3),
]

# Same table as FLAT_ROWS, laid out with one physical row per field.
COLUMN_ROWS: list[list[Any]] = [
    ["##", "orientation:column"],
    ["#", "##type", "##", None, None],
    ["id", "int", "ID", 1, 2],
    ["name", "string", "Name", "apple", "pear"],
]

MULTI_ROWS: list[list[Any]] = [
    ["##", "title_rows:2"],
    ["##var", "id", "name", "items"],
    ["##", "ID", "Name", "Items"],
    [None, 1, "apple", "a1"],
    [None, None, None, "a2"],
    [None, 2, "pear", "p1"],
]


def build_sheet(
    rows: Sequence[Sequence[Any]],
    merges: Iterable[tuple[int, int, int, int]] = (),
    header_only: bool = False,
    config: SheetLoaderConfig | None = None,
    name: str = "Items",
    **kwargs: Any,
) -> Sheet:
    """Load an in-memory sheet, asserting it is applicable."""
    sheet = Sheet(f"{name}@items.xlsx", name, config, **kwargs)
    assert sheet.load(MemorySheetReader(name, rows, merges), header_only=header_only)
    return sheet


# ---------------------------------------------------------------------------
# Decoder
# ---------------------------------------------------------------------------


class DictDecoder:
    """Decode every root title into a list of its values.

    ``type_descriptor`` is a collection of field names that are read per
    physical row (multi-row fields); all other fields use ``column()``.
    """

    def __init__(self) -> None:
        self.views: list[NamedRow] = []

    def decode(self, row: NamedRow, type_descriptor: Any) -> dict[str, Any]:
        self.views.append(row)
        multi = set(type_descriptor or ())
        out: dict[str, Any] = {}
        for title in row.titles:
            if title.name in multi:
                out[title.name] = [list(s) for s in row.column_across_rows(title.name)]
            else:
                out[title.name] = list(row.column(title.name))
        return out


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_config() -> SheetLoaderConfig:
    """Return a SheetLoaderConfig with all defaults."""
    return SheetLoaderConfig()


@pytest.fixture()
def decoder() -> DictDecoder:
    return DictDecoder()


@pytest.fixture()
def flat_sheet() -> Sheet:
    return build_sheet(FLAT_ROWS)


@pytest.fixture()
def merged_sheet() -> Sheet:
    return build_sheet(MERGED_ROWS, MERGED_MERGES)


@pytest.fixture()
def multi_sheet() -> Sheet:
    return build_sheet(MULTI_ROWS)
