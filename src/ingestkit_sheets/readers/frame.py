"""pandas-backed sheet reader for flat sources such as CSV files."""

from __future__ import annotations

import csv
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pandas as pd

from ingestkit_sheets.models import MergeRange


def read_csv_frame(path: str | Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Read a CSV file into a header-less, all-object DataFrame.

    Rows may have different field counts (the meta line is usually short),
    so the frame is widened to the longest row.  Empty fields become NaN and
    blank lines are kept so row numbers match the file.
    """
    with open(path, newline="", encoding=encoding) as fh:
        width = max((len(r) for r in csv.reader(fh)), default=0)
    return pd.read_csv(
        path,
        header=None,
        names=list(range(width)),
        dtype=object,
        keep_default_na=False,
        na_values=[""],
        skip_blank_lines=False,
        encoding=encoding,
    )


class DataFrameSheetReader:
    """Adapt a header-less :class:`pandas.DataFrame` to the ``SheetReader`` protocol.

    The frame must be read without a header row (``header=None``) so that
    its first row is the meta line.  Missing values (NaN / NaT) become
    ``None``.  Flat sources have no merged cells.
    """

    def __init__(self, name: str, frame: pd.DataFrame) -> None:
        self._name = name
        self._frame = frame

    @property
    def name(self) -> str:
        return self._name

    def iter_rows(self) -> Iterator[list[Any]]:
        for values in self._frame.itertuples(index=False, name=None):
            yield [None if pd.isna(v) else v for v in values]

    def merge_ranges(self) -> list[MergeRange]:
        return []
