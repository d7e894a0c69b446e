"""Configuration model for the ingestkit-sheets pipeline.

Provides ``SheetLoaderConfig`` with all tunable parameters and sensible
defaults.  Supports loading overrides from YAML or JSON files via the
``from_file()`` classmethod.
"""

from __future__ import annotations

import json
import pathlib

import yaml
from pydantic import BaseModel


class SheetLoaderConfig(BaseModel):
    """All tunable parameters with sensible defaults.

    Override individual values via constructor kwargs or load a complete
    config from a file with ``SheetLoaderConfig.from_file(path)``.
    """

    # --- Identity ---
    parser_version: str = "ingestkit_sheets:1.0.0"

    # --- Header reading ---
    header_probe_rows: int = 10

    # --- Row tags (column 0) ---
    ignore_tags: list[str] = ["##"]
    test_tags: list[str] = ["test"]

    # --- Workbook loading ---
    skip_hidden_sheets: bool = True
    max_rows_in_memory: int = 100_000
    fail_fast: bool = False
    csv_encoding: str = "utf-8"

    # --- Logging / PII safety ---
    log_sample_data: bool = False

    def is_ignore_tag(self, tag: str | None) -> bool:
        """Return True if *tag* marks a row that must be dropped from the data."""
        return _tag_in(tag, self.ignore_tags)

    def is_test_tag(self, tag: str | None) -> bool:
        """Return True if *tag* marks a test-only record."""
        return _tag_in(tag, self.test_tags)

    @classmethod
    def from_file(cls, path: str) -> SheetLoaderConfig:
        """Load loader settings from a YAML or JSON mapping.

        Typical files tune the row-tag conventions of a workbook family and
        the batch behaviour, e.g.::

            ignore_tags: ["##", "skip"]
            test_tags: ["test", "qa"]
            header_probe_rows: 12
            fail_fast: true

        ``.yaml`` / ``.yml`` and ``.json`` are accepted; an empty file gives
        the defaults.

        Raises:
            FileNotFoundError: If *path* does not exist.
            ValueError: If the file extension is not recognized.
        """
        file_path = pathlib.Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        suffix = file_path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            with open(file_path) as fh:
                data = yaml.safe_load(fh)
        elif suffix == ".json":
            with open(file_path) as fh:
                data = json.load(fh)
        else:
            raise ValueError(
                f"Unsupported config file extension '{suffix}'. "
                "Use .yaml, .yml, or .json."
            )

        if data is None:
            data = {}

        return cls(**data)


def _tag_in(tag: str | None, tags: list[str]) -> bool:
    if tag is None:
        return False
    tag = tag.strip().lower()
    if not tag:
        return False
    return tag in {t.lower() for t in tags}
