# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""CSV source table reader.

Reads quarterly export files into a :class:`SourceTable`. Header names are
stripped, cells are kept as text, and I/O or CSV errors are reported as
:class:`SourceFileError`.
"""

from __future__ import annotations

import csv
from pathlib import Path

from brandpulse.application.interfaces.source_table_reader import SourceTable
from brandpulse.domain.exceptions.brand_data import SourceFileError


def discover_source_files(directory: Path | str, *, pattern: str = "*.csv") -> list[Path]:
    """Return the files in ``directory`` matching ``pattern``, sorted by name.

    Raises:
        SourceFileError: If ``directory`` does not exist.
    """
    root = Path(directory)
    if not root.is_dir():
        raise SourceFileError(
            f"Source directory not found: {root}",
            details={"path": str(root)},
        )
    return sorted((p for p in root.glob(pattern) if p.is_file()), key=lambda p: p.name)


class CsvSourceTableReader:
    """Reader for delimiter-separated source files with a header row."""

    def __init__(self, *, delimiter: str = ",", encoding: str = "utf-8-sig") -> None:
        self._delimiter = delimiter
        self._encoding = encoding

    def stat(self, path: Path) -> int:
        try:
            return path.stat().st_size
        except OSError as exc:
            raise SourceFileError(
                f"Cannot access file: {exc}",
                details={"path": str(path)},
            ) from exc

    def read(self, path: Path) -> SourceTable:
        """Read ``path``; rows with no content at all are dropped.

        Raises:
            SourceFileError: If the file cannot be read or parsed.
        """
        try:
            with path.open("r", encoding=self._encoding, newline="") as fh:
                reader = csv.reader(fh, delimiter=self._delimiter)
                header = next(reader, None)
                if header is None:
                    return SourceTable(columns=())
                columns = tuple(col.strip() for col in header)
                rows = [
                    dict(zip(columns, cells, strict=False))
                    for cells in reader
                    if any(cell.strip() for cell in cells)
                ]
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            raise SourceFileError(
                f"Cannot read source file {path.name}: {exc}",
                details={"path": str(path)},
            ) from exc
        return SourceTable(columns=columns, rows=rows)


__all__ = ["CsvSourceTableReader", "discover_source_files"]
