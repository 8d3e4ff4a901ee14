# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Application Interface: Source Table Reader.

Synopsis:
    Reads one quarterly source file as a header plus text rows keyed by
    column name.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class SourceTable:
    """Header and rows of a tabular source file.

    Attributes:
        columns: Header names, stripped, in file order.
        rows: One mapping per data row; missing cells are absent or blank.
    """

    columns: tuple[str, ...]
    rows: Sequence[Mapping[str, str]] = field(default_factory=tuple)


class SourceTableReader(Protocol):
    """Reader for tabular source files."""

    def stat(self, path: Path) -> int:
        """Return the size of ``path`` in bytes.

        Raises:
            SourceFileError: If the file cannot be accessed.
        """

    def read(self, path: Path) -> SourceTable:
        """Read ``path``.

        Raises:
            SourceFileError: If the file cannot be read or parsed.
        """
