# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Validation of quarterly source tables.

Purpose:
    Classify problems found in a source file into errors (the file cannot be
    used) and warnings (the file is used, the affected cells or rows are
    dropped or stored as "not measured").

Layer:
    domain/services

Notes:
    - Pure functions over already-read data: file size, header, rows.
    - Duplicate detection uses normalized names, the same comparison the
      builder uses to keep only the first occurrence.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Final

from brandpulse.domain.services.metric_parsing import is_invalid_metric_cell, parse_metric_value
from brandpulse.domain.services.metric_schema import METRIC_NAMES, is_out_of_range
from brandpulse.domain.services.name_matcher import normalize_name

BRAND_NAME_COLUMN: Final[str] = "Brand name"
BRAND_ID_COLUMN: Final[str] = "Brand id"
CATEGORY_COLUMN: Final[str] = "Category"

REQUIRED_COLUMNS: Final[tuple[str, ...]] = (
    BRAND_NAME_COLUMN,
    BRAND_ID_COLUMN,
    CATEGORY_COLUMN,
    "Total_Users_pct",
    "Total_Prefer_pct",
)

DEFAULT_LARGE_FILE_BYTES: Final[int] = 10 * 1024 * 1024

_EXAMPLE_ROWS: Final[int] = 5
_MAX_LISTED_DUPLICATES: Final[int] = 5


@dataclass
class ValidationResult:
    """Errors and warnings collected for one source file."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def merge(self, other: ValidationResult) -> ValidationResult:
        """Append ``other``'s findings to this result and return it."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self


def validate_source_file(size_bytes: int, *, large_file_bytes: int = DEFAULT_LARGE_FILE_BYTES) -> ValidationResult:
    """Check the size of a source file.

    An empty file is an error; a file larger than ``large_file_bytes`` only
    produces a warning.
    """
    result = ValidationResult()
    if size_bytes == 0:
        result.errors.append("Source file is empty")
    elif size_bytes > large_file_bytes:
        size_mb = size_bytes / (1024 * 1024)
        result.warnings.append(f"Large file size: {size_mb:.2f}MB (may take longer to process)")
    return result


def validate_source_columns(columns: Sequence[str]) -> ValidationResult:
    """Check that every required column is present in the header."""
    result = ValidationResult()
    present = set(columns)
    missing = [col for col in REQUIRED_COLUMNS if col not in present]
    if missing:
        result.errors.append(f"Missing required columns: {', '.join(missing)}")
    return result


def validate_source_rows(rows: Sequence[Mapping[str, Any]]) -> ValidationResult:
    """Check row content.

    Produces an error for a table without data rows, and warnings for blank
    brand names, non-numeric metric cells, percentages outside ``[0, 100]``
    and duplicate brand names. Row numbers are 1-based data row positions.
    """
    result = ValidationResult()
    if not rows:
        result.errors.append("Source file has no data rows")
        return result

    blank_rows: list[int] = []
    invalid_cells = 0
    seen: set[str] = set()
    duplicates: list[str] = []

    for row_number, row in enumerate(rows, start=1):
        raw_name = row.get(BRAND_NAME_COLUMN)
        name = raw_name.strip() if isinstance(raw_name, str) else ""
        if not name:
            blank_rows.append(row_number)
        else:
            key = normalize_name(name)
            if key in seen and name not in duplicates:
                duplicates.append(name)
            seen.add(key)

        for metric in METRIC_NAMES:
            raw = row.get(metric)
            if is_invalid_metric_cell(raw):
                invalid_cells += 1
                result.warnings.append(f'Row {row_number}: Invalid numeric value for {metric}: "{raw}"')
                continue
            value = parse_metric_value(raw)
            if value is not None and is_out_of_range(metric, value):
                result.warnings.append(
                    f"Row {row_number}: {metric} value {value:g} is outside expected range [0-100]"
                )

    if blank_rows:
        result.warnings.append(f"{len(blank_rows)} rows have empty brand names (will be skipped)")
        examples = ", ".join(str(n) for n in blank_rows[:_EXAMPLE_ROWS])
        suffix = "..." if len(blank_rows) > _EXAMPLE_ROWS else ""
        result.warnings.append(f"  Example rows: {examples}{suffix}")

    if invalid_cells:
        result.warnings.append(f"{invalid_cells} invalid metric values detected (will be stored as null)")

    if duplicates:
        result.warnings.append(
            f"{len(duplicates)} duplicate brand names found (only first occurrence will be used)"
        )
        if len(duplicates) <= _MAX_LISTED_DUPLICATES:
            result.warnings.append(f"  Duplicates: {', '.join(duplicates)}")

    return result


__all__ = [
    "BRAND_ID_COLUMN",
    "BRAND_NAME_COLUMN",
    "CATEGORY_COLUMN",
    "DEFAULT_LARGE_FILE_BYTES",
    "REQUIRED_COLUMNS",
    "ValidationResult",
    "validate_source_columns",
    "validate_source_file",
    "validate_source_rows",
]
