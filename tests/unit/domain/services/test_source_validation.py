from __future__ import annotations

from brandpulse.domain.services.source_validation import (
    REQUIRED_COLUMNS,
    validate_source_columns,
    validate_source_file,
    validate_source_rows,
)


def _row(name: str, **metrics: str) -> dict[str, str]:
    return {"Brand name": name, "Brand id": "1", "Category": "Cat", **metrics}


def test_file_size_checks() -> None:
    empty = validate_source_file(0)
    assert not empty.is_valid
    assert empty.errors == ["Source file is empty"]

    large = validate_source_file(11 * 1024 * 1024)
    assert large.is_valid
    assert large.warnings and large.warnings[0].startswith("Large file size: 11.00MB")

    assert validate_source_file(100, large_file_bytes=50).warnings


def test_missing_required_columns() -> None:
    result = validate_source_columns(["Brand name", "Category", "Total_Users_pct"])

    assert not result.is_valid
    assert result.errors == ["Missing required columns: Brand id, Total_Prefer_pct"]
    assert validate_source_columns(list(REQUIRED_COLUMNS)).is_valid


def test_no_rows_is_an_error() -> None:
    result = validate_source_rows([])
    assert not result.is_valid


def test_blank_names_reported_with_example_rows() -> None:
    rows = [_row("")] * 7 + [_row("Acme")]
    result = validate_source_rows(rows)

    assert result.is_valid
    assert "7 rows have empty brand names (will be skipped)" in result.warnings
    assert "  Example rows: 1, 2, 3, 4, 5..." in result.warnings


def test_invalid_numbers_and_range_warnings() -> None:
    rows = [
        _row("Acme", Total_Users_pct="abc", Total_Prefer_pct="101.5"),
        _row("Zest", Total_Users_pct="-1", Esteem_C="900"),
    ]
    result = validate_source_rows(rows)

    assert 'Row 1: Invalid numeric value for Total_Users_pct: "abc"' in result.warnings
    assert "Row 1: Total_Prefer_pct value 101.5 is outside expected range [0-100]" in result.warnings
    assert "Row 2: Total_Users_pct value -1 is outside expected range [0-100]" in result.warnings
    assert "1 invalid metric values detected (will be stored as null)" in result.warnings
    assert not any("Esteem_C" in w for w in result.warnings)


def test_duplicates_listed_when_few() -> None:
    rows = [_row("Acme"), _row("ACME "), _row("Zest"), _row("Zest"), _row("Zest")]
    result = validate_source_rows(rows)

    assert "2 duplicate brand names found (only first occurrence will be used)" in result.warnings
    assert "  Duplicates: ACME, Zest" in result.warnings


def test_duplicates_not_listed_when_many() -> None:
    rows = [_row(f"B{i}") for i in range(6)] * 2
    result = validate_source_rows(rows)

    assert "6 duplicate brand names found (only first occurrence will be used)" in result.warnings
    assert not any(w.startswith("  Duplicates:") for w in result.warnings)
