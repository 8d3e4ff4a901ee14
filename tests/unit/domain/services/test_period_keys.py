from __future__ import annotations

import pytest

from brandpulse.domain.services.period_keys import (
    UNKNOWN_PERIOD,
    extract_period_key,
    is_period_key,
    normalize_period_key,
    sort_period_keys,
)


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("2012Q1-Table 1.csv", "2012Q1"),
        ("Brand Data 2010q3.csv", "2010Q3"),
        ("export_2011Q4_2012Q1.csv", "2011Q4"),
        ("notes.csv", UNKNOWN_PERIOD),
        ("2012-Q1.csv", UNKNOWN_PERIOD),
    ],
)
def test_extract_period_key(filename: str, expected: str) -> None:
    assert extract_period_key(filename) == expected


def test_normalize_and_validate() -> None:
    assert normalize_period_key(" 2012q1 ") == "2012Q1"
    assert is_period_key("2012q1")
    assert not is_period_key("UNKNOWN")
    assert not is_period_key("12Q1")


def test_sort_period_keys_is_chronological_unique_and_drops_unknown() -> None:
    keys = ["2012Q1", "2010Q3", "2012q1", "UNKNOWN", "2011Q4"]
    assert sort_period_keys(keys) == ["2010Q3", "2011Q4", "2012Q1"]
