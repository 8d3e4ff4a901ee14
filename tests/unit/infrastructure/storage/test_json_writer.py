from __future__ import annotations

import json
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import pytest

from brandpulse.domain.entities.brand import Brand
from brandpulse.domain.entities.period_document import PeriodDocument, PeriodIndex
from brandpulse.domain.exceptions.brand_data import DocumentWriteError
from brandpulse.infrastructure.storage.json_writer import JsonPeriodDocumentWriter

FIXED_NOW = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)


def test_period_document_written_in_wire_format(
    tmp_path: Path, brands: list[Brand], make_document: Callable[..., PeriodDocument]
) -> None:
    document = make_document("2012Q1", [(brands[0], {"Total_Users_pct": 61.18})], unmatched=["Pepsi"])
    writer = JsonPeriodDocumentWriter(tmp_path / "out")

    path = writer.write_period(document)

    assert path == tmp_path / "out" / "2012Q1.json"
    text = path.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    payload = json.loads(text)
    assert payload["periodKey"] == "2012Q1"
    assert payload["unmatchedNames"] == ["Pepsi"]
    assert payload["records"][0]["entityId"] == "b-7up"
    assert payload["records"][0]["metrics"]["Total_Users_pct"] == 61.18
    assert payload["records"][0]["metrics"]["Total_Prefer_pct"] is None
    assert [p.name for p in path.parent.iterdir()] == ["2012Q1.json"]


def test_unknown_period_goes_to_unindexed(
    tmp_path: Path, make_document: Callable[..., PeriodDocument]
) -> None:
    document = make_document("UNKNOWN")

    path = JsonPeriodDocumentWriter(tmp_path).write_unindexed(document)

    assert path == tmp_path / "unindexed" / "UNKNOWN-Table 1.json"
    assert json.loads(path.read_text(encoding="utf-8"))["periodKey"] == "UNKNOWN"


def test_index_written(tmp_path: Path) -> None:
    index = PeriodIndex.from_periods(
        {"2012Q1": "2012Q1.csv", "2010Q3": "2010Q3.csv"}, generated_at=FIXED_NOW
    )

    path = JsonPeriodDocumentWriter(tmp_path).write_index(index)

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert path.name == "index.json"
    assert payload["periods"] == ["2010Q3", "2012Q1"]
    assert payload["totalPeriods"] == 2


def test_rewrite_replaces_previous_file(
    tmp_path: Path, brands: list[Brand], make_document: Callable[..., PeriodDocument]
) -> None:
    writer = JsonPeriodDocumentWriter(tmp_path)
    writer.write_period(make_document("2012Q1", [(brands[0], {"Fun_pct": 1.0})]))
    path = writer.write_period(make_document("2012Q1", [(brands[0], {"Fun_pct": 2.0})]))

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["records"][0]["metrics"]["Fun_pct"] == 2.0


def test_unwritable_output_raises_write_error(
    tmp_path: Path, make_document: Callable[..., PeriodDocument]
) -> None:
    blocker = tmp_path / "out"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(DocumentWriteError) as excinfo:
        JsonPeriodDocumentWriter(blocker).write_period(make_document("2012Q1"))

    assert excinfo.value.details["path"].endswith("2012Q1.json")
