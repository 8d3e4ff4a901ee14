# tests/conftest.py
from __future__ import annotations

import asyncio
import csv
from collections.abc import Callable, Iterator, Mapping, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import prometheus_client as prom
import pytest

from brandpulse.application.schemas.dto.period_documents import PeriodDocumentDTO, PeriodIndexDTO
from brandpulse.config.settings import get_settings
from brandpulse.domain.entities.brand import Brand
from brandpulse.domain.entities.metric_record import MetricRecord
from brandpulse.domain.entities.period_document import PeriodDocument, PeriodIndex, SnapshotRecord
from brandpulse.domain.exceptions.brand_data import DocumentNotFoundError
from brandpulse.domain.services.metric_schema import METRIC_NAMES

FIXED_NOW = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)

BASE_COLUMNS = ["Brand name", "Brand id", "Category"]


@pytest.fixture(autouse=True)
def _fresh_prometheus_registry(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Give every test its own default Prometheus registry."""
    monkeypatch.setattr(prom, "REGISTRY", prom.CollectorRegistry(auto_describe=True))
    yield


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def brands() -> list[Brand]:
    """A small registry in registry order."""
    return [
        Brand(id="b-7up", name="7UP", category="Beverages"),
        Brand(id="b-acme", name="Acme"),
        Brand(id="b-coke", name="Coca-Cola", slug="coca-cola"),
        Brand(id="b-zest", name="Zest"),
    ]


@pytest.fixture()
def write_source_csv(tmp_path: Path) -> Callable[..., Path]:
    """Write a quarterly CSV with the required columns plus any metric columns.

    Usage:
        write_source_csv("2012Q1-Table 1.csv", [{"Brand name": "7UP", "Total_Users_pct": "61.18"}])
    """

    def _write(
        filename: str,
        rows: Sequence[Mapping[str, str]],
        *,
        columns: Sequence[str] | None = None,
        directory: Path | None = None,
    ) -> Path:
        target_dir = directory or (tmp_path / "source")
        target_dir.mkdir(parents=True, exist_ok=True)
        header = list(columns) if columns is not None else BASE_COLUMNS + list(METRIC_NAMES)
        path = target_dir / filename
        with path.open("w", encoding="utf-8", newline="") as fh:
            writer = csv.DictWriter(fh, fieldnames=header, extrasaction="ignore")
            writer.writeheader()
            for row in rows:
                writer.writerow({col: row.get(col, "") for col in header})
        return path

    return _write


@pytest.fixture()
def make_document() -> Callable[..., PeriodDocument]:
    """Build a PeriodDocument holding one record per ``(brand_id, metrics)`` pair."""

    def _make(
        period_key: str,
        records: Sequence[tuple[Brand, Mapping[str, float | None]]] = (),
        *,
        total_rows: int | None = None,
        unmatched: Sequence[str] = (),
    ) -> PeriodDocument:
        snapshot = tuple(
            SnapshotRecord(
                brand_id=brand.id,
                brand_name=brand.name,
                source_brand_id=f"src-{brand.id}",
                source_category="Test",
                metrics=MetricRecord.from_mapping(metrics),
            )
            for brand, metrics in records
        )
        return PeriodDocument(
            period_key=period_key,
            source_file=f"{period_key}-Table 1.csv",
            generated_at=FIXED_NOW,
            total_row_count=total_rows if total_rows is not None else len(snapshot) + len(unmatched),
            matched_count=len(snapshot),
            unmatched_names=tuple(unmatched),
            records=snapshot,
        )

    return _make


class InMemoryDocumentSource:
    """Document source over a dict, counting fetches per name."""

    def __init__(self, documents: Mapping[str, Any] | None = None, *, delay_s: float = 0.0) -> None:
        self.documents: dict[str, Any] = dict(documents or {})
        self.delay_s = delay_s
        self.calls: dict[str, int] = {}
        self.failures: dict[str, list[Exception]] = {}

    def fail_next(self, name: str, exc: Exception) -> None:
        self.failures.setdefault(name, []).append(exc)

    async def fetch_json(self, name: str) -> Mapping[str, Any]:
        self.calls[name] = self.calls.get(name, 0) + 1
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        pending = self.failures.get(name)
        if pending:
            raise pending.pop(0)
        if name not in self.documents:
            raise DocumentNotFoundError(f"Document not found: {name}", details={"name": name})
        return self.documents[name]


@pytest.fixture()
def document_source() -> Callable[..., InMemoryDocumentSource]:
    """Build an in-memory source publishing an index plus the given documents."""

    def _make(documents: Sequence[PeriodDocument] = (), *, delay_s: float = 0.0) -> InMemoryDocumentSource:
        index = PeriodIndex.from_periods(
            {d.period_key: d.source_file for d in documents}, generated_at=FIXED_NOW
        )
        payloads: dict[str, Any] = {"index.json": PeriodIndexDTO.from_domain(index).to_wire()}
        for document in documents:
            payloads[f"{document.period_key}.json"] = PeriodDocumentDTO.from_domain(document).to_wire()
        return InMemoryDocumentSource(payloads, delay_s=delay_s)

    return _make
