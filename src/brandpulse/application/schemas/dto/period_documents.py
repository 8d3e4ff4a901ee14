# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Application DTOs for period documents and the period index.

Synopsis:
    Pydantic v2 models of the JSON artifacts exchanged between the build phase
    and the serve phase. Wire keys are camelCase; every metric key is always
    present in a serialized record, ``null`` meaning "not measured".

Notes:
    - Reading is tolerant: unknown keys are ignored, and a period document only
      needs ``periodKey`` and a ``records`` list. Missing counts are derived
      from the records.

Layer:
    application/schemas/dto
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field, field_validator

from brandpulse.application.schemas.dto.base import BaseDTO
from brandpulse.domain.entities.metric_record import MetricRecord
from brandpulse.domain.entities.period_document import PeriodDocument, PeriodIndex, SnapshotRecord
from brandpulse.domain.services.period_keys import UNKNOWN_PERIOD, normalize_period_key


class SnapshotRecordDTO(BaseDTO):
    """One matched row of a period document."""

    model_config = ConfigDict(extra="ignore")

    entity_id: str = Field(alias="entityId", min_length=1)
    entity_name_as_matched: str = Field(alias="entityNameAsMatched")
    source_entity_id: str = Field(default="", alias="sourceEntityId")
    source_category: str = Field(default="", alias="sourceCategory")
    metrics: dict[str, float | None] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, record: SnapshotRecord) -> SnapshotRecordDTO:
        return cls(
            entity_id=record.brand_id,
            entity_name_as_matched=record.brand_name,
            source_entity_id=record.source_brand_id,
            source_category=record.source_category,
            metrics=record.metrics.to_dict(),
        )

    def to_domain(self) -> SnapshotRecord:
        return SnapshotRecord(
            brand_id=self.entity_id,
            brand_name=self.entity_name_as_matched,
            source_brand_id=self.source_entity_id,
            source_category=self.source_category,
            metrics=MetricRecord.from_mapping(self.metrics),
        )


class PeriodDocumentDTO(BaseDTO):
    """Serialized :class:`PeriodDocument` (``<PERIOD>.json``)."""

    model_config = ConfigDict(extra="ignore")

    period_key: str = Field(alias="periodKey", min_length=1)
    source_file_name: str = Field(default="", alias="sourceFileName")
    generated_at: datetime | None = Field(default=None, alias="generatedAt")
    total_row_count: int | None = Field(default=None, alias="totalRowCount", ge=0)
    matched_count: int | None = Field(default=None, alias="matchedCount", ge=0)
    unmatched_names: list[str] = Field(default_factory=list, alias="unmatchedNames")
    records: list[SnapshotRecordDTO]

    @field_validator("period_key")
    @classmethod
    def _normalize_key(cls, value: str) -> str:
        return normalize_period_key(value)

    @classmethod
    def from_domain(cls, document: PeriodDocument) -> PeriodDocumentDTO:
        return cls(
            period_key=document.period_key,
            source_file_name=document.source_file,
            generated_at=document.generated_at,
            total_row_count=document.total_row_count,
            matched_count=document.matched_count,
            unmatched_names=list(document.unmatched_names),
            records=[SnapshotRecordDTO.from_domain(r) for r in document.records],
        )

    def to_domain(self) -> PeriodDocument:
        """Convert to the domain entity.

        An absent ``matchedCount`` defaults to the number of records and an
        absent ``totalRowCount`` to the matched count.

        Raises:
            ValueError: If the counts are inconsistent with the records.
        """
        matched = len(self.records) if self.matched_count is None else self.matched_count
        total = matched if self.total_row_count is None else self.total_row_count
        return PeriodDocument(
            period_key=self.period_key,
            source_file=self.source_file_name,
            generated_at=self.generated_at,
            total_row_count=total,
            matched_count=matched,
            unmatched_names=tuple(self.unmatched_names),
            records=tuple(r.to_domain() for r in self.records),
        )

    def to_wire(self) -> dict[str, Any]:
        """Return the camelCase JSON-compatible payload."""
        return self.model_dump(mode="json", by_alias=True)


class PeriodIndexDTO(BaseDTO):
    """Serialized :class:`PeriodIndex` (``index.json``)."""

    model_config = ConfigDict(extra="ignore")

    periods: list[str]
    period_source_files: dict[str, str] = Field(default_factory=dict, alias="periodSourceFiles")
    generated_at: datetime | None = Field(default=None, alias="generatedAt")
    total_periods: int | None = Field(default=None, alias="totalPeriods", ge=0)

    @classmethod
    def from_domain(cls, index: PeriodIndex) -> PeriodIndexDTO:
        return cls(
            periods=list(index.periods),
            period_source_files=dict(index.period_source_files),
            generated_at=index.generated_at,
            total_periods=index.total_periods,
        )

    def to_domain(self) -> PeriodIndex:
        """Convert to the domain entity; keys are normalized, sorted and de-duplicated."""
        return PeriodIndex.from_periods(
            {normalize_period_key(p): self.period_source_files.get(p, "") for p in self.periods},
            generated_at=self.generated_at,
            exclude=(UNKNOWN_PERIOD,),
        )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


__all__ = ["PeriodDocumentDTO", "PeriodIndexDTO", "SnapshotRecordDTO"]
