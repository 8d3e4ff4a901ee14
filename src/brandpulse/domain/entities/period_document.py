# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Period document and period index domain entities.

Purpose:
    Immutable representation of the build artifacts: one ``PeriodDocument``
    per quarterly source file and one ``PeriodIndex`` listing every queryable
    period.

Layer:
    domain/entities

Notes:
    - Documents are created once per build run and never mutated; a period is
      "updated" only by rebuilding and replacing its file.
    - Only matched rows become ``SnapshotRecord`` instances; unmatched names
      are kept as plain strings for auditing.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from brandpulse.domain.entities.metric_record import MetricRecord
from brandpulse.domain.services.period_keys import UNKNOWN_PERIOD


@dataclass(frozen=True)
class SnapshotRecord:
    """One matched source row.

    Attributes:
        brand_id: Registry id of the matched brand.
        brand_name: Registry display name of the matched brand.
        source_brand_id: The row's own brand identifier column.
        source_category: The row's category column.
        metrics: Parsed metrics for the row.
    """

    brand_id: str
    brand_name: str
    source_brand_id: str
    source_category: str
    metrics: MetricRecord


@dataclass(frozen=True)
class PeriodDocument:
    """All matched records extracted from one source file for one period.

    Attributes:
        period_key: Normalized period key (``YYYYQ#``), or ``UNKNOWN``.
        source_file: Base name of the source file.
        generated_at: Build timestamp (UTC); ``None`` when the document omits it.
        total_row_count: Data rows read from the source file.
        matched_count: Number of records (rows matched to the registry).
        unmatched_names: Source brand names with no registry match,
            deduplicated, in first-seen order.
        records: Matched records in source order.
    """

    period_key: str
    source_file: str
    generated_at: datetime | None
    total_row_count: int
    matched_count: int
    unmatched_names: tuple[str, ...] = ()
    records: tuple[SnapshotRecord, ...] = ()

    def __post_init__(self) -> None:
        """Enforce ``matched_count == len(records) <= total_row_count``."""
        if self.matched_count != len(self.records):
            raise ValueError(
                "PeriodDocument.matched_count must equal the number of records "
                f"({self.matched_count} != {len(self.records)}).",
            )
        if self.matched_count > self.total_row_count:
            raise ValueError(
                "PeriodDocument.matched_count cannot exceed total_row_count "
                f"({self.matched_count} > {self.total_row_count}).",
            )

    def find_record(self, brand_id: str) -> SnapshotRecord | None:
        """Return the record for ``brand_id``, or ``None`` if absent."""
        for record in self.records:
            if record.brand_id == brand_id:
                return record
        return None

    def brand_ids(self) -> list[str]:
        """Return brand ids present in this period, in record order."""
        return [record.brand_id for record in self.records]

    @property
    def match_rate(self) -> float:
        """Matched rows over total rows (``0.0`` for an empty file)."""
        if self.total_row_count == 0:
            return 0.0
        return self.matched_count / self.total_row_count


@dataclass(frozen=True)
class PeriodIndex:
    """Master list of queryable periods.

    Attributes:
        periods: Sorted, unique period keys. Never contains ``UNKNOWN``.
        period_source_files: Period key -> source file name.
        generated_at: Build timestamp (UTC).
    """

    periods: tuple[str, ...]
    period_source_files: Mapping[str, str] = field(default_factory=dict)
    generated_at: datetime | None = None

    def __post_init__(self) -> None:
        """Enforce sorted, duplicate-free periods without the unknown sentinel."""
        if UNKNOWN_PERIOD in self.periods:
            raise ValueError(f"PeriodIndex.periods must not contain {UNKNOWN_PERIOD!r}.")
        if len(set(self.periods)) != len(self.periods):
            raise ValueError("PeriodIndex.periods must not contain duplicates.")
        if list(self.periods) != sorted(self.periods):
            raise ValueError("PeriodIndex.periods must be sorted ascending.")

    @property
    def total_periods(self) -> int:
        return len(self.periods)

    def __contains__(self, period_key: object) -> bool:
        return period_key in self.periods

    @classmethod
    def from_periods(
        cls,
        period_source_files: Mapping[str, str],
        *,
        generated_at: datetime | None = None,
        exclude: Sequence[str] = (),
    ) -> PeriodIndex:
        """Build an index from a period -> source file mapping.

        Args:
            period_source_files: Mapping of period keys to source files.
            generated_at: Build timestamp.
            exclude: Keys to leave out (e.g. the unknown-period sentinel).
        """
        kept = {k: v for k, v in period_source_files.items() if k not in exclude}
        return cls(
            periods=tuple(sorted(kept)),
            period_source_files=dict(sorted(kept.items())),
            generated_at=generated_at,
        )


__all__ = ["PeriodDocument", "PeriodIndex", "SnapshotRecord"]
