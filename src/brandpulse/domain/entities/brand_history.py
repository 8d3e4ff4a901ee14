# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Per-brand views over the period timeline.

Purpose:
    Views built on demand by the association service; never persisted.

Layer:
    domain/entities

Notes:
    - ``BrandHistory.metrics_by_period`` has an entry if and only if the brand
      has a record in that period. It is never padded for missing periods.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from brandpulse.domain.entities.brand import Brand
from brandpulse.domain.entities.metric_record import MetricRecord


@dataclass(frozen=True)
class BrandHistory:
    """A brand together with every snapshot it appears in.

    Attributes:
        brand: Registry entry.
        metrics_by_period: Period key -> metrics, only for periods with data.
        available_periods: Sorted keys of ``metrics_by_period``.
        latest_period: Greatest available key, or ``None`` without data.
    """

    brand: Brand
    metrics_by_period: Mapping[str, MetricRecord] = field(default_factory=dict)
    available_periods: tuple[str, ...] = ()
    latest_period: str | None = None

    def __post_init__(self) -> None:
        """Keep ``available_periods`` consistent with ``metrics_by_period``."""
        if set(self.available_periods) != set(self.metrics_by_period):
            raise ValueError(
                "BrandHistory.available_periods must match metrics_by_period keys.",
            )
        expected_latest = self.available_periods[-1] if self.available_periods else None
        if self.latest_period != expected_latest:
            raise ValueError("BrandHistory.latest_period must be the greatest available period.")

    @classmethod
    def from_metrics(cls, brand: Brand, metrics_by_period: Mapping[str, MetricRecord]) -> BrandHistory:
        """Build a history, deriving the sorted period list and latest period."""
        periods = tuple(sorted(metrics_by_period))
        return cls(
            brand=brand,
            metrics_by_period={p: metrics_by_period[p] for p in periods},
            available_periods=periods,
            latest_period=periods[-1] if periods else None,
        )

    @property
    def has_data(self) -> bool:
        return bool(self.available_periods)


@dataclass(frozen=True)
class CoverageReport:
    """Data coverage of one brand across all indexed periods.

    Attributes:
        brand_id: Registry id.
        total_periods_in_system: Number of indexed periods.
        periods_with_data: Number of periods in which the brand has a record.
        available_periods: Sorted keys of those periods.
        coverage_percent: ``periods_with_data / total_periods_in_system * 100``,
            ``0.0`` when the system has no periods.
        earliest_period: First period with data, if any.
        latest_period: Last period with data, if any.
    """

    brand_id: str
    total_periods_in_system: int
    periods_with_data: int
    available_periods: tuple[str, ...]
    coverage_percent: float
    earliest_period: str | None = None
    latest_period: str | None = None

    @classmethod
    def compute(
        cls,
        brand_id: str,
        *,
        total_periods_in_system: int,
        available_periods: tuple[str, ...] | list[str],
    ) -> CoverageReport:
        """Derive a report from the index size and the brand's periods."""
        periods = tuple(sorted(available_periods))
        with_data = len(periods)
        percent = (with_data / total_periods_in_system) * 100 if total_periods_in_system > 0 else 0.0
        return cls(
            brand_id=brand_id,
            total_periods_in_system=total_periods_in_system,
            periods_with_data=with_data,
            available_periods=periods,
            coverage_percent=percent,
            earliest_period=periods[0] if periods else None,
            latest_period=periods[-1] if periods else None,
        )


__all__ = ["BrandHistory", "CoverageReport"]
