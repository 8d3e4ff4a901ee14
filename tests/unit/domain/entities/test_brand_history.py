from __future__ import annotations

import pytest

from brandpulse.domain.entities.brand import Brand
from brandpulse.domain.entities.brand_history import BrandHistory, CoverageReport
from brandpulse.domain.entities.metric_record import MetricRecord

BRAND = Brand(id="b-1", name="One")


def test_history_from_metrics_sorts_periods() -> None:
    history = BrandHistory.from_metrics(
        BRAND,
        {"2012Q2": MetricRecord(), "2010Q3": MetricRecord(), "2011Q1": MetricRecord()},
    )

    assert history.available_periods == ("2010Q3", "2011Q1", "2012Q2")
    assert list(history.metrics_by_period) == ["2010Q3", "2011Q1", "2012Q2"]
    assert history.latest_period == "2012Q2"
    assert history.has_data


def test_history_without_data() -> None:
    history = BrandHistory.from_metrics(BRAND, {})

    assert history.available_periods == ()
    assert history.latest_period is None
    assert not history.has_data


def test_history_rejects_inconsistent_periods() -> None:
    with pytest.raises(ValueError):
        BrandHistory(
            brand=BRAND,
            metrics_by_period={"2012Q1": MetricRecord()},
            available_periods=("2012Q1", "2012Q2"),
            latest_period="2012Q2",
        )


def test_coverage_percent() -> None:
    report = CoverageReport.compute("b-1", total_periods_in_system=8, available_periods=["2012Q1", "2010Q3"])

    assert report.periods_with_data == 2
    assert report.coverage_percent == pytest.approx(25.0)
    assert report.earliest_period == "2010Q3"
    assert report.latest_period == "2012Q1"


def test_coverage_is_zero_for_empty_system() -> None:
    report = CoverageReport.compute("b-1", total_periods_in_system=0, available_periods=[])

    assert report.coverage_percent == 0.0
    assert report.earliest_period is None
    assert report.latest_period is None
