from __future__ import annotations

import pytest

from brandpulse.domain.enums.metrics import MetricCategory, MetricKind
from brandpulse.domain.services.metric_schema import (
    METRIC_NAMES,
    METRIC_SCHEMA,
    PERCENT_METRIC_NAMES,
    get_metric_spec,
    is_metric_name,
    is_out_of_range,
    metric_kind_for,
    metrics_in_category,
)


def test_schema_counts_by_kind() -> None:
    kinds = [spec.kind for spec in METRIC_SCHEMA]
    assert kinds.count(MetricKind.PERCENT) == 68
    assert kinds.count(MetricKind.COMPOSITE) == 15
    assert kinds.count(MetricKind.SHARE) == 1
    assert len(set(METRIC_NAMES)) == len(METRIC_NAMES)
    assert len(PERCENT_METRIC_NAMES) == 68


def test_kind_follows_suffix() -> None:
    assert metric_kind_for("Total_Users_pct") is MetricKind.PERCENT
    assert metric_kind_for("Esteem_C") is MetricKind.COMPOSITE
    assert metric_kind_for("Regard_MS") is MetricKind.SHARE
    with pytest.raises(ValueError):
        metric_kind_for("Brand name")


def test_lookup_helpers() -> None:
    spec = get_metric_spec("Brand_Stature_C")
    assert spec.category is MetricCategory.BRAND_EQUITY
    assert spec.unit == ""
    assert get_metric_spec("Fun_pct").unit == "%"
    assert is_metric_name("Fun_pct")
    assert not is_metric_name("Brand id")
    with pytest.raises(KeyError):
        get_metric_spec("Brand id")


def test_every_category_has_metrics() -> None:
    for category in MetricCategory:
        assert metrics_in_category(category), category
    assert [s.name for s in metrics_in_category(MetricCategory.ADDITIONAL)] == ["Regard_MS"]


def test_range_applies_to_percentages_only() -> None:
    assert is_out_of_range("Total_Users_pct", 100.5)
    assert is_out_of_range("Total_Users_pct", -0.1)
    assert not is_out_of_range("Total_Users_pct", 0.0)
    assert not is_out_of_range("Total_Users_pct", 100.0)
    assert not is_out_of_range("Esteem_C", 250.0)
    assert not is_out_of_range("Regard_MS", -3.0)
