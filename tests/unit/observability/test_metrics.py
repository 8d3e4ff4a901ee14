from __future__ import annotations

import prometheus_client as prom
import pytest

from brandpulse.infrastructure.observability import metrics
from brandpulse.infrastructure.observability.build_observer import PrometheusBuildObserver


def test_accessors_return_stable_collectors() -> None:
    assert metrics.get_build_rows_total() is metrics.get_build_rows_total()
    assert metrics.get_period_store_load_seconds() is metrics.get_period_store_load_seconds()


def test_accessors_follow_registry_swap(monkeypatch: pytest.MonkeyPatch) -> None:
    first = metrics.get_period_store_requests_total()

    monkeypatch.setattr(prom, "REGISTRY", prom.CollectorRegistry(auto_describe=True))
    second = metrics.get_period_store_requests_total()

    assert first is not second
    second.labels(outcome="hit").inc()
    assert prom.REGISTRY.get_sample_value(
        "brandpulse_period_store_requests_total", {"outcome": "hit"}
    ) == 1.0


def test_existing_collector_is_reused_after_cache_reset(monkeypatch: pytest.MonkeyPatch) -> None:
    counter = metrics.get_documents_http_status_total()
    monkeypatch.setattr(metrics, "_counter_cache", {})

    assert metrics.get_documents_http_status_total() is counter


def test_build_observer_counts_outcomes() -> None:
    observer = PrometheusBuildObserver()

    for outcome in ("matched", "matched", "unmatched", "blank", "duplicate"):
        observer.row(outcome)  # type: ignore[arg-type]
    observer.file("processed")
    observer.file("skipped")

    sample = prom.REGISTRY.get_sample_value
    assert sample("brandpulse_build_rows_total", {"outcome": "matched"}) == 2.0
    assert sample("brandpulse_build_rows_total", {"outcome": "duplicate"}) == 1.0
    assert sample("brandpulse_build_files_total", {"outcome": "skipped"}) == 1.0
