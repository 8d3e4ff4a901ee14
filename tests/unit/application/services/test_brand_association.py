from __future__ import annotations

import threading
from collections.abc import Callable

import pytest

from brandpulse.application.services.brand_association import BrandAssociationService
from brandpulse.domain.entities.brand import Brand
from brandpulse.domain.entities.period_document import PeriodDocument
from brandpulse.domain.exceptions.brand_data import BrandNotFoundError, PeriodNotFoundError
from brandpulse.infrastructure.caching.period_store import InMemoryPeriodStore
from brandpulse.infrastructure.registry.json_brand_registry import InMemoryBrandRegistry


class CountingRegistry(InMemoryBrandRegistry):
    def __init__(self, brands: list[Brand]) -> None:
        super().__init__(brands)
        self.reads = 0
        self.read_threads: list[int] = []

    def list_brands(self):  # type: ignore[no-untyped-def]
        self.reads += 1
        self.read_threads.append(threading.get_ident())
        return super().list_brands()


@pytest.fixture()
def timeline(brands: list[Brand], make_document: Callable[..., PeriodDocument]) -> list[PeriodDocument]:
    """Three quarters; Zest only appears in 2010Q3, Acme in none."""
    seven_up, _acme, coke, zest = brands
    return [
        make_document(
            "2010Q3",
            [(zest, {"Total_Users_pct": 12.5}), (coke, {"Total_Users_pct": 70.0})],
        ),
        make_document("2011Q1", [(coke, {"Total_Users_pct": 71.0})], unmatched=["Pepsi"]),
        make_document(
            "2012Q1",
            [(seven_up, {"Total_Users_pct": 61.18}), (coke, {"Total_Users_pct": 69.0})],
        ),
    ]


@pytest.fixture()
def service(
    timeline: list[PeriodDocument], document_source, brands: list[Brand]
) -> BrandAssociationService:
    store = InMemoryPeriodStore(document_source(timeline))
    return BrandAssociationService(store, InMemoryBrandRegistry(brands))


@pytest.mark.asyncio
async def test_history_lists_only_periods_with_data(service: BrandAssociationService) -> None:
    history = await service.get_history("b-coke")

    assert history.available_periods == ("2010Q3", "2011Q1", "2012Q1")
    assert history.latest_period == "2012Q1"
    assert history.metrics_by_period["2011Q1"].Total_Users_pct == 71.0


@pytest.mark.asyncio
async def test_history_restricted_to_requested_periods(service: BrandAssociationService) -> None:
    history = await service.get_history("b-coke", ["2012q1", "2010Q3", "2012Q1", "1999Q1"])

    assert history.available_periods == ("2010Q3", "2012Q1")


@pytest.mark.asyncio
async def test_compare_sparse_brand_returns_single_key(service: BrandAssociationService) -> None:
    result = await service.compare("b-zest", ["2010Q3", "2011Q1", "2012Q1"])

    assert list(result) == ["2010Q3"]
    assert result["2010Q3"].Total_Users_pct == 12.5


@pytest.mark.asyncio
async def test_compare_returns_chronological_keys(service: BrandAssociationService) -> None:
    result = await service.compare("b-coke", ["2012Q1", "2010Q3"])

    assert list(result) == ["2010Q3", "2012Q1"]


@pytest.mark.asyncio
async def test_metrics_for_period(service: BrandAssociationService) -> None:
    metrics = await service.get_metrics_for_period("b-7up", "2012Q1")

    assert metrics is not None
    assert metrics.Total_Users_pct == 61.18
    assert await service.get_metrics_for_period("b-7up", "2011Q1") is None


@pytest.mark.asyncio
async def test_metrics_presence_matches_available_periods(service: BrandAssociationService) -> None:
    periods = await service.list_periods()
    for brand_id in ("b-7up", "b-acme", "b-coke", "b-zest"):
        available = set(await service.get_available_periods(brand_id))
        for period in periods:
            metrics = await service.get_metrics_for_period(brand_id, period)
            assert (metrics is not None) == (period in available)


@pytest.mark.asyncio
async def test_brand_without_data(service: BrandAssociationService) -> None:
    assert await service.get_available_periods("b-acme") == []
    assert await service.has_any_data("b-acme") is False

    coverage = await service.get_coverage("b-acme")
    assert coverage.total_periods_in_system == 3
    assert coverage.periods_with_data == 0
    assert coverage.coverage_percent == 0.0
    assert coverage.earliest_period is None
    assert coverage.latest_period is None


@pytest.mark.asyncio
async def test_coverage_of_partial_brand(service: BrandAssociationService) -> None:
    coverage = await service.get_coverage("b-7up")

    assert coverage.available_periods == ("2012Q1",)
    assert coverage.coverage_percent == pytest.approx(100 / 3)
    assert coverage.earliest_period == coverage.latest_period == "2012Q1"


@pytest.mark.asyncio
async def test_brands_in_period(service: BrandAssociationService) -> None:
    assert await service.get_brands_in_period("2010Q3") == ["b-zest", "b-coke"]
    assert await service.get_brands_in_period("2030Q1") == []


@pytest.mark.asyncio
async def test_unknown_brand_raises(service: BrandAssociationService) -> None:
    with pytest.raises(BrandNotFoundError) as excinfo:
        await service.get_history("b-nope")

    assert excinfo.value.code == "BRAND_NOT_FOUND"


@pytest.mark.asyncio
async def test_unindexed_period_is_never_fetched(
    timeline: list[PeriodDocument], document_source, brands: list[Brand]
) -> None:
    source = document_source(timeline)
    service = BrandAssociationService(InMemoryPeriodStore(source), InMemoryBrandRegistry(brands))

    assert await service.get_metrics_for_period("b-coke", "1999Q4") is None
    assert "1999Q4.json" not in source.calls


@pytest.mark.asyncio
async def test_indexed_but_missing_document_propagates(
    timeline: list[PeriodDocument], document_source, brands: list[Brand]
) -> None:
    source = document_source(timeline)
    del source.documents["2011Q1.json"]
    service = BrandAssociationService(InMemoryPeriodStore(source), InMemoryBrandRegistry(brands))

    with pytest.raises(PeriodNotFoundError):
        await service.get_history("b-coke")


@pytest.mark.asyncio
async def test_registry_is_read_once_until_cleared(
    timeline: list[PeriodDocument], document_source, brands: list[Brand]
) -> None:
    registry = CountingRegistry(brands)
    service = BrandAssociationService(InMemoryPeriodStore(document_source(timeline)), registry)

    await service.get_history("b-coke")
    await service.get_available_periods("b-zest")
    assert registry.reads == 1

    service.clear_cache()
    await service.has_any_data("b-7up")
    assert registry.reads == 2


@pytest.mark.asyncio
async def test_registry_is_read_off_the_event_loop_thread(
    timeline: list[PeriodDocument], document_source, brands: list[Brand]
) -> None:
    registry = CountingRegistry(brands)
    service = BrandAssociationService(InMemoryPeriodStore(document_source(timeline)), registry)

    await service.get_metrics_for_period("b-7up", "2012Q1")

    assert registry.read_threads
    assert threading.get_ident() not in registry.read_threads


@pytest.mark.asyncio
async def test_first_registry_entry_wins_for_duplicate_ids(
    timeline: list[PeriodDocument], document_source
) -> None:
    registry = InMemoryBrandRegistry([Brand(id="b-coke", name="Coca-Cola"), Brand(id="b-coke", name="Coke")])
    service = BrandAssociationService(InMemoryPeriodStore(document_source(timeline)), registry)

    history = await service.get_history("b-coke")

    assert history.brand.name == "Coca-Cola"
