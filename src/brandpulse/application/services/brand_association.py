# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Brand association query service.

Purpose:
    Answer per-brand questions over the period timeline: history, metrics in
    one period, available periods, comparisons and coverage.

Layer:
    application/services

Notes:
    - Absence is a normal answer. A period that is not in the index has no
      document, so it is dropped before loading and never raises.
    - A period that *is* indexed but whose document is missing or invalid is
      a broken build; the store's error propagates unchanged.
    - The registry is read once, off the event loop, and kept until
      :meth:`clear_cache`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from brandpulse.application.interfaces.brand_registry_port import BrandRegistryPort
from brandpulse.application.interfaces.period_store_port import PeriodStorePort
from brandpulse.domain.entities.brand import Brand
from brandpulse.domain.entities.brand_history import BrandHistory, CoverageReport
from brandpulse.domain.entities.metric_record import MetricRecord
from brandpulse.domain.exceptions.brand_data import BrandNotFoundError
from brandpulse.domain.services.period_keys import normalize_period_key

logger = logging.getLogger(__name__)


class BrandAssociationService:
    """Query layer joining registry brands with period documents."""

    def __init__(self, store: PeriodStorePort, registry: BrandRegistryPort) -> None:
        """Initialize the service.

        Args:
            store: Cached period document store.
            registry: Brand registry.
        """
        self._store = store
        self._registry = registry
        self._brands: dict[str, Brand] | None = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_history(self, brand_id: str, periods: Iterable[str] | None = None) -> BrandHistory:
        """Return every snapshot of ``brand_id``.

        Args:
            brand_id: Registry id.
            periods: Periods to consider; every indexed period when omitted.

        Raises:
            BrandNotFoundError: If the id is not in the registry.
        """
        brand = await self._resolve_brand(brand_id)
        keys = await self._indexed_periods(periods)
        documents = await self._store.load_periods(keys)

        metrics_by_period: dict[str, MetricRecord] = {}
        for key, document in documents.items():
            record = document.find_record(brand.id)
            if record is not None:
                metrics_by_period[key] = record.metrics

        logger.debug(
            "association.history",
            extra={
                "extra": {
                    "brand_id": brand.id,
                    "periods_checked": len(keys),
                    "periods_with_data": len(metrics_by_period),
                }
            },
        )
        return BrandHistory.from_metrics(brand, metrics_by_period)

    async def get_metrics_for_period(self, brand_id: str, period: str) -> MetricRecord | None:
        """Return the metrics of ``brand_id`` in ``period``, or ``None`` without data."""
        brand = await self._resolve_brand(brand_id)
        keys = await self._indexed_periods([period])
        if not keys:
            return None
        document = await self._store.load_period(keys[0])
        record = document.find_record(brand.id)
        return record.metrics if record is not None else None

    async def get_available_periods(self, brand_id: str) -> list[str]:
        """Return the sorted periods in which ``brand_id`` has a record."""
        history = await self.get_history(brand_id)
        return list(history.available_periods)

    async def has_any_data(self, brand_id: str) -> bool:
        return bool(await self.get_available_periods(brand_id))

    async def get_brands_in_period(self, period: str) -> list[str]:
        """Return the brand ids present in ``period`` (``[]`` for an unknown period)."""
        keys = await self._indexed_periods([period])
        if not keys:
            return []
        document = await self._store.load_period(keys[0])
        return document.brand_ids()

    async def compare(self, brand_id: str, periods: Iterable[str]) -> dict[str, MetricRecord]:
        """Return metrics of ``brand_id`` for the requested periods that have data.

        Periods without data are omitted, never padded with empty records.
        Keys are in chronological order.
        """
        history = await self.get_history(brand_id, periods)
        return dict(history.metrics_by_period)

    async def get_coverage(self, brand_id: str) -> CoverageReport:
        """Return how many indexed periods contain ``brand_id``."""
        brand = await self._resolve_brand(brand_id)
        index = await self._store.load_index()
        history = await self.get_history(brand.id)
        return CoverageReport.compute(
            brand.id,
            total_periods_in_system=index.total_periods,
            available_periods=history.available_periods,
        )

    async def list_periods(self) -> list[str]:
        """Return every indexed period, sorted."""
        return await self._store.list_available_periods()

    def clear_cache(self) -> None:
        """Forget the registry snapshot; the next query re-reads it."""
        self._brands = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _resolve_brand(self, brand_id: str) -> Brand:
        if self._brands is None:
            listed = await asyncio.to_thread(self._registry.list_brands)
            brands: dict[str, Brand] = {}
            for brand in listed:
                brands.setdefault(brand.id, brand)
            self._brands = brands
        brand = self._brands.get(brand_id)
        if brand is None:
            raise BrandNotFoundError(brand_id)
        return brand

    async def _indexed_periods(self, periods: Iterable[str] | None) -> list[str]:
        """Return requested periods that are indexed, normalized and de-duplicated.

        With ``periods=None`` every indexed period is returned.
        """
        available = await self._store.list_available_periods()
        if periods is None:
            return available
        indexed = set(available)
        requested = dict.fromkeys(normalize_period_key(p) for p in periods)
        return [key for key in requested if key in indexed]


__all__ = ["BrandAssociationService"]
