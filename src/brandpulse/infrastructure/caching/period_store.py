# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""In-memory period store with single-flight loading.

Synopsis:
    Implements :class:`~brandpulse.application.interfaces.period_store_port.PeriodStorePort`
    on top of a document source. Each period document is fetched at most once
    per store instance while it stays cached; concurrent requests for the same
    uncached key share one in-flight task.

Design:
    * Per key: not requested -> loading -> cached, or -> error. Errors are
      not cached; the next request retries.
    * Pending table keyed by normalized period key. The index load is
      coalesced the same way.
    * ``clear_cache`` bumps a generation counter so loads started before the
      clear never repopulate the cache.
    * Load statistics are kept per instance and mirrored to Prometheus.

Layer:
    infrastructure/caching
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable, Mapping
from contextlib import suppress
from dataclasses import dataclass
from typing import Any, Final

from pydantic import ValidationError

from brandpulse.application.interfaces.document_source_port import DocumentSourcePort
from brandpulse.application.schemas.dto.period_documents import PeriodDocumentDTO, PeriodIndexDTO
from brandpulse.domain.entities.period_document import PeriodDocument, PeriodIndex
from brandpulse.domain.exceptions.base import DomainError
from brandpulse.domain.exceptions.brand_data import (
    DocumentDecodeError,
    DocumentNotFoundError,
    InvalidPeriodDocumentError,
    InvalidPeriodIndexError,
    PeriodNotFoundError,
)
from brandpulse.domain.services.period_keys import normalize_period_key
from brandpulse.infrastructure.logging.logger import get_json_logger
from brandpulse.infrastructure.observability.metrics import (
    get_period_store_load_seconds,
    get_period_store_requests_total,
    get_period_store_slow_loads_total,
)

__all__ = ["INDEX_DOCUMENT", "InMemoryPeriodStore", "LoadStatistics", "period_document_name"]

logger = get_json_logger(__name__)

INDEX_DOCUMENT: Final[str] = "index.json"


def period_document_name(period_key: str) -> str:
    """Return the document name of a period (``2012Q1`` -> ``2012Q1.json``)."""
    return f"{normalize_period_key(period_key)}.json"


@dataclass(frozen=True)
class LoadStatistics:
    """Snapshot of period load instrumentation.

    Attributes:
        total_requests: ``load_period`` calls.
        cache_hits: Requests served from the cache.
        cache_misses: Requests that had to wait for a fetch.
        average_load_time_s: Mean duration of completed fetches.
        slow_loads: Fetches slower than the configured threshold.
        cache_hit_rate: ``cache_hits / total_requests`` (``0.0`` without requests).
    """

    total_requests: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    average_load_time_s: float = 0.0
    slow_loads: int = 0
    cache_hit_rate: float = 0.0


class InMemoryPeriodStore:
    """Caching period store backed by a :class:`DocumentSourcePort`."""

    def __init__(
        self,
        source: DocumentSourcePort,
        *,
        slow_load_threshold_s: float = 2.0,
        summary_every: int = 10,
    ) -> None:
        """Initialize the store.

        Args:
            source: Where period documents and the index are fetched from.
            slow_load_threshold_s: Fetches slower than this are logged and counted.
            summary_every: Log a statistics summary every N completed fetches
                (``0`` disables the summary).
        """
        self._source = source
        self._slow_threshold = float(slow_load_threshold_s)
        self._summary_every = int(summary_every)

        self._documents: dict[str, PeriodDocument] = {}
        self._pending: dict[str, asyncio.Task[PeriodDocument]] = {}
        self._index: PeriodIndex | None = None
        self._index_task: asyncio.Task[PeriodIndex] | None = None
        self._generation = 0

        self._reset_statistics()

        self._requests = get_period_store_requests_total()
        self._latency = get_period_store_load_seconds()
        self._slow = get_period_store_slow_loads_total()

    # ------------------------------------------------------------------ #
    # Index
    # ------------------------------------------------------------------ #

    async def load_index(self) -> PeriodIndex:
        """Return the period index, fetching it on first use.

        Raises:
            InvalidPeriodIndexError: If the index is missing or malformed.
            DocumentSourceError: On transport failure.
        """
        if self._index is not None:
            return self._index
        task = self._index_task
        if task is None:
            task = asyncio.create_task(self._fetch_index(self._generation))
            self._index_task = task
            task.add_done_callback(self._forget_index_task)
        return await asyncio.shield(task)

    async def list_available_periods(self) -> list[str]:
        index = await self.load_index()
        return list(index.periods)

    async def _fetch_index(self, generation: int) -> PeriodIndex:
        try:
            payload = await self._source.fetch_json(INDEX_DOCUMENT)
        except DocumentNotFoundError as exc:
            raise InvalidPeriodIndexError("index document not found") from exc
        except DocumentDecodeError as exc:
            raise InvalidPeriodIndexError(str(exc)) from exc

        index = self._parse_index(payload)
        if generation == self._generation:
            self._index = index
        logger.info(
            "period_store.index_loaded",
            extra={"extra": {"total_periods": index.total_periods}},
        )
        return index

    @staticmethod
    def _parse_index(payload: Mapping[str, Any]) -> PeriodIndex:
        if not isinstance(payload, Mapping):
            raise InvalidPeriodIndexError("index payload is not an object")
        if not isinstance(payload.get("periods"), list):
            raise InvalidPeriodIndexError("index payload has no 'periods' list")
        try:
            return PeriodIndexDTO.model_validate(payload).to_domain()
        except ValueError as exc:
            raise InvalidPeriodIndexError(str(exc)) from exc

    def _forget_index_task(self, task: asyncio.Task[PeriodIndex]) -> None:
        if self._index_task is task:
            self._index_task = None
        if not task.cancelled():
            task.exception()

    # ------------------------------------------------------------------ #
    # Periods
    # ------------------------------------------------------------------ #

    async def load_period(self, period_key: str) -> PeriodDocument:
        """Return the document for ``period_key``.

        Raises:
            PeriodNotFoundError: No document exists for the key.
            InvalidPeriodDocumentError: The document fails validation.
            DocumentSourceError: On transport failure.
        """
        key = normalize_period_key(period_key)
        self._total_requests += 1

        cached = self._documents.get(key)
        if cached is not None:
            self._cache_hits += 1
            with suppress(Exception):
                self._requests.labels(outcome="hit").inc()
            return cached

        self._cache_misses += 1
        task = self._pending.get(key)
        if task is None:
            task = asyncio.create_task(self._fetch_period(key, self._generation))
            self._pending[key] = task
            task.add_done_callback(lambda t, k=key: self._forget_pending(k, t))
        return await asyncio.shield(task)

    async def load_periods(self, period_keys: Iterable[str]) -> dict[str, PeriodDocument]:
        """Load several periods concurrently.

        Duplicate keys collapse; the result is keyed by normalized key in
        request order. Any single failure fails the whole batch.
        """
        keys = list(dict.fromkeys(normalize_period_key(k) for k in period_keys))
        documents = await asyncio.gather(*(self.load_period(k) for k in keys))
        return dict(zip(keys, documents, strict=True))

    async def preload(self, period_keys: Iterable[str]) -> int:
        """Warm the cache for ``period_keys`` and return the number loaded."""
        start = time.perf_counter()
        documents = await self.load_periods(period_keys)
        logger.info(
            "period_store.preload",
            extra={
                "extra": {
                    "periods": len(documents),
                    "elapsed_s": round(time.perf_counter() - start, 4),
                }
            },
        )
        return len(documents)

    def is_cached(self, period_key: str) -> bool:
        return normalize_period_key(period_key) in self._documents

    def clear_cache(self) -> None:
        """Drop cached documents, the cached index and statistics."""
        self._generation += 1
        self._documents.clear()
        self._pending.clear()
        self._index = None
        self._index_task = None
        self._reset_statistics()

    async def _fetch_period(self, key: str, generation: int) -> PeriodDocument:
        start = time.perf_counter()
        try:
            try:
                payload = await self._source.fetch_json(period_document_name(key))
            except DocumentNotFoundError as exc:
                raise PeriodNotFoundError(key) from exc
            except DocumentDecodeError as exc:
                raise InvalidPeriodDocumentError(key, str(exc)) from exc
            document = self._parse_period(key, payload)
        except DomainError as exc:
            with suppress(Exception):
                self._requests.labels(outcome="error").inc()
            logger.warning(
                "period_store.load_failed",
                extra={"extra": {"period": key, "error": exc.to_dict()}},
            )
            raise

        elapsed = time.perf_counter() - start
        self._record_load(key, elapsed)
        if generation == self._generation:
            self._documents[key] = document
        return document

    @staticmethod
    def _parse_period(key: str, payload: Mapping[str, Any]) -> PeriodDocument:
        if not isinstance(payload, Mapping):
            raise InvalidPeriodDocumentError(key, "payload is not an object")
        if not payload.get("periodKey"):
            raise InvalidPeriodDocumentError(key, "missing 'periodKey'")
        if not isinstance(payload.get("records"), list):
            raise InvalidPeriodDocumentError(key, "missing 'records' list")
        try:
            document = PeriodDocumentDTO.model_validate(payload).to_domain()
        except (ValidationError, ValueError, TypeError) as exc:
            raise InvalidPeriodDocumentError(key, str(exc)) from exc
        if document.period_key != key:
            raise InvalidPeriodDocumentError(
                key, f"document declares period {document.period_key!r}"
            )
        return document

    def _forget_pending(self, key: str, task: asyncio.Task[PeriodDocument]) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]
        if not task.cancelled():
            task.exception()

    # ------------------------------------------------------------------ #
    # Instrumentation
    # ------------------------------------------------------------------ #

    def _reset_statistics(self) -> None:
        self._total_requests = 0
        self._cache_hits = 0
        self._cache_misses = 0
        self._loads = 0
        self._total_load_time_s = 0.0
        self._slow_loads = 0

    def _record_load(self, key: str, elapsed: float) -> None:
        self._loads += 1
        self._total_load_time_s += elapsed
        with suppress(Exception):
            self._requests.labels(outcome="miss").inc()
            self._latency.observe(elapsed)

        if elapsed > self._slow_threshold:
            self._slow_loads += 1
            with suppress(Exception):
                self._slow.inc()
            logger.warning(
                "period_store.slow_load",
                extra={
                    "extra": {
                        "period": key,
                        "elapsed_s": round(elapsed, 4),
                        "threshold_s": self._slow_threshold,
                    }
                },
            )

        if self._summary_every > 0 and self._loads % self._summary_every == 0:
            stats = self.statistics()
            logger.info(
                "period_store.summary",
                extra={
                    "extra": {
                        "total_requests": stats.total_requests,
                        "cache_hit_rate": round(stats.cache_hit_rate, 4),
                        "average_load_time_s": round(stats.average_load_time_s, 4),
                        "slow_loads": stats.slow_loads,
                    }
                },
            )

    def statistics(self) -> LoadStatistics:
        """Return a snapshot of the load statistics."""
        return LoadStatistics(
            total_requests=self._total_requests,
            cache_hits=self._cache_hits,
            cache_misses=self._cache_misses,
            average_load_time_s=(self._total_load_time_s / self._loads) if self._loads else 0.0,
            slow_loads=self._slow_loads,
            cache_hit_rate=(
                self._cache_hits / self._total_requests if self._total_requests else 0.0
            ),
        )

    def cache_stats(self) -> dict[str, Any]:
        """Return cache size, cached keys, hit rate and average load time."""
        stats = self.statistics()
        return {
            "size": len(self._documents),
            "cached_periods": sorted(self._documents),
            "hit_rate": stats.cache_hit_rate,
            "average_load_time_s": stats.average_load_time_s,
        }
