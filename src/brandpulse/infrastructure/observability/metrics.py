# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Prometheus metrics utilities (registry-aware).

Accessor functions return collectors bound to the **current**
``prometheus_client.REGISTRY``:
    - Safe under tests that swap the default registry.
    - No duplicate-registration errors.
    - Cache automatically resets when the active registry changes.

Collectors:
    * Build phase: rows by outcome, files by outcome.
    * Period store: requests by outcome, load latency, slow loads.
    * HTTP document source: request latency and status codes.

Example:
    get_period_store_requests_total().labels(outcome="hit").inc()
    get_period_store_load_seconds().observe(0.012)
"""

from __future__ import annotations

import logging
import threading
from contextlib import suppress
from typing import Final

import prometheus_client as prom
from prometheus_client import Counter, Histogram

_log = logging.getLogger(__name__)

# Common histogram buckets (seconds)
_BUCKETS: Final[tuple[float, ...]] = (
    0.005,
    0.010,
    0.025,
    0.050,
    0.100,
    0.250,
    0.500,
    1.000,
    2.000,
    5.000,
    10.000,
)

# Cache keyed by metric name within the currently-active registry.
_active_registry: prom.CollectorRegistry | None = None
_hist_cache: dict[str, Histogram] = {}
_counter_cache: dict[str, Counter] = {}
_lock = threading.RLock()


def _ensure_registry() -> None:
    """Reset caches if the active registry changed."""
    global _active_registry
    with _lock:
        if _active_registry is not prom.REGISTRY:
            _hist_cache.clear()
            _counter_cache.clear()
            _active_registry = prom.REGISTRY


def _lookup_existing(name: str, kind: type[Counter] | type[Histogram]) -> Counter | Histogram | None:
    """Return a collector of type ``kind`` already registered under ``name``."""
    with _lock, suppress(AttributeError):
        mapping = getattr(prom.REGISTRY, "_names_to_collectors", None)
        if isinstance(mapping, dict):
            col = mapping.get(name)
            if isinstance(col, kind):
                return col
    return None


def _get_or_create_hist(
    name: str,
    help_text: str,
    *,
    buckets: tuple[float, ...] = _BUCKETS,
    labelnames: tuple[str, ...] = (),
) -> Histogram:
    """Get or create a registry-bound ``Histogram`` with stable identity.

    1. Return from module cache if present for the active registry.
    2. If the registry already has a collector by this name, reuse it.
    3. Otherwise, register a new collector on the active registry.
    """
    _ensure_registry()
    with _lock:
        cached = _hist_cache.get(name)
        if cached is not None:
            return cached

        existing = _lookup_existing(name, Histogram)
        if isinstance(existing, Histogram):
            _hist_cache[name] = existing
            return existing

        try:
            h = Histogram(name, help_text, labelnames, buckets=buckets, registry=prom.REGISTRY)
        except ValueError as exc:
            if "Duplicated timeseries" in str(exc):
                again = _lookup_existing(name, Histogram)
                if isinstance(again, Histogram):
                    _hist_cache[name] = again
                    return again
            _log.exception("Failed to register Prometheus histogram %s", name)
            raise
        _hist_cache[name] = h
        return h


def _get_or_create_counter(
    name: str,
    help_text: str,
    *,
    labelnames: tuple[str, ...] = (),
) -> Counter:
    """Get or create a registry-bound ``Counter`` with stable identity."""
    _ensure_registry()
    with _lock:
        cached = _counter_cache.get(name)
        if cached is not None:
            return cached

        existing = _lookup_existing(name, Counter)
        if isinstance(existing, Counter):
            _counter_cache[name] = existing
            return existing

        try:
            c = Counter(name, help_text, labelnames, registry=prom.REGISTRY)
        except ValueError as exc:
            if "Duplicated timeseries" in str(exc):
                again = _lookup_existing(name, Counter)
                if isinstance(again, Counter):
                    _counter_cache[name] = again
                    return again
            _log.exception("Failed to register Prometheus counter %s", name)
            raise
        _counter_cache[name] = c
        return c


# ---------------------------------------------------------------------------
# Build phase


def get_build_rows_total() -> Counter:
    """Source rows seen by the builder, by outcome.

    Labels:
        outcome: ``matched`` | ``unmatched`` | ``blank`` | ``duplicate``.
    """
    return _get_or_create_counter(
        "brandpulse_build_rows_total",
        "Source rows processed by the period builder.",
        labelnames=("outcome",),
    )


def get_build_files_total() -> Counter:
    """Source files seen by the builder, by outcome (``processed`` | ``skipped`` | ``failed``)."""
    return _get_or_create_counter(
        "brandpulse_build_files_total",
        "Source files handled by the period builder.",
        labelnames=("outcome",),
    )


# ---------------------------------------------------------------------------
# Period store


def get_period_store_requests_total() -> Counter:
    """Period load requests by outcome (``hit`` | ``miss`` | ``error``)."""
    return _get_or_create_counter(
        "brandpulse_period_store_requests_total",
        "Period document requests served by the period store.",
        labelnames=("outcome",),
    )


def get_period_store_load_seconds() -> Histogram:
    """Latency of period document loads that missed the cache."""
    return _get_or_create_hist(
        "brandpulse_period_store_load_seconds",
        "Period document load latency in seconds (cache misses).",
    )


def get_period_store_slow_loads_total() -> Counter:
    return _get_or_create_counter(
        "brandpulse_period_store_slow_loads_total",
        "Period document loads slower than the configured threshold.",
    )


# ---------------------------------------------------------------------------
# HTTP document source


def get_documents_http_latency_seconds() -> Histogram:
    """HTTP document fetch latency, labelled by outcome (``ok`` | ``error``)."""
    return _get_or_create_hist(
        "brandpulse_documents_http_latency_seconds",
        "Latency of HTTP document fetches in seconds.",
        labelnames=("outcome",),
    )


def get_documents_http_status_total() -> Counter:
    """HTTP responses by status code."""
    return _get_or_create_counter(
        "brandpulse_documents_http_status_total",
        "HTTP document responses by status code.",
        labelnames=("code",),
    )


__all__ = [
    "get_build_files_total",
    "get_build_rows_total",
    "get_documents_http_latency_seconds",
    "get_documents_http_status_total",
    "get_period_store_load_seconds",
    "get_period_store_requests_total",
    "get_period_store_slow_loads_total",
]
