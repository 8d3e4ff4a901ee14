# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Prometheus-backed build observer."""

from __future__ import annotations

from contextlib import suppress

from brandpulse.application.interfaces.build_observer import FileOutcome, RowOutcome
from brandpulse.infrastructure.observability.metrics import (
    get_build_files_total,
    get_build_rows_total,
)


class PrometheusBuildObserver:
    """Exports builder outcomes as ``brandpulse_build_*_total`` counters."""

    def __init__(self) -> None:
        self._rows = get_build_rows_total()
        self._files = get_build_files_total()

    def row(self, outcome: RowOutcome) -> None:
        with suppress(Exception):
            self._rows.labels(outcome=outcome).inc()

    def file(self, outcome: FileOutcome) -> None:
        with suppress(Exception):
            self._files.labels(outcome=outcome).inc()


__all__ = ["PrometheusBuildObserver"]
