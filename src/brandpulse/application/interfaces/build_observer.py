# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Application Interface: Build Observer.

Synopsis:
    Receives per-row and per-file outcomes from the period builder so outer
    layers can export counters without the use case depending on them.

Layer:
    application/interfaces
"""

from __future__ import annotations

from typing import Literal, Protocol

RowOutcome = Literal["matched", "unmatched", "blank", "duplicate"]
FileOutcome = Literal["processed", "skipped", "failed"]


class BuildObserver(Protocol):
    """Sink for build outcomes."""

    def row(self, outcome: RowOutcome) -> None:
        """Record one source row."""

    def file(self, outcome: FileOutcome) -> None:
        """Record one source file."""


class NullBuildObserver:
    """Observer that records nothing."""

    def row(self, outcome: RowOutcome) -> None:
        return None

    def file(self, outcome: FileOutcome) -> None:
        return None
