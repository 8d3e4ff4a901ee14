# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Application Interface: Period Document Writer.

Layer:
    application/interfaces
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from brandpulse.domain.entities.period_document import PeriodDocument, PeriodIndex


class PeriodDocumentWriter(Protocol):
    """Publishes build artifacts. Each call replaces any previous artifact."""

    def write_period(self, document: PeriodDocument) -> Path:
        """Write the document of an indexed period and return its location."""

    def write_unindexed(self, document: PeriodDocument) -> Path:
        """Write a document whose period could not be determined."""

    def write_index(self, index: PeriodIndex) -> Path:
        """Write the period index and return its location."""
