# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Application Interface: Period Store Port.

Synopsis:
    Read access to built period documents and the period index. Implementations
    cache documents for the lifetime of the instance.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from brandpulse.domain.entities.period_document import PeriodDocument, PeriodIndex


class PeriodStorePort(Protocol):
    """Cached loader for period documents."""

    async def load_index(self) -> PeriodIndex:
        """Return the period index.

        Raises:
            InvalidPeriodIndexError: If the index is missing or malformed.
            DocumentSourceError: On transport failure.
        """

    async def load_period(self, period_key: str) -> PeriodDocument:
        """Return the document for one period.

        Raises:
            PeriodNotFoundError: If no document exists for the key.
            InvalidPeriodDocumentError: If the document is malformed.
            DocumentSourceError: On transport failure.
        """

    async def load_periods(self, period_keys: Iterable[str]) -> dict[str, PeriodDocument]:
        """Load several periods concurrently; any failure fails the batch."""

    async def list_available_periods(self) -> list[str]:
        """Return the sorted period keys listed in the index."""

    def is_cached(self, period_key: str) -> bool:
        """Return True if the document for ``period_key`` is cached."""

    def clear_cache(self) -> None:
        """Drop cached documents, the cached index and load statistics."""
