# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""
Quarterly brand data exceptions.

Purpose:
    Error taxonomy for the build and serve phases:

    * ``BrandNotFoundError``: the brand id does not exist in the registry
      (caller error).
    * ``PeriodNotFoundError``: no document exists for a period key. Query
      services treat this as absence where the contract allows it.
    * ``InvalidPeriodDocumentError`` / ``InvalidPeriodIndexError``: a build
      artifact exists but fails structural validation. Always surfaced.
    * ``DocumentSourceError`` and subclasses: transport-level failures from
      the static document location.
    * ``SourceFileError``: a source file cannot be read or fails structural
      validation at build time. Caught per file by the builder.
    * ``DocumentWriteError``: a build artifact cannot be written.
    * ``RegistryLoadError``: the brand registry cannot be loaded.

Layer:
    domain/exceptions

Notes:
    - Infrastructure translates httpx / OSError / json errors into these
      types; transport exceptions never cross the boundary.
"""

from __future__ import annotations

from brandpulse.domain.exceptions.base import DomainError


class BrandNotFoundError(DomainError):
    """Raised when a brand id cannot be resolved against the registry."""

    code = "BRAND_NOT_FOUND"

    def __init__(self, brand_id: str) -> None:
        super().__init__(f"Brand not found: {brand_id}", details={"brand_id": brand_id})
        self.brand_id = brand_id


class PeriodNotFoundError(DomainError):
    """Raised when no period document exists for the requested key."""

    code = "PERIOD_NOT_FOUND"

    def __init__(self, period: str) -> None:
        super().__init__(f"Period data not found: {period}", details={"period": period})
        self.period = period


class InvalidPeriodDocumentError(DomainError):
    """Raised when a period document exists but is structurally invalid."""

    code = "INVALID_PERIOD_DOCUMENT"

    def __init__(self, period: str, reason: str) -> None:
        super().__init__(
            f"Invalid data for period {period}: {reason}",
            details={"period": period, "reason": reason},
        )
        self.period = period
        self.reason = reason


class InvalidPeriodIndexError(DomainError):
    """Raised when the period index is missing or structurally invalid."""

    code = "INVALID_PERIOD_INDEX"

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to load period index: {reason}", details={"reason": reason})
        self.reason = reason


class DocumentSourceError(DomainError):
    """Raised when the static document location cannot serve a request."""

    code = "DOCUMENT_SOURCE_ERROR"


class DocumentNotFoundError(DocumentSourceError):
    """Raised by a document source when the named document does not exist."""

    code = "DOCUMENT_NOT_FOUND"


class DocumentDecodeError(DocumentSourceError):
    """Raised by a document source when a document is not a JSON object."""

    code = "DOCUMENT_DECODE_ERROR"


class SourceFileError(DomainError):
    """Raised when a build source file cannot be read or is structurally invalid."""

    code = "SOURCE_FILE_ERROR"


class DocumentWriteError(DomainError):
    """Raised when a build artifact cannot be written."""

    code = "DOCUMENT_WRITE_ERROR"


class RegistryLoadError(DomainError):
    """Raised when the brand registry cannot be loaded or contains invalid entries."""

    code = "REGISTRY_LOAD_ERROR"


__all__ = [
    "BrandNotFoundError",
    "DocumentDecodeError",
    "DocumentNotFoundError",
    "DocumentSourceError",
    "DocumentWriteError",
    "InvalidPeriodDocumentError",
    "InvalidPeriodIndexError",
    "PeriodNotFoundError",
    "RegistryLoadError",
    "SourceFileError",
]
