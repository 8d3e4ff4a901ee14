# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Use case: Build period documents from quarterly source files.

Offline step that turns one source file per quarter into one period document
of brand-matched records, plus an index of every buildable period.

Scope:
    * Files are processed sequentially in the order given (callers pass them
      sorted by name), so output ordering is deterministic.
    * A file that cannot be read or is structurally invalid is skipped; the
      remaining files are still built.
    * Row problems (blank names, bad numbers, out-of-range percentages,
      duplicates) are warnings, never failures.
    * The match rate is reported, never enforced.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

from brandpulse.application.interfaces.build_observer import BuildObserver, NullBuildObserver
from brandpulse.application.interfaces.period_document_writer import PeriodDocumentWriter
from brandpulse.application.interfaces.source_table_reader import SourceTable, SourceTableReader
from brandpulse.domain.entities.brand import Brand
from brandpulse.domain.entities.period_document import PeriodDocument, PeriodIndex, SnapshotRecord
from brandpulse.domain.exceptions.base import DomainError
from brandpulse.domain.services.metric_parsing import parse_metric_row
from brandpulse.domain.services.name_matcher import BrandNameIndex, normalize_name
from brandpulse.domain.services.period_keys import UNKNOWN_PERIOD, extract_period_key
from brandpulse.domain.services.source_validation import (
    BRAND_ID_COLUMN,
    BRAND_NAME_COLUMN,
    CATEGORY_COLUMN,
    DEFAULT_LARGE_FILE_BYTES,
    ValidationResult,
    validate_source_columns,
    validate_source_file,
    validate_source_rows,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class FileBuildStatus(str, Enum):
    """Outcome of one source file."""

    PROCESSED = "PROCESSED"
    SKIPPED = "SKIPPED"
    WRITE_FAILED = "WRITE_FAILED"


@dataclass
class FileBuildReport:
    """Per-file build report.

    Attributes:
        source_file: Base name of the source file.
        period_key: Extracted period key (``UNKNOWN`` if none).
        status: Outcome.
        total_rows: Data rows read.
        matched_count: Rows matched to the registry.
        unmatched_count: Distinct unmatched brand names.
        errors: Reasons the file was skipped or not written.
        warnings: Validation warnings.
        output_path: Where the document was written, if it was.
    """

    source_file: str
    period_key: str
    status: FileBuildStatus = FileBuildStatus.SKIPPED
    total_rows: int = 0
    matched_count: int = 0
    unmatched_count: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    output_path: Path | None = None

    @property
    def indexed(self) -> bool:
        return self.status is FileBuildStatus.PROCESSED and self.period_key != UNKNOWN_PERIOD

    @property
    def match_rate(self) -> float:
        return self.matched_count / self.total_rows if self.total_rows else 0.0


@dataclass
class BuildSummary:
    """Result of one build run."""

    files: list[FileBuildReport] = field(default_factory=list)
    index: PeriodIndex | None = None

    @property
    def processed_count(self) -> int:
        return sum(1 for f in self.files if f.status is FileBuildStatus.PROCESSED)

    @property
    def skipped_count(self) -> int:
        return len(self.files) - self.processed_count

    @property
    def total_rows(self) -> int:
        return sum(f.total_rows for f in self.files if f.status is FileBuildStatus.PROCESSED)

    @property
    def total_matched(self) -> int:
        return sum(f.matched_count for f in self.files if f.status is FileBuildStatus.PROCESSED)

    @property
    def match_rate(self) -> float:
        return self.total_matched / self.total_rows if self.total_rows else 0.0


@dataclass(frozen=True)
class BuildPeriodDocumentsRequest:
    """Request parameters for a build run.

    Attributes:
        source_files: Source files, in processing order.
        brands: Registry snapshot, in registry order.
    """

    source_files: Sequence[Path]
    brands: Sequence[Brand]


class BuildPeriodDocumentsUseCase:
    """Build one period document per source file and the period index."""

    def __init__(
        self,
        reader: SourceTableReader,
        writer: PeriodDocumentWriter,
        *,
        clock: Callable[[], datetime] = _utcnow,
        large_file_bytes: int = DEFAULT_LARGE_FILE_BYTES,
        max_logged_warnings: int = 10,
        observer: BuildObserver | None = None,
    ) -> None:
        """Initialize the use case.

        Args:
            reader: Source table reader.
            writer: Destination for documents and the index.
            clock: Returns the build timestamp; called once per run.
            large_file_bytes: Size above which a file produces a warning.
            max_logged_warnings: Warnings logged per file; the rest are only
                counted (all are kept on the report).
            observer: Receives row and file outcomes.
        """
        self._reader = reader
        self._writer = writer
        self._clock = clock
        self._large_file_bytes = large_file_bytes
        self._max_logged_warnings = max_logged_warnings
        self._observer: BuildObserver = observer or NullBuildObserver()

    def execute(self, req: BuildPeriodDocumentsRequest) -> BuildSummary:
        """Run the build.

        Returns:
            Summary with one report per source file and the written index
            (``None`` when no file could be processed).
        """
        generated_at = self._clock()
        name_index = BrandNameIndex(req.brands)
        for kept, dropped in name_index.collisions:
            logger.warning(
                "build.registry_name_collision",
                extra={
                    "extra": {
                        "name": kept.name,
                        "kept_id": kept.id,
                        "dropped_id": dropped.id,
                    }
                },
            )

        logger.info(
            "build.start",
            extra={"extra": {"files": len(req.source_files), "brands": len(req.brands)}},
        )

        summary = BuildSummary()
        period_files: dict[str, str] = {}
        for path in req.source_files:
            report = self._build_file(path, name_index, generated_at)
            summary.files.append(report)
            self._observer.file(
                "processed"
                if report.status is FileBuildStatus.PROCESSED
                else "failed" if report.status is FileBuildStatus.WRITE_FAILED else "skipped"
            )
            if not report.indexed:
                continue
            previous = period_files.get(report.period_key)
            if previous is not None:
                logger.warning(
                    "build.duplicate_period",
                    extra={
                        "extra": {
                            "period": report.period_key,
                            "replaced": previous,
                            "source_file": report.source_file,
                        }
                    },
                )
            period_files[report.period_key] = report.source_file

        if summary.processed_count:
            index = PeriodIndex.from_periods(
                period_files, generated_at=generated_at, exclude=(UNKNOWN_PERIOD,)
            )
            self._writer.write_index(index)
            summary.index = index

        logger.info(
            "build.complete",
            extra={
                "extra": {
                    "processed": summary.processed_count,
                    "skipped": summary.skipped_count,
                    "periods": summary.index.total_periods if summary.index else 0,
                    "total_rows": summary.total_rows,
                    "total_matched": summary.total_matched,
                    "match_rate": round(summary.match_rate, 4),
                }
            },
        )
        return summary

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _build_file(
        self,
        path: Path,
        name_index: BrandNameIndex,
        generated_at: datetime,
    ) -> FileBuildReport:
        report = FileBuildReport(source_file=path.name, period_key=extract_period_key(path.name))
        if report.period_key == UNKNOWN_PERIOD:
            logger.warning(
                "build.unknown_period",
                extra={"extra": {"source_file": path.name}},
            )

        try:
            validation = validate_source_file(
                self._reader.stat(path), large_file_bytes=self._large_file_bytes
            )
            table: SourceTable | None = None
            if validation.is_valid:
                table = self._reader.read(path)
                validation.merge(validate_source_columns(table.columns))
                if validation.is_valid:
                    validation.merge(validate_source_rows(table.rows))
        except DomainError as exc:
            validation = ValidationResult(errors=[exc.message])
            table = None

        report.warnings.extend(validation.warnings)
        self._log_warnings(report)
        if not validation.is_valid or table is None:
            report.errors.extend(validation.errors)
            logger.error(
                "build.file_skipped",
                extra={"extra": {"source_file": path.name, "errors": report.errors}},
            )
            return report

        document = self._build_document(report, table, name_index, generated_at)
        report.total_rows = document.total_row_count
        report.matched_count = document.matched_count
        report.unmatched_count = len(document.unmatched_names)

        try:
            if report.period_key == UNKNOWN_PERIOD:
                report.output_path = self._writer.write_unindexed(document)
            else:
                report.output_path = self._writer.write_period(document)
        except DomainError as exc:
            report.status = FileBuildStatus.WRITE_FAILED
            report.errors.append(exc.message)
            logger.error(
                "build.write_failed",
                extra={"extra": {"source_file": path.name, "error": exc.to_dict()}},
            )
            return report

        report.status = FileBuildStatus.PROCESSED
        logger.info(
            "build.file_processed",
            extra={
                "extra": {
                    "source_file": path.name,
                    "period": report.period_key,
                    "total_rows": report.total_rows,
                    "matched": report.matched_count,
                    "unmatched": report.unmatched_count,
                    "match_rate": round(report.match_rate, 4),
                }
            },
        )
        return report

    def _build_document(
        self,
        report: FileBuildReport,
        table: SourceTable,
        name_index: BrandNameIndex,
        generated_at: datetime,
    ) -> PeriodDocument:
        records: list[SnapshotRecord] = []
        unmatched: dict[str, None] = {}
        seen: set[str] = set()

        for row in table.rows:
            name = (row.get(BRAND_NAME_COLUMN) or "").strip()
            if not name:
                self._observer.row("blank")
                continue
            key = normalize_name(name)
            if key in seen:
                self._observer.row("duplicate")
                continue
            seen.add(key)

            brand = name_index.find(name)
            if brand is None:
                unmatched.setdefault(name, None)
                self._observer.row("unmatched")
                continue

            records.append(
                SnapshotRecord(
                    brand_id=brand.id,
                    brand_name=brand.name,
                    source_brand_id=(row.get(BRAND_ID_COLUMN) or "").strip(),
                    source_category=(row.get(CATEGORY_COLUMN) or "").strip(),
                    metrics=parse_metric_row(row),
                )
            )
            self._observer.row("matched")

        return PeriodDocument(
            period_key=report.period_key,
            source_file=report.source_file,
            generated_at=generated_at,
            total_row_count=len(table.rows),
            matched_count=len(records),
            unmatched_names=tuple(unmatched),
            records=tuple(records),
        )

    def _log_warnings(self, report: FileBuildReport) -> None:
        shown = report.warnings[: self._max_logged_warnings]
        for warning in shown:
            logger.warning(
                "build.validation_warning",
                extra={"extra": {"source_file": report.source_file, "warning": warning}},
            )
        hidden = len(report.warnings) - len(shown)
        if hidden > 0:
            logger.warning(
                "build.validation_warnings_truncated",
                extra={"extra": {"source_file": report.source_file, "not_logged": hidden}},
            )


__all__ = [
    "BuildPeriodDocumentsRequest",
    "BuildPeriodDocumentsUseCase",
    "BuildSummary",
    "FileBuildReport",
    "FileBuildStatus",
]
