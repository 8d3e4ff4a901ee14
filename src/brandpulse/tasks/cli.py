# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Brandpulse CLI: build period documents and inspect associations.

Commands:
    build                       Build <PERIOD>.json documents and index.json.
    inspect periods             List indexed periods.
    inspect history BRAND_ID    Metrics of a brand in every period with data.
    inspect coverage BRAND_ID   Data coverage of a brand.
    inspect compare BRAND_ID P  Metrics of a brand for selected periods.
    inspect brands-in-period P  Brand ids present in one period.

Environment:
    BRANDPULSE_SOURCE_DIR          Directory of quarterly CSV files.
    BRANDPULSE_OUTPUT_DIR          Directory receiving the documents.
    BRANDPULSE_REGISTRY_PATH       Brand registry JSON file.
    BRANDPULSE_DOCUMENTS_BASE_URL  Optional HTTP origin for inspect commands.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import typer

from brandpulse.application.services.brand_association import BrandAssociationService
from brandpulse.application.use_cases.build_period_documents import (
    BuildPeriodDocumentsRequest,
    BuildSummary,
)
from brandpulse.bootstrap import (
    build_association_service,
    build_document_source,
    build_period_builder,
    build_registry,
)
from brandpulse.config.settings import Settings, get_settings
from brandpulse.domain.entities.brand_history import BrandHistory, CoverageReport
from brandpulse.domain.entities.metric_record import MetricRecord
from brandpulse.domain.exceptions.base import DomainError
from brandpulse.infrastructure.logging.logger import (
    bind_run_id,
    configure_root_logging,
    get_json_logger,
)
from brandpulse.infrastructure.sources.csv_reader import discover_source_files

configure_root_logging()
log = get_json_logger(__name__)

T = TypeVar("T")

app = typer.Typer(add_completion=False, no_args_is_help=True)
inspect_app = typer.Typer(no_args_is_help=True)
app.add_typer(inspect_app, name="inspect")


def _settings(**overrides: Any) -> Settings:
    """Return settings with non-``None`` CLI overrides applied."""
    settings = get_settings()
    configure_root_logging(settings.log_level)
    updates = {k: v for k, v in overrides.items() if v is not None}
    return settings.model_copy(update=updates) if updates else settings


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _fail(exc: DomainError) -> typer.Exit:
    log.error("cli.failed", extra={"extra": {"error": exc.to_dict()}})
    typer.echo(json.dumps(exc.to_dict(), ensure_ascii=False), err=True)
    return typer.Exit(code=1)


def _summary_payload(summary: BuildSummary) -> dict[str, Any]:
    return {
        "processed": summary.processed_count,
        "skipped": summary.skipped_count,
        "totalRows": summary.total_rows,
        "totalMatched": summary.total_matched,
        "matchRate": round(summary.match_rate, 4),
        "periods": list(summary.index.periods) if summary.index else [],
        "files": [
            {
                "sourceFile": f.source_file,
                "periodKey": f.period_key,
                "status": f.status.value,
                "totalRows": f.total_rows,
                "matched": f.matched_count,
                "unmatched": f.unmatched_count,
                "warnings": len(f.warnings),
                "errors": f.errors,
            }
            for f in summary.files
        ],
    }


def _metrics_payload(metrics: MetricRecord) -> dict[str, float]:
    return metrics.measured()


def _history_payload(history: BrandHistory) -> dict[str, Any]:
    return {
        "brandId": history.brand.id,
        "brandName": history.brand.name,
        "availablePeriods": list(history.available_periods),
        "latestPeriod": history.latest_period,
        "metricsByPeriod": {
            period: _metrics_payload(metrics)
            for period, metrics in history.metrics_by_period.items()
        },
    }


def _coverage_payload(report: CoverageReport) -> dict[str, Any]:
    return {
        "brandId": report.brand_id,
        "totalPeriodsInSystem": report.total_periods_in_system,
        "periodsWithData": report.periods_with_data,
        "availablePeriods": list(report.available_periods),
        "coveragePercent": round(report.coverage_percent, 2),
        "earliestPeriod": report.earliest_period,
        "latestPeriod": report.latest_period,
    }


def _run_query(query: Callable[[BrandAssociationService], Awaitable[T]]) -> T:
    """Run one async query against a freshly wired service."""
    settings = _settings()

    async def _run() -> T:
        source = build_document_source(settings)
        service = build_association_service(settings, source=source)
        try:
            return await query(service)
        finally:
            aclose = getattr(source, "aclose", None)
            if aclose is not None:
                await aclose()

    try:
        return asyncio.run(_run())
    except DomainError as exc:
        raise _fail(exc) from exc


@app.command("build")
def build(
    source_dir: Path | None = typer.Option(  # noqa: B008
        None, help="Directory of quarterly CSV files (default: BRANDPULSE_SOURCE_DIR)."
    ),
    output_dir: Path | None = typer.Option(  # noqa: B008
        None, help="Output directory (default: BRANDPULSE_OUTPUT_DIR)."
    ),
    registry_path: Path | None = typer.Option(  # noqa: B008
        None, "--registry", help="Brand registry JSON (default: BRANDPULSE_REGISTRY_PATH)."
    ),
) -> None:
    """Build one period document per source file, then the period index.

    Exits with code 1 when no source file could be processed.
    """
    settings = _settings(
        source_dir=source_dir,
        output_dir=output_dir,
        registry_path=registry_path,
    )
    run_id = bind_run_id()
    log.info(
        "build.invoked",
        extra={
            "extra": {
                "run_id": run_id,
                "source_dir": str(settings.source_dir),
                "output_dir": str(settings.output_dir),
            }
        },
    )

    try:
        brands = build_registry(settings).list_brands()
        files = discover_source_files(settings.source_dir)
    except DomainError as exc:
        raise _fail(exc) from exc

    if not files:
        log.warning(
            "build.no_source_files",
            extra={"extra": {"source_dir": str(settings.source_dir)}},
        )

    summary = build_period_builder(settings).execute(
        BuildPeriodDocumentsRequest(source_files=files, brands=brands)
    )
    _echo_json(_summary_payload(summary))
    if summary.processed_count == 0:
        raise typer.Exit(code=1)


@inspect_app.command("periods")
def inspect_periods() -> None:
    """List the periods in the index."""

    async def _query(service: BrandAssociationService) -> list[str]:
        return await service.list_periods()

    _echo_json(_run_query(_query))


@inspect_app.command("history")
def inspect_history(
    brand_id: str = typer.Argument(..., help="Registry brand id."),  # noqa: B008
    period: list[str] | None = typer.Option(  # noqa: B008
        None, "--period", "-p", help="Restrict to these periods (repeatable)."
    ),
) -> None:
    """Print the metrics of a brand in every period with data."""

    async def _query(service: BrandAssociationService) -> BrandHistory:
        return await service.get_history(brand_id, period or None)

    _echo_json(_history_payload(_run_query(_query)))


@inspect_app.command("coverage")
def inspect_coverage(
    brand_id: str = typer.Argument(..., help="Registry brand id."),  # noqa: B008
) -> None:
    """Print how many indexed periods contain a brand."""

    async def _query(service: BrandAssociationService) -> CoverageReport:
        return await service.get_coverage(brand_id)

    _echo_json(_coverage_payload(_run_query(_query)))


@inspect_app.command("compare")
def inspect_compare(
    brand_id: str = typer.Argument(..., help="Registry brand id."),  # noqa: B008
    periods: list[str] = typer.Argument(..., help="Periods to compare."),  # noqa: B008
) -> None:
    """Print a brand's metrics for the requested periods that have data."""

    async def _query(service: BrandAssociationService) -> dict[str, MetricRecord]:
        return await service.compare(brand_id, periods)

    result = _run_query(_query)
    _echo_json({period: _metrics_payload(metrics) for period, metrics in result.items()})


@inspect_app.command("brands-in-period")
def inspect_brands_in_period(
    period: str = typer.Argument(..., help="Period key, e.g. 2012Q1."),  # noqa: B008
) -> None:
    """Print the brand ids present in one period."""

    async def _query(service: BrandAssociationService) -> list[str]:
        return await service.get_brands_in_period(period)

    _echo_json(_run_query(_query))


if __name__ == "__main__":  # pragma: no cover
    app()
