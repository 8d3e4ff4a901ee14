# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Composition root.

Wires configuration into concrete adapters for both phases. Everything is
built per call; there are no module-level singletons, so each caller (CLI
command, test) owns the lifetime of its store and document source.
"""

from __future__ import annotations

from brandpulse.application.interfaces.brand_registry_port import BrandRegistryPort
from brandpulse.application.interfaces.document_source_port import DocumentSourcePort
from brandpulse.application.services.brand_association import BrandAssociationService
from brandpulse.application.use_cases.build_period_documents import BuildPeriodDocumentsUseCase
from brandpulse.config.settings import Settings
from brandpulse.infrastructure.caching.period_store import InMemoryPeriodStore
from brandpulse.infrastructure.documents.filesystem_source import FileSystemDocumentSource
from brandpulse.infrastructure.documents.http_source import HttpDocumentSource
from brandpulse.infrastructure.documents.settings import DocumentsHttpSettings
from brandpulse.infrastructure.observability.build_observer import PrometheusBuildObserver
from brandpulse.infrastructure.registry.json_brand_registry import JsonFileBrandRegistry
from brandpulse.infrastructure.sources.csv_reader import CsvSourceTableReader
from brandpulse.infrastructure.storage.json_writer import JsonPeriodDocumentWriter


def build_registry(settings: Settings) -> BrandRegistryPort:
    return JsonFileBrandRegistry(settings.registry_path)


def build_document_source(settings: Settings) -> DocumentSourcePort:
    """Return an HTTP source when a base URL is configured, else the output directory."""
    if settings.documents_base_url:
        http_settings = DocumentsHttpSettings(base_url=settings.documents_base_url)
        return HttpDocumentSource(http_settings)
    return FileSystemDocumentSource(settings.output_dir)


def build_period_store(settings: Settings, source: DocumentSourcePort) -> InMemoryPeriodStore:
    return InMemoryPeriodStore(
        source,
        slow_load_threshold_s=settings.slow_load_threshold_s,
        summary_every=settings.summary_every,
    )


def build_association_service(
    settings: Settings,
    *,
    source: DocumentSourcePort | None = None,
    registry: BrandRegistryPort | None = None,
) -> BrandAssociationService:
    """Wire the serve phase.

    Args:
        settings: Application settings.
        source: Document source override; derived from settings when omitted.
        registry: Registry override; the configured JSON file when omitted.
    """
    store = build_period_store(settings, source or build_document_source(settings))
    return BrandAssociationService(store, registry or build_registry(settings))


def build_period_builder(settings: Settings) -> BuildPeriodDocumentsUseCase:
    """Wire the build phase."""
    return BuildPeriodDocumentsUseCase(
        CsvSourceTableReader(delimiter=settings.csv_delimiter),
        JsonPeriodDocumentWriter(settings.output_dir),
        large_file_bytes=settings.large_file_bytes,
        max_logged_warnings=settings.max_logged_warnings,
        observer=PrometheusBuildObserver(),
    )


__all__ = [
    "build_association_service",
    "build_document_source",
    "build_period_builder",
    "build_period_store",
    "build_registry",
]
