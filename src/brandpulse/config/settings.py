# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Brandpulse Configuration (Pydantic Settings, v2)

Summary:
    Typed, validated configuration for both phases: where source files and
    the registry live, where documents are written and served from, and the
    tuning knobs of the builder and the period store. Only the outer layers
    (CLI, bootstrap) read it; inner layers receive plain values.

Design:
    - Pydantic v2 BaseSettings with `extra='forbid'` to catch unknown keys.
    - Explicit field declarations with constrained types and ranges.
    - Accessor `get_settings()` with LRU cache.
    - HTTP transport knobs live in
      :class:`~brandpulse.infrastructure.documents.settings.DocumentsHttpSettings`
      (``BRANDPULSE_HTTP_*``).
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Logical deployment environment."""

    DEVELOPMENT = "development"
    TEST = "test"
    CI = "ci"
    PRODUCTION = "production"


_DEFAULT_LOG_LEVELS: dict[Environment, str] = {
    Environment.DEVELOPMENT: "DEBUG",
    Environment.TEST: "WARNING",
    Environment.CI: "INFO",
    Environment.PRODUCTION: "INFO",
}


class Settings(BaseSettings):
    """Typed configuration for Brandpulse."""

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Logical deployment environment.",
        validation_alias="ENVIRONMENT",
    )
    log_level: str | None = Field(
        default=None,
        description="Root log level; defaults per environment when unset.",
        validation_alias="LOG_LEVEL",
    )

    # ---------------------------
    # Build phase
    # ---------------------------
    source_dir: Path = Field(
        default=Path("data/source"),
        description="Directory scanned for quarterly source files (*.csv).",
        validation_alias="BRANDPULSE_SOURCE_DIR",
    )
    output_dir: Path = Field(
        default=Path("data/quarterly"),
        description="Directory receiving index.json and <PERIOD>.json documents.",
        validation_alias="BRANDPULSE_OUTPUT_DIR",
    )
    registry_path: Path = Field(
        default=Path("data/brands.json"),
        description="Brand registry JSON file.",
        validation_alias="BRANDPULSE_REGISTRY_PATH",
    )
    csv_delimiter: str = Field(
        default=",",
        min_length=1,
        max_length=1,
        description="Field delimiter of the source files.",
        validation_alias="BRANDPULSE_CSV_DELIMITER",
    )
    large_file_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="Source files larger than this produce a warning.",
        validation_alias="BRANDPULSE_LARGE_FILE_BYTES",
    )
    max_logged_warnings: int = Field(
        default=10,
        ge=0,
        description="Validation warnings logged per source file.",
        validation_alias="BRANDPULSE_MAX_LOGGED_WARNINGS",
    )

    # ---------------------------
    # Serve phase
    # ---------------------------
    documents_base_url: str | None = Field(
        default=None,
        description=(
            "HTTP origin serving the built documents. When unset, documents are "
            "read from the output directory."
        ),
        validation_alias="BRANDPULSE_DOCUMENTS_BASE_URL",
    )
    slow_load_threshold_s: float = Field(
        default=2.0,
        gt=0,
        description="Period loads slower than this are logged and counted.",
        validation_alias="BRANDPULSE_SLOW_LOAD_THRESHOLD_S",
    )
    summary_every: int = Field(
        default=10,
        ge=0,
        description="Log a period store summary every N loads (0 disables).",
        validation_alias="BRANDPULSE_SUMMARY_EVERY",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @model_validator(mode="after")
    def _default_log_level(self) -> Settings:
        if self.log_level is None:
            self.log_level = _DEFAULT_LOG_LEVELS[self.environment]
        return self

    @field_validator("documents_base_url")
    @classmethod
    def _blank_url_is_unset(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip().rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton `Settings` instance.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        settings = Settings()
    except ValidationError as exc:
        logger.exception("Invalid application configuration")
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
    logger.info(
        "settings.initialized",
        extra={
            "extra": {
                "environment": settings.environment.value,
                "log_level": settings.log_level,
                "source_dir": str(settings.source_dir),
                "output_dir": str(settings.output_dir),
                "registry_path": str(settings.registry_path),
                "documents_over_http": settings.documents_base_url is not None,
            }
        },
    )
    return settings
