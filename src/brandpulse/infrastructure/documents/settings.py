# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""HTTP document source settings.

Purpose:
    Pydantic-based configuration for fetching built period documents from an
    HTTP origin (static hosting / CDN): base URL, timeout and retry budget.

Layer:
    infrastructure

Notes:
    - Values are sourced from environment variables prefixed with
      ``BRANDPULSE_HTTP_``.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DocumentsHttpSettings(BaseSettings):
    """Configuration for the HTTP document source.

    Environment variables (with ``model_config.env_prefix``):

    * ``BRANDPULSE_HTTP_BASE_URL``
    * ``BRANDPULSE_HTTP_TIMEOUT_S``
    * ``BRANDPULSE_HTTP_MAX_RETRIES``
    """

    base_url: str = Field(
        "http://localhost:8080/quarterly",
        description="Base URL under which index.json and <PERIOD>.json are published.",
    )
    timeout_s: float = Field(
        5.0,
        gt=0,
        description="Per-request timeout in seconds for the transport client.",
    )
    max_retries: int = Field(
        2,
        ge=0,
        description="Maximum number of retry attempts for transport failures and 5xx responses.",
    )

    model_config: SettingsConfigDict = SettingsConfigDict(
        env_prefix="BRANDPULSE_HTTP_",
        extra="ignore",
    )
