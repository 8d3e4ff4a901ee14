# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Structured JSON logging utilities.

This module exposes an idempotent root configurator and a per-module logger
factory that produce one JSON object per line.

Features:
    * Stable keys: ``ts``, ``level``, ``logger``, ``message``.
    * Build-run correlation: ``run_id`` taken from the record, then from the
      current context (see :func:`bind_run_id`), then from ``BRANDPULSE_RUN_ID``.
    * Structured fields passed as ``extra={"extra": {...}}`` are merged into
      the top-level object.

Typical usage:
    configure_root_logging()
    log = get_json_logger(__name__)
    log.info("build.file_processed", extra={"extra": {"period": "2012Q1"}})
"""

from __future__ import annotations

import json
import logging
import os
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

__all__ = [
    "bind_run_id",
    "configure_root_logging",
    "get_json_logger",
    "get_run_id",
]

_RUN_ID_ENV_KEY = "BRANDPULSE_RUN_ID"

_RUN_ID_CTX: ContextVar[str | None] = ContextVar("brandpulse_run_id", default=None)


def bind_run_id(run_id: str | None = None) -> str:
    """Bind a correlation id to the current context and return it.

    Args:
        run_id: Explicit id to bind. A random hex id is generated when omitted.
    """
    rid = run_id or uuid.uuid4().hex
    _RUN_ID_CTX.set(rid)
    return rid


def get_run_id() -> str | None:
    """Return the run id bound to the current context, if any."""
    return _RUN_ID_CTX.get(None)


class _JsonFormatter(logging.Formatter):
    """JSON log formatter emitting stable keys and optional extras."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a JSON object.

        Args:
            record: Logging record.

        Returns:
            JSON-encoded log line.
        """
        payload: dict[str, Any] = {
            "ts": datetime.now(tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        rid: str | None = (
            getattr(record, "run_id", None) or _RUN_ID_CTX.get(None) or os.getenv(_RUN_ID_ENV_KEY)
        )
        if rid:
            payload["run_id"] = rid

        # Exceptions: guard against None in exc_info tuple.
        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            if exc_type is not None:
                payload["exc_type"] = exc_type.__name__
            if exc_value is not None:
                payload["exc_message"] = str(exc_value)

        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


def configure_root_logging(level: str | int | None = None) -> None:
    """Initialize the root logger with a JSON stream handler (idempotent).

    Args:
        level: Logging level or level name. If ``None``, use env ``LOG_LEVEL`` or ``INFO``.
    """
    root = logging.getLogger()

    env_level = os.getenv("LOG_LEVEL")
    resolved: int | str = (
        level if level is not None else (env_level.upper() if env_level else "INFO")
    )
    root.setLevel(resolved.upper() if isinstance(resolved, str) else resolved)

    if root.handlers:
        # Already configured; prevent duplicate handlers.
        return

    handler = logging.StreamHandler()
    handler.setFormatter(_JsonFormatter())
    root.addHandler(handler)


def get_json_logger(name: str) -> logging.Logger:
    """Return a module-specific logger backed by the JSON root handler.

    This does *not* implicitly configure the root logger. Call
    :func:`configure_root_logging` once at startup.

    Args:
        name: Logger name, typically ``__name__`` of the caller.
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger
