# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Lenient numeric parsing of metric cells.

Purpose:
    Turn raw source cells into ``float | None``. Malformed input never raises;
    it becomes "not measured" and can be reported as a build warning.

Layer:
    domain/services
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from brandpulse.domain.entities.metric_record import MetricRecord
from brandpulse.domain.services.metric_schema import METRIC_NAMES


def _is_blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def parse_metric_value(raw: Any) -> float | None:
    """Parse one metric cell.

    Args:
        raw: Cell content: text, a number, or ``None``.

    Returns:
        The numeric value, or ``None`` when the cell is blank or does not hold
        a finite number.
    """
    if _is_blank(raw) or isinstance(raw, bool):
        return None
    try:
        value = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def is_invalid_metric_cell(raw: Any) -> bool:
    """Return True for a non-blank cell that does not parse to a number."""
    return not _is_blank(raw) and parse_metric_value(raw) is None


def parse_metric_row(row: Mapping[str, Any]) -> MetricRecord:
    """Parse every known metric column of ``row`` into a :class:`MetricRecord`.

    Missing columns become ``None``. Values are stored as read; range checks
    happen during validation, not here.
    """
    return MetricRecord.from_mapping({name: parse_metric_value(row.get(name)) for name in METRIC_NAMES})


__all__ = ["is_invalid_metric_cell", "parse_metric_row", "parse_metric_value"]
