# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Brand-perception metric enumerations.

Purpose:
    Classify metric columns by value kind (derived from the column suffix)
    and by the high-level grouping used when presenting a snapshot.

Layer:
    domain

Notes:
    - Values are string identifiers suitable for JSON and external contracts.
"""

from __future__ import annotations

from enum import Enum


class MetricKind(str, Enum):
    """Value kind of a metric column, derived from its name suffix.

    ``PERCENT`` columns (``_pct``) are shares of respondents and are expected
    in ``[0, 100]``; they render with a ``%`` unit. ``COMPOSITE`` (``_C``) and
    ``SHARE`` (``_MS``) columns are unranged scores rendered without a unit.
    """

    PERCENT = "PERCENT"
    COMPOSITE = "COMPOSITE"
    SHARE = "SHARE"

    @property
    def unit(self) -> str:
        """Display unit appended to formatted values."""
        return "%" if self is MetricKind.PERCENT else ""

    @property
    def is_ranged(self) -> bool:
        """Whether values of this kind have an expected ``[0, 100]`` range."""
        return self is MetricKind.PERCENT


class MetricCategory(str, Enum):
    """High-level grouping of metrics."""

    AWARENESS = "Awareness & Preference"
    BRAND_EQUITY = "Brand Equity"
    DIFFERENTIATION = "Differentiation"
    QUALITY = "Quality & Performance"
    PERSONALITY = "Personality & Character"
    RELATIONSHIP = "Relationship & Engagement"
    ADDITIONAL = "Additional"


__all__ = ["MetricCategory", "MetricKind"]
