# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""MetricRecord domain entity.

Purpose:
    Typed, partially-null set of brand-perception measurements attached to one
    brand in one period.

Layer:
    domain/entities

Notes:
    - ``None`` means "not measured" and is never coerced to zero; a measured
      ``0.0`` is a distinct, valid value.
    - Field names are the source column names and follow the schema table in
      :mod:`brandpulse.domain.services.metric_schema`. A parity test keeps the
      two in sync.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, fields
from typing import Any

from brandpulse.domain.services.metric_schema import METRIC_NAMES, get_metric_spec

NO_DATA_LABEL = "No data"


@dataclass(frozen=True, slots=True)
class MetricRecord:
    """All metric columns of one snapshot row, each independently nullable."""

    # Awareness & Preference
    Total_Users_pct: float | None = None
    Total_Prefer_pct: float | None = None
    # Brand Equity composites
    Energized_Differentiation_C: float | None = None
    Relevance_C: float | None = None
    Esteem_C: float | None = None
    Knowledge_C: float | None = None
    Brand_Stature_C: float | None = None
    Brand_Strength_C: float | None = None
    Brand_Asset_C: float | None = None
    # Differentiation
    Different_pct: float | None = None
    Distinctive_pct: float | None = None
    Unique_pct: float | None = None
    Dynamic_pct: float | None = None
    Innovative_pct: float | None = None
    Leader_pct: float | None = None
    Original_pct: float | None = None
    Cutting_Edge_C: float | None = None
    # Quality & Performance
    Reliable_pct: float | None = None
    High_quality_pct: float | None = None
    High_Performance_pct: float | None = None
    Superior_C: float | None = None
    Worth_More_pct: float | None = None
    # Personality & Character
    Arrogant_pct: float | None = None
    Authentic_pct: float | None = None
    Best_Brand_pct: float | None = None
    Carefree_pct: float | None = None
    Cares_Customers_pct: float | None = None
    Charming_pct: float | None = None
    Daring_pct: float | None = None
    Down_to_Earth_pct: float | None = None
    Energetic_pct: float | None = None
    Friendly_pct: float | None = None
    Fun_pct: float | None = None
    Gaining_In_Popularity_pct: float | None = None
    Glamorous_pct: float | None = None
    Good_Value_pct: float | None = None
    Healthy_pct: float | None = None
    Helpful_pct: float | None = None
    Independent_pct: float | None = None
    Intelligent_pct: float | None = None
    Kind_pct: float | None = None
    Obliging_pct: float | None = None
    Prestigious_pct: float | None = None
    Progressive_pct: float | None = None
    Restrained_pct: float | None = None
    Rugged_pct: float | None = None
    Sensuous_pct: float | None = None
    Simple_pct: float | None = None
    Social_pct: float | None = None
    Socially_Responsible_pct: float | None = None
    Straightforward_pct: float | None = None
    Stylish_pct: float | None = None
    Traditional_pct: float | None = None
    Trendy_pct: float | None = None
    Trustworthy_pct: float | None = None
    Unapproachable_pct: float | None = None
    Up_To_Date_pct: float | None = None
    Upper_Class_pct: float | None = None
    Visionary_pct: float | None = None
    Classic_C: float | None = None
    Chic_C: float | None = None
    Customer_Centric_C: float | None = None
    Outgoing_C: float | None = None
    No_Nonsense_C: float | None = None
    Distant_C: float | None = None
    # Relationship & Engagement
    Adapts_to_my_needs_pct: float | None = None
    Belong_to_a_club_pct: float | None = None
    Best_option_available_pct: float | None = None
    Fairly_priced_pct: float | None = None
    Feel_loyal_pct: float | None = None
    Goes_out_of_its_way_pct: float | None = None
    Identify_with_other_users_pct: float | None = None
    Interested_learning_more_pct: float | None = None
    Interested_special_events_pct: float | None = None
    Meets_my_needs_completely_pct: float | None = None
    My_kind_of_brand_pct: float | None = None
    One_of_my_favorite_brands_pct: float | None = None
    Recommend_to_a_friend_pct: float | None = None
    Resolves_conflicts_well_pct: float | None = None
    Strongest_relationship_pct: float | None = None
    Want_my_business_pct: float | None = None
    Worth_a_premium_price_pct: float | None = None
    Would_miss_if_went_away_pct: float | None = None
    # Additional
    Regard_MS: float | None = None

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> MetricRecord:
        """Build a record from a name -> number mapping.

        Unknown keys are ignored and missing keys become ``None``.

        Raises:
            TypeError: If a known key carries a non-numeric value.
        """
        kwargs: dict[str, float | None] = {}
        for name in METRIC_NAMES:
            value = values.get(name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise TypeError(
                    f"MetricRecord.{name} must be a number or None; got {type(value).__name__}."
                )
            kwargs[name] = float(value)
        return cls(**kwargs)

    def get(self, name: str) -> float | None:
        """Return the value of metric ``name``.

        Raises:
            KeyError: If ``name`` is not a known metric.
        """
        get_metric_spec(name)
        value: float | None = getattr(self, name)
        return value

    def to_dict(self) -> dict[str, float | None]:
        """Return every metric in schema order, ``None`` for not measured."""
        return {name: getattr(self, name) for name in METRIC_NAMES}

    def measured(self) -> dict[str, float]:
        """Return only the metrics that carry a value."""
        return {name: value for name, value in self.items() if value is not None}

    def items(self) -> Iterator[tuple[str, float | None]]:
        for f in fields(self):
            yield f.name, getattr(self, f.name)

    @property
    def is_empty(self) -> bool:
        """True when no metric was measured."""
        return not self.measured()


def format_metric_value(name: str, value: float | None, *, digits: int = 2) -> str:
    """Render a metric value with the unit implied by its kind.

    Percentages render with a ``%`` unit; composite and share scores render
    bare. ``None`` renders as ``"No data"``.

    Raises:
        KeyError: If ``name`` is not a known metric.
    """
    spec = get_metric_spec(name)
    if value is None:
        return NO_DATA_LABEL
    return f"{value:.{digits}f}{spec.unit}"


__all__ = ["MetricRecord", "NO_DATA_LABEL", "format_metric_value"]
