# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Metric schema table for quarterly brand-perception snapshots.

Purpose:
    Single source of truth for the metric columns carried by a quarterly
    source file and by :class:`~brandpulse.domain.entities.metric_record.MetricRecord`.
    The table defines, per column:
        * The exact column / field name.
        * A human-readable label.
        * A high-level category.
        * The value kind, derived from the name suffix.

Layer:
    domain

Notes:
    - Pure domain logic: no logging, no I/O.
    - Order matches the column order of the source files and is the order in
      which metrics are serialized.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

from brandpulse.domain.enums.metrics import MetricCategory, MetricKind

_SUFFIX_KINDS: Final[tuple[tuple[str, MetricKind], ...]] = (
    ("_pct", MetricKind.PERCENT),
    ("_MS", MetricKind.SHARE),
    ("_C", MetricKind.COMPOSITE),
)


def metric_kind_for(name: str) -> MetricKind:
    """Return the :class:`MetricKind` implied by a column name suffix.

    Raises:
        ValueError: If the name carries none of the known suffixes.
    """
    for suffix, kind in _SUFFIX_KINDS:
        if name.endswith(suffix):
            return kind
    raise ValueError(f"Metric column {name!r} has no recognised kind suffix.")


@dataclass(frozen=True)
class MetricSpec:
    """Metadata describing a single metric column.

    Attributes:
        name: Column name in the source file and field name on ``MetricRecord``.
        label: Human-readable label.
        category: High-level grouping.
        kind: Value kind derived from ``name``.
    """

    name: str
    label: str
    category: MetricCategory
    kind: MetricKind

    @property
    def unit(self) -> str:
        return self.kind.unit


def _spec(name: str, label: str, category: MetricCategory) -> MetricSpec:
    return MetricSpec(name=name, label=label, category=category, kind=metric_kind_for(name))


_A = MetricCategory.AWARENESS
_E = MetricCategory.BRAND_EQUITY
_D = MetricCategory.DIFFERENTIATION
_Q = MetricCategory.QUALITY
_P = MetricCategory.PERSONALITY
_R = MetricCategory.RELATIONSHIP
_X = MetricCategory.ADDITIONAL

METRIC_SCHEMA: Final[tuple[MetricSpec, ...]] = (
    # Awareness & Preference
    _spec("Total_Users_pct", "Total Users", _A),
    _spec("Total_Prefer_pct", "Total Prefer", _A),
    # Brand Equity composites
    _spec("Energized_Differentiation_C", "Energized Differentiation", _E),
    _spec("Relevance_C", "Relevance", _E),
    _spec("Esteem_C", "Esteem", _E),
    _spec("Knowledge_C", "Knowledge", _E),
    _spec("Brand_Stature_C", "Brand Stature", _E),
    _spec("Brand_Strength_C", "Brand Strength", _E),
    _spec("Brand_Asset_C", "Brand Asset", _E),
    # Differentiation
    _spec("Different_pct", "Different", _D),
    _spec("Distinctive_pct", "Distinctive", _D),
    _spec("Unique_pct", "Unique", _D),
    _spec("Dynamic_pct", "Dynamic", _D),
    _spec("Innovative_pct", "Innovative", _D),
    _spec("Leader_pct", "Leader", _D),
    _spec("Original_pct", "Original", _D),
    _spec("Cutting_Edge_C", "Cutting Edge", _D),
    # Quality & Performance
    _spec("Reliable_pct", "Reliable", _Q),
    _spec("High_quality_pct", "High Quality", _Q),
    _spec("High_Performance_pct", "High Performance", _Q),
    _spec("Superior_C", "Superior", _Q),
    _spec("Worth_More_pct", "Worth More", _Q),
    # Personality & Character
    _spec("Arrogant_pct", "Arrogant", _P),
    _spec("Authentic_pct", "Authentic", _P),
    _spec("Best_Brand_pct", "Best Brand", _P),
    _spec("Carefree_pct", "Carefree", _P),
    _spec("Cares_Customers_pct", "Cares About Customers", _P),
    _spec("Charming_pct", "Charming", _P),
    _spec("Daring_pct", "Daring", _P),
    _spec("Down_to_Earth_pct", "Down to Earth", _P),
    _spec("Energetic_pct", "Energetic", _P),
    _spec("Friendly_pct", "Friendly", _P),
    _spec("Fun_pct", "Fun", _P),
    _spec("Gaining_In_Popularity_pct", "Gaining in Popularity", _P),
    _spec("Glamorous_pct", "Glamorous", _P),
    _spec("Good_Value_pct", "Good Value", _P),
    _spec("Healthy_pct", "Healthy", _P),
    _spec("Helpful_pct", "Helpful", _P),
    _spec("Independent_pct", "Independent", _P),
    _spec("Intelligent_pct", "Intelligent", _P),
    _spec("Kind_pct", "Kind", _P),
    _spec("Obliging_pct", "Obliging", _P),
    _spec("Prestigious_pct", "Prestigious", _P),
    _spec("Progressive_pct", "Progressive", _P),
    _spec("Restrained_pct", "Restrained", _P),
    _spec("Rugged_pct", "Rugged", _P),
    _spec("Sensuous_pct", "Sensuous", _P),
    _spec("Simple_pct", "Simple", _P),
    _spec("Social_pct", "Social", _P),
    _spec("Socially_Responsible_pct", "Socially Responsible", _P),
    _spec("Straightforward_pct", "Straightforward", _P),
    _spec("Stylish_pct", "Stylish", _P),
    _spec("Traditional_pct", "Traditional", _P),
    _spec("Trendy_pct", "Trendy", _P),
    _spec("Trustworthy_pct", "Trustworthy", _P),
    _spec("Unapproachable_pct", "Unapproachable", _P),
    _spec("Up_To_Date_pct", "Up to Date", _P),
    _spec("Upper_Class_pct", "Upper Class", _P),
    _spec("Visionary_pct", "Visionary", _P),
    _spec("Classic_C", "Classic", _P),
    _spec("Chic_C", "Chic", _P),
    _spec("Customer_Centric_C", "Customer Centric", _P),
    _spec("Outgoing_C", "Outgoing", _P),
    _spec("No_Nonsense_C", "No Nonsense", _P),
    _spec("Distant_C", "Distant", _P),
    # Relationship & Engagement
    _spec("Adapts_to_my_needs_pct", "Adapts to My Needs", _R),
    _spec("Belong_to_a_club_pct", "Belong to a Club", _R),
    _spec("Best_option_available_pct", "Best Option Available", _R),
    _spec("Fairly_priced_pct", "Fairly Priced", _R),
    _spec("Feel_loyal_pct", "Feel Loyal", _R),
    _spec("Goes_out_of_its_way_pct", "Goes Out of Its Way", _R),
    _spec("Identify_with_other_users_pct", "Identify with Other Users", _R),
    _spec("Interested_learning_more_pct", "Interested in Learning More", _R),
    _spec("Interested_special_events_pct", "Interested in Special Events", _R),
    _spec("Meets_my_needs_completely_pct", "Meets My Needs Completely", _R),
    _spec("My_kind_of_brand_pct", "My Kind of Brand", _R),
    _spec("One_of_my_favorite_brands_pct", "One of My Favorite Brands", _R),
    _spec("Recommend_to_a_friend_pct", "Recommend to a Friend", _R),
    _spec("Resolves_conflicts_well_pct", "Resolves Conflicts Well", _R),
    _spec("Strongest_relationship_pct", "Strongest Relationship", _R),
    _spec("Want_my_business_pct", "Wants My Business", _R),
    _spec("Worth_a_premium_price_pct", "Worth a Premium Price", _R),
    _spec("Would_miss_if_went_away_pct", "Would Miss If It Went Away", _R),
    # Additional
    _spec("Regard_MS", "Regard", _X),
)

METRIC_NAMES: Final[tuple[str, ...]] = tuple(spec.name for spec in METRIC_SCHEMA)

_SPECS_BY_NAME: Final[Mapping[str, MetricSpec]] = {spec.name: spec for spec in METRIC_SCHEMA}

PERCENT_METRIC_NAMES: Final[frozenset[str]] = frozenset(
    spec.name for spec in METRIC_SCHEMA if spec.kind is MetricKind.PERCENT
)

PERCENT_RANGE: Final[tuple[float, float]] = (0.0, 100.0)


def get_metric_spec(name: str) -> MetricSpec:
    """Return the schema entry for ``name``.

    Raises:
        KeyError: If ``name`` is not a known metric column.
    """
    try:
        return _SPECS_BY_NAME[name]
    except KeyError:
        raise KeyError(f"Unknown metric: {name!r}") from None


def is_metric_name(name: str) -> bool:
    return name in _SPECS_BY_NAME


def metrics_in_category(category: MetricCategory) -> list[MetricSpec]:
    """Return schema entries of one category, in schema order."""
    return [spec for spec in METRIC_SCHEMA if spec.category is category]


def is_out_of_range(name: str, value: float) -> bool:
    """Return True if ``value`` lies outside the expected range for ``name``.

    Unranged kinds (composite and share scores) are never out of range.
    """
    spec = get_metric_spec(name)
    if not spec.kind.is_ranged:
        return False
    low, high = PERCENT_RANGE
    return value < low or value > high


__all__ = [
    "METRIC_NAMES",
    "METRIC_SCHEMA",
    "MetricSpec",
    "PERCENT_METRIC_NAMES",
    "PERCENT_RANGE",
    "get_metric_spec",
    "is_metric_name",
    "is_out_of_range",
    "metric_kind_for",
    "metrics_in_category",
]
