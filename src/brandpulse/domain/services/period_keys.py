# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Quarterly period key helpers.

Purpose:
    Derive and normalize period keys of the form ``YYYYQ#`` (e.g. ``2012Q1``).
    Keys sort lexicographically in chronological order.

Layer:
    domain/services
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Final

UNKNOWN_PERIOD: Final[str] = "UNKNOWN"

_PERIOD_IN_NAME: Final[re.Pattern[str]] = re.compile(r"(\d{4}Q\d)", re.IGNORECASE)
_PERIOD_KEY: Final[re.Pattern[str]] = re.compile(r"^\d{4}Q\d$")


def extract_period_key(filename: str) -> str:
    """Return the first ``YYYYQ#`` token in ``filename``, upper-cased.

    Examples:
        ``"Brand Data 2012q1.csv"`` -> ``"2012Q1"``; ``"notes.csv"`` ->
        ``"UNKNOWN"``.
    """
    match = _PERIOD_IN_NAME.search(filename)
    if match is None:
        return UNKNOWN_PERIOD
    return match.group(1).upper()


def normalize_period_key(key: str) -> str:
    return key.strip().upper()


def is_period_key(key: str) -> bool:
    """True if ``key`` (after normalization) is a well-formed period key."""
    return bool(_PERIOD_KEY.match(normalize_period_key(key)))


def sort_period_keys(keys: Iterable[str]) -> list[str]:
    """Return unique normalized keys in ascending order, without ``UNKNOWN``."""
    normalized = {normalize_period_key(k) for k in keys}
    normalized.discard(UNKNOWN_PERIOD)
    return sorted(normalized)


__all__ = [
    "UNKNOWN_PERIOD",
    "extract_period_key",
    "is_period_key",
    "normalize_period_key",
    "sort_period_keys",
]
