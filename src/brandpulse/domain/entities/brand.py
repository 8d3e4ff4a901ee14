# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Brand registry entry.

Purpose:
    Read-only view of one entry of the external brand registry. Only ``id``
    and ``name`` participate in association; remaining attributes are kept
    verbatim so callers can render them.

Layer:
    domain/entities
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Brand:
    """A registry entity identified by a stable id and a display name.

    Attributes:
        id: Stable registry identifier (non-empty).
        name: Display name used for name-based matching (non-empty).
        slug: Optional URL slug.
        category: Optional registry category (may differ from a snapshot's).
        attributes: Any further registry fields, kept verbatim.
    """

    id: str
    name: str
    slug: str | None = None
    category: str | None = None
    attributes: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        """Enforce non-empty identity fields."""
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError("Brand.id must be a non-empty string.")
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Brand.name must be a non-empty string.")


__all__ = ["Brand"]
