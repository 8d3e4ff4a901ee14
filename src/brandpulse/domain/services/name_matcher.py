# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Name-based association between source rows and registry brands.

Purpose:
    Decide whether a brand name read from a source file refers to a registry
    entry. Matching is exact after trimming and lower-casing; there is no
    fuzzy matching ("Acme" does not match "Acme Inc.").

Layer:
    domain/services
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from brandpulse.domain.entities.brand import Brand


def normalize_name(name: str) -> str:
    """Return ``name`` trimmed and lower-cased."""
    return name.strip().lower()


def names_match(a: str, b: str) -> bool:
    return normalize_name(a) == normalize_name(b)


def find_brand_by_name(name: str, brands: Iterable[Brand]) -> Brand | None:
    """Return the first brand whose normalized name equals ``name``'s, else None."""
    wanted = normalize_name(name)
    for brand in brands:
        if normalize_name(brand.name) == wanted:
            return brand
    return None


class BrandNameIndex:
    """Precomputed normalized-name lookup over a registry snapshot.

    Equivalent to :func:`find_brand_by_name` for every input, but O(1) per
    lookup. When two registry entries normalize to the same name the first one
    in registry order is kept and the later ones are listed in
    :attr:`collisions`.
    """

    def __init__(self, brands: Sequence[Brand]) -> None:
        self._by_name: dict[str, Brand] = {}
        self.collisions: list[tuple[Brand, Brand]] = []
        for brand in brands:
            key = normalize_name(brand.name)
            kept = self._by_name.get(key)
            if kept is None:
                self._by_name[key] = brand
            else:
                self.collisions.append((kept, brand))

    def __len__(self) -> int:
        return len(self._by_name)

    def find(self, name: str) -> Brand | None:
        return self._by_name.get(normalize_name(name))


__all__ = ["BrandNameIndex", "find_brand_by_name", "names_match", "normalize_name"]
