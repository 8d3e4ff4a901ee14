# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Brand registry adapters.

Synopsis:
    ``JsonFileBrandRegistry`` reads the registry file produced by the brand
    import tooling (``{"brands": [...]}`` or a bare list). Entries keep their
    file order, which decides which entry wins a normalized-name collision.
    ``InMemoryBrandRegistry`` wraps an already-built list.

Layer:
    infrastructure/registry
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from brandpulse.domain.entities.brand import Brand
from brandpulse.domain.exceptions.brand_data import RegistryLoadError
from brandpulse.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

_KNOWN_FIELDS = frozenset({"id", "name", "slug", "category"})


def brand_from_mapping(entry: Mapping[str, Any], *, position: int) -> Brand:
    """Build a :class:`Brand` from one registry entry.

    Raises:
        RegistryLoadError: If the entry is not an object or lacks id/name.
    """
    if not isinstance(entry, Mapping):
        raise RegistryLoadError(
            f"Registry entry {position} is not an object.",
            details={"position": position},
        )
    raw_id = entry.get("id")
    name = entry.get("name")
    if raw_id is None or not str(raw_id).strip() or not isinstance(name, str) or not name.strip():
        raise RegistryLoadError(
            f"Registry entry {position} must have a non-empty id and name.",
            details={"position": position},
        )
    slug = entry.get("slug")
    category = entry.get("category")
    return Brand(
        id=str(raw_id),
        name=name,
        slug=slug if isinstance(slug, str) else None,
        category=category if isinstance(category, str) else None,
        attributes={k: v for k, v in entry.items() if k not in _KNOWN_FIELDS},
    )


class InMemoryBrandRegistry:
    """Registry over a fixed list of brands."""

    def __init__(self, brands: Iterable[Brand]) -> None:
        self._brands = tuple(brands)

    def list_brands(self) -> Sequence[Brand]:
        return self._brands


class JsonFileBrandRegistry:
    """Registry read from a JSON file on every :meth:`list_brands` call.

    Callers that need a stable snapshot cache the returned sequence.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def list_brands(self) -> Sequence[Brand]:
        """Read the registry file.

        Raises:
            RegistryLoadError: If the file is unreadable, not JSON, has an
                unexpected shape, or contains an invalid entry.
        """
        try:
            payload: Any = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            raise RegistryLoadError(
                f"Cannot read brand registry {self._path}.",
                details={"path": str(self._path), "error": str(exc)},
            ) from exc
        except json.JSONDecodeError as exc:
            raise RegistryLoadError(
                f"Brand registry {self._path} is not valid JSON.",
                details={"path": str(self._path), "error": str(exc)},
            ) from exc

        entries = payload.get("brands") if isinstance(payload, Mapping) else payload
        if not isinstance(entries, list):
            raise RegistryLoadError(
                "Brand registry must be a list or an object with a 'brands' list.",
                details={"path": str(self._path)},
            )

        brands = [brand_from_mapping(entry, position=i) for i, entry in enumerate(entries)]
        logger.info(
            "registry.loaded",
            extra={"extra": {"path": str(self._path), "brands": len(brands)}},
        )
        return brands


__all__ = ["InMemoryBrandRegistry", "JsonFileBrandRegistry", "brand_from_mapping"]
