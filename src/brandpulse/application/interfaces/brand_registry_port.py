# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Application Interface: Brand Registry Port.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from brandpulse.domain.entities.brand import Brand


class BrandRegistryPort(Protocol):
    """Read-only access to the external brand registry."""

    def list_brands(self) -> Sequence[Brand]:
        """Return every registry entry in registry order.

        Raises:
            RegistryLoadError: If the registry cannot be read or is malformed.
        """
