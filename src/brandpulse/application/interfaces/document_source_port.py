# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Application Interface: Document Source Port.

Synopsis:
    Fetches named JSON documents (``index.json``, ``2012Q1.json``) from
    wherever the build phase published them: a local directory or an HTTP
    origin.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class DocumentSourcePort(Protocol):
    """Source of JSON documents addressed by file name."""

    async def fetch_json(self, name: str) -> Mapping[str, Any]:
        """Fetch and decode one document.

        Args:
            name: Document file name relative to the source root.

        Returns:
            The decoded JSON object.

        Raises:
            DocumentNotFoundError: The document does not exist.
            DocumentDecodeError: The payload is not a JSON object.
            DocumentSourceError: Any other transport failure.
        """
