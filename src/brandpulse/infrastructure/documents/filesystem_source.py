# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Local directory document source.

Reads documents from the build output directory. File reads run in a worker
thread so the event loop is never blocked.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from brandpulse.domain.exceptions.brand_data import (
    DocumentDecodeError,
    DocumentNotFoundError,
    DocumentSourceError,
)


class FileSystemDocumentSource:
    """Document source rooted at a local directory."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    async def fetch_json(self, name: str) -> Mapping[str, Any]:
        """Read and decode ``<root>/<name>``.

        Raises:
            DocumentNotFoundError: The file does not exist.
            DocumentDecodeError: The file is not a JSON object.
            DocumentSourceError: The file cannot be read.
        """
        return await asyncio.to_thread(self._read, name)

    def _read(self, name: str) -> Mapping[str, Any]:
        path = self._root / name
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise DocumentNotFoundError(
                f"Document not found: {name}",
                details={"name": name, "path": str(path)},
            ) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentSourceError(
                f"Cannot read document {name}.",
                details={"name": name, "path": str(path), "error": str(exc)},
            ) from exc

        try:
            payload: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DocumentDecodeError(
                f"Document {name} is not valid JSON.",
                details={"name": name, "error": str(exc)},
            ) from exc
        if not isinstance(payload, Mapping):
            raise DocumentDecodeError(
                f"Document {name} must be a JSON object.",
                details={"name": name, "type": type(payload).__name__},
            )
        return payload


__all__ = ["FileSystemDocumentSource"]
