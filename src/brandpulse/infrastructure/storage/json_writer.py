# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""JSON writer for build artifacts.

Layout under ``output_dir``:

    index.json
    <PERIOD>.json
    unindexed/<source stem>.json

Each file is written to a temporary sibling and moved into place with
``os.replace``, so readers never observe a partially written document.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from brandpulse.application.schemas.dto.period_documents import PeriodDocumentDTO, PeriodIndexDTO
from brandpulse.domain.entities.period_document import PeriodDocument, PeriodIndex
from brandpulse.domain.exceptions.brand_data import DocumentWriteError
from brandpulse.infrastructure.caching.period_store import INDEX_DOCUMENT, period_document_name

UNINDEXED_DIR = "unindexed"


class JsonPeriodDocumentWriter:
    """Writes period documents and the index as pretty-printed JSON."""

    def __init__(self, output_dir: Path | str) -> None:
        self._output_dir = Path(output_dir)

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def write_period(self, document: PeriodDocument) -> Path:
        path = self._output_dir / period_document_name(document.period_key)
        self._write_json(path, PeriodDocumentDTO.from_domain(document).to_wire())
        return path

    def write_unindexed(self, document: PeriodDocument) -> Path:
        """Write a document whose period is unknown, named after its source file."""
        stem = Path(document.source_file).stem
        path = self._output_dir / UNINDEXED_DIR / f"{stem}.json"
        self._write_json(path, PeriodDocumentDTO.from_domain(document).to_wire())
        return path

    def write_index(self, index: PeriodIndex) -> Path:
        path = self._output_dir / INDEX_DOCUMENT
        self._write_json(path, PeriodIndexDTO.from_domain(index).to_wire())
        return path

    @staticmethod
    def _write_json(path: Path, payload: Any) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        except OSError as exc:
            raise DocumentWriteError(
                f"Cannot write {path.name}: {exc}",
                details={"path": str(path)},
            ) from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2, ensure_ascii=False)
                fh.write("\n")
            os.replace(tmp_name, path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise DocumentWriteError(
                f"Cannot write {path.name}: {exc}",
                details={"path": str(path)},
            ) from exc


__all__ = ["JsonPeriodDocumentWriter", "UNINDEXED_DIR"]
