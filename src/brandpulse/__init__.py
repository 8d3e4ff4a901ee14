# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""Brandpulse: quarterly brand-perception data associated with a brand registry.

Two phases:
    * offline: ``brandpulse build`` turns quarterly CSV files into JSON period
      documents plus a master index.
    * online: :class:`~brandpulse.application.services.brand_association.BrandAssociationService`
      answers per-brand and per-period questions through a cached period store.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
