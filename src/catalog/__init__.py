from __future__ import annotations

from catalog.base import PAGE_SIZE, CatalogClient

__all__ = ["PAGE_SIZE", "CatalogClient"]
