"""Catalog - dataset endpoint registry and DCAT catalog resolution."""

from .state import CatalogState
from .resolver import CatalogResolver

__all__ = ["CatalogState", "CatalogResolver"]
