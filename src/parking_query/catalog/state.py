"""
Catalog State - Registry of dataset endpoints and their fast-path entry points.
"""

import logging
from typing import Optional

from ..errors import NotFoundError

logger = logging.getLogger(__name__)


class CatalogState:
    """
    Owned registry of known dataset endpoints.

    Endpoints keep insertion order and are unique by URL. Each endpoint
    may carry a fast-path entry point that snapshot queries prefer.
    """

    def __init__(self):
        self._datasets: list[str] = []
        self._fast_paths: dict[str, str] = {}

    def add_dataset(self, url: str) -> bool:
        """Add a dataset endpoint. Returns False when it was already known."""
        if url in self._datasets:
            return False
        self._datasets.append(url)
        logger.debug(f"Added dataset to catalog: {url}")
        return True

    def add_fast_path(self, dataset_url: str, fast_path_url: str) -> None:
        """
        Register a fast-path entry point for a cataloged dataset.

        Raises:
            NotFoundError: If the dataset URL is not in the catalog.
        """
        if dataset_url not in self._datasets:
            raise NotFoundError(dataset_url)
        self._fast_paths[dataset_url] = fast_path_url

    def record_fast_path(self, key: str, fast_path_url: str) -> None:
        """Register a fast path without the membership check (catalog resolution)."""
        if key not in self._datasets:
            logger.debug(f"Fast path {fast_path_url} registered for uncataloged key {key}")
        self._fast_paths[key] = fast_path_url

    def fast_path(self, dataset_url: str) -> Optional[str]:
        return self._fast_paths.get(dataset_url)

    def entry_point(self, dataset_url: str) -> str:
        """URL to query for a dataset: its fast path when one exists."""
        return self._fast_paths.get(dataset_url, dataset_url)

    def list_datasets(self) -> list[str]:
        """Snapshot of the cataloged endpoints, in insertion order."""
        return list(self._datasets)

    def list_fast_paths(self) -> dict[str, str]:
        return dict(self._fast_paths)

    def __len__(self) -> int:
        return len(self._datasets)

    def __contains__(self, url: str) -> bool:
        return url in self._datasets
