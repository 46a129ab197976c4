"""
Parking Data Query - Single entry point over the catalog and aggregators.

Owns one catalog state and shares it with the resolver and both
aggregators; several independent instances can coexist.
"""

import logging
from typing import AsyncIterator, Callable, Optional

from .aggregation import (
    FacilityRecord,
    IntervalAggregator,
    IntervalFetcher,
    MeasurementFetcher,
    MeasurementRecord,
    MergedStream,
    SnapshotAggregator,
    SourceFailure,
)
from .catalog import CatalogResolver, CatalogState
from .config import QueryConfig
from .facts import GraphClient

logger = logging.getLogger(__name__)


class ParkingDataQuery:
    """
    Catalog-driven parking data queries.

    Resolve DCAT catalogs (or add dataset URLs directly), then stream
    facility snapshots or measurement intervals from every dataset.
    """

    def __init__(
        self,
        config: Optional[QueryConfig] = None,
        client: Optional[GraphClient] = None,
        interval_fetcher: Optional[MeasurementFetcher] = None,
    ):
        self.config = config or QueryConfig()
        self.state = CatalogState()
        self.client = client or GraphClient(self.config)
        self._owns_client = client is None

        vocabulary = self.config.vocabulary
        self._resolver = CatalogResolver(self.client, self.state, vocabulary)
        self._snapshots = SnapshotAggregator(self.client, self.state, vocabulary)
        self._intervals = IntervalAggregator(
            self.state,
            interval_fetcher or IntervalFetcher(
                self.client,
                vocabulary,
                max_pages=self.config.max_interval_pages,
            ),
        )

    @classmethod
    def from_config(cls, config: QueryConfig) -> "ParkingDataQuery":
        return cls(config=config)

    async def bootstrap(self) -> None:
        """
        Load the configured catalogs, datasets and fast paths.

        Raises:
            FetchError: If a configured catalog cannot be resolved.
            NotFoundError: If a fast path names an unknown dataset.
        """
        for catalog_url in self.config.catalogs:
            await self.resolve_catalog(catalog_url)
        for dataset_url in self.config.datasets:
            self.add_dataset(dataset_url)
        for dataset_url, fast_path_url in self.config.fast_paths.items():
            self.add_fast_path(dataset_url, fast_path_url)

    # Catalog

    async def resolve_catalog(self, catalog_url: str) -> None:
        """Fetch a DCAT catalog and add its download URLs to the catalog."""
        await self._resolver.resolve_catalog(catalog_url)

    def add_dataset(self, url: str) -> None:
        """Add a dataset endpoint; adding a known URL is a no-op."""
        if self.state.add_dataset(url):
            logger.info(f"Added dataset {url}")

    def add_fast_path(self, dataset_url: str, fast_path_url: str) -> None:
        """
        Prefer ``fast_path_url`` when querying ``dataset_url``.

        Raises:
            NotFoundError: If ``dataset_url`` is not in the catalog.
        """
        self.state.add_fast_path(dataset_url, fast_path_url)
        logger.info(f"Registered fast path {fast_path_url} for {dataset_url}")

    def list_catalog(self) -> list[str]:
        return self.state.list_datasets()

    # Snapshots

    def get_facilities(
        self,
        on_error: Optional[Callable[[SourceFailure], None]] = None,
    ) -> MergedStream[FacilityRecord]:
        return self._snapshots.get_facilities(on_error=on_error)

    # Intervals

    def get_interval(self, from_ts: float, to_ts: float) -> MergedStream[MeasurementRecord]:
        return self._intervals.get_interval(from_ts, to_ts)

    def get_dataset_interval(
        self, from_ts: float, to_ts: float, dataset_url: str
    ) -> AsyncIterator[MeasurementRecord]:
        return self._intervals.get_dataset_interval(from_ts, to_ts, dataset_url)

    def get_facility_interval(
        self, from_ts: float, to_ts: float, dataset_url: str, facility_uri: str
    ) -> AsyncIterator[MeasurementRecord]:
        return self._intervals.get_facility_interval(from_ts, to_ts, dataset_url, facility_uri)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "ParkingDataQuery":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
