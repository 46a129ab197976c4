"""
Parking Data Query - Catalog-driven aggregation of linked parking data.

Resolves DCAT catalogs into dataset endpoints and merges facility
snapshots and measurement intervals from all of them into single
async streams.
"""

__version__ = "0.3.0"

from .config import QueryConfig
from .vocabulary import Vocabulary
from .errors import (
    ParkingQueryError,
    FetchError,
    NotFoundError,
    MalformedRecordError,
    EmptySourceError,
    LiteralDecodeError,
)
from .facts import Fact, FactPattern, GraphClient, decode_literal, filter_facts
from .catalog import CatalogResolver, CatalogState
from .aggregation import (
    FacilityRecord,
    IntervalAggregator,
    IntervalFetcher,
    MeasurementRecord,
    MergedStream,
    SnapshotAggregator,
    SourceFailure,
)
from .query import ParkingDataQuery

__all__ = [
    # Config
    "QueryConfig",
    "Vocabulary",
    # Errors
    "ParkingQueryError",
    "FetchError",
    "NotFoundError",
    "MalformedRecordError",
    "EmptySourceError",
    "LiteralDecodeError",
    # Facts
    "Fact",
    "FactPattern",
    "GraphClient",
    "decode_literal",
    "filter_facts",
    # Catalog
    "CatalogResolver",
    "CatalogState",
    # Aggregation
    "FacilityRecord",
    "IntervalAggregator",
    "IntervalFetcher",
    "MeasurementRecord",
    "MergedStream",
    "SnapshotAggregator",
    "SourceFailure",
    # Facade
    "ParkingDataQuery",
]
