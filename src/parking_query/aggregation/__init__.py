"""Aggregation - merged snapshot and interval streams over the catalog."""

from .models import FacilityRecord, MeasurementRecord, facility_identifier
from .stream import MergedStream, SourceFailure, StreamStats
from .facilities import SnapshotAggregator, extract_facilities
from .interval import (
    IntervalAggregator,
    IntervalFetcher,
    MeasurementFetcher,
    entry_url,
    extract_measurements,
)

__all__ = [
    "FacilityRecord",
    "MeasurementRecord",
    "facility_identifier",
    "MergedStream",
    "SourceFailure",
    "StreamStats",
    "SnapshotAggregator",
    "extract_facilities",
    "IntervalAggregator",
    "IntervalFetcher",
    "MeasurementFetcher",
    "entry_url",
    "extract_measurements",
]
