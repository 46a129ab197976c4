"""
Interval Aggregator - Time-ranged measurements from cataloged datasets.

Measurements are read from paged interval documents: each page holds
vacant-spaces observations in named graphs stamped with
``prov:generatedAtTime`` and links to older data through
``hydra:previous``.
"""

import logging
from datetime import datetime, timezone
from typing import AsyncIterator, Optional, Protocol

from pydantic import ValidationError

from ..catalog import CatalogState
from ..errors import LiteralDecodeError, MalformedRecordError
from ..facts import Fact, FactPattern, GraphClient, decode_literal, filter_facts, find_fact
from ..vocabulary import DEFAULT_VOCABULARY, Vocabulary
from .models import MeasurementRecord
from .stream import MergedStream

logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


def to_datetime(timestamp: float) -> datetime:
    """Unix timestamp to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def entry_url(endpoint: str, to: float) -> str:
    """Time-scoped entry URL of a dataset: ``<endpoint>?time=<to as ISO-8601>``."""
    separator = "&" if "?" in endpoint else "?"
    return f"{endpoint}{separator}time={to_datetime(to).strftime(TIME_FORMAT)}"


def extract_measurements(
    facts: list[Fact],
    page_url: str,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> list[MeasurementRecord]:
    """
    Decode the measurements of one interval page.

    A measurement is timestamped by its named graph, or by the page
    itself when it sits in the default graph.

    Raises:
        MalformedRecordError: If a measurement has no decodable timestamp
            or value.
    """
    stamps: dict[str, str] = {}
    for fact in filter_facts(FactPattern(predicate=vocabulary.generated_at_time), facts):
        stamps.setdefault(fact.subject, fact.object)

    measurements = []
    for fact in filter_facts(FactPattern(predicate=vocabulary.number_of_vacant_spaces), facts):
        stamp = stamps.get(fact.graph) if fact.graph else None
        if stamp is None:
            stamp = stamps.get(page_url)
        if stamp is None:
            raise MalformedRecordError(fact.subject, f"no generation time on {page_url}")

        try:
            timestamp = decode_literal(stamp)
            vacant = int(decode_literal(fact.object))
        except (LiteralDecodeError, TypeError, ValueError) as e:
            raise MalformedRecordError(fact.subject, str(e)) from e
        if not isinstance(timestamp, datetime):
            raise MalformedRecordError(fact.subject, f"generation time is not a dateTime: {stamp}")
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)

        try:
            measurements.append(MeasurementRecord(
                facility_uri=fact.subject,
                timestamp=timestamp,
                vacant_spaces=vacant,
                page_url=page_url,
            ))
        except ValidationError as e:
            raise MalformedRecordError(fact.subject, str(e)) from e

    return measurements


class MeasurementFetcher(Protocol):
    """Produces the measurements of one dataset within a time range."""

    def fetch(self, from_ts: float, to_ts: float, entry: str) -> AsyncIterator[MeasurementRecord]:
        ...


class IntervalFetcher:
    """
    Walks interval pages backwards from an entry URL.

    Stops at the first page reaching before the interval start, at a page
    without measurements, on a revisited page, when there is no previous
    link, or after ``max_pages`` pages.
    """

    def __init__(
        self,
        client: GraphClient,
        vocabulary: Optional[Vocabulary] = None,
        max_pages: int = 100,
    ):
        self.client = client
        self.vocabulary = vocabulary or DEFAULT_VOCABULARY
        self.max_pages = max_pages

    async def fetch(self, from_ts: float, to_ts: float, entry: str) -> AsyncIterator[MeasurementRecord]:
        start, end = to_datetime(from_ts), to_datetime(to_ts)
        visited: set[str] = set()
        url: Optional[str] = entry

        while url is not None:
            if url in visited:
                logger.warning(f"Interval pages loop back to {url}, stopping")
                return
            if len(visited) >= self.max_pages:
                logger.warning(f"Stopped after {self.max_pages} interval pages from {entry}")
                return
            visited.add(url)

            facts = await self.client.fetch(url)
            measurements = extract_measurements(facts, url, self.vocabulary)
            if not measurements:
                logger.debug(f"No measurements on {url}")
                return

            for measurement in measurements:
                if start <= measurement.timestamp <= end:
                    yield measurement

            if min(m.timestamp for m in measurements) < start:
                return
            url = self._previous_page(facts, url)

    def _previous_page(self, facts: list[Fact], url: str) -> Optional[str]:
        previous = (
            find_fact(FactPattern(subject=url, predicate=self.vocabulary.hydra_previous), facts)
            or find_fact(FactPattern(predicate=self.vocabulary.hydra_previous), facts)
        )
        return previous.object if previous else None


class IntervalAggregator:
    """Fans interval queries out to the catalog; any source failure is fatal."""

    def __init__(self, state: CatalogState, fetcher: MeasurementFetcher):
        self.state = state
        self.fetcher = fetcher

    def get_interval(self, from_ts: float, to_ts: float) -> MergedStream[MeasurementRecord]:
        """Stream measurements between ``from_ts`` and ``to_ts`` from every cataloged dataset."""
        _check_range(from_ts, to_ts)
        return MergedStream(
            self.state.list_datasets(),
            lambda dataset_url: self.fetcher.fetch(from_ts, to_ts, entry_url(dataset_url, to_ts)),
            fatal_errors=True,
            name="interval",
        )

    def get_dataset_interval(
        self, from_ts: float, to_ts: float, dataset_url: str
    ) -> AsyncIterator[MeasurementRecord]:
        """Measurements of a single dataset, straight from the fetcher."""
        _check_range(from_ts, to_ts)
        return self.fetcher.fetch(from_ts, to_ts, entry_url(dataset_url, to_ts))

    async def get_facility_interval(
        self, from_ts: float, to_ts: float, dataset_url: str, facility_uri: str
    ) -> AsyncIterator[MeasurementRecord]:
        """Measurements of one facility within a dataset."""
        async for measurement in self.get_dataset_interval(from_ts, to_ts, dataset_url):
            if measurement.facility_uri == facility_uri:
                yield measurement


def _check_range(from_ts: float, to_ts: float) -> None:
    if from_ts > to_ts:
        raise ValueError(f"Interval start {from_ts} is after its end {to_ts}")
