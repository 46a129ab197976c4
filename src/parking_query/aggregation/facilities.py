"""
Snapshot Aggregator - Current facilities from every cataloged dataset.
"""

import logging
from typing import AsyncIterator, Callable, Iterator, Optional

from pydantic import ValidationError

from ..catalog import CatalogState
from ..errors import EmptySourceError, LiteralDecodeError, MalformedRecordError
from ..facts import Fact, FactPattern, GraphClient, decode_literal, filter_facts, find_fact
from ..vocabulary import DEFAULT_VOCABULARY, Vocabulary
from .models import FacilityRecord, facility_identifier
from .stream import MergedStream, SourceFailure

logger = logging.getLogger(__name__)


def extract_facilities(
    facts: list[Fact],
    dataset_url: str,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> Iterator[FacilityRecord]:
    """
    Decode the facility records described by ``facts``, in fact order.

    Raises:
        EmptySourceError: If no urban parking site is described.
        MalformedRecordError: If a parking site lacks a decodable
            capacity or label. Records before it have already been yielded.
    """
    candidates = filter_facts(FactPattern(object=vocabulary.urban_parking_site), facts)
    subjects = list(dict.fromkeys(fact.subject for fact in candidates))
    if not subjects:
        raise EmptySourceError(dataset_url)

    capacities = filter_facts(FactPattern(predicate=vocabulary.number_of_spaces), facts)
    labels = filter_facts(FactPattern(predicate=vocabulary.rdfs_label), facts)

    for subject in subjects:
        capacity_fact = find_fact(FactPattern(subject=subject), capacities)
        if capacity_fact is None:
            raise MalformedRecordError(subject, "missing number of spaces")
        label_fact = find_fact(FactPattern(subject=subject), labels)
        if label_fact is None:
            raise MalformedRecordError(subject, "missing label")

        try:
            capacity = int(decode_literal(capacity_fact.object))
            label = str(decode_literal(label_fact.object))
        except (LiteralDecodeError, TypeError, ValueError) as e:
            raise MalformedRecordError(subject, str(e)) from e

        try:
            record = FacilityRecord(
                label=label,
                identifier=facility_identifier(label),
                source_uri=subject,
                capacity=capacity,
                dataset_url=dataset_url,
            )
        except ValidationError as e:
            raise MalformedRecordError(subject, str(e)) from e
        yield record


class SnapshotAggregator:
    """Fans snapshot queries out to the catalog, preferring fast paths."""

    def __init__(
        self,
        client: GraphClient,
        state: CatalogState,
        vocabulary: Optional[Vocabulary] = None,
    ):
        self.client = client
        self.state = state
        self.vocabulary = vocabulary or DEFAULT_VOCABULARY

    def get_facilities(
        self,
        on_error: Optional[Callable[[SourceFailure], None]] = None,
    ) -> MergedStream[FacilityRecord]:
        """
        Stream facilities from every dataset in the current catalog.

        Per-dataset failures do not end the stream; they are collected in
        the stream's ``errors`` and reported to ``on_error``.
        """
        return MergedStream(
            self.state.list_datasets(),
            self._facilities_for,
            fatal_errors=False,
            on_error=on_error,
            name="facilities",
        )

    async def _facilities_for(self, dataset_url: str) -> AsyncIterator[FacilityRecord]:
        url = self.state.entry_point(dataset_url)
        if url != dataset_url:
            logger.debug(f"Using fast path {url} for {dataset_url}")

        facts = await self.client.fetch(url)
        count = 0
        for record in extract_facilities(facts, dataset_url, self.vocabulary):
            count += 1
            yield record
        logger.debug(f"Read {count} facilities from {url}")
