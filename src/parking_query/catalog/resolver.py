"""
Catalog Resolver - Extract dataset endpoints from a DCAT catalog document.
"""

import logging
from typing import Optional

from opentelemetry import trace

from ..facts import Fact, FactPattern, GraphClient, filter_facts
from ..vocabulary import DEFAULT_VOCABULARY, Vocabulary
from .state import CatalogState

logger = logging.getLogger(__name__)
tracer = trace.get_tracer("parking_query.catalog.resolver", "0.3.0")


class CatalogResolver:
    """
    Resolves catalog documents into dataset endpoints.

    Datasets are the subjects typed ``dcat:Dataset``; each distribution's
    ``dcat:downloadURL`` becomes a cataloged endpoint. A dataset's
    ``hasRangeGate`` relation is recorded as its fast path, keyed by the
    dataset subject.
    """

    def __init__(
        self,
        client: GraphClient,
        state: CatalogState,
        vocabulary: Optional[Vocabulary] = None,
    ):
        self.client = client
        self.state = state
        self.vocabulary = vocabulary or DEFAULT_VOCABULARY

    async def resolve_catalog(self, catalog_url: str) -> None:
        """
        Fetch a catalog document and merge its endpoints into the state.

        Raises:
            FetchError: If the catalog cannot be fetched or parsed.
        """
        with tracer.start_as_current_span("resolve_catalog") as span:
            span.set_attribute("catalog_url", catalog_url)

            facts = await self.client.fetch(catalog_url)
            added = self.merge_facts(facts)

            span.set_attribute("datasets_added", added)
            logger.info(
                f"Resolved catalog {catalog_url}: {added} new dataset(s), "
                f"{len(self.state)} in catalog"
            )

    def merge_facts(self, facts: list[Fact]) -> int:
        """Merge the endpoints and fast paths described by ``facts``. Returns the number of new endpoints."""
        vocab = self.vocabulary

        datasets = filter_facts(
            FactPattern(predicate=vocab.rdf_type, object=vocab.dcat_dataset),
            facts,
        )

        distributions: list[Fact] = []
        for dataset in datasets:
            distributions.extend(filter_facts(
                FactPattern(subject=dataset.subject, predicate=vocab.dcat_distribution),
                facts,
            ))

        for dataset in datasets:
            for gate in filter_facts(
                FactPattern(subject=dataset.subject, predicate=vocab.has_range_gate),
                facts,
            ):
                self.state.record_fast_path(dataset.subject, gate.object)

        download_links: list[Fact] = []
        for distribution in distributions:
            download_links.extend(filter_facts(
                FactPattern(subject=distribution.object, predicate=vocab.dcat_download_url),
                facts,
            ))

        added = 0
        for link in download_links:
            if self.state.add_dataset(link.object):
                added += 1
        return added
