"""Shared fakes and fact builders for the test suite."""

import asyncio
from datetime import datetime, timezone
from typing import Optional, Union

from rdflib import Literal

from parking_query.errors import FetchError
from parking_query.facts import Fact
from parking_query.vocabulary import DEFAULT_VOCABULARY as V


def lit(value) -> str:
    """N3 encoding of a Python value."""
    return Literal(value).n3()


def utc(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


class StaticGraphClient:
    """In-memory graph client: URL -> facts, or an exception to raise."""

    def __init__(
        self,
        documents: dict[str, Union[list[Fact], Exception]],
        delays: Optional[dict[str, float]] = None,
    ):
        self.documents = documents
        self.delays = delays or {}
        self.requested: list[str] = []

    async def fetch(self, url: str) -> list[Fact]:
        self.requested.append(url)
        await asyncio.sleep(self.delays.get(url, 0))
        document = self.documents.get(url)
        if document is None:
            raise FetchError(url, "not found", status=404)
        if isinstance(document, Exception):
            raise document
        return list(document)

    async def aclose(self) -> None:
        pass


def parking_facts(dataset: str, facilities: list[tuple[str, str, int]]) -> list[Fact]:
    """Facts describing urban parking sites as (local name, label, capacity)."""
    facts = []
    for name, label, capacity in facilities:
        subject = f"{dataset}#{name}"
        facts.extend([
            Fact(subject, V.rdf_type, V.urban_parking_site),
            Fact(subject, V.rdfs_label, lit(label)),
            Fact(subject, V.number_of_spaces, lit(capacity)),
        ])
    return facts


def catalog_facts(datasets: dict[str, list[str]], range_gates: Optional[dict[str, str]] = None) -> list[Fact]:
    """DCAT facts: dataset subject -> download URLs, one distribution each."""
    facts = []
    for dataset, download_urls in datasets.items():
        facts.append(Fact(dataset, V.rdf_type, V.dcat_dataset))
        for i, url in enumerate(download_urls):
            distribution = f"{dataset}/distribution/{i}"
            facts.append(Fact(dataset, V.dcat_distribution, distribution))
            facts.append(Fact(distribution, V.dcat_download_url, url))
    for dataset, gate in (range_gates or {}).items():
        facts.append(Fact(dataset, V.has_range_gate, gate))
    return facts


def interval_page(
    page_url: str,
    observations: list[tuple[int, str, int]],
    previous: Optional[str] = None,
) -> list[Fact]:
    """An interval page of (unix time, facility URI, vacant spaces) observations."""
    facts = []
    for i, (timestamp, facility, vacant) in enumerate(observations):
        graph = f"{page_url}#g{i}"
        facts.append(Fact(graph, V.generated_at_time, lit(utc(timestamp))))
        facts.append(Fact(facility, V.number_of_vacant_spaces, lit(vacant), graph))
    if previous:
        facts.append(Fact(page_url, V.hydra_previous, previous))
    return facts
