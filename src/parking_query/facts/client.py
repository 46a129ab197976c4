"""
Graph Client - Fetch a linked-data document and flatten it into facts.

Provides the asynchronous fetch collaborator used by catalog resolution,
snapshot aggregation and interval paging.
"""

import logging
from typing import Optional

import httpx
from opentelemetry import trace
from rdflib import BNode, Dataset, Graph, Literal
from rdflib.graph import DATASET_DEFAULT_GRAPH_ID

from ..config import QueryConfig
from ..errors import FetchError
from .model import Fact

logger = logging.getLogger(__name__)
tracer = trace.get_tracer("parking_query.facts.client", "0.3.0")


# Content type -> rdflib parser name
RDF_FORMATS: dict[str, str] = {
    "application/trig": "trig",
    "text/turtle": "turtle",
    "application/x-turtle": "turtle",
    "application/n-triples": "nt",
    "application/n-quads": "nquads",
    "application/ld+json": "json-ld",
    "application/json": "json-ld",
    "application/rdf+xml": "xml",
    "application/xml": "xml",
    "text/n3": "n3",
}
DEFAULT_FORMAT = "turtle"

# Formats that can carry named graphs
QUAD_FORMATS = {"trig", "nquads", "json-ld"}


def format_for_content_type(content_type: Optional[str]) -> str:
    """Pick the rdflib parser for a Content-Type header value."""
    if not content_type:
        return DEFAULT_FORMAT
    media_type = content_type.split(";")[0].strip().lower()
    return RDF_FORMATS.get(media_type, DEFAULT_FORMAT)


def _term_to_str(term) -> str:
    if isinstance(term, Literal):
        return term.n3()
    if isinstance(term, BNode):
        return f"_:{term}"
    return str(term)


def dataset_to_facts(dataset: Dataset) -> list[Fact]:
    """Flatten every quad of an rdflib dataset into facts."""
    facts = []
    for s, p, o, context in dataset.quads((None, None, None, None)):
        graph = getattr(context, "identifier", context)
        if graph is None or graph == DATASET_DEFAULT_GRAPH_ID:
            graph_name = None
        else:
            graph_name = _term_to_str(graph)
        facts.append(Fact(_term_to_str(s), _term_to_str(p), _term_to_str(o), graph_name))
    return facts


def parse_facts(data: str, rdf_format: str, base: str) -> list[Fact]:
    """Parse a document body; triple formats land in the default graph."""
    if rdf_format in QUAD_FORMATS:
        dataset = Dataset()
        dataset.parse(data=data, format=rdf_format, publicID=base)
        return dataset_to_facts(dataset)

    graph = Graph()
    graph.parse(data=data, format=rdf_format, publicID=base)
    return [Fact(_term_to_str(s), _term_to_str(p), _term_to_str(o)) for s, p, o in graph]


class GraphClient:
    """
    HTTP client returning the facts of a remote RDF document.

    Handles content negotiation, redirects and parser selection.
    """

    def __init__(
        self,
        config: Optional[QueryConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or QueryConfig()
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=self.config.timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": self.config.user_agent},
        )

    async def fetch(self, url: str) -> list[Fact]:
        """
        Fetch and parse a document.

        Args:
            url: Document URL

        Returns:
            Facts of every graph in the document

        Raises:
            FetchError: If the document is unreachable, answers with an
                error status, or cannot be parsed.
        """
        with tracer.start_as_current_span("fetch_graph") as span:
            span.set_attribute("url", url)

            try:
                response = await self._http.get(url, headers={"Accept": self.config.accept})
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise FetchError(url, str(e) or type(e).__name__) from e

            if response.status_code >= 400:
                raise FetchError(url, response.reason_phrase, status=response.status_code)

            rdf_format = format_for_content_type(response.headers.get("content-type"))
            base = str(response.url)

            try:
                facts = parse_facts(response.text, rdf_format, base)
            except Exception as e:
                raise FetchError(url, f"cannot parse {rdf_format}: {e}") from e

            span.set_attribute("fact_count", len(facts))
            logger.debug(f"Fetched {len(facts)} facts from {base} ({rdf_format})")
            return facts

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "GraphClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
