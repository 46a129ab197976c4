"""Facts - fact model, pattern filter, literal decoding and the graph client."""

from .model import Fact, FactPattern
from .filter import filter_facts, find_fact
from .literals import decode_literal, is_literal
from .client import GraphClient

__all__ = [
    "Fact",
    "FactPattern",
    "filter_facts",
    "find_fact",
    "decode_literal",
    "is_literal",
    "GraphClient",
]
