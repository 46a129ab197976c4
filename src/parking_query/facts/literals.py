"""
Literal decoding for N3-encoded fact objects.
"""

from typing import Any

from rdflib import Literal
from rdflib.util import from_n3

from ..errors import LiteralDecodeError


def is_literal(term: str) -> bool:
    return isinstance(term, str) and term.startswith('"')


def decode_literal(term: str) -> Any:
    """
    Decode an N3 literal into its Python value.

    Typed literals map through rdflib's datatype table (xsd:integer to int,
    xsd:dateTime to datetime, ...); plain and language-tagged literals
    decode to str.

    Raises:
        LiteralDecodeError: If the term is not a literal encoding.
    """
    if not is_literal(term):
        raise LiteralDecodeError(term)

    try:
        node = from_n3(term)
    except Exception as e:
        raise LiteralDecodeError(term, str(e)) from e

    if not isinstance(node, Literal):
        raise LiteralDecodeError(term)
    if getattr(node, "ill_typed", False):
        raise LiteralDecodeError(term, f"ill-typed value for {node.datatype}")
    return node.toPython()
