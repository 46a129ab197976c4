"""
Fact model - subject/predicate/object statements and partial patterns.
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional


class Fact(NamedTuple):
    """
    One statement from a metadata or data graph.

    IRIs are plain strings, blank nodes are ``_:id`` and literals keep
    their N3 encoding (see ``decode_literal``). ``graph`` names the graph
    the statement was read from, None for the default graph.
    """
    subject: str
    predicate: str
    object: str
    graph: Optional[str] = None


@dataclass(frozen=True)
class FactPattern:
    """Partial fact: unset positions match anything."""
    subject: Optional[str] = None
    predicate: Optional[str] = None
    object: Optional[str] = None
    graph: Optional[str] = None

    def matches(self, fact: Fact) -> bool:
        if self.subject is not None and fact.subject != self.subject:
            return False
        if self.predicate is not None and fact.predicate != self.predicate:
            return False
        if self.object is not None and fact.object != self.object:
            return False
        if self.graph is not None and fact.graph != self.graph:
            return False
        return True

    @property
    def is_empty(self) -> bool:
        return (
            self.subject is None
            and self.predicate is None
            and self.object is None
            and self.graph is None
        )
