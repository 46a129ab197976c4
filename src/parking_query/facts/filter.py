"""Fact Filter - select facts matching a partial pattern."""

from typing import Iterable, Optional

from .model import Fact, FactPattern


def filter_facts(pattern: FactPattern, facts: Iterable[Fact]) -> list[Fact]:
    """Return the facts matching every set position of ``pattern``, in input order."""
    if pattern.is_empty:
        return list(facts)
    return [fact for fact in facts if pattern.matches(fact)]


def find_fact(pattern: FactPattern, facts: Iterable[Fact]) -> Optional[Fact]:
    """Return the first matching fact, or None."""
    for fact in facts:
        if pattern.matches(fact):
            return fact
    return None
