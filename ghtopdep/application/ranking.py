"""Ranking of aggregated dependents by stars."""
from typing import Dict, Iterable

from ghtopdep.domain.models import DependentEntry, ResultSet


def deduplicate(entries: Iterable[DependentEntry]) -> Dict[str, DependentEntry]:
    """Collapse repeated URLs, keeping the first entry seen for each."""
    unique: Dict[str, DependentEntry] = {}
    for entry in entries:
        unique.setdefault(entry.url, entry)
    return unique


def rank_dependents(entries: Iterable[DependentEntry], rows: int) -> ResultSet:
    """Deduplicate, sort by stars descending and keep the first ``rows`` entries.

    The sort is stable, so entries with equal stars keep discovery order.
    """
    unique = deduplicate(entries).values()
    ranked = sorted(unique, key=lambda entry: entry.stars, reverse=True)
    return ResultSet(repositories=tuple(ranked[:rows]))
