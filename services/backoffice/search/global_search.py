"""
Relevance-ranked search across several record collections at once.

Used by the dashboard's global search box: courses, participants and
contractors are searched together and shown grouped by collection.

Relevance of a record is the sum, over each field containing the term, of a
positional bonus (10 when the field starts with the term, 5 when the term
starts at index 1-4, 1 otherwise) plus one point per matching field.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .fields import get_field

LEADING_MATCH_BONUS = 10
EARLY_MATCH_BONUS = 5
LATE_MATCH_BONUS = 1
EARLY_MATCH_WINDOW = 5


@dataclass
class Dataset:
    """A named collection and the fields searched in it."""
    name: str
    data: Sequence[Any]
    search_fields: Sequence[str] = field(default_factory=list)


@dataclass(frozen=True)
class RankedResult:
    """A matching record with the collection it came from and its score."""
    record: Any
    dataset_name: str
    relevance: int
    match_count: int


def positional_bonus(index: int) -> int:
    """Score of a single field match starting at ``index``."""
    if index == 0:
        return LEADING_MATCH_BONUS
    if index < EARLY_MATCH_WINDOW:
        return EARLY_MATCH_BONUS
    return LATE_MATCH_BONUS


def score_record(record: Any, term: str, fields: Sequence[str]) -> Tuple[int, int]:
    """
    Score ``record`` against an already lowercased ``term``.

    Returns:
        (relevance, match_count); match_count is 0 when nothing matched
    """
    relevance = 0
    match_count = 0

    for field_name in fields:
        value = get_field(record, field_name)
        haystack = "" if value is None else str(value).lower()

        index = haystack.find(term)
        if index == -1:
            continue

        match_count += 1
        relevance += positional_bonus(index)

    return relevance + match_count, match_count


def global_search(datasets: Sequence[Dataset], term: Optional[str]) -> List[RankedResult]:
    """
    Search every dataset and rank the matches.

    Args:
        datasets: Collections to search, each with its own fields
        term: Search term; compared case-insensitively

    Returns:
        Matches sorted by descending relevance. Ties keep dataset order and
        then record order. An empty term returns no results.
    """
    if not term:
        return []

    needle = term.lower()
    results = []

    for dataset in datasets:
        for record in dataset.data:
            relevance, match_count = score_record(record, needle, dataset.search_fields)
            if match_count == 0:
                continue

            results.append(RankedResult(
                record=record,
                dataset_name=dataset.name,
                relevance=relevance,
                match_count=match_count,
            ))

    # sorted() is stable, so equal scores keep encounter order
    return sorted(results, key=lambda result: result.relevance, reverse=True)


def group_by_dataset(results: Sequence[RankedResult]) -> Dict[str, List[RankedResult]]:
    """Group ranked results by collection, keeping their ranked order."""
    grouped: Dict[str, List[RankedResult]] = {}
    for result in results:
        grouped.setdefault(result.dataset_name, []).append(result)
    return grouped
