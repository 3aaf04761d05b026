"""
In-memory search engine for back-office tables.

Free-text search, typed filters, single-key sorting, pagination and
relevance-ranked search across several collections.
"""

from .engine import AdvancedSearch, QueryStats, SearchConfig, query
from .filters import (
    BooleanFilter,
    DateFilter,
    FilterOption,
    FilterSpec,
    FilterType,
    NumberFilter,
    RangeFilter,
    RangeValue,
    SelectFilter,
    TextFilter,
    count_active_filters,
    make_filter,
    passes_filters,
)
from .global_search import Dataset, RankedResult, global_search, group_by_dataset
from .matching import SearchOptions, highlight, matches
from .pagination import PageInfo, Paginator, paginate
from .sorting import SortDirection, SortSpec, compare, sort_records, toggle_sort

__all__ = [
    "AdvancedSearch",
    "QueryStats",
    "SearchConfig",
    "query",
    "BooleanFilter",
    "DateFilter",
    "FilterOption",
    "FilterSpec",
    "FilterType",
    "NumberFilter",
    "RangeFilter",
    "RangeValue",
    "SelectFilter",
    "TextFilter",
    "count_active_filters",
    "make_filter",
    "passes_filters",
    "Dataset",
    "RankedResult",
    "global_search",
    "group_by_dataset",
    "SearchOptions",
    "highlight",
    "matches",
    "PageInfo",
    "Paginator",
    "paginate",
    "SortDirection",
    "SortSpec",
    "compare",
    "sort_records",
    "toggle_sort",
]
