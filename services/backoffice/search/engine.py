"""
Search, filter and sort pipeline for in-memory record collections.

``query`` is the pure pipeline: text search, then typed filters, then sort.
Filtering runs first so sorting only pays for the records that survive.

``AdvancedSearch`` wraps the pipeline in a session object that a table view
keeps alive: it holds the search term, filter values, sort, selected rows
and current page, and memoizes the last result keyed by its inputs so
repeated reads do not recompute anything.
"""

import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional, Sequence, Set, Tuple

from ..log_config import get_logger, log_query
from ..settings import settings
from .filters import FilterSpec, compile_filters, count_active_filters, passes_compiled
from .matching import SearchOptions, highlight, matches
from .pagination import PageInfo, Paginator
from .sorting import SortDirection, SortSpec, sort_records, toggle_sort

logger = get_logger(__name__)


@dataclass(frozen=True)
class SearchConfig:
    """Fields searched by the free-text box and how terms are compared."""
    search_fields: Tuple[str, ...] = ()
    case_sensitive: bool = False
    exact_match: bool = False
    highlight_matches: bool = False

    @property
    def options(self) -> SearchOptions:
        return SearchOptions(
            case_sensitive=self.case_sensitive,
            exact_match=self.exact_match,
            highlight_matches=self.highlight_matches,
        )


@dataclass(frozen=True)
class QueryStats:
    """Counters shown above a table."""
    total_items: int
    filtered_items: int
    selected_items: int = 0
    active_filters: int = 0
    has_search: bool = False
    has_sort: bool = False


def query(
    data: Sequence[Any],
    search_term: Optional[str],
    filters: Optional[Mapping],
    sort_spec: Optional[SortSpec],
    config: SearchConfig,
    filter_specs: Sequence[FilterSpec] = (),
) -> List[Any]:
    """
    Run text search, filters and sort over ``data``.

    Args:
        data: Source collection; never mutated
        search_term: Free-text term; blank means no text filtering
        filters: Filter values keyed by filter key
        sort_spec: Active sort, or None to keep source order
        config: Search fields and comparison options
        filter_specs: Declarations for the filter keys

    Returns:
        A new list; identical inputs always yield the same order
    """
    options = config.options
    result = list(data)

    if search_term and search_term.strip():
        result = [item for item in result if matches(item, search_term, config.search_fields, options)]

    compiled = compile_filters(filters or {}, filter_specs)
    if compiled:
        result = [item for item in result if passes_compiled(item, compiled)]

    return sort_records(result, sort_spec)


def _freeze(value: Any) -> Hashable:
    """Hashable snapshot of a filter value for memoization keys."""
    if isinstance(value, Mapping):
        return tuple(sorted((str(k), _freeze(v)) for k, v in value.items()))
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze(v) for v in value)
    try:
        hash(value)
    except TypeError:
        return repr(value)
    return value


@dataclass
class _QueryCache:
    key: Optional[Tuple] = None
    result: List[Any] = field(default_factory=list)


class AdvancedSearch:
    """
    Search session over one record collection.

    Records must expose a unique identifier under ``id_field`` for row
    selection. Changing the search term or a filter sends the view back to
    page 1, so a stale page past the end of the new result is never shown.
    """

    def __init__(
        self,
        data: Sequence[Any],
        config: SearchConfig,
        filter_specs: Sequence[FilterSpec] = (),
        items_per_page: Optional[int] = None,
        id_field: str = "id",
    ):
        config_defaults = settings()

        self._data = data
        self.config = config
        self.filter_specs = tuple(filter_specs)
        self.id_field = id_field

        self._search_term = ""
        self._filters: Dict[str, Any] = {}
        self._sort: Optional[SortSpec] = None
        self._selected: Set[Any] = set()
        self._paginator = Paginator(items_per_page or config_defaults.default_items_per_page)
        # Hosts should wait this long after a keystroke before calling set_search_term
        self.debounce_ms = config_defaults.search_debounce_ms
        self._cache = _QueryCache()

    # Source data

    @property
    def data(self) -> Sequence[Any]:
        return self._data

    def set_data(self, data: Sequence[Any]) -> None:
        """Swap the source collection; selection of vanished rows is kept."""
        self._data = data

    # Search term

    @property
    def search_term(self) -> str:
        return self._search_term

    def set_search_term(self, term: str) -> None:
        if term != self._search_term:
            self._search_term = term
            self._paginator.reset()

    # Filters

    @property
    def filters(self) -> Dict[str, Any]:
        return dict(self._filters)

    def set_filter(self, key: str, value: Any) -> None:
        self._filters[key] = value
        self._paginator.reset()

    def remove_filter(self, key: str) -> None:
        if self._filters.pop(key, None) is not None:
            self._paginator.reset()

    def clear_filters(self) -> None:
        self._filters = {}
        self._paginator.reset()

    # Sort

    @property
    def sort(self) -> Optional[SortSpec]:
        return self._sort

    def set_sort(self, key: str, direction: SortDirection = SortDirection.ASC) -> None:
        self._sort = SortSpec(key=key, direction=SortDirection(direction))

    def clear_sort(self) -> None:
        self._sort = None

    def toggle_sort(self, key: str) -> SortSpec:
        self._sort = toggle_sort(self._sort, key)
        return self._sort

    def sort_direction(self, key: str) -> Optional[SortDirection]:
        """Direction of ``key`` if it is the active sort column."""
        if self._sort is not None and self._sort.key == key:
            return self._sort.direction
        return None

    # Results

    def _cache_key(self) -> Tuple:
        return (
            id(self._data),
            len(self._data),
            self._search_term,
            _freeze(self._filters),
            self._sort,
            self.config,
            self.filter_specs,
        )

    @property
    def results(self) -> List[Any]:
        """Searched, filtered and sorted records (memoized)."""
        key = self._cache_key()
        if self._cache.key != key:
            start_time = time.perf_counter()
            result = query(
                self._data,
                self._search_term,
                self._filters,
                self._sort,
                self.config,
                self.filter_specs,
            )
            self._cache = _QueryCache(key=key, result=result)

            log_query(
                logger,
                total_items=len(self._data),
                filtered_items=len(result),
                active_filters=count_active_filters(self._filters),
                duration_ms=(time.perf_counter() - start_time) * 1000,
                has_search=bool(self._search_term.strip()),
                sort_key=self._sort.key if self._sort else None,
            )

        return list(self._cache.result)

    @property
    def stats(self) -> QueryStats:
        return QueryStats(
            total_items=len(self._data),
            filtered_items=len(self.results),
            selected_items=len(self._selected),
            active_filters=count_active_filters(self._filters),
            has_search=bool(self._search_term.strip()),
            has_sort=self._sort is not None,
        )

    # Pagination

    def _synced_paginator(self) -> Paginator:
        self._paginator.update_total(len(self.results))
        return self._paginator

    @property
    def page_info(self) -> PageInfo:
        return self._synced_paginator().info

    @property
    def page_items(self) -> List[Any]:
        return self.page_info.slice(self.results)

    def set_items_per_page(self, items_per_page: int) -> None:
        if items_per_page < 1:
            raise ValueError(f"items_per_page must be at least 1, got {items_per_page}")
        self._paginator.items_per_page = items_per_page
        self._paginator.reset()

    def go_to_page(self, page: int) -> int:
        return self._synced_paginator().go_to_page(page)

    def next_page(self) -> int:
        return self._synced_paginator().next_page()

    def previous_page(self) -> int:
        return self._synced_paginator().previous_page()

    def first_page(self) -> int:
        return self._synced_paginator().first_page()

    def last_page(self) -> int:
        return self._synced_paginator().last_page()

    # Selection

    def _record_id(self, record: Any) -> Any:
        if isinstance(record, Mapping):
            return record.get(self.id_field)
        return getattr(record, self.id_field, None)

    @property
    def selected_ids(self) -> Set[Any]:
        return set(self._selected)

    def select_item(self, item_id: Any) -> bool:
        """Toggle selection of one row; returns whether it is now selected."""
        if item_id in self._selected:
            self._selected.discard(item_id)
            return False
        self._selected.add(item_id)
        return True

    def select_all(self) -> None:
        """Select every record in the current result (all pages) that has an id."""
        ids = (self._record_id(record) for record in self.results)
        self._selected = {item_id for item_id in ids if item_id is not None}

    def clear_selection(self) -> None:
        self._selected = set()

    def is_selected(self, item_id: Any) -> bool:
        return item_id in self._selected

    def selected_records(self) -> List[Any]:
        """Selected records in source order, including filtered-out ones."""
        return [record for record in self._data if self._record_id(record) in self._selected]

    # Presentation helpers

    def highlight(self, text: str) -> str:
        return highlight(text, self._search_term, self.config.options)
