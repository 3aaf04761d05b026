"""
Typed filter declarations and the predicates that apply them.

Each filter type is its own frozen dataclass carrying only the fields that
matter for it, so a range filter can never be declared with select options
and vice versa. The filter *values* (what the user picked) are kept apart in
a plain mapping keyed by filter key, the way table toolbars hand them over.

Filtering favors availability over strictness: unknown keys, malformed range
values and uncoercible record values degrade to "passes" or "does not match"
instead of raising.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, List, Optional, Sequence, Tuple

from .fields import get_field, to_date, to_number


class FilterType(str, Enum):
    TEXT = "text"
    SELECT = "select"
    DATE = "date"
    NUMBER = "number"
    BOOLEAN = "boolean"
    RANGE = "range"


@dataclass(frozen=True)
class FilterOption:
    """One choice offered by a select filter."""
    value: Any
    label: str


@dataclass(frozen=True)
class RangeValue:
    """Inclusive bounds picked for a range filter."""
    min: float
    max: float


@dataclass(frozen=True)
class FilterSpec:
    """Base declaration of a filterable field."""
    key: str
    label: str = ""

    type: ClassVar[FilterType]

    def accepts(self, item_value: Any, value: Any) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class TextFilter(FilterSpec):
    """Case-insensitive substring containment."""
    placeholder: str = ""

    type: ClassVar[FilterType] = FilterType.TEXT

    def accepts(self, item_value: Any, value: Any) -> bool:
        if item_value is None:
            return False
        return str(value).lower() in str(item_value).lower()


@dataclass(frozen=True)
class SelectFilter(FilterSpec):
    """Exact equality, or membership when several values are picked."""
    options: Tuple[FilterOption, ...] = ()

    type: ClassVar[FilterType] = FilterType.SELECT

    def accepts(self, item_value: Any, value: Any) -> bool:
        if isinstance(value, (list, tuple, set, frozenset)):
            return item_value in value
        return item_value == value


@dataclass(frozen=True)
class BooleanFilter(FilterSpec):
    """Truthiness equality."""

    type: ClassVar[FilterType] = FilterType.BOOLEAN

    def accepts(self, item_value: Any, value: Any) -> bool:
        return bool(item_value) == bool(value)


@dataclass(frozen=True)
class NumberFilter(FilterSpec):
    """Numeric equality."""

    type: ClassVar[FilterType] = FilterType.NUMBER

    def accepts(self, item_value: Any, value: Any) -> bool:
        item_number = to_number(item_value)
        wanted = to_number(value)
        if item_number is None or wanted is None:
            return False
        return item_number == wanted


@dataclass(frozen=True)
class DateFilter(FilterSpec):
    """Same calendar day, ignoring time of day."""

    type: ClassVar[FilterType] = FilterType.DATE

    def accepts(self, item_value: Any, value: Any) -> bool:
        item_day = to_date(item_value)
        wanted = to_date(value)
        if item_day is None or wanted is None:
            return False
        return item_day == wanted


@dataclass(frozen=True)
class RangeFilter(FilterSpec):
    """Inclusive numeric range; ``min``/``max`` bound the input widget."""
    min: Optional[float] = None
    max: Optional[float] = None

    type: ClassVar[FilterType] = FilterType.RANGE

    def accepts(self, item_value: Any, value: Any) -> bool:
        bounds = _range_bounds(value)
        if bounds is None:
            return True

        low, high = bounds
        item_number = to_number(item_value)
        if item_number is None:
            return False
        return low <= item_number <= high


FILTER_TYPES: Dict[FilterType, type] = {
    FilterType.TEXT: TextFilter,
    FilterType.SELECT: SelectFilter,
    FilterType.DATE: DateFilter,
    FilterType.NUMBER: NumberFilter,
    FilterType.BOOLEAN: BooleanFilter,
    FilterType.RANGE: RangeFilter,
}


def make_filter(key: str, filter_type: str, **kwargs: Any) -> FilterSpec:
    """
    Build a filter declaration from its type name.

    Raises:
        ValueError: If ``filter_type`` is not a known filter type
    """
    try:
        cls = FILTER_TYPES[FilterType(filter_type)]
    except ValueError as e:
        valid = ", ".join(t.value for t in FilterType)
        raise ValueError(f"Unknown filter type '{filter_type}'. Expected one of: {valid}") from e
    return cls(key=key, **kwargs)


def _range_bounds(value: Any) -> Optional[Tuple[float, float]]:
    """Extract (min, max) from a RangeValue or a {"min", "max"} mapping."""
    if isinstance(value, RangeValue):
        low, high = value.min, value.max
    elif isinstance(value, Mapping):
        low, high = value.get("min"), value.get("max")
    else:
        return None

    low, high = to_number(low), to_number(high)
    if low is None or high is None:
        return None
    return low, high


def is_active(value: Any) -> bool:
    """A filter value of None or "" means the filter is switched off."""
    return value is not None and value != ""


def count_active_filters(filters: Mapping) -> int:
    """Number of filters that currently constrain results."""
    return sum(1 for value in filters.values() if is_active(value))


def index_filter_specs(filter_specs: Iterable[FilterSpec]) -> Dict[str, FilterSpec]:
    """Map filter key to its declaration; later declarations win."""
    return {spec.key: spec for spec in filter_specs}


ActiveFilter = Tuple[FilterSpec, Any]


def compile_filters(filters: Mapping, filter_specs: Iterable[FilterSpec]) -> List[ActiveFilter]:
    """
    Pair each active filter value with its declaration.

    Values that are switched off and keys without a declaration are dropped,
    so they never reject a record.
    """
    specs = index_filter_specs(filter_specs)
    compiled = []

    for key, value in filters.items():
        if not is_active(value):
            continue

        spec = specs.get(key)
        if spec is None:
            continue

        compiled.append((spec, value))

    return compiled


def passes_compiled(record: Any, compiled: Sequence[ActiveFilter]) -> bool:
    """Apply filters prepared by :func:`compile_filters`."""
    return all(spec.accepts(get_field(record, spec.key), value) for spec, value in compiled)


def passes_filters(
    record: Any,
    filters: Mapping,
    filter_specs: Sequence[FilterSpec],
) -> bool:
    """
    Check that ``record`` satisfies every active filter (logical AND).

    Args:
        record: Mapping or attribute object
        filters: Filter values keyed by filter key
        filter_specs: Declarations giving each key its comparison semantics

    Returns:
        True if no active filter rejects the record. Filters without a
        matching declaration are ignored.
    """
    return passes_compiled(record, compile_filters(filters, filter_specs))
