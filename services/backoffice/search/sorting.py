"""
Single-key sorting for table views.

Missing values always sort last, whichever direction is active, so empty
cells never crowd the top of a table.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import cmp_to_key
from numbers import Real
from typing import Any, Iterable, List, Optional

from .fields import get_field


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortSpec:
    """Active sort key and direction."""
    key: str
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def parse(cls, value: str) -> "SortSpec":
        """
        Build a sort spec from "key" or "key:direction".

        Raises:
            ValueError: If the direction is not "asc" or "desc"

        Examples:
            >>> SortSpec.parse("fechaRegistro:desc")
            SortSpec(key='fechaRegistro', direction=<SortDirection.DESC: 'desc'>)
        """
        key, _, direction = value.partition(":")
        try:
            return cls(key=key.strip(), direction=SortDirection(direction.strip().lower() or "asc"))
        except ValueError as e:
            raise ValueError(f"Invalid sort direction in '{value}'. Expected asc or desc") from e


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def _is_number(value: Any) -> bool:
    return isinstance(value, (Real, Decimal)) and not isinstance(value, bool)


def _timestamp(value: Any) -> Optional[float]:
    if isinstance(value, datetime):
        return value.timestamp() * 1000
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day).timestamp() * 1000
    return None


def compare_values(a: Any, b: Any) -> int:
    """
    Ascending three-way comparison of two field values.

    Numbers compare numerically, dates by timestamp and everything else as
    case-insensitive strings. None sorts after any value.
    """
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1

    if _is_number(a) and _is_number(b):
        # Decimal and float do not subtract, but they do compare
        return (a > b) - (a < b)

    a_time, b_time = _timestamp(a), _timestamp(b)
    if a_time is not None and b_time is not None:
        return _sign(a_time - b_time)

    a_str, b_str = str(a).lower(), str(b).lower()
    if a_str < b_str:
        return -1
    if a_str > b_str:
        return 1
    return 0


def compare(a: Any, b: Any, sort_spec: SortSpec) -> int:
    """
    Compare two records by the sort key.

    Returns:
        -1, 0 or 1. Descending order negates the result except for missing
        values, which stay last.
    """
    a_value = get_field(a, sort_spec.key)
    b_value = get_field(b, sort_spec.key)

    result = compare_values(a_value, b_value)
    if a_value is None or b_value is None:
        return result

    return -result if sort_spec.direction == SortDirection.DESC else result


def sort_records(records: Iterable[Any], sort_spec: Optional[SortSpec]) -> List[Any]:
    """
    Return a new list sorted by ``sort_spec``; equal keys keep their order.

    Without a sort spec the records are returned in their original order.
    """
    if sort_spec is None:
        return list(records)
    return sorted(records, key=cmp_to_key(lambda a, b: compare(a, b, sort_spec)))


def toggle_sort(current: Optional[SortSpec], key: str) -> SortSpec:
    """
    Sort spec after the user clicks the header of column ``key``.

    Clicking the active column flips its direction; clicking another column
    starts ascending.
    """
    if current is not None and current.key == key:
        flipped = SortDirection.DESC if current.direction == SortDirection.ASC else SortDirection.ASC
        return SortSpec(key=key, direction=flipped)
    return SortSpec(key=key, direction=SortDirection.ASC)
