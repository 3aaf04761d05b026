"""
Field access and value coercion shared by search, filters and sorting.

Records are whatever the caller keeps in its tables: plain dicts, dataclasses
or pydantic models. Values are read, never written.
"""

import re
from collections.abc import Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from numbers import Real
from typing import Any, Optional

# Date patterns tried in order for string values
DATE_PATTERNS = [
    "%Y-%m-%dT%H:%M:%S.%f",  # 2025-04-03T11:16:16.82
    "%Y-%m-%dT%H:%M:%S",     # 2025-04-03T11:16:16
    "%Y-%m-%d %H:%M:%S",     # 2025-04-03 11:16:16
    "%Y-%m-%d",              # 2025-04-03
    "%d-%m-%Y",              # 03-04-2025
    "%d/%m/%Y",              # 03/04/2025
]

# Only applied to strings with a time part, so "10-03-2025" keeps its year
_TZ_SUFFIX = re.compile(r"(Z|[+-]\d{2}:?\d{2})$")


def get_field(record: Any, key: str) -> Any:
    """Read ``key`` from a mapping or an attribute object; None when absent."""
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def to_number(value: Any) -> Optional[float]:
    """Coerce a value to float, or None when it is not numeric."""
    if value is None:
        return None
    if isinstance(value, (bool, Real, Decimal)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def to_datetime(value: Any) -> Optional[datetime]:
    """
    Coerce a value to a naive datetime, or None when it cannot be parsed.

    Accepts datetime/date objects, ISO and Chilean date strings, and numbers
    interpreted as epoch milliseconds.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo else value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc).replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        cleaned = value.strip()
        if ":" in cleaned:
            cleaned = _TZ_SUFFIX.sub("", cleaned)
        for pattern in DATE_PATTERNS:
            try:
                return datetime.strptime(cleaned, pattern)
            except ValueError:
                continue

    return None


def to_date(value: Any) -> Optional[date]:
    """Coerce a value to a calendar day, dropping the time of day."""
    parsed = to_datetime(value)
    return parsed.date() if parsed else None
