"""
Free-text search across configured record fields.
"""

import re
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from .fields import get_field


@dataclass(frozen=True)
class SearchOptions:
    """How a search term is compared against field values."""
    case_sensitive: bool = False
    exact_match: bool = False
    highlight_matches: bool = False


DEFAULT_OPTIONS = SearchOptions()


def matches(
    record: Any,
    term: Optional[str],
    fields: Sequence[str],
    options: Optional[SearchOptions] = None,
) -> bool:
    """
    Check whether any configured field of ``record`` matches ``term``.

    Args:
        record: Mapping or attribute object
        term: Free-text search term; blank terms match every record
        fields: Field names to search (logical OR)
        options: Case sensitivity and exact/substring matching

    Returns:
        True if at least one field matches

    Examples:
        >>> matches({"nombre": "Juan Pérez"}, "JUAN", ["nombre"])
        True
        >>> matches({"nombre": None}, "juan", ["nombre"])
        False
    """
    if not term or not term.strip():
        return True

    options = options or DEFAULT_OPTIONS
    needle = term if options.case_sensitive else term.lower()

    for field_name in fields:
        value = get_field(record, field_name)
        if value is None:
            continue

        haystack = str(value) if options.case_sensitive else str(value).lower()

        if options.exact_match:
            if haystack == needle:
                return True
        elif needle in haystack:
            return True

    return False


def highlight(text: str, term: Optional[str], options: Optional[SearchOptions] = None) -> str:
    """
    Wrap every occurrence of ``term`` in ``<mark>`` tags.

    Text is returned unchanged when highlighting is disabled or the term is
    empty. The term is matched literally, never as a regular expression.

    Examples:
        >>> highlight("Juan Pérez", "juan", SearchOptions(highlight_matches=True))
        '<mark>Juan</mark> Pérez'
    """
    options = options or DEFAULT_OPTIONS
    if not options.highlight_matches or not term:
        return text

    flags = 0 if options.case_sensitive else re.IGNORECASE
    pattern = re.compile(f"({re.escape(term)})", flags)
    return pattern.sub(r"<mark>\1</mark>", text)
