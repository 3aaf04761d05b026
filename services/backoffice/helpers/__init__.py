"""
Helper utilities for data normalization and validation.

This module provides utilities for normalizing, validating and formatting
Chilean identification numbers (RUT) and participant names, with support
for pluggable adapters.
"""

from .rut import (
    RUTValidation,
    compute_check_digit,
    format_rut,
    is_valid_rut,
    normalize_rut,
    validate_rut,
)
from .name import normalize_name

__all__ = [
    "RUTValidation",
    "compute_check_digit",
    "format_rut",
    "is_valid_rut",
    "normalize_rut",
    "validate_rut",
    "normalize_name",
]
