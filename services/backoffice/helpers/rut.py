"""
RUT (Rol Único Tributario) normalization, validation and formatting for Chile.

This module provides utilities to clean, validate and display Chilean
identification numbers (RUT) using the official módulo 11 algorithm.
Every function is a pure transform: it is safe to call on every keystroke
of a form field or on every row of a bulk import.

The implementation is designed with an adapter pattern to allow plugging in
external libraries (like python-rut) in the future if needed.
"""

import re
from dataclasses import dataclass
from typing import Any, Protocol

# Anything that is not a digit or the K check character is noise
_NOISE_PATTERN = re.compile(r"[^0-9Kk]")

MIN_BODY_LENGTH = 7

MSG_REQUIRED = "RUT requerido"
MSG_INSUFFICIENT_FORMAT = "Formato insuficiente"
MSG_BODY_TOO_SHORT = f"RUT debe tener al menos {MIN_BODY_LENGTH} dígitos"
MSG_WRONG_CHECK_DIGIT = "Dígito verificador incorrecto"
MSG_VALID = "RUT válido"


@dataclass(frozen=True)
class RUTValidation:
    """Outcome of validating a RUT; failures carry a user-facing message."""
    valid: bool
    message: str

    def __bool__(self) -> bool:
        return self.valid


class RUTAdapter(Protocol):
    """Protocol for pluggable RUT validation/normalization adapters."""

    def normalize(self, rut: Any) -> str:
        """Strip a RUT string down to digits and an uppercase K."""
        ...

    def validate(self, rut: Any) -> RUTValidation:
        """Validate a RUT string using módulo 11 algorithm."""
        ...

    def format(self, rut: Any) -> str:
        """Format a RUT string for display (12.345.678-5)."""
        ...


def compute_check_digit(body: str) -> str:
    """
    Compute the módulo 11 check character for a RUT body.

    The Chilean RUT validation algorithm:
    1. Multiply each digit (from right to left) by sequence 2,3,4,5,6,7,2,3,4...
    2. Sum all products
    3. Calculate 11 - (sum % 11)
    4. If result is 11, DV is 0; if 10, DV is K; otherwise DV is the result

    Args:
        body: Numeric part of the RUT, digits only

    Returns:
        Check character ("0"-"9" or "K")

    Raises:
        ValueError: If body contains anything other than digits

    Examples:
        >>> compute_check_digit("12345678")
        '5'
        >>> compute_check_digit("1000005")
        'K'
    """
    if not body.isdigit():
        raise ValueError(f"RUT body must contain only digits, got {body!r}")

    total = 0
    multiplier = 2

    for digit in reversed(body):
        total += int(digit) * multiplier
        multiplier = 2 if multiplier == 7 else multiplier + 1

    expected = 11 - (total % 11)

    if expected == 11:
        return "0"
    if expected == 10:
        return "K"
    return str(expected)


class DefaultRUTAdapter:
    """Default implementation of RUT normalization, validation and formatting."""

    def normalize(self, rut: Any) -> str:
        """
        Strip a RUT down to its significant characters.

        Args:
            rut: RUT string in any format (with/without dots, hyphens, spaces)

        Returns:
            Digits plus an uppercase K, e.g. "12345678K". Non-string input
            normalizes to an empty string.

        Examples:
            >>> adapter = DefaultRUTAdapter()
            >>> adapter.normalize("12.345.678-k")
            '12345678K'
            >>> adapter.normalize("  12.345.678-5  ")
            '123456785'
            >>> adapter.normalize(None)
            ''
        """
        if not isinstance(rut, str):
            return ""

        return _NOISE_PATTERN.sub("", rut).upper()

    def validate(self, rut: Any) -> RUTValidation:
        """
        Validate a RUT and explain why it failed.

        Args:
            rut: RUT string (will be normalized first)

        Returns:
            RUTValidation with valid flag and a message suitable for an
            inline form error

        Examples:
            >>> adapter = DefaultRUTAdapter()
            >>> adapter.validate("12.345.678-5").valid
            True
            >>> adapter.validate("12345678-4").message
            'Dígito verificador incorrecto'
        """
        if not isinstance(rut, str) or not rut.strip():
            return RUTValidation(False, MSG_REQUIRED)

        cleaned = self.normalize(rut)
        if len(cleaned) < 2:
            return RUTValidation(False, MSG_INSUFFICIENT_FORMAT)

        body, dv = cleaned[:-1], cleaned[-1]
        if len(body) < MIN_BODY_LENGTH:
            return RUTValidation(False, MSG_BODY_TOO_SHORT)

        # A stray K inside the body can never produce a matching check digit
        if not body.isdigit() or compute_check_digit(body) != dv:
            return RUTValidation(False, MSG_WRONG_CHECK_DIGIT)

        return RUTValidation(True, MSG_VALID)

    def format(self, rut: Any) -> str:
        """
        Format a RUT as NN.NNN.NNN-C without validating it.

        Partial input is formatted too, so the result can be shown live
        while the user types.

        Examples:
            >>> adapter = DefaultRUTAdapter()
            >>> adapter.format("123456785")
            '12.345.678-5'
            >>> adapter.format("7")
            '7'
        """
        cleaned = self.normalize(rut)
        if len(cleaned) < 2:
            return cleaned

        body, dv = cleaned[:-1], cleaned[-1]

        # Group digits in threes counting from the right
        groups = []
        while len(body) > 3:
            groups.insert(0, body[-3:])
            body = body[:-3]
        groups.insert(0, body)

        return f"{'.'.join(groups)}-{dv}"


# Global adapter instance (can be replaced with external library)
_adapter: RUTAdapter = DefaultRUTAdapter()


def set_adapter(adapter: RUTAdapter) -> None:
    """
    Set a custom RUT adapter (e.g., to use python-rut library).

    Args:
        adapter: Custom adapter implementing RUTAdapter protocol
    """
    global _adapter
    _adapter = adapter


def get_adapter() -> RUTAdapter:
    """Return the adapter currently used by the module-level helpers."""
    return _adapter


def normalize_rut(rut: Any) -> str:
    """
    Strip a RUT down to digits and an uppercase K.

    Uses the configured adapter (default: built-in implementation).

    Examples:
        >>> normalize_rut("12.345.678-k")
        '12345678K'
    """
    return _adapter.normalize(rut)


def validate_rut(rut: Any) -> RUTValidation:
    """
    Validate a RUT using módulo 11 algorithm.

    Uses the configured adapter (default: built-in implementation).

    Examples:
        >>> validate_rut("12.345.678-5")
        RUTValidation(valid=True, message='RUT válido')
    """
    return _adapter.validate(rut)


def format_rut(rut: Any) -> str:
    """
    Format a RUT for display.

    Uses the configured adapter (default: built-in implementation).

    Examples:
        >>> format_rut("12345678-5")
        '12.345.678-5'
    """
    return _adapter.format(rut)


def is_valid_rut(rut: Any) -> bool:
    """Return True when the RUT passes módulo 11 validation."""
    return validate_rut(rut).valid
