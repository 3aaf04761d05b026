"""
Name normalization utilities for course participants.

Participant names arrive from enrollment sheets typed by contractors, with
honorifics, stray spaces and inconsistent capitalization. This module brings
them to a single display form.
"""

import re
import unicodedata


# Honorifics to remove (case-insensitive)
# Each pattern will match the honorific at the start of the string followed by space
HONORIFICS = [
    # General (with optional dot)
    r'sr\.?',              # señor
    r'sra\.?',             # señora
    r'srta\.?',            # señorita
    r'don',
    r'doña',
    # Professional (with optional dot)
    r'dr\.?',              # doctor
    r'dra\.?',             # doctora
    r'prof\.?',            # profesor
    r'profa\.?',           # profesora
    r'ing\.?',             # ingeniero
    r'inga\.?',            # ingeniera
    r'téc\.?',             # técnico
    r'tec\.?',
]

_HONORIFIC_PATTERN = re.compile(r'^(?:' + '|'.join(HONORIFICS) + r')\s+', re.IGNORECASE)


def normalize_name(name: str) -> str:
    """
    Normalize a participant name by removing honorifics and standardizing format.

    Normalization steps:
    1. Strip leading/trailing whitespace
    2. Normalize unicode to NFC form (canonical composition)
    3. Remove common honorifics from the beginning
    4. Collapse multiple spaces into single space
    5. Convert to title case

    Args:
        name: Name string to normalize

    Returns:
        Normalized name in title case, or "" for empty/non-string input

    Examples:
        >>> normalize_name("  JUAN   PÉREZ  ")
        'Juan Pérez'
        >>> normalize_name("Sr. Juan Pérez")
        'Juan Pérez'
        >>> normalize_name("ING. MARÍA  GARCÍA")
        'María García'
    """
    if not name or not isinstance(name, str):
        return ""

    result = name.strip()

    # Consistent representation of accented characters
    result = unicodedata.normalize('NFC', result)

    result = _HONORIFIC_PATTERN.sub('', result)

    result = re.sub(r'\s+', ' ', result)

    return result.title()
