"""
Text utilities for Norwegian customer data.

Used for organization number normalization and cell cleanup.
"""

import re
from typing import Optional

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_org_nr(org_nr: Optional[str]) -> Optional[str]:
    """
    Normalize an organization number to digits only.

    Letters, spaces and punctuation are dropped:
    - "987 654 321"     → "987654321"
    - "987-654-321"     → "987654321"
    - "NO987654321MVA"  → "987654321"

    Args:
        org_nr: Raw organization number from the file

    Returns:
        Digit string, or None if nothing is left (private customer)
    """
    if not org_nr:
        return None

    digits = _NON_DIGITS.sub("", org_nr)

    return digits or None


def format_org_nr(org_nr: Optional[str]) -> str:
    """Format a 9-digit organization number as "987 654 321"."""
    if not org_nr:
        return ""
    clean = org_nr.replace(" ", "")
    if len(clean) != 9:
        return org_nr
    return f"{clean[:3]} {clean[3:6]} {clean[6:]}"


def clean_text(value: Optional[str], max_length: int = 255) -> Optional[str]:
    """
    Clean a cell value for storage.

    - Strips whitespace
    - Truncates to max length
    - Returns None for empty/whitespace-only strings

    Args:
        value: Raw cell value
        max_length: Maximum characters to store

    Returns:
        Cleaned value or None
    """
    if not value:
        return None

    value = value.strip()

    if not value:
        return None

    if len(value) > max_length:
        value = value[:max_length]

    return value
