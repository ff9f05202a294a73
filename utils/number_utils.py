"""
Norwegian number parsing.

Point-of-sale exports write amounts as "1 234,56 kr" or "1.234,56", while
spreadsheets re-saved in English locale write "1234.56". All of them must
land on the same Decimal.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from exceptions import NumberParseError

ZERO = Decimal("0")

# Regular whitespace plus the non-breaking and narrow no-break spaces used as
# thousands separators
_WHITESPACE = re.compile(r"[\s\u00a0\u202f]")
_NOT_NUMERIC = re.compile(r"[^0-9.\-]")


def _clean_amount(value: str) -> str:
    cleaned = _WHITESPACE.sub("", value).replace("kr", "")

    # Comma means Norwegian decimal comma: periods are thousands separators
    if "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".", 1)

    cleaned = _NOT_NUMERIC.sub("", cleaned)

    negative = cleaned.startswith("-")
    cleaned = cleaned.replace("-", "")
    return f"-{cleaned}" if negative else cleaned


def parse_amount(value: Optional[str], strict: bool = False) -> Decimal:
    """
    Parse a localized monetary amount.

    Examples:
        "1 234,56 kr" → Decimal("1234.56")
        "1.234,56"    → Decimal("1234.56")
        "1234.56"     → Decimal("1234.56")
        "", None, "abc" → Decimal("0")

    Absent and unparseable values both come back as zero. Callers that need
    to tell them apart pass strict=True.

    Args:
        value: Raw cell value
        strict: Raise instead of returning zero for non-empty garbage

    Returns:
        Parsed amount, never NaN or infinite

    Raises:
        NumberParseError: strict mode only, for values that do not parse
    """
    if value is None:
        return ZERO

    raw = str(value)
    if not raw.strip():
        return ZERO

    cleaned = _clean_amount(raw)

    try:
        amount = Decimal(cleaned) if cleaned not in ("", "-", ".", "-.") else None
    except InvalidOperation:
        amount = None

    if amount is None or not amount.is_finite():
        if strict:
            raise NumberParseError(raw)
        return ZERO

    return amount
