"""
Import period calculation.

Turns the month or ISO week chosen for an import into the date interval it
replaces, the date stamped on its sales and the import reference tag.
"""

import calendar
import re
from datetime import date, timedelta
from typing import Optional

import structlog

from models.period import ImportPeriod, PeriodType
from exceptions import InvalidPeriodError

logger = structlog.get_logger(__name__)

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})$")
WEEK_PATTERN = re.compile(r"^(\d{4})-W(\d{1,2})$", re.IGNORECASE)

REFERENCE_PREFIX = "import_"


def month_period(year: int, month: int) -> ImportPeriod:
    """Period covering a calendar month, ending on its last day."""
    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"{year}-{month}")

    try:
        last_day = calendar.monthrange(year, month)[1]
        end = date(year, month, last_day)
    except ValueError:
        # Year 0 is outside the date range
        raise InvalidPeriodError(f"{year}-{month}")

    label = f"{year:04d}-{month:02d}"

    return ImportPeriod(
        period_type=PeriodType.MONTH,
        label=label,
        start=date(year, month, 1),
        end=end,
        sale_date=end,
        reference=f"{REFERENCE_PREFIX}{label}",
    )


def week_period(year: int, week: int) -> ImportPeriod:
    """
    Period covering an ISO week, Monday to Sunday.

    Week 1 is the week containing January 4th.
    """
    try:
        monday = date.fromisocalendar(year, week, 1)
    except ValueError:
        # Week 0, week > 53, or W53 in a 52-week year
        raise InvalidPeriodError(f"{year}-W{week}")

    label = f"{year:04d}-W{week:02d}"
    sunday = monday + timedelta(days=6)

    return ImportPeriod(
        period_type=PeriodType.WEEK,
        label=label,
        start=monday,
        end=sunday,
        sale_date=sunday,
        reference=f"{REFERENCE_PREFIX}{label}",
    )


def resolve_period(selector: Optional[str]) -> ImportPeriod:
    """
    Resolve a period selector.

    Args:
        selector: "YYYY-MM" for a month or "YYYY-Www" for an ISO week

    Returns:
        ImportPeriod with start, end, sale date and reference

    Raises:
        InvalidPeriodError: If the selector is missing or malformed
    """
    value = (selector or "").strip()

    match = WEEK_PATTERN.match(value)
    if match:
        period = week_period(int(match.group(1)), int(match.group(2)))
    else:
        match = MONTH_PATTERN.match(value)
        if not match:
            raise InvalidPeriodError(selector)
        period = month_period(int(match.group(1)), int(match.group(2)))

    logger.debug(
        "period_resolved",
        selector=selector,
        start=period.start.isoformat(),
        end=period.end.isoformat(),
        reference=period.reference,
    )

    return period
