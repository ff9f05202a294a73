"""
Import period schemas.

An import always replaces one calendar month or one ISO week.
"""

from datetime import date
from enum import Enum

from pydantic import Field

from models.base import BaseSchema


class PeriodType(str, Enum):
    """Granularity of an import."""
    MONTH = "month"
    WEEK = "week"


class ImportPeriod(BaseSchema):
    """Closed date interval an import replaces."""

    period_type: PeriodType
    label: str = Field(..., description="2026-01 or 2026-W02")
    start: date = Field(..., description="First day (inclusive)")
    end: date = Field(..., description="Last day (inclusive)")
    sale_date: date = Field(..., description="Date stamped on every imported sale")
    reference: str = Field(..., description="import_<label>, tags the sales of this period")

    @property
    def description(self) -> str:
        """Sale description used for business customers."""
        return f"Import {self.label}"

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end
