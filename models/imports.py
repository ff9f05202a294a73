"""
Import job and result schemas.

ImportJob and ImportResult live only for the duration of one import; the
pydantic models are what the API returns.
"""

import bisect
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import Field

from models.base import BaseSchema
from models.mapping import ColumnMapping, MappableField
from models.period import ImportPeriod


# ===================
# JOB
# ===================

@dataclass
class ImportJob:
    """One period import for one tenant. Never persisted."""
    tenant_id: str
    period: ImportPeriod
    mapping: ColumnMapping
    rows: list[list[str]]
    has_header_row: bool = False
    strict_numbers: bool = False

    def row_number(self, index: int) -> int:
        """1-based line number in the uploaded file for data row `index`."""
        return index + 1 + (1 if self.has_header_row else 0)


# ===================
# RESULT
# ===================

@dataclass
class ImportResult:
    """Counters and errors accumulated while an import runs."""
    total_rows: int = 0
    customers_created: int = 0
    customers_updated: int = 0
    sales_created: int = 0
    sales_deleted: int = 0
    skipped_zero_sales: int = 0
    total_amount_imported: Decimal = field(default_factory=lambda: Decimal("0"))
    total_profit_imported: Decimal = field(default_factory=lambda: Decimal("0"))
    errors: list[str] = field(default_factory=list)

    period_label: Optional[str] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None

    # Row number of each entry in `errors`, kept sorted
    _error_rows: list[int] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def for_period(cls, period: ImportPeriod, total_rows: int) -> "ImportResult":
        return cls(
            total_rows=total_rows,
            period_label=period.label,
            period_start=period.start,
            period_end=period.end,
        )

    @property
    def success(self) -> bool:
        """True if every row went through."""
        return not self.errors

    def record_customer(self, created: bool, updated: bool) -> None:
        if created:
            self.customers_created += 1
        elif updated:
            self.customers_updated += 1

    def record_sale(self, amount: Decimal, profit: Decimal) -> None:
        self.sales_created += 1
        self.total_amount_imported += amount
        self.total_profit_imported += profit

    def record_skipped(self) -> None:
        self.skipped_zero_sales += 1

    def record_error(self, row_number: int, message: str) -> None:
        """Add a row error, keeping errors in file order."""
        position = bisect.bisect_right(self._error_rows, row_number)
        self._error_rows.insert(position, row_number)
        self.errors.insert(position, f"Rad {row_number}: {message}")

    def to_response(self) -> "ImportResultResponse":
        return ImportResultResponse(
            success=self.success,
            total_rows=self.total_rows,
            customers_created=self.customers_created,
            customers_updated=self.customers_updated,
            sales_created=self.sales_created,
            sales_deleted=self.sales_deleted,
            skipped_zero_sales=self.skipped_zero_sales,
            total_amount_imported=self.total_amount_imported,
            total_profit_imported=self.total_profit_imported,
            errors=list(self.errors),
            period_label=self.period_label,
            period_start=self.period_start,
            period_end=self.period_end,
        )


class ImportResultResponse(BaseSchema):
    """Outcome of an import, returned to the caller."""

    success: bool = True
    total_rows: int
    customers_created: int = 0
    customers_updated: int = 0
    sales_created: int = 0
    sales_deleted: int = 0
    skipped_zero_sales: int = 0
    total_amount_imported: Decimal = Decimal("0")
    total_profit_imported: Decimal = Decimal("0")
    errors: list[str] = Field(default_factory=list)
    period_label: Optional[str] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None


# ===================
# PREVIEW / CONFIRM
# ===================

class ImportPreview(BaseSchema):
    """Parsed upload waiting for a mapping. Nothing saved yet."""

    preview_id: str
    filename: Optional[str] = None
    encoding: str
    has_header_row: bool = False
    column_count: int
    row_count: int = Field(..., description="Data rows (header excluded)")
    labels: list[str] = Field(default_factory=list, description="Header cells or Kolonne 1..N")
    sample_rows: list[list[str]] = Field(default_factory=list)
    suggested_mapping: dict[str, str] = Field(default_factory=dict)
    fields: list[MappableField] = Field(default_factory=list)
    expires_in_minutes: int = 30


class ImportConfirmRequest(BaseSchema):
    """Mapping and period chosen for a previewed upload."""

    period: str = Field(..., description="2026-01 or 2026-W02", examples=["2026-01"])
    mapping: dict[str, Optional[str]] = Field(
        default_factory=dict,
        description="Column index → field key",
        examples=[{"0": "org_nr", "1": "name", "2": "total_sales"}]
    )
    template: Optional[str] = Field(None, description="Use a saved template instead of mapping")
    has_header_row: Optional[bool] = Field(None, description="Override the preview's header choice")
    strict_numbers: bool = Field(False, description="Report unreadable amounts as row errors")
