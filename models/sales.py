"""
Sale record schemas.

One row per customer per imported period, dated on the period's last day.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from models.base import BaseSchema, TenantMixin, TimestampMixin


class SaleRecordCreate(TenantMixin, BaseSchema):
    """Schema for creating a sale record."""

    customer_id: str = Field(..., description="Customer UUID")
    amount: Decimal = Field(..., description="Sales amount (NOK); negative for credit notes")
    profit: Decimal = Field(default=Decimal("0"), description="Profit (NOK)")
    sale_date: date = Field(..., description="Last day of the imported period")
    description: Optional[str] = Field(None, max_length=500)
    import_ref: Optional[str] = Field(None, description="import_<period>; None for private one-offs")

    @field_validator("amount", "profit", mode="before")
    @classmethod
    def round_amount(cls, v):
        """Round to 2 decimal places."""
        if v is not None:
            return round(Decimal(str(v)), 2)
        return v

    @field_validator("sale_date", mode="before")
    @classmethod
    def parse_date(cls, v):
        """Parse date from string or datetime."""
        if isinstance(v, str):
            return date.fromisoformat(v)
        if isinstance(v, datetime):
            return v.date()
        return v

    def to_row(self) -> dict:
        """Row for the sales table."""
        return {
            "tenant_id": self.tenant_id,
            "customer_id": self.customer_id,
            "amount": float(self.amount),
            "profit": float(self.profit),
            "sale_date": self.sale_date.isoformat(),
            "description": self.description,
            "import_ref": self.import_ref,
        }


class SaleRecordResponse(TenantMixin, TimestampMixin, BaseSchema):
    """Schema for sale record response."""

    id: str
    customer_id: str
    amount: Decimal
    profit: Decimal = Decimal("0")
    sale_date: date
    description: Optional[str] = None
    import_ref: Optional[str] = None

    @field_validator("amount", "profit", mode="before")
    @classmethod
    def ensure_decimal(cls, v):
        """Ensure amounts are Decimal."""
        if v is not None:
            return Decimal(str(v))
        return v
