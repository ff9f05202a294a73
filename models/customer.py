"""
Customer schemas.

Customers are owned by the CRM; imports only create them or fill in
contact fields.
"""

from typing import Optional

from pydantic import Field, field_validator

from models.base import BaseSchema, TenantMixin, TimestampMixin

# Single aggregate customer per tenant for everyone without an org.nr
PRIVATE_CUSTOMER_NAME = "Privatkunder"
PRIVATE_CUSTOMER_NOTES = "Samlet kategori for alle privatkunder uten org.nr"
UNKNOWN_CUSTOMER_NAME = "Ukjent"

# Fields an import may overwrite on an existing business customer
OVERWRITABLE_FIELDS = ("name", "address", "postal_code", "city", "phone", "email")


class CustomerCreate(TenantMixin, BaseSchema):
    """Schema for creating a customer."""

    name: str = Field(..., min_length=1, max_length=255)
    org_nr: Optional[str] = Field(None, description="Digits only; None for the private aggregate")
    address: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    contact_person: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    industry: Optional[str] = None
    employee_count: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("org_nr")
    @classmethod
    def digits_only(cls, v: Optional[str]) -> Optional[str]:
        """Organization numbers are stored normalized."""
        if v is not None and not v.isdigit():
            raise ValueError("org_nr must contain digits only")
        return v or None


class CustomerUpdate(BaseSchema):
    """Fields an import may overwrite. None means leave unchanged."""

    name: Optional[str] = None
    address: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    def changes(self) -> dict:
        """Only the fields that carry a value."""
        return self.model_dump(exclude_none=True)


class CustomerResponse(TenantMixin, TimestampMixin, BaseSchema):
    """Schema for customer response."""

    id: str
    name: str
    org_nr: Optional[str] = None
    address: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_private_aggregate(self) -> bool:
        return self.org_nr is None and self.name == PRIVATE_CUSTOMER_NAME
