"""
Base schemas and mixins for all models.
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True
    )


class TenantMixin(BaseModel):
    """Every persisted row belongs to exactly one tenant."""
    tenant_id: str = Field(..., min_length=1, description="Owning tenant UUID")


class TimestampMixin(BaseModel):
    """Add timestamps to response models."""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
