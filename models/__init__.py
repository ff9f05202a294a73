"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    TenantMixin,
    TimestampMixin,
)
from models.mapping import (
    FieldKey,
    FIELD_LABELS,
    ColumnMapping,
    MappingTemplateCreate,
    MappingTemplateResponse,
    AppliedMappingResponse,
    MappableField,
    mappable_fields,
)
from models.period import (
    PeriodType,
    ImportPeriod,
)
from models.customer import (
    PRIVATE_CUSTOMER_NAME,
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
)
from models.sales import (
    SaleRecordCreate,
    SaleRecordResponse,
)
from models.registry import RegistryCompany
from models.imports import (
    ImportJob,
    ImportResult,
    ImportResultResponse,
    ImportPreview,
    ImportConfirmRequest,
)

__all__ = [
    # Base
    "BaseSchema",
    "TenantMixin",
    "TimestampMixin",

    # Mapping
    "FieldKey",
    "FIELD_LABELS",
    "ColumnMapping",
    "MappingTemplateCreate",
    "MappingTemplateResponse",
    "AppliedMappingResponse",
    "MappableField",
    "mappable_fields",

    # Period
    "PeriodType",
    "ImportPeriod",

    # Customer
    "PRIVATE_CUSTOMER_NAME",
    "CustomerCreate",
    "CustomerUpdate",
    "CustomerResponse",

    # Sales
    "SaleRecordCreate",
    "SaleRecordResponse",

    # Registry
    "RegistryCompany",

    # Import
    "ImportJob",
    "ImportResult",
    "ImportResultResponse",
    "ImportPreview",
    "ImportConfirmRequest",
]
