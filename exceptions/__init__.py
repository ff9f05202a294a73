"""
Custom exceptions module.

Import from here rather than from exceptions.errors.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    DuplicateError,
    ExternalServiceError,
    DatabaseError,

    # Import file
    ImportFileError,
    NumberParseError,

    # Mapping
    MappingValidationError,
    InvalidFieldKeyError,
    TemplateNotFoundError,
    TemplateNameExistsError,

    # Period
    InvalidPeriodError,

    # Preview
    PreviewExpiredError,

    # Registry
    RegistryLookupError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "DuplicateError",
    "ExternalServiceError",
    "DatabaseError",

    # Import file
    "ImportFileError",
    "NumberParseError",

    # Mapping
    "MappingValidationError",
    "InvalidFieldKeyError",
    "TemplateNotFoundError",
    "TemplateNameExistsError",

    # Period
    "InvalidPeriodError",

    # Preview
    "PreviewExpiredError",

    # Registry
    "RegistryLookupError",
]
