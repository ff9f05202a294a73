"""
Custom exception classes for the application.

Every error carries a machine-readable code, a message and an HTTP status.
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base exception for all application errors.
    
    All custom exceptions inherit from this.
    
    Attributes:
        code: Error code (e.g., "TEMPLATE_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """
    
    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)
    
    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""
    
    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""
    
    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with existing resource (409)."""
    
    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class DuplicateError(ConflictError):
    """Duplicate resource (409)."""
    
    def __init__(
        self,
        resource: str,
        field: str,
        value: str
    ):
        super().__init__(
            code=f"{resource.upper()}_{field.upper()}_EXISTS",
            message=f"{resource} with this {field} already exists",
            details={field: value}
        )


class ExternalServiceError(AppError):
    """External service failure (503)."""
    
    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""
    
    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )



# ===================
# IMPORT FILE ERRORS
# ===================

class ImportFileError(ValidationError):
    """Uploaded sales file is empty, too large or unreadable."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="IMPORT_FILE_INVALID",
            message=message,
            details=details
        )


class NumberParseError(ValidationError):
    """Amount could not be read as a number (strict parsing only)."""

    def __init__(self, value: str):
        super().__init__(
            code="NUMBER_PARSE_ERROR",
            message=f"Ugyldig tall: {value!r}",
            details={"value": value}
        )


# ===================
# MAPPING ERRORS
# ===================

class MappingValidationError(ValidationError):
    """Column mapping cannot identify customers."""

    def __init__(self, mapped_fields: list[str]):
        super().__init__(
            code="MAPPING_MISSING_IDENTITY",
            message="Du må mappe enten Org.nr eller Kundenavn for å kunne importere",
            details={"mapped_fields": mapped_fields, "required_any": ["org_nr", "name"]}
        )


class InvalidFieldKeyError(ValidationError):
    """Mapping refers to a field that cannot be imported."""

    def __init__(self, field_key: str, valid: list[str]):
        super().__init__(
            code="MAPPING_INVALID_FIELD",
            message=f"Unknown import field: {field_key}",
            details={"provided": field_key, "valid": valid}
        )


class TemplateNotFoundError(NotFoundError):
    """Mapping template not found."""

    def __init__(self, name: str):
        super().__init__(
            resource="Template",
            identifier=name,
            code="TEMPLATE_NOT_FOUND"
        )


class TemplateNameExistsError(DuplicateError):
    """Mapping template name already used by the tenant."""

    def __init__(self, name: str):
        super().__init__(
            resource="Template",
            field="name",
            value=name
        )


# ===================
# PERIOD ERRORS
# ===================

class InvalidPeriodError(ValidationError):
    """Period selector is missing or malformed."""

    def __init__(self, selector: Optional[str]):
        super().__init__(
            code="PERIOD_INVALID",
            message="Du må velge måned (YYYY-MM) eller uke (YYYY-Www) for import",
            details={"provided": selector}
        )


# ===================
# PREVIEW ERRORS
# ===================

class PreviewExpiredError(NotFoundError):
    """Uploaded file is no longer waiting for confirmation."""

    def __init__(self, preview_id: str):
        super().__init__(
            resource="Preview",
            identifier=preview_id,
            code="PREVIEW_EXPIRED"
        )


# ===================
# REGISTRY ERRORS
# ===================

class RegistryLookupError(ExternalServiceError):
    """Brønnøysund registry lookup failed."""

    def __init__(self, org_nr: str, reason: str):
        super().__init__(
            service="brreg",
            message=f"Registry lookup failed: {reason}",
            details={"org_nr": org_nr, "reason": reason}
        )
