"""
Mapping template API routes.

Templates are named per tenant and store column index → field key.
"""

from fastapi import APIRouter, Header, Query
from fastapi.responses import JSONResponse
import structlog

from models.mapping import (
    AppliedMappingResponse,
    MappingTemplateCreate,
    MappingTemplateResponse,
)
from services.mapping_service import dropped_columns
from services.template_service import get_template_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/import-templates", tags=["Import templates"])


def _handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(status_code=e.status_code, content=e.to_dict())
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


@router.get("", response_model=list[MappingTemplateResponse])
async def list_templates(tenant_id: str = Header(..., alias="X-Tenant-ID")):
    """List the tenant's templates, ordered by name."""
    try:
        return get_template_service().list(tenant_id)
    except Exception as e:
        return _handle_error(e)


@router.post("", response_model=MappingTemplateResponse, status_code=201)
async def save_template(
    data: MappingTemplateCreate,
    tenant_id: str = Header(..., alias="X-Tenant-ID"),
):
    """Save the current mapping under a new name. Names are unique per tenant."""
    try:
        return get_template_service().save(tenant_id, data)
    except Exception as e:
        return _handle_error(e)


@router.delete("/{name}", status_code=204)
async def delete_template(name: str, tenant_id: str = Header(..., alias="X-Tenant-ID")):
    try:
        get_template_service().delete(tenant_id, name)
    except Exception as e:
        return _handle_error(e)


@router.get("/{name}/apply", response_model=AppliedMappingResponse)
async def apply_template(
    name: str,
    column_count: int = Query(..., ge=1, description="Columns in the current file"),
    tenant_id: str = Header(..., alias="X-Tenant-ID"),
):
    """
    Fit a template to a file with `column_count` columns.

    Saved columns past the end of the file are dropped and listed.
    """
    try:
        service = get_template_service()
        template = service.get_by_name(tenant_id, name)
        mapping = service.apply(tenant_id, name, column_count)

        return AppliedMappingResponse(
            template=template.name,
            column_count=column_count,
            mapping=mapping.to_dict(),
            dropped_columns=dropped_columns(template.mapping, column_count),
        )
    except Exception as e:
        return _handle_error(e)
