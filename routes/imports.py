"""
Sales import API routes.

Two-step flow: /preview parses the file and suggests a mapping, nothing is
saved; /confirm/{preview_id} runs the import with the chosen mapping and
period. POST /api/imports does both in one request.
"""

import json
from typing import Optional

from fastapi import APIRouter, File, Form, Header, UploadFile
from fastapi.responses import JSONResponse
import structlog

from config import settings
from models.imports import ImportConfirmRequest, ImportPreview, ImportResultResponse
from models.mapping import ColumnMapping, MappableField, mappable_fields
from parsers.csv_parser import parse_csv, split_header
from services import preview_cache_service
from services.preview_cache_service import CachedUpload
from services.import_service import get_import_service
from services.mapping_service import suggest_mapping
from services.template_service import get_template_service
from exceptions import AppError, ImportFileError, PreviewExpiredError, ValidationError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/imports", tags=["Imports"])

SAMPLE_ROWS = 5


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


async def _read_upload(file: UploadFile) -> bytes:
    content = await file.read()
    if len(content) > settings.import_max_file_bytes:
        raise ImportFileError(
            "Filen er for stor",
            details={"bytes": len(content), "max_bytes": settings.import_max_file_bytes}
        )
    return content


def _mapping_from_form(raw: str) -> dict:
    try:
        data = json.loads(raw or "{}")
    except json.JSONDecodeError as e:
        raise ValidationError(
            "mapping must be a JSON object",
            code="MAPPING_INVALID_JSON",
            details={"error": str(e)}
        )
    if not isinstance(data, dict):
        raise ValidationError("mapping must be a JSON object", code="MAPPING_INVALID_JSON")
    return data


# ===================
# FIELDS
# ===================

@router.get("/fields", response_model=list[MappableField])
async def list_fields():
    """Fields a column can be mapped to, with display labels."""
    return mappable_fields()


# ===================
# PREVIEW / CONFIRM
# ===================

@router.post("/preview", response_model=ImportPreview)
async def preview_import(
    file: UploadFile = File(...),
    has_header_row: bool = Form(False),
    tenant_id: str = Header(..., alias="X-Tenant-ID"),
):
    """
    Parse an uploaded CSV and suggest a mapping.

    With a header row the suggestion comes from the header labels.
    Nothing is saved until /confirm is called.
    """
    try:
        content = await _read_upload(file)
        parsed = parse_csv(content, filename=file.filename)
        labels, data_rows = split_header(parsed.rows, has_header_row)

        suggested = suggest_mapping(labels) if has_header_row else ColumnMapping()

        preview_id = preview_cache_service.store_preview(CachedUpload(
            tenant_id=tenant_id,
            rows=parsed.rows,
            encoding=parsed.encoding,
            has_header_row=has_header_row,
            filename=file.filename,
        ))

        logger.info(
            "import_preview_created",
            tenant_id=tenant_id,
            preview_id=preview_id,
            filename=file.filename,
            encoding=parsed.encoding,
            rows=len(data_rows),
            columns=parsed.column_count,
            suggested=len(suggested),
        )

        return ImportPreview(
            preview_id=preview_id,
            filename=file.filename,
            encoding=parsed.encoding,
            has_header_row=has_header_row,
            column_count=parsed.column_count,
            row_count=len(data_rows),
            labels=labels,
            sample_rows=data_rows[:SAMPLE_ROWS],
            suggested_mapping=suggested.to_dict(),
            fields=mappable_fields(),
            expires_in_minutes=settings.preview_ttl_minutes,
        )

    except Exception as e:
        return _handle_error(e)


@router.post("/confirm/{preview_id}", response_model=ImportResultResponse)
async def confirm_import(
    preview_id: str,
    request: ImportConfirmRequest,
    tenant_id: str = Header(..., alias="X-Tenant-ID"),
):
    """
    Import a previewed file into the selected period.

    The period's existing sales are replaced. Row problems are reported in
    `errors` and do not stop the import.
    """
    try:
        upload = preview_cache_service.retrieve_preview(preview_id, tenant_id)
        if upload is None:
            raise PreviewExpiredError(preview_id)

        if request.template:
            mapping = get_template_service().apply(
                tenant_id, request.template, upload.column_count
            )
        else:
            mapping = ColumnMapping.from_dict(request.mapping)

        has_header_row = (
            upload.has_header_row if request.has_header_row is None else request.has_header_row
        )

        service = get_import_service()
        job = service.prepare(
            tenant_id=tenant_id,
            rows=upload.rows,
            mapping=mapping,
            period_selector=request.period,
            has_header_row=has_header_row,
            strict_numbers=request.strict_numbers,
        )
        result = service.run(job)

        preview_cache_service.delete_preview(preview_id)

        return result.to_response()

    except Exception as e:
        return _handle_error(e)


# ===================
# ONE-SHOT
# ===================

@router.post("", response_model=ImportResultResponse)
async def run_import(
    file: UploadFile = File(...),
    period: str = Form(...),
    mapping: str = Form("{}"),
    has_header_row: bool = Form(False),
    strict_numbers: bool = Form(False),
    template: Optional[str] = Form(None),
    tenant_id: str = Header(..., alias="X-Tenant-ID"),
):
    """
    Upload and import in one request.

    `mapping` is a JSON object of column index → field key, e.g.
    {"0": "org_nr", "1": "name", "2": "total_sales"}. A saved `template`
    can be given instead.
    """
    try:
        content = await _read_upload(file)
        service = get_import_service()

        if template:
            parsed = parse_csv(content, filename=file.filename)
            column_mapping = get_template_service().apply(
                tenant_id, template, parsed.column_count
            )
            job = service.prepare(
                tenant_id=tenant_id,
                rows=parsed.rows,
                mapping=column_mapping,
                period_selector=period,
                has_header_row=has_header_row,
                strict_numbers=strict_numbers,
            )
            return service.run(job).to_response()

        result = service.run_upload(
            tenant_id=tenant_id,
            content=content,
            mapping=_mapping_from_form(mapping),
            period_selector=period,
            has_header_row=has_header_row,
            strict_numbers=strict_numbers,
            filename=file.filename,
        )
        return result.to_response()

    except Exception as e:
        return _handle_error(e)
