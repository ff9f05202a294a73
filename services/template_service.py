"""
Mapping template store.

Named, tenant-scoped column mappings that can be reapplied to the next
export from the same till.
"""

from typing import Optional
import structlog

from config import get_supabase_client
from models.mapping import (
    ColumnMapping,
    MappingTemplateCreate,
    MappingTemplateResponse,
)
from services.mapping_service import apply_template
from exceptions import (
    DatabaseError,
    TemplateNotFoundError,
    TemplateNameExistsError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


class TemplateService:
    """
    Mapping template CRUD, keyed by (tenant, name).
    """

    def __init__(self, client=None):
        self.db = client or get_supabase_client()
        self.table = "import_templates"

    # ===================
    # READ OPERATIONS
    # ===================

    def list(self, tenant_id: str) -> list[MappingTemplateResponse]:
        """
        List a tenant's templates ordered by name.

        Args:
            tenant_id: Tenant UUID

        Returns:
            List of templates
        """
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("tenant_id", tenant_id)
                .order("name")
                .execute()
            )
        except Exception as e:
            logger.error("list_templates_failed", tenant_id=tenant_id, error=str(e))
            raise DatabaseError("select", str(e))

        return [MappingTemplateResponse(**row) for row in result.data]

    def get_by_name(self, tenant_id: str, name: str) -> MappingTemplateResponse:
        """
        Get a template by name.

        Raises:
            TemplateNotFoundError: If the tenant has no template with that name
        """
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("tenant_id", tenant_id)
                .eq("name", name.strip())
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("get_template_failed", tenant_id=tenant_id, name=name, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            raise TemplateNotFoundError(name)

        return MappingTemplateResponse(**result.data[0])

    def exists(self, tenant_id: str, name: str) -> bool:
        try:
            self.get_by_name(tenant_id, name)
        except TemplateNotFoundError:
            return False
        return True

    # ===================
    # WRITE OPERATIONS
    # ===================

    def save(self, tenant_id: str, data: MappingTemplateCreate) -> MappingTemplateResponse:
        """
        Save a mapping under a new name.

        Args:
            tenant_id: Tenant UUID
            data: Name, mapping and the column count it was made for

        Returns:
            Created template

        Raises:
            ValidationError: If the name is blank
            TemplateNameExistsError: If the name is already used
        """
        name = data.name.strip()
        if not name:
            raise ValidationError("Template name is required", code="TEMPLATE_NAME_REQUIRED")

        if self.exists(tenant_id, name):
            raise TemplateNameExistsError(name)

        logger.info(
            "saving_template",
            tenant_id=tenant_id,
            name=name,
            column_count=data.column_count,
            mapped=len(data.mapping)
        )

        try:
            result = (
                self.db.table(self.table)
                .insert({
                    "tenant_id": tenant_id,
                    "name": name,
                    "mapping": data.mapping,
                    "column_count": data.column_count,
                })
                .execute()
            )
        except Exception as e:
            logger.error("save_template_failed", tenant_id=tenant_id, name=name, error=str(e))
            raise DatabaseError("insert", str(e))

        if not result.data:
            raise DatabaseError("insert", "no row returned", {"table": self.table})

        return MappingTemplateResponse(**result.data[0])

    def delete(self, tenant_id: str, name: str) -> None:
        """
        Delete a template by name.

        Raises:
            TemplateNotFoundError: If the template doesn't exist
        """
        template = self.get_by_name(tenant_id, name)

        try:
            (
                self.db.table(self.table)
                .delete()
                .eq("id", template.id)
                .eq("tenant_id", tenant_id)
                .execute()
            )
        except Exception as e:
            logger.error("delete_template_failed", tenant_id=tenant_id, name=name, error=str(e))
            raise DatabaseError("delete", str(e))

        logger.info("template_deleted", tenant_id=tenant_id, name=name)

    # ===================
    # APPLY
    # ===================

    def apply(self, tenant_id: str, name: str, column_count: int) -> ColumnMapping:
        """
        Load a template and fit it to a file with `column_count` columns.

        Raises:
            TemplateNotFoundError: If the template doesn't exist
        """
        template = self.get_by_name(tenant_id, name)
        mapping = apply_template(template.to_column_mapping(), column_count)

        logger.info(
            "template_applied",
            tenant_id=tenant_id,
            name=name,
            saved_columns=template.column_count,
            file_columns=column_count,
            mapped=len(mapping)
        )

        return mapping


# Singleton instance
_template_service: Optional[TemplateService] = None


def get_template_service() -> TemplateService:
    """Get or create TemplateService instance."""
    global _template_service
    if _template_service is None:
        _template_service = TemplateService()
    return _template_service
