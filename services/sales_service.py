"""
Sales store.

Period-scoped deletes and batched inserts for imported sale records.
"""

from typing import Optional
from datetime import date
import structlog

from config import get_supabase_client, settings
from models.sales import SaleRecordCreate, SaleRecordResponse
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)


class SalesService:
    """
    Sale record persistence, always scoped by tenant.
    """

    def __init__(self, client=None, batch_size: Optional[int] = None):
        self.db = client or get_supabase_client()
        self.table = "sales"
        self.batch_size = batch_size or settings.import_insert_batch_size

    # ===================
    # READ OPERATIONS
    # ===================

    def get_for_period(
        self,
        tenant_id: str,
        start_date: date,
        end_date: date
    ) -> list[SaleRecordResponse]:
        """
        Get a tenant's sales dated within a range (inclusive).

        Args:
            tenant_id: Tenant UUID
            start_date: First day
            end_date: Last day

        Returns:
            Sales ordered by date
        """
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("tenant_id", tenant_id)
                .gte("sale_date", start_date.isoformat())
                .lte("sale_date", end_date.isoformat())
                .order("sale_date")
                .execute()
            )
        except Exception as e:
            logger.error("get_sales_for_period_failed", tenant_id=tenant_id, error=str(e))
            raise DatabaseError("select", str(e))

        return [SaleRecordResponse(**row) for row in result.data]

    # ===================
    # WRITE OPERATIONS
    # ===================

    def delete_for_period(
        self,
        tenant_id: str,
        start_date: date,
        end_date: date,
        import_ref: Optional[str] = None
    ) -> int:
        """
        Delete a tenant's sales within a date range (inclusive).

        Used to make imports idempotent - delete the period before
        re-inserting it. Deleting an already empty period is a no-op.

        Args:
            tenant_id: Tenant UUID
            start_date: Start of date range
            end_date: End of date range
            import_ref: Only delete sales carrying this tag

        Returns:
            Number of records deleted
        """
        logger.info(
            "deleting_sales_for_period",
            tenant_id=tenant_id,
            start=start_date.isoformat(),
            end=end_date.isoformat(),
            import_ref=import_ref
        )

        try:
            query = (
                self.db.table(self.table)
                .delete()
                .eq("tenant_id", tenant_id)
                .gte("sale_date", start_date.isoformat())
                .lte("sale_date", end_date.isoformat())
            )
            if import_ref:
                query = query.eq("import_ref", import_ref)

            result = query.execute()

        except Exception as e:
            logger.error("delete_sales_for_period_failed", tenant_id=tenant_id, error=str(e))
            raise DatabaseError("delete", str(e))

        deleted = len(result.data) if result.data else 0

        logger.info("sales_deleted_for_period", tenant_id=tenant_id, count=deleted)

        return deleted

    def create(self, record: SaleRecordCreate) -> SaleRecordResponse:
        """
        Insert a single sale record.

        Args:
            record: Sale record creation data

        Returns:
            Created SaleRecordResponse
        """
        try:
            result = (
                self.db.table(self.table)
                .insert(record.to_row())
                .execute()
            )
        except Exception as e:
            logger.error("create_sale_failed", customer_id=record.customer_id, error=str(e))
            raise DatabaseError("insert", str(e))

        if not result.data:
            raise DatabaseError("insert", "no row returned", {"table": self.table})

        return SaleRecordResponse(**result.data[0])

    def bulk_create(self, records: list[SaleRecordCreate]) -> int:
        """
        Insert sale records in one request.

        Callers chunk with `batches()`; a failure means none of the given
        records were stored.

        Args:
            records: Sale records to create

        Returns:
            Number of records created
        """
        if not records:
            return 0

        logger.info("bulk_creating_sales", count=len(records))

        try:
            result = (
                self.db.table(self.table)
                .insert([r.to_row() for r in records])
                .execute()
            )
        except Exception as e:
            logger.error(
                "bulk_create_sales_failed",
                count=len(records),
                error=str(e)
            )
            raise DatabaseError("insert", str(e))

        created = len(result.data) if result.data else 0
        logger.info("sales_bulk_created", count=created)
        return created

    def batches(self, items: list) -> list[list]:
        """Split items into insert-sized chunks."""
        return [
            items[i:i + self.batch_size]
            for i in range(0, len(items), self.batch_size)
        ]


# Singleton instance
_sales_service: Optional[SalesService] = None


def get_sales_service() -> SalesService:
    """Get or create SalesService instance."""
    global _sales_service
    if _sales_service is None:
        _sales_service = SalesService()
    return _sales_service
