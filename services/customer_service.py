"""
Customer store.

The narrow slice of the customers table that imports need: lookup by
organization number, the private-customer aggregate, insert and update.
"""

from typing import Optional
import structlog

from config import get_supabase_client
from models.customer import (
    CustomerCreate,
    CustomerResponse,
    PRIVATE_CUSTOMER_NAME,
)
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)


class CustomerService:
    """
    Customer persistence, always scoped by tenant.
    """

    def __init__(self, client=None):
        self.db = client or get_supabase_client()
        self.table = "customers"

    # ===================
    # READ OPERATIONS
    # ===================

    def find_by_org_nr(self, tenant_id: str, org_nr: str) -> Optional[CustomerResponse]:
        """
        Find a business customer by normalized organization number.

        Args:
            tenant_id: Tenant UUID
            org_nr: Digits-only organization number

        Returns:
            CustomerResponse or None
        """
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("tenant_id", tenant_id)
                .eq("org_nr", org_nr)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("find_customer_by_org_nr_failed", org_nr=org_nr, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            return None
        return CustomerResponse(**result.data[0])

    def find_private_aggregate(self, tenant_id: str) -> Optional[CustomerResponse]:
        """Find the tenant's "Privatkunder" customer (no org.nr)."""
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("tenant_id", tenant_id)
                .eq("name", PRIVATE_CUSTOMER_NAME)
                .is_("org_nr", "null")
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("find_private_customer_failed", tenant_id=tenant_id, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            return None
        return CustomerResponse(**result.data[0])

    # ===================
    # WRITE OPERATIONS
    # ===================

    def create(self, data: CustomerCreate) -> CustomerResponse:
        """
        Insert a customer.

        Args:
            data: Customer creation data

        Returns:
            Created CustomerResponse
        """
        logger.info(
            "creating_customer",
            tenant_id=data.tenant_id,
            org_nr=data.org_nr,
            name=data.name
        )

        try:
            result = (
                self.db.table(self.table)
                .insert(data.model_dump(exclude_none=True))
                .execute()
            )
        except Exception as e:
            logger.error("create_customer_failed", org_nr=data.org_nr, error=str(e))
            raise DatabaseError("insert", str(e))

        if not result.data:
            raise DatabaseError("insert", "no row returned", {"table": self.table})

        customer = CustomerResponse(**result.data[0])
        logger.info("customer_created", customer_id=customer.id, org_nr=customer.org_nr)
        return customer

    def update_fields(self, customer_id: str, fields: dict) -> None:
        """
        Overwrite the given fields on a customer.

        Args:
            customer_id: Customer UUID
            fields: Column → new value; empty dict is a no-op
        """
        if not fields:
            return

        try:
            (
                self.db.table(self.table)
                .update(fields)
                .eq("id", customer_id)
                .execute()
            )
        except Exception as e:
            logger.error("update_customer_failed", customer_id=customer_id, error=str(e))
            raise DatabaseError("update", str(e))

        logger.debug("customer_updated", customer_id=customer_id, fields=sorted(fields))


# Singleton instance
_customer_service: Optional[CustomerService] = None


def get_customer_service() -> CustomerService:
    """Get or create CustomerService instance."""
    global _customer_service
    if _customer_service is None:
        _customer_service = CustomerService()
    return _customer_service
