"""
Customer resolution for import rows.

Maps each row to a persisted customer:
- rows without an organization number go to the tenant's single
  "Privatkunder" customer
- rows with one are matched by (tenant, org.nr), enriched from the row, or
  created and backfilled from Enhetsregisteret
"""

from dataclasses import dataclass
from typing import Optional, Sequence
import structlog

from models.customer import (
    CustomerCreate,
    CustomerUpdate,
    PRIVATE_CUSTOMER_NAME,
    PRIVATE_CUSTOMER_NOTES,
    UNKNOWN_CUSTOMER_NAME,
)
from models.mapping import ColumnMapping, FieldKey
from models.registry import RegistryCompany
from integrations.brreg import RegistryLookup, NullRegistry
from services.customer_service import CustomerService
from utils.text_utils import normalize_org_nr, clean_text

logger = structlog.get_logger(__name__)


@dataclass
class ResolvedCustomer:
    """Customer a row belongs to, and what resolving it did."""
    customer_id: str
    is_private: bool
    row_name: Optional[str] = None
    org_nr: Optional[str] = None
    created: bool = False
    updated: bool = False


class CustomerResolver:
    """
    Resolves rows to customers for one import job.

    Rows are resolved one at a time. Customers created earlier in the same
    job are remembered so a repeated org.nr never creates a second customer.
    """

    def __init__(
        self,
        tenant_id: str,
        mapping: ColumnMapping,
        customers: CustomerService,
        registry: Optional[RegistryLookup] = None,
    ):
        self.tenant_id = tenant_id
        self.mapping = mapping
        self.customers = customers
        self.registry = registry or NullRegistry()

        self._known: dict[str, str] = {}  # org_nr -> customer_id
        self._private_id: Optional[str] = None

    def _value(self, row: Sequence[str], field_key: FieldKey) -> Optional[str]:
        return clean_text(self.mapping.get(row, field_key))

    # ===================
    # ENTRY POINT
    # ===================

    def resolve(self, row: Sequence[str]) -> ResolvedCustomer:
        """
        Resolve one mapped row.

        Args:
            row: Parsed row fields

        Returns:
            ResolvedCustomer with created/updated flags

        Raises:
            DatabaseError: If a lookup or write fails
        """
        org_nr = normalize_org_nr(self.mapping.get(row, FieldKey.ORG_NR))
        name = self._value(row, FieldKey.NAME)

        if not org_nr:
            return self._resolve_private(name)

        return self._resolve_business(row, org_nr, name)

    # ===================
    # PRIVATE CUSTOMERS
    # ===================

    def _resolve_private(self, row_name: Optional[str]) -> ResolvedCustomer:
        if self._private_id:
            return ResolvedCustomer(self._private_id, is_private=True, row_name=row_name)

        existing = self.customers.find_private_aggregate(self.tenant_id)
        if existing:
            self._private_id = existing.id
            return ResolvedCustomer(existing.id, is_private=True, row_name=row_name)

        created = self.customers.create(CustomerCreate(
            tenant_id=self.tenant_id,
            name=PRIVATE_CUSTOMER_NAME,
            notes=PRIVATE_CUSTOMER_NOTES,
        ))
        self._private_id = created.id

        logger.info("private_customer_created", tenant_id=self.tenant_id, customer_id=created.id)
        return ResolvedCustomer(created.id, is_private=True, row_name=row_name, created=True)

    # ===================
    # BUSINESS CUSTOMERS
    # ===================

    def _resolve_business(
        self,
        row: Sequence[str],
        org_nr: str,
        name: Optional[str],
    ) -> ResolvedCustomer:
        customer_id = self._known.get(org_nr)
        if customer_id is None:
            existing = self.customers.find_by_org_nr(self.tenant_id, org_nr)
            customer_id = existing.id if existing else None

        if customer_id is not None:
            self._known[org_nr] = customer_id
            updated = self._overwrite_fields(customer_id, row)
            return ResolvedCustomer(
                customer_id,
                is_private=False,
                row_name=name,
                org_nr=org_nr,
                updated=updated,
            )

        created = self.customers.create(self._new_customer(row, org_nr, name))
        self._known[org_nr] = created.id
        return ResolvedCustomer(
            created.id,
            is_private=False,
            row_name=name,
            org_nr=org_nr,
            created=True,
        )

    def _overwrite_fields(self, customer_id: str, row: Sequence[str]) -> bool:
        """Write non-empty row values over the stored ones. Never clears."""
        update = CustomerUpdate(
            name=self._value(row, FieldKey.NAME),
            address=self._value(row, FieldKey.ADDRESS),
            postal_code=self._value(row, FieldKey.POSTAL_CODE),
            city=self._value(row, FieldKey.CITY),
            phone=self._value(row, FieldKey.PHONE),
            email=self._value(row, FieldKey.EMAIL),
        )
        changes = update.changes()
        if not changes:
            return False

        self.customers.update_fields(customer_id, changes)
        return True

    def _new_customer(
        self,
        row: Sequence[str],
        org_nr: str,
        name: Optional[str],
    ) -> CustomerCreate:
        data = {
            "tenant_id": self.tenant_id,
            "org_nr": org_nr,
            "name": name or UNKNOWN_CUSTOMER_NAME,
            "address": self._value(row, FieldKey.ADDRESS),
            "postal_code": self._value(row, FieldKey.POSTAL_CODE),
            "city": self._value(row, FieldKey.CITY),
            "phone": self._value(row, FieldKey.PHONE),
            "email": self._value(row, FieldKey.EMAIL),
            "contact_person": self._value(row, FieldKey.CONTACT_PERSON),
            "contact_phone": self._value(row, FieldKey.CONTACT_PHONE),
            "contact_email": self._value(row, FieldKey.CONTACT_EMAIL),
        }

        company = self._lookup(org_nr)
        if company:
            _backfill(data, company)

        return CustomerCreate(**data)

    def _lookup(self, org_nr: str) -> Optional[RegistryCompany]:
        """Registry lookup; any failure means "use the file's data only"."""
        try:
            return self.registry.lookup(org_nr)
        except Exception as e:
            logger.warning(
                "registry_lookup_ignored",
                tenant_id=self.tenant_id,
                org_nr=org_nr,
                error=str(e),
                error_type=type(e).__name__
            )
            return None


def _backfill(data: dict, company: RegistryCompany) -> None:
    """Fill gaps in new-customer data from the registry. File values win."""
    if company.name and (not data["name"] or data["name"] == UNKNOWN_CUSTOMER_NAME):
        data["name"] = company.name

    if not data["address"] and (company.street or company.postal_code or company.city):
        data["address"] = company.street
        data["postal_code"] = company.postal_code
        data["city"] = company.city

    if company.industry_description:
        data["industry"] = company.industry_description
    if company.employee_count is not None:
        data["employee_count"] = str(company.employee_count)
