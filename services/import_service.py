"""
Sales period import.

Replaces one tenant's sales for one month or ISO week with the rows of an
uploaded export:

    bytes → decode → split rows → map columns → per row: customer + amounts
          → delete the period's sales → insert the new ones → ImportResult

A bad row is reported and skipped; only pre-flight problems (unreadable
file, mapping without org.nr or name, bad period) stop an import.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence, Union
import structlog

from config import settings
from models.imports import ImportJob, ImportResult
from models.mapping import ColumnMapping, FieldKey
from models.period import ImportPeriod
from models.sales import SaleRecordCreate
from models.customer import UNKNOWN_CUSTOMER_NAME
from parsers.csv_parser import parse_csv, split_header
from integrations.brreg import RegistryLookup, get_registry
from services.customer_resolver import CustomerResolver, ResolvedCustomer
from services.customer_service import CustomerService, get_customer_service
from services.sales_service import SalesService, get_sales_service
from services.mapping_service import validate_mapping
from services.period_service import resolve_period
from utils.number_utils import parse_amount
from exceptions import AppError, ImportFileError

logger = structlog.get_logger(__name__)


@dataclass
class StagedSale:
    """Sale waiting for insert, remembering the file row it came from."""
    row_number: int
    record: SaleRecordCreate


def private_description(row_name: Optional[str]) -> str:
    return f"Privatkunde - {row_name or UNKNOWN_CUSTOMER_NAME}"


class ImportService:
    """
    Runs period imports.

    Rows are processed sequentially; the customer resolver's in-job cache
    relies on it.
    """

    def __init__(
        self,
        customers: Optional[CustomerService] = None,
        sales: Optional[SalesService] = None,
        registry: Optional[RegistryLookup] = None,
        tagged_delete: Optional[bool] = None,
    ):
        self.customers = customers or get_customer_service()
        self.sales = sales or get_sales_service()
        self.registry = registry if registry is not None else get_registry()
        self.tagged_delete = (
            settings.delete_tagged_only if tagged_delete is None else tagged_delete
        )

    # ===================
    # JOB CONSTRUCTION
    # ===================

    def prepare(
        self,
        tenant_id: str,
        rows: list[list[str]],
        mapping: Union[ColumnMapping, dict],
        period_selector: Optional[str],
        has_header_row: bool = False,
        strict_numbers: bool = False,
    ) -> ImportJob:
        """
        Validate inputs and build a job. Nothing is written.

        Raises:
            ImportFileError: If there are no data rows
            MappingValidationError: If neither org_nr nor name is mapped
            InvalidPeriodError: If the period selector is missing or malformed
        """
        if not isinstance(mapping, ColumnMapping):
            mapping = ColumnMapping.from_dict(mapping)

        validate_mapping(mapping)
        period = resolve_period(period_selector)

        _, data_rows = split_header(rows, has_header_row)
        if not data_rows:
            raise ImportFileError("Filen inneholder ingen datarader")

        return ImportJob(
            tenant_id=tenant_id,
            period=period,
            mapping=mapping,
            rows=data_rows,
            has_header_row=has_header_row,
            strict_numbers=strict_numbers,
        )

    def run_upload(
        self,
        tenant_id: str,
        content: bytes,
        mapping: Union[ColumnMapping, dict],
        period_selector: Optional[str],
        has_header_row: bool = False,
        strict_numbers: bool = False,
        filename: Optional[str] = None,
    ) -> ImportResult:
        """
        Import an uploaded file in one call.

        Args:
            tenant_id: Tenant UUID
            content: Raw file bytes
            mapping: Column index → field key
            period_selector: "YYYY-MM" or "YYYY-Www"
            has_header_row: Treat the first row as labels
            strict_numbers: Report unreadable amounts as row errors
            filename: Original filename (for logging)

        Returns:
            ImportResult

        Raises:
            ImportFileError, MappingValidationError, InvalidPeriodError:
                before anything is written
        """
        if len(content) > settings.import_max_file_bytes:
            raise ImportFileError(
                "Filen er for stor",
                details={"bytes": len(content), "max_bytes": settings.import_max_file_bytes}
            )

        parsed = parse_csv(content, filename=filename)
        job = self.prepare(
            tenant_id=tenant_id,
            rows=parsed.rows,
            mapping=mapping,
            period_selector=period_selector,
            has_header_row=has_header_row,
            strict_numbers=strict_numbers,
        )
        return self.run(job)

    # ===================
    # RECONCILIATION
    # ===================

    def run(self, job: ImportJob) -> ImportResult:
        """
        Replace the job's period with the job's rows.

        Args:
            job: Validated import job

        Returns:
            ImportResult with counts, totals and row errors
        """
        validate_mapping(job.mapping)
        period = job.period
        result = ImportResult.for_period(period, total_rows=len(job.rows))

        logger.info(
            "import_started",
            tenant_id=job.tenant_id,
            period=period.label,
            start=period.start.isoformat(),
            end=period.end.isoformat(),
            rows=len(job.rows),
            tagged_delete=self.tagged_delete,
        )

        result.sales_deleted = self.sales.delete_for_period(
            job.tenant_id,
            period.start,
            period.end,
            import_ref=period.reference if self.tagged_delete else None,
        )

        resolver = CustomerResolver(
            tenant_id=job.tenant_id,
            mapping=job.mapping,
            customers=self.customers,
            registry=self.registry,
        )

        staged: list[StagedSale] = []
        for index, row in enumerate(job.rows):
            row_number = job.row_number(index)
            try:
                sale = self._process_row(job, row, resolver, result)
            except AppError as e:
                logger.warning("import_row_failed", row=row_number, code=e.code, error=e.message)
                result.record_error(row_number, e.message)
                continue
            except Exception as e:
                logger.warning("import_row_failed", row=row_number, error=str(e))
                result.record_error(row_number, str(e))
                continue

            if sale is not None:
                staged.append(StagedSale(row_number, sale))

        self._insert(staged, result)

        logger.info(
            "import_complete",
            tenant_id=job.tenant_id,
            period=period.label,
            customers_created=result.customers_created,
            customers_updated=result.customers_updated,
            sales_created=result.sales_created,
            sales_deleted=result.sales_deleted,
            skipped_zero_sales=result.skipped_zero_sales,
            errors=len(result.errors),
            total_amount=float(result.total_amount_imported),
        )

        return result

    def _process_row(
        self,
        job: ImportJob,
        row: Sequence[str],
        resolver: CustomerResolver,
        result: ImportResult,
    ) -> Optional[SaleRecordCreate]:
        """Resolve a row's customer and build its sale, or None if skipped."""
        mapping = job.mapping
        amount, profit = self._amounts(mapping, row, job.strict_numbers)

        customer = resolver.resolve(row)
        result.record_customer(customer.created, customer.updated)

        if amount == 0:
            result.record_skipped()
            return None

        return self._sale(job.tenant_id, job.period, customer, amount, profit)

    @staticmethod
    def _amounts(
        mapping: ColumnMapping,
        row: Sequence[str],
        strict: bool,
    ) -> tuple[Decimal, Decimal]:
        """Sales amount and profit; profit is sales minus cost unless mapped."""
        amount = parse_amount(mapping.get(row, FieldKey.TOTAL_SALES), strict=strict)
        cost = parse_amount(mapping.get(row, FieldKey.TOTAL_COST), strict=strict)

        if mapping.has_field(FieldKey.TOTAL_PROFIT):
            profit = parse_amount(mapping.get(row, FieldKey.TOTAL_PROFIT), strict=strict)
        else:
            profit = amount - cost

        # Stored with two decimals; "0,001" is a zero sale
        return round(amount, 2), round(profit, 2)

    @staticmethod
    def _sale(
        tenant_id: str,
        period: ImportPeriod,
        customer: ResolvedCustomer,
        amount: Decimal,
        profit: Decimal,
    ) -> SaleRecordCreate:
        # Private one-offs carry no tag: they are not a re-deletable batch
        if customer.is_private:
            description = private_description(customer.row_name)
            import_ref = None
        else:
            description = period.description
            import_ref = period.reference

        return SaleRecordCreate(
            tenant_id=tenant_id,
            customer_id=customer.customer_id,
            amount=amount,
            profit=profit,
            sale_date=period.sale_date,
            description=description,
            import_ref=import_ref,
        )

    def _insert(self, staged: list[StagedSale], result: ImportResult) -> None:
        """
        Insert staged sales in batches.

        A failed batch is retried row by row so only the bad rows are
        reported.
        """
        for batch in self.sales.batches(staged):
            try:
                self.sales.bulk_create([s.record for s in batch])
            except Exception as e:
                logger.warning("import_batch_failed", size=len(batch), error=str(e))
                self._insert_rows(batch, result)
                continue

            for s in batch:
                result.record_sale(s.record.amount, s.record.profit)

    def _insert_rows(self, batch: list[StagedSale], result: ImportResult) -> None:
        for s in batch:
            try:
                self.sales.create(s.record)
            except AppError as e:
                result.record_error(s.row_number, e.message)
                continue
            except Exception as e:
                result.record_error(s.row_number, str(e))
                continue
            result.record_sale(s.record.amount, s.record.profit)


# Singleton instance
_import_service: Optional[ImportService] = None


def get_import_service() -> ImportService:
    """Get or create ImportService instance."""
    global _import_service
    if _import_service is None:
        _import_service = ImportService()
    return _import_service
