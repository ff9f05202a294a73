"""
Shared test fixtures.

FakeSupabaseClient keeps tables in memory and applies the filters the
stores use (eq, is_, gte, lte, order, limit), so services can be tested
against real data flow instead of chained MagicMocks.
"""

import os
import sys
import uuid
from pathlib import Path

# Settings are read on import; give them something to read
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("BRREG_ENABLED", "false")

# Add project root to Python path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

import pytest
from datetime import datetime
from typing import Callable, Optional

from models.registry import RegistryCompany
from services import preview_cache_service
from services.customer_service import CustomerService
from services.sales_service import SalesService
from services.template_service import TemplateService
from services.import_service import ImportService


TENANT_ID = "tenant-uuid-001"
OTHER_TENANT_ID = "tenant-uuid-002"


# ===================
# FAKE SUPABASE CLIENT
# ===================

class FakeSupabaseResponse:
    """Query response with .data and .count like postgrest's APIResponse."""

    def __init__(self, data: list):
        self.data = data
        self.count = len(data)


class FakeSupabaseQuery:
    """Chainable query builder over one in-memory table."""

    def __init__(self, client: "FakeSupabaseClient", table: str):
        self._client = client
        self._table = table
        self._op = "select"
        self._payload = None
        self._filters: list[Callable[[dict], bool]] = []
        self._order: Optional[tuple[str, bool]] = None
        self._limit: Optional[int] = None

    # operations

    def select(self, *args, **kwargs):
        self._op = "select"
        return self

    def insert(self, data):
        self._op = "insert"
        self._payload = data
        return self

    def update(self, data):
        self._op = "update"
        self._payload = data
        return self

    def delete(self):
        self._op = "delete"
        return self

    # filters

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def is_(self, column, value):
        if value == "null":
            self._filters.append(lambda row: row.get(column) is None)
        else:
            self._filters.append(lambda row: row.get(column) == value)
        return self

    def gte(self, column, value):
        self._filters.append(lambda row: row.get(column) is not None and row[column] >= value)
        return self

    def lte(self, column, value):
        self._filters.append(lambda row: row.get(column) is not None and row[column] <= value)
        return self

    def order(self, column, desc=False, **kwargs):
        self._order = (column, desc)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _matches(self, row: dict) -> bool:
        return all(f(row) for f in self._filters)

    def execute(self) -> FakeSupabaseResponse:
        self._client.calls.append((self._table, self._op))
        rows = self._client.tables.setdefault(self._table, [])

        if self._op == "insert":
            return FakeSupabaseResponse(self._client._insert(self._table, self._payload))

        if self._op == "delete":
            removed = [r for r in rows if self._matches(r)]
            self._client.tables[self._table] = [r for r in rows if not self._matches(r)]
            return FakeSupabaseResponse([dict(r) for r in removed])

        if self._op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self._payload)
                    row["updated_at"] = datetime.utcnow().isoformat()
                    updated.append(dict(row))
            return FakeSupabaseResponse(updated)

        selected = [dict(r) for r in rows if self._matches(r)]
        if self._order:
            column, desc = self._order
            selected.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
        if self._limit is not None:
            selected = selected[:self._limit]
        return FakeSupabaseResponse(selected)


class FakeSupabaseClient:
    """
    In-memory stand-in for the Supabase client.

    Usage:
        def test_something(fake_db):
            fake_db.seed("customers", [{"tenant_id": ..., "name": ...}])
            fake_db.fail_insert("sales", lambda row: row["amount"] < 0)
    """

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.calls: list[tuple[str, str]] = []
        self._insert_failures: dict[str, Callable[[dict], bool]] = {}

    def table(self, name: str) -> FakeSupabaseQuery:
        return FakeSupabaseQuery(self, name)

    def seed(self, table: str, rows: list[dict]) -> list[dict]:
        return self._insert(table, rows)

    def fail_insert(self, table: str, predicate: Callable[[dict], bool]) -> None:
        """Make inserts into `table` raise when any row matches."""
        self._insert_failures[table] = predicate

    def rows(self, table: str, **filters) -> list[dict]:
        return [
            r for r in self.tables.get(table, [])
            if all(r.get(k) == v for k, v in filters.items())
        ]

    def _insert(self, table: str, data) -> list[dict]:
        items = [data] if isinstance(data, dict) else list(data)

        predicate = self._insert_failures.get(table)
        if predicate and any(predicate(item) for item in items):
            raise Exception(f"insert into {table} rejected")

        now = datetime.utcnow().isoformat()
        stored = []
        for item in items:
            row = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now, **item}
            self.tables.setdefault(table, []).append(row)
            stored.append(dict(row))
        return stored


# ===================
# FAKE REGISTRY
# ===================

class FakeRegistry:
    """Registry lookup stub. Unknown numbers are 'not found'."""

    def __init__(self, companies: Optional[dict[str, RegistryCompany]] = None, error: Exception = None):
        self.companies = companies or {}
        self.error = error
        self.lookups: list[str] = []

    def lookup(self, org_nr: str) -> Optional[RegistryCompany]:
        self.lookups.append(org_nr)
        if self.error:
            raise self.error
        return self.companies.get(org_nr)


# ===================
# FIXTURES
# ===================

@pytest.fixture
def fake_db() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def customer_service(fake_db) -> CustomerService:
    return CustomerService(client=fake_db)


@pytest.fixture
def sales_service(fake_db) -> SalesService:
    return SalesService(client=fake_db, batch_size=100)


@pytest.fixture
def template_service(fake_db) -> TemplateService:
    return TemplateService(client=fake_db)


@pytest.fixture
def import_service(customer_service, sales_service, registry) -> ImportService:
    """ImportService on the fake database, deleting whole periods."""
    return ImportService(
        customers=customer_service,
        sales=sales_service,
        registry=registry,
        tagged_delete=False,
    )


@pytest.fixture(autouse=True)
def clear_preview_cache():
    preview_cache_service.clear()
    yield
    preview_cache_service.clear()


@pytest.fixture
def tenant_id() -> str:
    return TENANT_ID
