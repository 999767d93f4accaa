import uuid
from datetime import datetime, timedelta, timezone

import pytest

from customer_registry.core.config import get_settings
from customer_registry.services.table_client import DataStoreError

BASE_TIME = datetime(2026, 1, 5, 9, 30, tzinfo=timezone.utc)


class FakeTableClient:
    """In-memory collaborator.

    - `fail_insert` / `fail_query`: exception raised by the next calls
    - `insert_gate`: event every insert waits on before completing
    - `query_plan`: list of (event, rows); each query pops one entry, waits on
      the event and answers with those rows instead of the stored table
    """

    def __init__(self):
        self.rows = []
        self.inserts = []
        self.calls = []
        self.fail_insert = None
        self.fail_query = None
        self.insert_gate = None
        self.query_plan = []
        self.closed = False

    async def insert(self, table, record):
        self.calls.append("insert")
        self.inserts.append((table, dict(record)))
        if self.insert_gate is not None:
            await self.insert_gate.wait()
        if self.fail_insert is not None:
            raise self.fail_insert
        self.add_row(**record)
        self.calls.append("insert-done")

    async def query(self, table, *, order_by="created_at", descending=True):
        self.calls.append("query")
        if self.query_plan:
            gate, rows = self.query_plan.pop(0)
            await gate.wait()
            return [dict(r) for r in rows]
        if self.fail_query is not None:
            raise self.fail_query
        return [dict(r) for r in sorted(self.rows, key=lambda r: r[order_by], reverse=descending)]

    async def aclose(self):
        self.closed = True

    def add_row(self, created_at=None, **fields):
        row = {
            "id": str(uuid.uuid4()),
            "phone": None,
            "company": None,
            "designation": None,
            "linkedin_url": None,
            "instagram_id": None,
            **fields,
            "created_at": created_at or BASE_TIME + timedelta(minutes=len(self.rows)),
        }
        self.rows.append(row)
        return row


@pytest.fixture()
def fake_client():
    return FakeTableClient()


@pytest.fixture()
def store_error():
    return DataStoreError("HTTP 409 inserting into customers: duplicate key value")


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
