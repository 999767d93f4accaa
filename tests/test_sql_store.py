"""Tests for the SQLAlchemy-backed table store."""
import asyncio
import time
from datetime import datetime

import pytest
from sqlalchemy import event, select, update

from customer_registry.db.base import Base
from customer_registry.db.session import make_engine, make_session_factory
from customer_registry.models.customer import Customer
from customer_registry.services.sql_store import SqlTableStore
from customer_registry.services.table_client import DataStoreError


@pytest.fixture()
def store(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path/'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield SqlTableStore(make_session_factory(engine))
    engine.dispose()


def _record(name, email, **extra):
    row = {
        "name": name,
        "email": email,
        "phone": None,
        "company": None,
        "designation": None,
        "linkedin_url": None,
        "instagram_id": None,
    }
    row.update(extra)
    return row


def test_insert_assigns_id_and_created_at(store):
    async def scenario():
        await store.insert("customers", _record("Jane Doe", "jane@example.com", company="Acme Inc."))
        return await store.query("customers")

    rows = asyncio.run(scenario())
    assert len(rows) == 1
    row = rows[0]
    assert len(row["id"]) == 36
    assert isinstance(row["created_at"], datetime)
    assert row["company"] == "Acme Inc."
    assert row["phone"] is None


def test_query_orders_newest_first_with_insertion_order_ties(store):
    async def scenario():
        for name in ("A", "B", "C"):
            await store.insert("customers", _record(name, f"{name.lower()}@example.com"))
        with store.session_factory() as db:
            db.execute(update(Customer).values(created_at=datetime(2026, 1, 5, 9, 30)))
            db.commit()
        first = await store.query("customers")
        second = await store.query("customers")
        return first, second

    first, second = asyncio.run(scenario())
    assert [r["name"] for r in first] == ["A", "B", "C"]
    assert first == second


def test_query_newest_first(store):
    async def scenario():
        await store.insert("customers", _record("Old", "old@example.com"))
        await asyncio.sleep(0.01)
        await store.insert("customers", _record("New", "new@example.com"))
        return await store.query("customers")

    rows = asyncio.run(scenario())
    assert [r["name"] for r in rows] == ["New", "Old"]


def test_duplicate_email_is_a_store_error(store):
    async def scenario():
        await store.insert("customers", _record("Jane", "jane@example.com"))
        with pytest.raises(DataStoreError):
            await store.insert("customers", _record("Jane Again", "jane@example.com"))
        return await store.query("customers")

    assert len(asyncio.run(scenario())) == 1


def test_unknown_table_and_columns(store):
    async def scenario():
        with pytest.raises(DataStoreError):
            await store.insert("orders", _record("Jane", "jane@example.com"))
        with pytest.raises(DataStoreError):
            await store.insert("customers", {**_record("Jane", "jane@example.com"), "id": "abc"})
        with pytest.raises(DataStoreError):
            await store.query("customers", order_by="nope")

    asyncio.run(scenario())


def test_event_loop_keeps_running_during_statements(store):
    engine = store.session_factory.kw["bind"]

    @event.listens_for(engine, "before_cursor_execute")
    def _slow(*args):
        time.sleep(0.05)

    ticks = []

    async def ticker():
        while True:
            ticks.append(1)
            await asyncio.sleep(0.005)

    async def scenario():
        t = asyncio.create_task(ticker())
        await asyncio.sleep(0)
        before = len(ticks)
        await store.query("customers")
        during = len(ticks) - before
        t.cancel()
        return during

    assert asyncio.run(scenario()) > 1


def test_concurrent_inserts_get_distinct_sequence_numbers(store):
    async def scenario():
        await asyncio.gather(
            *(store.insert("customers", _record(f"C{i}", f"c{i}@example.com")) for i in range(5))
        )
        return await store.query("customers")

    rows = asyncio.run(scenario())
    assert len(rows) == 5

    with store.session_factory() as db:
        seqs = db.execute(select(Customer.seq)).scalars().all()
    assert sorted(seqs) == [1, 2, 3, 4, 5]
