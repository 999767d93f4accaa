from __future__ import annotations

import asyncio
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from customer_registry.models.customer import Customer
from customer_registry.schemas.customer import FORM_FIELDS
from customer_registry.services.table_client import DataStoreError

TABLES = {Customer.__tablename__: Customer}


def _row_to_dict(c: Customer) -> dict[str, Any]:
    row = {k: getattr(c, k) for k in FORM_FIELDS}
    row["id"] = c.id
    row["created_at"] = c.created_at
    return row


class SqlTableStore:
    """Local stand-in for the hosted store, backed by SQLAlchemy.

    Same contract as the hosted client: id and created_at are assigned here,
    and ties on the sort column fall back to insertion order. Session work runs
    in a worker thread so the event loop keeps serving while a statement runs.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _model(self, table: str):
        model = TABLES.get(table)
        if model is None:
            raise DataStoreError(f"Unknown table: {table}")
        return model

    async def insert(self, table: str, record: Mapping[str, Any]) -> None:
        model = self._model(table)
        unknown = set(record) - set(FORM_FIELDS)
        if unknown:
            raise DataStoreError(f"Unknown columns for {table}: {sorted(unknown)}")
        await asyncio.to_thread(self._insert, table, model, dict(record))

    async def query(self, table: str, *, order_by: str = "created_at", descending: bool = True) -> list[dict[str, Any]]:
        model = self._model(table)
        column = getattr(model, order_by, None)
        if column is None:
            raise DataStoreError(f"Unknown column for {table}: {order_by}")
        return await asyncio.to_thread(self._query, table, model, column, descending)

    async def aclose(self) -> None:
        return None

    def _insert(self, table: str, model, record: dict[str, Any]) -> None:
        db = self.session_factory()
        try:
            db.add(model(**record))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise DataStoreError(f"Insert into {table} failed: {e.__class__.__name__}") from e
        finally:
            db.close()

    def _query(self, table: str, model, column, descending: bool) -> list[dict[str, Any]]:
        db = self.session_factory()
        try:
            q = select(model).order_by(column.desc() if descending else column.asc(), model.seq.asc())
            rows = db.execute(q).scalars().all()
            return [_row_to_dict(r) for r in rows]
        except SQLAlchemyError as e:
            raise DataStoreError(f"Query on {table} failed: {e.__class__.__name__}") from e
        finally:
            db.close()
