from __future__ import annotations

from typing import Any, Mapping, Protocol

from customer_registry.core.config import Settings


class DataStoreError(RuntimeError):
    pass


class TableClient(Protocol):
    """Insert/query access to a remote table."""

    async def insert(self, table: str, record: Mapping[str, Any]) -> None: ...

    async def query(self, table: str, *, order_by: str = "created_at", descending: bool = True) -> list[dict[str, Any]]: ...

    async def aclose(self) -> None: ...


def build_table_client(settings: Settings) -> TableClient:
    backend = settings.data_store_backend.lower()

    if backend == "supabase":
        from customer_registry.services.supabase_client import SupabaseTableClient

        if not settings.supabase_url or not settings.supabase_key:
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY are required for the supabase backend.")
        return SupabaseTableClient(
            base_url=settings.supabase_url,
            api_key=settings.supabase_key,
            timeout=settings.supabase_timeout_seconds,
        )

    if backend == "sql":
        from customer_registry.db.session import SessionLocal
        from customer_registry.services.sql_store import SqlTableStore

        return SqlTableStore(SessionLocal)

    raise RuntimeError(f"Unknown data store backend: {settings.data_store_backend}")
