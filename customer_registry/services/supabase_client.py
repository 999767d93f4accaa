from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from customer_registry.services.table_client import DataStoreError


class SupabaseTableClient:
    """Table access through the hosted PostgREST API.

    Required settings:
      - SUPABASE_URL (project URL, e.g. "https://abc.supabase.co")
      - SUPABASE_KEY (anon or service key)

    A single AsyncClient is kept for the life of the object; call `aclose` on shutdown.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=f"{self.base_url}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def insert(self, table: str, record: Mapping[str, Any]) -> None:
        try:
            r = await self._client.post(f"/{table}", json=dict(record), headers={"Prefer": "return=minimal"})
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DataStoreError(f"HTTP {e.response.status_code} inserting into {table}: {e.response.text[:300]}") from e
        except httpx.HTTPError as e:
            raise DataStoreError(f"Insert into {table} failed: {e}") from e

    async def query(self, table: str, *, order_by: str = "created_at", descending: bool = True) -> list[dict[str, Any]]:
        params = {"select": "*", "order": f"{order_by}.{'desc' if descending else 'asc'}"}
        try:
            r = await self._client.get(f"/{table}", params=params)
            r.raise_for_status()
            data = r.json()
        except httpx.HTTPStatusError as e:
            raise DataStoreError(f"HTTP {e.response.status_code} querying {table}: {e.response.text[:300]}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise DataStoreError(f"Query on {table} failed: {e}") from e

        if not isinstance(data, list):
            raise DataStoreError(f"Unexpected response querying {table}")
        return data

    async def aclose(self) -> None:
        await self._client.aclose()
