from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from customer_registry.services.refresh_signal import RefreshSignal
from customer_registry.services.table_client import TableClient

logger = logging.getLogger(__name__)


class CustomerListLoader:
    """Holds the customer collection and reloads it on every refresh signal.

    Reloads are never cancelled. When several are in flight, the response that
    arrives last replaces the collection. A failed reload keeps the previous
    collection and records the error in `last_error`.
    """

    def __init__(self, client: TableClient, signal: RefreshSignal, *, table: str = "customers"):
        self.client = client
        self.signal = signal
        self.table = table

        self.customers: list[dict[str, Any]] = []
        self.last_error: Exception | None = None

        self._in_flight = 0
        self._tasks: set[asyncio.Task] = set()
        self._unsubscribe: Callable[[], None] | None = None
        self._closed = False

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    def start(self) -> None:
        """Subscribe to the refresh signal and schedule the initial load."""
        if self._unsubscribe is None:
            self._unsubscribe = self.signal.subscribe(self._on_refresh)
        self._schedule()

    def close(self) -> None:
        self._closed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def reload_now(self) -> bool:
        """Manual reload. Rejected while a reload is already in flight."""
        if self.is_loading or self._closed:
            return False
        self._schedule()
        return True

    async def reload(self) -> None:
        self._in_flight += 1
        await self._load()

    async def _load(self) -> None:
        # _in_flight was incremented by the caller
        try:
            rows = await self.client.query(self.table, order_by="created_at", descending=True)
        except Exception as e:
            if not self._closed:
                logger.warning("customer list reload failed, keeping %d cached rows: %s", len(self.customers), e)
                self.last_error = e
            return
        finally:
            self._in_flight -= 1

        if self._closed:
            return
        self.customers = list(rows)
        self.last_error = None

    async def wait_until_idle(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_refresh(self, _value: int) -> None:
        self._schedule()

    def _schedule(self) -> None:
        loop = asyncio.get_running_loop()
        self._in_flight += 1
        task = loop.create_task(self._load())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
