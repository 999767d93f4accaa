from __future__ import annotations

from customer_registry.services.customer_list_service import CustomerListLoader
from customer_registry.services.refresh_signal import RefreshSignal
from customer_registry.services.registration_service import SubmissionWorkflow
from customer_registry.services.table_client import TableClient


class RegistrationPage:
    """Registration form and customer list sharing one refresh signal."""

    def __init__(self, client: TableClient, *, table: str = "customers"):
        self.client = client
        self.signal = RefreshSignal()

        self.workflow = SubmissionWorkflow(client, self.signal, table=table)
        self.loader = CustomerListLoader(client, self.signal, table=table)

    def start(self) -> None:
        self.loader.start()

    async def close(self) -> None:
        self.loader.close()
        await self.client.aclose()
