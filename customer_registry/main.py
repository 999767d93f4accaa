from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from customer_registry.api.router import api_router
from customer_registry.core.config import Settings, get_settings
from customer_registry.core.logging_config import configure_logging
from customer_registry.services.registration_page import RegistrationPage
from customer_registry.services.table_client import TableClient, build_table_client


def create_app(settings: Settings | None = None, client: TableClient | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        page = RegistrationPage(
            client or build_table_client(settings),
            table=settings.customers_table,
        )
        app.state.registration_page = page
        page.start()
        try:
            yield
        finally:
            app.state.registration_page = None
            await page.close()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app
