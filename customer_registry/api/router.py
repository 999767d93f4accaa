from __future__ import annotations

from fastapi import APIRouter

from customer_registry.api.routes import customers

api_router = APIRouter()

api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
