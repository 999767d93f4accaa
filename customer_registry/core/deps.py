from __future__ import annotations

from fastapi import HTTPException, Request, status

from customer_registry.services.registration_page import RegistrationPage


def get_page(request: Request) -> RegistrationPage:
    page = getattr(request.app.state, "registration_page", None)
    if page is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Registration page not started")
    return page
