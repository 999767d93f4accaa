from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from customer_registry.core.deps import get_page
from customer_registry.schemas.customer import (
    CustomerFormValues,
    CustomerListOut,
    CustomerOut,
    FieldCheckIn,
    FieldCheckOut,
    NotificationOut,
    customers_summary,
)
from customer_registry.services.registration_page import RegistrationPage
from customer_registry.services.registration_service import SubmissionOutcome
from customer_registry.services.validation import RULES, validate_field

router = APIRouter()


@router.get("", response_model=CustomerListOut)
def list_customers(page: RegistrationPage = Depends(get_page)):
    loader = page.loader
    customers = [CustomerOut.model_validate(c) for c in loader.customers]
    return CustomerListOut(
        count=len(customers),
        summary=customers_summary(len(customers)),
        is_loading=loader.is_loading,
        customers=customers,
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=NotificationOut)
async def register_customer(payload: CustomerFormValues, page: RegistrationPage = Depends(get_page)):
    workflow = page.workflow
    if workflow.is_submitting:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A registration is already in progress")

    workflow.form.update(payload.model_dump())
    outcome = await workflow.submit()

    if outcome == SubmissionOutcome.BUSY:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A registration is already in progress")
    if outcome == SubmissionOutcome.INVALID:
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"errors": workflow.form.errors})

    notice = workflow.last_notification
    body = NotificationOut(title=notice.title, description=notice.description, variant=notice.variant)
    if outcome == SubmissionOutcome.FAILED:
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=body.model_dump())

    # Let the refresh triggered by this insert land before answering
    await page.loader.wait_until_idle()
    return body


@router.post("/reload", status_code=status.HTTP_202_ACCEPTED)
async def reload_customers(page: RegistrationPage = Depends(get_page)):
    if not page.loader.reload_now():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Reload already in progress")
    return {"ok": True}


@router.post("/validate", response_model=FieldCheckOut)
def check_field(payload: FieldCheckIn):
    if payload.field not in RULES:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown field")
    return FieldCheckOut(field=payload.field, error=validate_field(payload.field, payload.value))
