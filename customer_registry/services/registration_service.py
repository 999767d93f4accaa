from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable

from customer_registry.schemas.customer import FORM_FIELDS, CustomerRecord
from customer_registry.services.refresh_signal import RefreshSignal
from customer_registry.services.table_client import TableClient
from customer_registry.services.validation import Invalid, validate_customer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = "default"  # default|destructive


SUCCESS_NOTICE = Notification(title="Success", description="Customer registered successfully!")
FAILURE_NOTICE = Notification(
    title="Error",
    description="Failed to register customer. Please try again.",
    variant="destructive",
)


class SubmissionOutcome(str, enum.Enum):
    SUCCESS = "success"
    INVALID = "invalid"
    FAILED = "failed"
    BUSY = "busy"


class RegistrationForm:
    """Current form values and inline field errors."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.errors: dict[str, str] = {}
        self.reset()

    def reset(self) -> None:
        self.values = {name: "" for name in FORM_FIELDS}
        self.errors = {}

    def set_value(self, name: str, value: Any) -> None:
        if name not in self.values:
            raise KeyError(name)
        self.values[name] = "" if value is None else str(value)

    def update(self, values: dict[str, Any]) -> None:
        for name, value in values.items():
            self.set_value(name, value)

    def set_field_error(self, name: str, message: str | None) -> None:
        if message is None:
            self.errors.pop(name, None)
        else:
            self.errors[name] = message


class SubmissionWorkflow:
    """Validate the form, insert the record and announce the change.

    Only one submission may be in flight; further attempts are rejected with
    SubmissionOutcome.BUSY until it completes.
    """

    def __init__(
        self,
        client: TableClient,
        signal: RefreshSignal,
        *,
        table: str = "customers",
        notify: Callable[[Notification], None] | None = None,
    ):
        self.client = client
        self.signal = signal
        self.table = table
        self.notify = notify or (lambda _n: None)
        self.form = RegistrationForm()
        self.is_submitting = False
        self.last_notification: Notification | None = None

    async def submit(self) -> SubmissionOutcome:
        if self.is_submitting:
            logger.info("submission rejected: another submission is in flight")
            return SubmissionOutcome.BUSY

        result = validate_customer(self.form.values)
        if isinstance(result, Invalid):
            self.form.errors = dict(result.errors)
            return SubmissionOutcome.INVALID

        self.form.errors = {}
        return await self.submit_record(result.record)

    async def submit_record(self, record: CustomerRecord) -> SubmissionOutcome:
        if self.is_submitting:
            logger.info("submission rejected: another submission is in flight")
            return SubmissionOutcome.BUSY

        self.is_submitting = True
        try:
            await self.client.insert(self.table, record.to_row())
        except Exception:
            logger.exception("customer insert failed")
            self._announce(FAILURE_NOTICE)
            return SubmissionOutcome.FAILED
        finally:
            self.is_submitting = False

        logger.info("customer registered")
        self._announce(SUCCESS_NOTICE)
        self.form.reset()
        self.signal.bump()
        return SubmissionOutcome.SUCCESS

    def _announce(self, notice: Notification) -> None:
        self.last_notification = notice
        self.notify(notice)
