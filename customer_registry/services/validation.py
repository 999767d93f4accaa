from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Union

from email_validator import EmailNotValidError, validate_email
from pydantic import AnyUrl, TypeAdapter, ValidationError

from customer_registry.schemas.customer import FORM_FIELDS, CustomerRecord

logger = logging.getLogger(__name__)

_url_adapter = TypeAdapter(AnyUrl)
_EMAIL_SHAPE = re.compile(r"^[^\s@]+@[^\s@.]+(\.[^\s@.]+)+$")


def _exceeds_smtp_limits(value: str) -> bool:
    # email-validator enforces RFC 5321 sizes, tighter than the 255 column
    local, _, domain = value.rpartition("@")
    return (
        len(value) > 254
        or len(local) > 64
        or len(domain) > 253
        or any(len(label) > 63 for label in domain.split("."))
    )


def _is_email(value: str) -> bool:
    if not _EMAIL_SHAPE.match(value):
        return False
    if _exceeds_smtp_limits(value):
        return True
    try:
        validate_email(value, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError:
        return False
    return True


def _is_url(value: str) -> bool:
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


@dataclass(frozen=True)
class FieldRule:
    max_length: int
    length_message: str
    required_message: str | None = None
    format_check: Optional[Callable[[str], bool]] = None
    format_message: str = ""

    @property
    def required(self) -> bool:
        return self.required_message is not None


RULES: dict[str, FieldRule] = {
    "name": FieldRule(100, "Name must be less than 100 characters", required_message="Name is required"),
    "email": FieldRule(
        255,
        "Email must be less than 255 characters",
        required_message="Email is required",
        format_check=_is_email,
        format_message="Invalid email address",
    ),
    "phone": FieldRule(20, "Phone must be less than 20 characters"),
    "company": FieldRule(100, "Company must be less than 100 characters"),
    "designation": FieldRule(100, "Designation must be less than 100 characters"),
    "linkedin_url": FieldRule(
        500,
        "URL must be less than 500 characters",
        format_check=_is_url,
        format_message="Invalid URL",
    ),
    "instagram_id": FieldRule(50, "Instagram ID must be less than 50 characters"),
}


@dataclass(frozen=True)
class Valid:
    record: CustomerRecord

    ok = True


@dataclass(frozen=True)
class Invalid:
    errors: dict[str, str] = field(default_factory=dict)

    ok = False


ValidationResult = Union[Valid, Invalid]


def _clean(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw).strip()


def _check(rule: FieldRule, value: str) -> str | None:
    # required > length > format
    if not value:
        return rule.required_message
    if len(value) > rule.max_length:
        return rule.length_message
    if rule.format_check is not None and not rule.format_check(value):
        return rule.format_message
    return None


def validate_field(name: str, raw: Any) -> str | None:
    """Return the first violated constraint message for one field, or None."""
    return _check(RULES[name], _clean(raw))


def validate_customer(raw: Mapping[str, Any]) -> ValidationResult:
    """Validate raw form input.

    Every field is trimmed and checked independently; the result carries either
    the normalized record (blank optional fields become None) or one message per
    offending field.
    """
    values: dict[str, str | None] = {}
    errors: dict[str, str] = {}

    for name in FORM_FIELDS:
        rule = RULES[name]
        value = _clean(raw.get(name))
        message = _check(rule, value)
        if message is not None:
            errors[name] = message
            continue
        values[name] = value if value or rule.required else None

    if errors:
        return Invalid(errors=errors)
    return Valid(record=CustomerRecord(**values))


class DebouncedFieldValidator:
    """Validate a field once its input has settled.

    Each call to `push` replaces any pending check for the same field. When the
    delay elapses without a newer value, `on_result(field, message)` is called
    with the outcome of `validate_field`.
    """

    def __init__(self, on_result: Callable[[str, str | None], None], *, delay_ms: int = 300):
        self.on_result = on_result
        self.delay = max(delay_ms, 0) / 1000
        self._pending: dict[str, asyncio.TimerHandle] = {}

    def push(self, name: str, raw: Any) -> None:
        if name not in RULES:
            raise KeyError(name)
        loop = asyncio.get_running_loop()
        self.cancel(name)
        self._pending[name] = loop.call_later(self.delay, self._fire, name, raw)

    def cancel(self, name: str | None = None) -> None:
        names = [name] if name is not None else list(self._pending)
        for n in names:
            handle = self._pending.pop(n, None)
            if handle is not None:
                handle.cancel()

    @property
    def pending(self) -> set[str]:
        return set(self._pending)

    def _fire(self, name: str, raw: Any) -> None:
        self._pending.pop(name, None)
        message = validate_field(name, raw)
        logger.debug("debounced validation for %s: %s", name, message or "ok")
        self.on_result(name, message)
