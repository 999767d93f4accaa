from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, computed_field

OPTIONAL_FIELDS = ("phone", "company", "designation", "linkedin_url", "instagram_id")
FORM_FIELDS = ("name", "email") + OPTIONAL_FIELDS


class CustomerFormValues(BaseModel):
    """Raw form input. Blank strings mean "not provided"."""

    name: str = ""
    email: str = ""
    phone: str = ""
    company: str = ""
    designation: str = ""
    linkedin_url: str = ""
    instagram_id: str = ""


class CustomerRecord(BaseModel):
    """A validated customer ready to be inserted.

    Optional fields are either a trimmed non-empty string or None.
    """

    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=20)
    company: str | None = Field(default=None, max_length=100)
    designation: str | None = Field(default=None, max_length=100)
    linkedin_url: str | None = Field(default=None, max_length=500)
    instagram_id: str | None = Field(default=None, max_length=50)

    def to_row(self) -> dict[str, str | None]:
        # id and created_at are assigned by the data store
        return self.model_dump(include=set(FORM_FIELDS))


class CustomerOut(BaseModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    company: str | None = None
    designation: str | None = None
    linkedin_url: str | None = None
    instagram_id: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True

    @computed_field  # type: ignore[prop-decorator]
    @property
    def instagram_profile_url(self) -> str | None:
        if not self.instagram_id:
            return None
        return f"https://instagram.com/{self.instagram_id.replace('@', '')}"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def registered_on(self) -> str:
        # e.g. "Jan 5, 2026"
        return f"{self.created_at:%b} {self.created_at.day}, {self.created_at.year}"


class CustomerListOut(BaseModel):
    count: int
    summary: str
    is_loading: bool
    customers: list[CustomerOut] = Field(default_factory=list)


class FieldCheckIn(BaseModel):
    field: str
    value: str = ""


class FieldCheckOut(BaseModel):
    field: str
    error: str | None = None


class NotificationOut(BaseModel):
    title: str
    description: str
    variant: str = "default"


def customers_summary(count: int) -> str:
    return f"{count} customer{'' if count == 1 else 's'} registered"
