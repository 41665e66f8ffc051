from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

REQUIRED_FIELDS = ("client_name", "client_email", "service", "date", "time")

_email_address = TypeAdapter(EmailStr)


def is_email_address(value: str) -> bool:
    """Syntax check only; the domain is not looked up."""
    try:
        _email_address.validate_python(value)
    except ValidationError:
        return False
    return True


class BookingRecord(BaseModel):
    """Booking form data as posted by the website.

    Every field is optional at the schema level so that a missing value is
    reported by the confirmation flow itself instead of a 422.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        str_strip_whitespace=True,
    )

    client_name: str | None = None
    client_email: str | None = None
    service: str | None = None
    date: str | None = None
    time: str | None = None
    additional_info: str | None = None
    booking_id: str | None = None
    client_id: str | None = None

    def missing_fields(self) -> list[str]:
        """Names (camelCase) of required fields that are absent, blank or malformed."""
        missing = [to_camel(name) for name in REQUIRED_FIELDS if not getattr(self, name)]
        if self.client_email and not is_email_address(self.client_email):
            missing.append("clientEmail")
        return missing

    @property
    def has_notes(self) -> bool:
        return bool(self.additional_info and self.additional_info.strip())


class ConfirmationResult(BaseModel):
    """Outcome of a confirmation request, returned to the website as-is."""

    success: bool
    message: str


class BookingProxyResult(BaseModel):
    """Reply from the spreadsheet booking service, passed through to the browser."""

    status: Literal["accepted", "rejected", "unavailable"]
    body: dict
