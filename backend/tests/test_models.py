"""Tests for the booking record model."""

import pytest
from pydantic import ValidationError

from booking_mailer.models.booking import BookingRecord


def test_accepts_camel_case_payload(booking_payload):
    record = BookingRecord.model_validate(booking_payload)

    assert record.client_name == "Jane Doe"
    assert record.booking_id == "WDC-1"
    assert record.missing_fields() == []


def test_reports_missing_fields_in_camel_case():
    record = BookingRecord.model_validate({"clientName": "Jane Doe", "clientEmail": "jane@example.com"})

    assert record.missing_fields() == ["service", "date", "time"]


def test_whitespace_counts_as_missing(booking_payload):
    booking_payload["service"] = "   "

    assert BookingRecord.model_validate(booking_payload).missing_fields() == ["service"]


@pytest.mark.parametrize(
    "email",
    [
        "jane",
        "jane@",
        "@example.com",
        "jane@example",
        "jane doe@example.com",
        "jane@example..com",
        "a,b@x.com",
        "jane@-.-",
        "<x>@y.z",
    ],
)
def test_malformed_email_is_reported(booking_payload, email):
    booking_payload["clientEmail"] = email

    assert BookingRecord.model_validate(booking_payload).missing_fields() == ["clientEmail"]


def test_has_notes():
    assert BookingRecord(additional_info="  Allergic to penicillin ").has_notes
    assert not BookingRecord(additional_info="   ").has_notes
    assert not BookingRecord().has_notes


def test_record_is_immutable(booking):
    with pytest.raises(ValidationError):
        booking.client_name = "Someone Else"


@pytest.mark.parametrize("email", ["jane@example.com", "jane.doe+booking@mail.example.co.uk"])
def test_well_formed_email_is_accepted(booking_payload, email):
    booking_payload["clientEmail"] = email

    assert BookingRecord.model_validate(booking_payload).missing_fields() == []
