"""Tests for the booking confirmation flow: validate → render → send."""

from functools import partial
from unittest.mock import patch

import pytest

from conftest import StubTransport
from booking_mailer.errors import RenderError
from booking_mailer.models.booking import BookingRecord
from booking_mailer.models.email import RenderedDocument, TransportResponse
from booking_mailer.services.confirmation_pipeline import (
    FAILURE_MESSAGE,
    MISSING_INFO_MESSAGE,
    SUCCESS_MESSAGE,
    confirm_booking,
)
from booking_mailer.services import document_gen
from booking_mailer.services.document_gen import render_confirmation
from booking_mailer.services.email_sender import EmailDispatcher


class CountingRenderer:
    def __init__(self, error: Exception | None = None):
        self.calls = 0
        self.error = error

    def __call__(self, record: BookingRecord) -> RenderedDocument:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return RenderedDocument(pdf_bytes=b"%PDF-1.4 fake", html_body=f"<p>{record.client_name}</p>")


def _no_logo(path: str) -> None:
    return None


real_renderer = partial(render_confirmation, logo_path="logo.png", read_asset=_no_logo)


@pytest.mark.asyncio
async def test_end_to_end_success(booking, dispatcher, stub_transport):
    result = await confirm_booking(booking, dispatcher, render=real_renderer)

    assert result.success is True
    assert result.message == SUCCESS_MESSAGE
    assert stub_transport.calls == 1

    email = stub_transport.sent[0]
    assert email.recipient == "jane@example.com"
    assert email.subject == "Your Appointment Confirmation with WAFA Dental Clinic"
    assert "Jane Doe" in email.html_body
    (attachment,) = email.attachments
    assert "WDC-1" in attachment.filename
    assert attachment.content.startswith(b"%PDF")


@pytest.mark.asyncio
async def test_missing_booking_id_uses_generic_filename(booking, dispatcher, stub_transport):
    record = booking.model_copy(update={"booking_id": None})

    await confirm_booking(record, dispatcher, render=CountingRenderer())

    assert stub_transport.sent[0].attachments[0].filename == "WAFA_Dental_Clinic_Receipt_CONFIRMATION.pdf"


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["client_name", "client_email", "service", "date", "time"])
async def test_missing_field_rejected_before_render(booking, dispatcher, stub_transport, field):
    record = booking.model_copy(update={field: None})
    renderer = CountingRenderer()

    result = await confirm_booking(record, dispatcher, render=renderer)

    assert result.success is False
    assert result.message == MISSING_INFO_MESSAGE
    assert renderer.calls == 0
    assert stub_transport.calls == 0


@pytest.mark.asyncio
async def test_malformed_email_rejected(booking, dispatcher, stub_transport):
    record = booking.model_copy(update={"client_email": "not-an-email"})
    renderer = CountingRenderer()

    result = await confirm_booking(record, dispatcher, render=renderer)

    assert result.message == MISSING_INFO_MESSAGE
    assert renderer.calls == 0


@pytest.mark.asyncio
async def test_render_failure_skips_dispatch(booking, dispatcher, stub_transport):
    renderer = CountingRenderer(error=RenderError("PDF rendering failed: boom"))

    result = await confirm_booking(booking, dispatcher, render=renderer)

    assert result.success is False
    assert result.message == FAILURE_MESSAGE
    assert renderer.calls == 1
    assert stub_transport.calls == 0


@pytest.mark.asyncio
async def test_template_failure_reports_generic_message(booking, dispatcher, stub_transport):
    with patch.object(document_gen._env, "get_template", side_effect=RuntimeError("template missing")):
        result = await confirm_booking(booking, dispatcher, render=real_renderer)

    assert result.success is False
    assert result.message == FAILURE_MESSAGE
    assert stub_transport.calls == 0


@pytest.mark.asyncio
async def test_delivery_failure_reports_generic_message(booking):
    transport = StubTransport(TransportResponse(ok=False, error="bounced"))
    dispatcher = EmailDispatcher(transport, "management@wafadentalclinic.com")

    result = await confirm_booking(booking, dispatcher, render=CountingRenderer())

    assert result.success is False
    assert result.message == FAILURE_MESSAGE
    assert "bounced" not in result.message
    assert transport.calls == 1


@pytest.mark.asyncio
async def test_transport_exception_does_not_propagate(booking):
    transport = StubTransport(error=ConnectionResetError("reset by peer"))
    dispatcher = EmailDispatcher(transport, "management@wafadentalclinic.com")

    result = await confirm_booking(booking, dispatcher, render=CountingRenderer())

    assert result.success is False
    assert result.message == FAILURE_MESSAGE
