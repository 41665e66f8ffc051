"""Tests for the email dispatcher and attachment naming."""

import httpx
import pytest

from conftest import StubTransport
from booking_mailer.errors import TransportFailure
from booking_mailer.models.email import DeliveryFailed, DeliverySent, EmailAttachment, TransportResponse
from booking_mailer.services.email_sender import EmailDispatcher, confirmation_filename

PDF = EmailAttachment(filename="receipt.pdf", content=b"%PDF-1.4 test")


def _dispatcher(transport: StubTransport) -> EmailDispatcher:
    return EmailDispatcher(transport, "management@wafadentalclinic.com", "Wafa Dental Clinic")


class TestGuard:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "recipient, subject, html",
        [
            ("", "Subject", "<p>hi</p>"),
            ("   ", "Subject", "<p>hi</p>"),
            ("jane@example.com", "", "<p>hi</p>"),
            ("jane@example.com", "Subject", ""),
        ],
    )
    async def test_rejects_without_calling_transport(self, recipient, subject, html):
        transport = StubTransport()

        result = await _dispatcher(transport).send(recipient, subject, html, [PDF])

        assert isinstance(result, DeliveryFailed)
        assert result.kind == "rejected_locally"
        assert transport.calls == 0


class TestOutcomes:
    @pytest.mark.asyncio
    async def test_success_maps_to_sent(self):
        transport = StubTransport(TransportResponse(ok=True, id="abc123"))

        result = await _dispatcher(transport).send("jane@example.com", "Subject", "<p>hi</p>", [PDF])

        assert result == DeliverySent(message_id="abc123")
        assert transport.calls == 1

    @pytest.mark.asyncio
    async def test_provider_error_maps_to_failed(self):
        transport = StubTransport(TransportResponse(ok=False, error="bounced"))

        result = await _dispatcher(transport).send("jane@example.com", "Subject", "<p>hi</p>", [PDF])

        assert isinstance(result, DeliveryFailed)
        assert result.kind == "transport_failure"
        assert "bounced" in result.reason

    @pytest.mark.asyncio
    async def test_ok_without_id_is_not_sent(self):
        transport = StubTransport(TransportResponse(ok=True, id=None))

        result = await _dispatcher(transport).send("jane@example.com", "Subject", "<p>hi</p>")

        assert isinstance(result, DeliveryFailed)

    @pytest.mark.asyncio
    async def test_transport_failure_is_caught(self):
        transport = StubTransport(error=TransportFailure("SMTP delivery failed: connection refused"))

        result = await _dispatcher(transport).send("jane@example.com", "Subject", "<p>hi</p>")

        assert isinstance(result, DeliveryFailed)
        assert result.kind == "transport_failure"
        assert "connection refused" in result.reason
        assert transport.calls == 1

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_caught(self):
        transport = StubTransport(error=httpx.ReadTimeout("timed out"))

        result = await _dispatcher(transport).send("jane@example.com", "Subject", "<p>hi</p>")

        assert isinstance(result, DeliveryFailed)
        assert "ReadTimeout" in result.reason


class TestOutgoingEmail:
    @pytest.mark.asyncio
    async def test_passes_message_to_transport(self):
        transport = StubTransport()

        await _dispatcher(transport).send(" jane@example.com ", "Subject", "<p>hi</p>", [PDF])

        (email,) = transport.sent
        assert email.sender == "Wafa Dental Clinic <management@wafadentalclinic.com>"
        assert email.recipient == "jane@example.com"
        assert email.subject == "Subject"
        assert email.attachments == (PDF,)

    @pytest.mark.asyncio
    async def test_sender_without_display_name(self):
        transport = StubTransport()

        await EmailDispatcher(transport, "management@wafadentalclinic.com").send("jane@example.com", "S", "<p/>")

        assert transport.sent[0].sender == "management@wafadentalclinic.com"


class TestConfirmationFilename:
    def test_uses_booking_id(self):
        assert confirmation_filename("WDC-1") == "WAFA_Dental_Clinic_Receipt_WDC-1.pdf"

    @pytest.mark.parametrize("booking_id", [None, "", "   "])
    def test_falls_back_to_confirmation(self, booking_id):
        assert confirmation_filename(booking_id) == "WAFA_Dental_Clinic_Receipt_CONFIRMATION.pdf"

    def test_unsafe_characters_are_replaced(self):
        assert confirmation_filename("WDC 1/../x") == "WAFA_Dental_Clinic_Receipt_WDC_1_.._x.pdf"
