"""Shared fixtures for the booking confirmation tests."""

import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add backend/ to path so `booking_mailer` is importable from tests/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from booking_mailer.models.booking import BookingRecord
from booking_mailer.models.email import OutgoingEmail, TransportResponse
from booking_mailer.services.email_sender import EmailDispatcher


class StubTransport:
    """Test double for a mail transport that records every send."""

    name = "stub"

    def __init__(self, response: TransportResponse | None = None, error: Exception | None = None):
        self.response = response or TransportResponse(ok=True, id="msg_123")
        self.error = error
        self.sent: list[OutgoingEmail] = []
        self.closed = False

    @property
    def calls(self) -> int:
        return len(self.sent)

    async def send(self, email: OutgoingEmail) -> TransportResponse:
        self.sent.append(email)
        if self.error is not None:
            raise self.error
        return self.response

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def booking() -> BookingRecord:
    return BookingRecord(
        client_name="Jane Doe",
        client_email="jane@example.com",
        service="Cleaning",
        date="2025-01-10",
        time="09:00 AM",
        booking_id="WDC-1",
        client_id="CID-1",
    )


@pytest.fixture
def booking_payload() -> dict:
    return {
        "clientName": "Jane Doe",
        "clientEmail": "jane@example.com",
        "service": "Cleaning",
        "date": "2025-01-10",
        "time": "09:00 AM",
        "bookingId": "WDC-1",
        "clientId": "CID-1",
    }


@pytest.fixture
def stub_transport() -> StubTransport:
    return StubTransport()


@pytest.fixture
def dispatcher(stub_transport: StubTransport) -> EmailDispatcher:
    return EmailDispatcher(stub_transport, "management@wafadentalclinic.com", "Wafa Dental Clinic")


@pytest.fixture
def logo_png() -> bytes:
    """A small valid PNG to stand in for the clinic logo."""
    buf = io.BytesIO()
    Image.new("RGB", (60, 20), (1, 2, 69)).save(buf, format="PNG")
    return buf.getvalue()
