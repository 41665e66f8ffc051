"""Send a sample booking confirmation through the configured transport.

Run: python3 backend/scripts/send_test_confirmation.py you@example.com
Uses MAIL_TRANSPORT / RESEND_API_KEY / SMTP_* from backend/.env.
"""

import asyncio
import sys
from pathlib import Path

# Add backend/ to path so `booking_mailer` is importable from scripts/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from booking_mailer.config import settings
from booking_mailer.models.booking import BookingRecord
from booking_mailer.services.confirmation_pipeline import confirm_booking
from booking_mailer.services.email_sender import EmailDispatcher
from booking_mailer.services.mail_transport import build_transport


def sample_booking(recipient: str) -> BookingRecord:
    return BookingRecord(
        client_name="John Doe",
        client_email=recipient,
        service="General Check-up",
        date="September 25, 2025",
        time="10:00 AM",
        additional_info="First visit. Slight sensitivity on the lower left molar.",
        booking_id="WDC-TEST-001",
        client_id="CID-TEST-002",
    )


async def main(recipient: str) -> int:
    if settings.mail_transport == "resend" and not settings.resend_api_key:
        print("FATAL: RESEND_API_KEY is not set in your .env file. Aborting.", file=sys.stderr)
        return 1
    if settings.mail_transport == "smtp" and not (settings.smtp_user and settings.smtp_password):
        print("FATAL: SMTP_USER / SMTP_PASSWORD are not set. Aborting.", file=sys.stderr)
        return 1

    transport = build_transport(settings)
    try:
        dispatcher = EmailDispatcher(transport, settings.from_email, settings.from_name)
        print(f"Sending test confirmation to {recipient} via {transport.name}...")
        result = await confirm_booking(sample_booking(recipient), dispatcher)
    finally:
        await transport.aclose()

    print(f"Status: {'SUCCESS' if result.success else 'FAILURE'} — {result.message}")
    return 0 if result.success else 1


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__.strip(), file=sys.stderr)
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1])))
