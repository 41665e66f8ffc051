"""Confirmation email dispatch.

One call, one terminal result: the dispatcher validates its inputs, makes a
single transport call and reports ``DeliverySent`` or ``DeliveryFailed``.
It never retries and never lets a transport exception escape.
"""

from __future__ import annotations

import re
from email.utils import formataddr

from loguru import logger

from booking_mailer.errors import DeliveryError, RejectedLocally
from booking_mailer.models.email import (
    DeliveryFailed,
    DeliveryResult,
    DeliverySent,
    EmailAttachment,
    OutgoingEmail,
)
from booking_mailer.services.mail_transport import MailTransport

RECEIPT_PREFIX = "WAFA_Dental_Clinic_Receipt"
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def confirmation_filename(booking_id: str | None) -> str:
    """Attachment name for a booking receipt.

    ``WAFA_Dental_Clinic_Receipt_<bookingId>.pdf``, or ``..._CONFIRMATION.pdf``
    when the booking has no identifier.
    """
    label = _UNSAFE_FILENAME_CHARS.sub("_", (booking_id or "").strip()).strip("_")
    return f"{RECEIPT_PREFIX}_{label or 'CONFIRMATION'}.pdf"


class EmailDispatcher:
    """Sends confirmation emails through an injected transport."""

    def __init__(self, transport: MailTransport, from_email: str, from_name: str = "") -> None:
        self.transport = transport
        self.sender = formataddr((from_name, from_email)) if from_name else from_email

    @staticmethod
    def _check_inputs(recipient: str, subject: str, html_body: str) -> None:
        missing = [
            name
            for name, value in (("recipient", recipient), ("subject", subject), ("html_body", html_body))
            if not value or not value.strip()
        ]
        if missing:
            raise RejectedLocally(f"Missing required email parameters: {', '.join(missing)}")

    async def send(
        self,
        recipient: str,
        subject: str,
        html_body: str,
        attachments: list[EmailAttachment] | None = None,
    ) -> DeliveryResult:
        """Send one email and report the outcome.

        Returns:
            ``DeliverySent`` with the transport's message id, or
            ``DeliveryFailed`` describing why nothing was (or may have been)
            delivered.
        """
        try:
            self._check_inputs(recipient, subject, html_body)
        except RejectedLocally as e:
            logger.error("Email rejected before sending: {}", e)
            return DeliveryFailed(kind=e.kind, reason=str(e))

        email = OutgoingEmail(
            sender=self.sender,
            recipient=recipient.strip(),
            subject=subject,
            html_body=html_body,
            attachments=tuple(attachments or ()),
        )

        logger.info(
            "Sending '{}' to {} via {} ({} attachment(s))",
            subject,
            email.recipient,
            self.transport.name,
            len(email.attachments),
        )
        try:
            response = await self.transport.send(email)
        except DeliveryError as e:
            logger.error("Transport {} failed: {}", self.transport.name, e)
            return DeliveryFailed(kind=e.kind, reason=str(e))
        except Exception as e:
            logger.exception("Unexpected error from transport {}", self.transport.name)
            return DeliveryFailed(kind="transport_failure", reason=f"{type(e).__name__}: {e}")

        if not response.ok:
            logger.error("Provider reported an error sending to {}: {}", email.recipient, response.error)
            return DeliveryFailed(kind="transport_failure", reason=response.error or "Provider reported an error")

        if not response.id:
            logger.error("Transport {} reported success without a message id", self.transport.name)
            return DeliveryFailed(kind="transport_failure", reason="No message id in provider response")

        logger.info("Email sent successfully to {}. Message ID: {}", email.recipient, response.id)
        return DeliverySent(message_id=response.id)
