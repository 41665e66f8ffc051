"""Booking confirmation orchestration.

Coordinates the confirmation flow for one booking:
1. Check the record carries every required field
2. Render the PDF receipt and the HTML email body
3. Send the email with the receipt attached

Each stage only runs if the previous one succeeded. Failures are logged
with their cause and reported to the caller with a generic message.
"""

from __future__ import annotations

import asyncio
from functools import partial
from typing import Callable

from loguru import logger

from booking_mailer import clinic
from booking_mailer.config import settings
from booking_mailer.errors import BookingValidationError, RenderError
from booking_mailer.models.booking import BookingRecord, ConfirmationResult
from booking_mailer.models.email import DeliveryFailed, EmailAttachment, RenderedDocument
from booking_mailer.services.document_gen import render_confirmation
from booking_mailer.services.email_sender import EmailDispatcher, confirmation_filename

MISSING_INFO_MESSAGE = "Missing required booking information."
FAILURE_MESSAGE = "An error occurred while sending the confirmation email."
SUCCESS_MESSAGE = "Booking confirmation email with PDF sent successfully!"

Renderer = Callable[[BookingRecord], RenderedDocument]


def validate_booking(record: BookingRecord) -> None:
    """Raise ``BookingValidationError`` if a required field is missing."""
    missing = record.missing_fields()
    if missing:
        raise BookingValidationError(missing)


def default_renderer() -> Renderer:
    return partial(render_confirmation, logo_path=settings.logo_path)


async def confirm_booking(
    record: BookingRecord,
    dispatcher: EmailDispatcher,
    *,
    render: Renderer | None = None,
) -> ConfirmationResult:
    """Render and email the confirmation for a booking.

    Args:
        record: Booking form data.
        dispatcher: Sends the email through the configured transport.
        render: Produces the PDF and HTML for a record. Defaults to the
            branded receipt renderer using ``settings.logo_path``.

    Returns:
        ConfirmationResult with ``success`` and a caller-facing message.
    """
    render = render or default_renderer()

    # ── Stage 1: validate ─────────────────────────────────────────────
    try:
        validate_booking(record)
    except BookingValidationError as e:
        logger.error("Validation failed: {}", e)
        return ConfirmationResult(success=False, message=MISSING_INFO_MESSAGE)

    logger.info(
        "Confirming booking {} for {} ({} on {} at {})",
        record.booking_id or "(no id)",
        record.client_email,
        record.service,
        record.date,
        record.time,
    )

    # ── Stage 2: render ───────────────────────────────────────────────
    try:
        document = await asyncio.to_thread(render, record)
    except RenderError as e:
        logger.error("Rendering failed for booking {}: {}", record.booking_id, e.__cause__ or e)
        return ConfirmationResult(success=False, message=FAILURE_MESSAGE)

    logger.debug("PDF receipt rendered: {} bytes", len(document.pdf_bytes))

    # ── Stage 3: send ─────────────────────────────────────────────────
    attachment = EmailAttachment(
        filename=confirmation_filename(record.booking_id),
        content=document.pdf_bytes,
    )
    result = await dispatcher.send(
        record.client_email or "",
        clinic.CONFIRMATION_SUBJECT,
        document.html_body,
        [attachment],
    )

    if isinstance(result, DeliveryFailed):
        logger.error("Confirmation email not sent ({}): {}", result.kind, result.reason)
        return ConfirmationResult(success=False, message=FAILURE_MESSAGE)

    logger.info("Confirmation for booking {} sent (message id {})", record.booking_id, result.message_id)
    return ConfirmationResult(success=True, message=SUCCESS_MESSAGE)
