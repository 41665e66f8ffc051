"""Booking confirmation endpoint.

Receives the booking form data from the website, then renders and emails
the confirmation receipt.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError

from booking_mailer.dependencies import get_dispatcher, read_payload
from booking_mailer.models.booking import BookingRecord, ConfirmationResult
from booking_mailer.services.confirmation_pipeline import MISSING_INFO_MESSAGE, confirm_booking
from booking_mailer.services.email_sender import EmailDispatcher

router = APIRouter(tags=["confirmation"])


def _reply(status_code: int, result: ConfirmationResult) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=result.model_dump())


@router.post("/send-confirmation", response_model=ConfirmationResult)
async def send_confirmation(request: Request, dispatcher: EmailDispatcher = Depends(get_dispatcher)):
    """Send a booking confirmation email with the PDF receipt attached.

    400 when required booking information is missing, 500 when the receipt
    cannot be rendered or the email cannot be delivered.
    """
    payload = await read_payload(request)
    logger.info("[/send-confirmation] received fields: {}", sorted(payload))

    try:
        record = BookingRecord.model_validate(payload)
    except ValidationError as e:
        logger.error("Booking payload failed schema validation: {}", e.errors())
        return _reply(400, ConfirmationResult(success=False, message=MISSING_INFO_MESSAGE))

    if record.missing_fields():
        logger.error("Validation failed: missing {}", record.missing_fields())
        return _reply(400, ConfirmationResult(success=False, message=MISSING_INFO_MESSAGE))

    result = await confirm_booking(record, dispatcher)
    return _reply(200 if result.success else 500, result)
