"""Booking submission proxy to the Google Apps Script web app."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from loguru import logger

from booking_mailer.config import settings
from booking_mailer.dependencies import read_payload
from booking_mailer.services.booking_sheet import forward_booking

router = APIRouter(tags=["booking"])

STATUS_CODES = {"accepted": 200, "rejected": 400, "unavailable": 500}


@router.post("/book-appointment")
async def book_appointment(request: Request):
    """Relay a booking form submission to the spreadsheet booking service."""
    if not settings.web_app_url:
        logger.error("WEB_APP_URL is not configured")
        return JSONResponse(status_code=500, content={"success": False, "message": "Server configuration error."})

    payload = await read_payload(request)
    logger.info("[/book-appointment] forwarding {} field(s)", len(payload))

    result = await forward_booking(settings.web_app_url, payload, timeout=settings.http_timeout)
    return JSONResponse(status_code=STATUS_CODES[result.status], content=result.body)
