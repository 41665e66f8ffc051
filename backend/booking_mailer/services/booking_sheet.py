"""Forwarding of booking submissions to the Google Apps Script web app.

The browser cannot post to the Apps Script URL directly (CORS), so the
backend relays the form fields as ``application/x-www-form-urlencoded``
and passes the script's JSON reply back unchanged.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
from loguru import logger

from booking_mailer.models.booking import BookingProxyResult

UNAVAILABLE_MESSAGE = "Could not connect to the booking service."


def _form_fields(payload: dict[str, Any]) -> dict[str, str]:
    """Flatten a submitted payload into form fields."""
    fields: dict[str, str] = {}
    for key, value in payload.items():
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            fields[key] = json.dumps(value)
        elif isinstance(value, bool):
            fields[key] = "true" if value else "false"
        else:
            fields[key] = str(value)
    return fields


async def forward_booking(
    web_app_url: str,
    payload: dict[str, Any],
    *,
    http_client: httpx.AsyncClient | None = None,
    timeout: float = 30.0,
) -> BookingProxyResult:
    """Post a booking to the Apps Script web app and classify its reply.

    Apps Script answers ``/exec`` with a redirect to the script output, so
    redirects are followed.
    """
    client = http_client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
    try:
        resp = await client.post(web_app_url, data=_form_fields(payload))
        body = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Error proxying request to the booking service: {}", e)
        return BookingProxyResult(status="unavailable", body={"success": False, "message": UNAVAILABLE_MESSAGE})
    finally:
        if http_client is None:
            await client.aclose()

    if not isinstance(body, dict):
        logger.error("Booking service returned unexpected JSON: {!r}", body)
        return BookingProxyResult(status="unavailable", body={"success": False, "message": UNAVAILABLE_MESSAGE})

    if body.get("success"):
        logger.info("Booking accepted by the booking service")
        return BookingProxyResult(status="accepted", body=body)

    logger.warning("Booking rejected by the booking service: {}", body.get("message"))
    return BookingProxyResult(status="rejected", body=body)
