from __future__ import annotations

from typing import Any

from fastapi import Request
from loguru import logger

from booking_mailer.services.email_sender import EmailDispatcher


def get_dispatcher(request: Request) -> EmailDispatcher:
    """The dispatcher built at startup (see ``main.lifespan``)."""
    return request.app.state.dispatcher


async def read_payload(request: Request) -> dict[str, Any]:
    """Read a JSON or form-encoded body as a plain dict.

    The website posts JSON; older forms post ``x-www-form-urlencoded``.
    An unreadable body is treated as empty so the caller reports the
    missing fields.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    try:
        body = await request.json()
    except ValueError:
        logger.warning("Request body is not valid JSON")
        return {}
    return body if isinstance(body, dict) else {}
