"""Mail transports: the Resend HTTP API and a legacy SMTP session.

Both implement the same ``MailTransport`` protocol: one ``send`` call per
email, returning a ``TransportResponse``. A provider-reported error comes
back as ``ok=False``; a failure of the transport itself (network, TLS, SMTP
session) raises ``TransportFailure`` with the original exception chained.
Transports are built once from settings and injected into the dispatcher.
"""

from __future__ import annotations

import base64
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid, parseaddr
from typing import Any, Protocol

import aiosmtplib
import httpx
from loguru import logger

from booking_mailer.config import Settings
from booking_mailer.errors import TransportFailure
from booking_mailer.models.email import OutgoingEmail, TransportResponse


class MailTransport(Protocol):
    name: str

    async def send(self, email: OutgoingEmail) -> TransportResponse: ...

    async def aclose(self) -> None: ...


class ResendAPIError(Exception):
    """Raised when a non-send Resend endpoint returns a non-2xx response."""

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Resend API {status_code}: {detail}")


def _error_detail(resp: httpx.Response) -> str:
    """Pull the provider's error message out of a failed response."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:500] or resp.reason_phrase
    if isinstance(body, dict):
        name = body.get("name")
        message = body.get("message") or body.get("error")
        if name and message:
            return f"{name}: {message}"
        if message:
            return str(message)
    return str(body)[:500]


class ResendTransport:
    """Async client for the Resend transactional email API.

    Usage::

        async with ResendTransport(api_key) as resend:
            response = await resend.send(email)
    """

    name = "resend"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.resend.com",
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._http = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    # -- Context manager ---------------------------------------------------

    async def __aenter__(self) -> ResendTransport:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # -- Emails ------------------------------------------------------------

    @staticmethod
    def _payload(email: OutgoingEmail) -> dict:
        return {
            "from": email.sender,
            "to": [email.recipient],
            "subject": email.subject,
            "html": email.html_body,
            "attachments": [
                {
                    "filename": attachment.filename,
                    "content": base64.b64encode(attachment.content).decode("ascii"),
                }
                for attachment in email.attachments
            ],
        }

    async def send(self, email: OutgoingEmail) -> TransportResponse:
        """Send one email with a single ``POST /emails`` call."""
        try:
            resp = await self._http.post("/emails", json=self._payload(email), headers=self._headers)
        except httpx.HTTPError as e:
            raise TransportFailure(f"Resend request failed: {e}") from e

        if resp.is_success:
            try:
                body = resp.json()
            except ValueError:
                return TransportResponse(ok=False, error="Resend returned a non-JSON success response")
            message_id = body.get("id") if isinstance(body, dict) else None
            return TransportResponse(ok=True, id=message_id)

        detail = _error_detail(resp)
        logger.debug("Resend rejected email ({}): {}", resp.status_code, detail)
        return TransportResponse(ok=False, error=f"Resend {resp.status_code}: {detail}")

    # -- Domains -----------------------------------------------------------

    async def list_domains(self) -> list[dict]:
        """Return the domains registered on the Resend account."""
        resp = await self._http.get("/domains", headers=self._headers)
        if not resp.is_success:
            raise ResendAPIError(resp.status_code, _error_detail(resp))
        body = resp.json()
        return body.get("data", [])


class SmtpTransport:
    """Legacy SMTP delivery: one aiosmtplib session per email."""

    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int,
        *,
        username: str = "",
        password: str = "",
        use_tls: bool = False,
        timeout: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout

    async def aclose(self) -> None:
        """Nothing to release; each send opens and closes its own session."""

    @staticmethod
    def build_message(email: OutgoingEmail) -> MIMEMultipart:
        """Build the MIME message: HTML body plus one part per attachment."""
        _, sender_address = parseaddr(email.sender)
        domain = sender_address.rpartition("@")[2] or None

        msg = MIMEMultipart("mixed")
        msg["From"] = email.sender
        msg["To"] = email.recipient
        msg["Subject"] = email.subject
        msg["Message-ID"] = make_msgid(domain=domain)

        alt = MIMEMultipart("alternative")
        alt.attach(MIMEText(email.html_body, "html"))
        msg.attach(alt)

        for attachment in email.attachments:
            _, _, subtype = attachment.content_type.partition("/")
            part = MIMEApplication(attachment.content, _subtype=subtype or "octet-stream")
            part.add_header("Content-Disposition", "attachment", filename=attachment.filename)
            msg.attach(part)
            logger.debug("Attached '{}' ({} bytes)", attachment.filename, len(attachment.content))

        return msg

    async def send(self, email: OutgoingEmail) -> TransportResponse:
        """Open a session, send, close. Session errors raise ``TransportFailure``."""
        msg = self.build_message(email)
        logger.info("Sending email to {} via {}:{}", email.recipient, self.host, self.port)

        try:
            refused, response = await aiosmtplib.send(
                msg,
                hostname=self.host,
                port=self.port,
                username=self._username or None,
                password=self._password or None,
                use_tls=self._use_tls,
                start_tls=False if self._use_tls else None,
                timeout=self._timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            raise TransportFailure(f"SMTP delivery failed: {e}") from e

        if refused:
            reasons = "; ".join(f"{addr}: {resp.message}" for addr, resp in refused.items())
            return TransportResponse(ok=False, error=f"Recipient refused: {reasons}")

        logger.debug("SMTP server accepted message: {}", response)
        return TransportResponse(ok=True, id=msg["Message-ID"])


def build_transport(settings: Settings) -> MailTransport:
    """Construct the transport selected by ``MAIL_TRANSPORT``."""
    if settings.mail_transport == "smtp":
        logger.info("Using SMTP transport ({}:{})", settings.smtp_host, settings.smtp_port)
        return SmtpTransport(
            settings.smtp_host,
            settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.smtp_timeout,
        )

    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY is not set; confirmation emails will be rejected by Resend")
    logger.info("Using Resend transport ({})", settings.resend_api_url)
    return ResendTransport(
        settings.resend_api_key,
        base_url=settings.resend_api_url,
        timeout=settings.http_timeout,
    )
