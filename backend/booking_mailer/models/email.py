from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict


class EmailAttachment(BaseModel):
    """A named file attached to an outgoing email."""

    model_config = ConfigDict(frozen=True)

    filename: str
    content: bytes
    content_type: str = "application/pdf"


class RenderedDocument(BaseModel):
    """The PDF receipt and HTML email body rendered for one booking."""

    model_config = ConfigDict(frozen=True)

    pdf_bytes: bytes
    html_body: str


class OutgoingEmail(BaseModel):
    """Everything a transport needs to deliver one email."""

    model_config = ConfigDict(frozen=True)

    sender: str
    recipient: str
    subject: str
    html_body: str
    attachments: tuple[EmailAttachment, ...] = ()


class TransportResponse(BaseModel):
    """What a transport reports back: ``ok`` with an ``id``, or an ``error``."""

    ok: bool
    id: str | None = None
    error: str | None = None


class DeliverySent(BaseModel):
    status: Literal["sent"] = "sent"
    message_id: str


class DeliveryFailed(BaseModel):
    status: Literal["failed"] = "failed"
    kind: Literal["rejected_locally", "transport_failure"]
    reason: str


DeliveryResult = Union[DeliverySent, DeliveryFailed]
