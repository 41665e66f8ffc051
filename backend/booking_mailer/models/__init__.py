from .booking import BookingProxyResult, BookingRecord, ConfirmationResult
from .email import (
    DeliveryFailed,
    DeliveryResult,
    DeliverySent,
    EmailAttachment,
    OutgoingEmail,
    RenderedDocument,
    TransportResponse,
)

__all__ = [
    "BookingRecord",
    "BookingProxyResult",
    "ConfirmationResult",
    "DeliveryFailed",
    "DeliveryResult",
    "DeliverySent",
    "EmailAttachment",
    "OutgoingEmail",
    "RenderedDocument",
    "TransportResponse",
]
