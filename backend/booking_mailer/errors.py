"""Error taxonomy for the confirmation pipeline.

Every failure the pipeline can hit maps onto one of these. The orchestrator
turns them into a generic caller-facing message; the cause is only logged.
"""

from __future__ import annotations

from typing import Literal

DeliveryErrorKind = Literal["rejected_locally", "transport_failure"]


class BookingError(Exception):
    """Base class for pipeline errors."""


class BookingValidationError(BookingError):
    """Raised when a booking record is missing required information."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing required booking fields: {', '.join(missing)}")


class RenderError(BookingError):
    """Raised when the PDF receipt cannot be built or finalized."""


class DeliveryError(BookingError):
    """Raised when an email cannot be delivered."""

    kind: DeliveryErrorKind = "transport_failure"


class RejectedLocally(DeliveryError):
    """The send was refused before any external call was made."""

    kind: DeliveryErrorKind = "rejected_locally"


class TransportFailure(DeliveryError):
    """The transport call failed or the provider returned an error."""

    kind: DeliveryErrorKind = "transport_failure"
