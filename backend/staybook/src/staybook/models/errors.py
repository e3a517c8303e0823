"""Standard error codes for the reservation engine.

Every failure the engine reports to a caller carries one of these codes.
Operations return them inside an Outcome; the API layer turns a failed
Outcome into a BookingError, which the exception handlers render as
a ToolError body.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Error kinds reported by the engine."""

    INVALID_INTERVAL = "ERR_001"
    LISTING_NOT_FOUND = "ERR_002"
    INTERVAL_CONFLICT = "ERR_003"
    RESERVATION_NOT_FOUND = "ERR_004"
    NOT_AUTHORIZED = "ERR_005"
    UPSTREAM_UNAVAILABLE = "ERR_006"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_INTERVAL: "The end date must be after the start date",
    ErrorCode.LISTING_NOT_FOUND: "Listing not found",
    ErrorCode.INTERVAL_CONFLICT: "One booking already exists for these dates",
    ErrorCode.RESERVATION_NOT_FOUND: "Booking not found",
    ErrorCode.NOT_AUTHORIZED: "Not authorized for this action",
    ErrorCode.UPSTREAM_UNAVAILABLE: "A backing service is unavailable",
}

# Recovery suggestions for API clients
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.INVALID_INTERVAL: "Pick an end date later than the start date",
    ErrorCode.LISTING_NOT_FOUND: "Verify the listing public id",
    ErrorCode.INTERVAL_CONFLICT: "Check availability and choose other dates",
    ErrorCode.RESERVATION_NOT_FOUND: "Verify the booking id and that it belongs to you",
    ErrorCode.NOT_AUTHORIZED: "Sign in and retry",
    ErrorCode.UPSTREAM_UNAVAILABLE: "Retry the request later",
}


class ToolError(BaseModel):
    """Error body returned to API clients.

    `details` holds string-only context such as the offending listing id;
    it never contains internal keys.
    """

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ) -> "ToolError":
        """Fill in the message and recovery hint registered for `code`."""
        return cls(
            error_code=code,
            message=ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class BookingError(Exception):
    """A failed engine outcome travelling up through the HTTP layer.

    The API's exception handler turns it back into a ToolError body with
    the status code mapped from `code`.
    """

    def __init__(
        self,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ):
        super().__init__(ERROR_MESSAGES[code])
        self.code = code
        self.details = details

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self.code]

    @classmethod
    def from_tool_error(cls, error: ToolError) -> "BookingError":
        return cls(code=error.error_code, details=error.details)

    def to_tool_error(self) -> ToolError:
        return ToolError.from_code(self.code, self.details)


class ListingLookupError(LookupError):
    """A reservation points at a listing the catalog no longer returns.

    Raised by the booked-listing views; this is a data integrity failure,
    not a client error.
    """

    def __init__(self, listing_public_id: str):
        self.listing_public_id = listing_public_id
        super().__init__(f"No catalog entry for listing {listing_public_id}")
