"""FastAPI exception handlers for converting engine errors to HTTP responses.

Engine operations return an Outcome; routes raise BookingError for a
failed one and the handlers here render it as a ToolError body.

The ErrorCode-to-HTTP status mapping:
- 400 Bad Request: invalid interval, unknown listing, date conflict,
  reservation not found
- 401 Unauthorized: no caller identity
- 503 Service Unavailable: store or catalog unreachable

Request validation failures are reported as 400 rather than FastAPI's
default 422.

Usage:
    from api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

import logging
from typing import TypeVar

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from api.models.common import format_validation_errors
from staybook.models import BookingError, ErrorCode, ListingLookupError, Outcome

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Map ErrorCode to HTTP status codes
ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_INTERVAL: HTTP_400_BAD_REQUEST,
    ErrorCode.LISTING_NOT_FOUND: HTTP_400_BAD_REQUEST,
    ErrorCode.INTERVAL_CONFLICT: HTTP_400_BAD_REQUEST,
    ErrorCode.RESERVATION_NOT_FOUND: HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_AUTHORIZED: HTTP_401_UNAUTHORIZED,
    ErrorCode.UPSTREAM_UNAVAILABLE: HTTP_503_SERVICE_UNAVAILABLE,
}

INTERNAL_ERROR_BODY = {
    "success": False,
    "error_code": "ERR_INTERNAL",
    "message": "An unexpected error occurred",
    "recovery": "Please try again later or contact support",
    "details": None,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode (400 if not explicitly mapped)."""
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


def unwrap(outcome: Outcome[T]) -> T | None:
    """Return an Outcome's value, or raise BookingError for a failed one.

    Args:
        outcome: Result of an engine operation

    Returns:
        The outcome's value

    Raises:
        BookingError: Carrying the outcome's error code and details
    """
    if outcome.error is not None:
        raise BookingError.from_tool_error(outcome.error)
    return outcome.value


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    """Handle BookingError exceptions and convert to JSON response.

    Args:
        request: The incoming request (unused but required by FastAPI)
        exc: The BookingError exception

    Returns:
        JSONResponse with error details and appropriate status code.
    """
    status_code = get_http_status_for_error(exc.code)
    tool_error = exc.to_tool_error()

    return JSONResponse(
        status_code=status_code,
        content=tool_error.model_dump(mode="json"),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed requests as 400 with the ValidationErrorResponse body."""
    body = format_validation_errors(list(exc.errors()))
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content=body.model_dump(mode="json"),
    )


async def listing_lookup_error_handler(
    request: Request, exc: ListingLookupError
) -> JSONResponse:
    """A reservation references a listing the catalog cannot return.

    This is a data integrity failure, so it is logged as an error and
    reported as a generic 500.
    """
    logger.error(
        "booked_listing_lookup_failed",
        extra={"listing_public_id": exc.listing_public_id, "path": request.url.path},
    )
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=INTERNAL_ERROR_BODY,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with a generic error response.

    Args:
        request: The incoming request (unused but required by FastAPI)
        exc: The uncaught exception

    Returns:
        JSONResponse with 500 status and generic error message.
    """
    logger.exception("Unhandled exception: %s", exc)

    # Don't expose internal details to the client
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=INTERNAL_ERROR_BODY,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(BookingError, booking_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ListingLookupError, listing_lookup_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
