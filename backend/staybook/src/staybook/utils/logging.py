"""Logging for the reservation engine and its HTTP edge.

Every record carries the correlation id of the request being served, set
by the API middleware and kept in a ContextVar, so concurrent requests do
not mix ids. Engine events go through `log_booking_operation`, which logs a
readable `key=value` line and attaches the same fields to the record as
attributes for JSON log processors.

Usage:
    from staybook.utils.logging import get_logger, log_booking_operation

    logger = get_logger(__name__)
    log_booking_operation(logger, "booking_created", booking_id="...")
"""

import logging
import os
import uuid
from contextvars import ContextVar
from typing import Any

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

NO_CORRELATION_ID = "no-correlation-id"

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

# Events describing a refused request
_REJECTION_EVENTS = frozenset(
    {"booking_conflict", "booking_rejected", "booking_cancel_rejected"}
)


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a correlation id to the current context.

    Args:
        correlation_id: Id received from the caller; a UUID4 is generated
            when it is missing or empty

    Returns:
        The id now in effect
    """
    effective = correlation_id or str(uuid.uuid4())
    _correlation_id.set(effective)
    return effective


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Stamp `correlation_id` on each record passing through."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return True


class StructuredFormatter(logging.Formatter):
    """Prefix every line with `[correlation-id]`."""

    def format(self, record: logging.LogRecord) -> str:
        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id is None:
            correlation_id = get_correlation_id() or NO_CORRELATION_ID
            record.correlation_id = correlation_id
        return f"[{correlation_id}] {super().format(record)}"


def get_logger(name: str) -> logging.Logger:
    """`logging.getLogger` with a CorrelationIdFilter attached exactly once."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())
    return logger


def configure_logging(level: str | None = None) -> None:
    """Set the root level and install one structured stderr handler.

    Repeated calls only adjust the level.

    Args:
        level: Level name; LOG_LEVEL, then INFO, when omitted
    """
    root = logging.getLogger()
    root.setLevel((level or os.getenv("LOG_LEVEL", "INFO")).upper())

    if any(isinstance(h.formatter, StructuredFormatter) for h in root.handlers):
        return

    stream = logging.StreamHandler()
    stream.setFormatter(StructuredFormatter(LOG_FORMAT))
    stream.addFilter(CorrelationIdFilter())
    root.addHandler(stream)


def log_booking_operation(
    logger: logging.Logger,
    operation: str,
    *,
    booking_id: str | None = None,
    listing_id: str | None = None,
    principal_id: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log one engine event.

    The level follows the outcome: ERROR when `error` is given, WARNING for
    refused requests (conflicts, rejections), INFO otherwise. Empty
    identifiers are left out.

    Args:
        logger: Logger of the calling module
        operation: Event name, e.g. "booking_created"
        booking_id: Reservation public id
        listing_id: Listing public id
        principal_id: Public id of the acting user
        error: Failure description
        **extra: Further fields, logged as given
    """
    fields: dict[str, Any] = {
        "booking_id": booking_id,
        "listing_id": listing_id,
        "principal_id": principal_id,
        "error": error,
    }
    context: dict[str, Any] = {k: v for k, v in fields.items() if v}
    context.update(extra)

    details = " ".join(f"{key}={value}" for key, value in context.items())
    message = f"{operation} {details}".rstrip()
    context["operation"] = operation

    if error:
        level = logging.ERROR
    elif operation in _REJECTION_EVENTS:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger.log(level, message, extra=context)
