"""Correlation ID middleware for request tracing.

Reads the X-Correlation-ID header from incoming requests or generates a new
one, makes it available to every log record of the request via contextvars,
echoes it on the response, and logs one access line per request.
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from staybook.utils.logging import clear_correlation_id, get_logger, set_correlation_id

CORRELATION_ID_HEADER = "X-Correlation-ID"

logger = get_logger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware that manages correlation IDs for request tracing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Tag the request with a correlation ID and log its outcome.

        Args:
            request: Incoming request
            call_next: Next middleware/handler in chain

        Returns:
            Response with correlation ID header
        """
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_ID_HEADER))
        started = time.perf_counter()

        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            logger.info(
                "%s %s -> %d (%.1f ms)",
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
            return response
        finally:
            clear_correlation_id()
