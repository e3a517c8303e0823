"""FastAPI application for the Staybook reservation API.

This package provides REST endpoints for:
- Health checks
- Booking lifecycle (create, cancel, availability, booked listings)
- Availability-aware listing search

Runs on AWS Lambda behind API Gateway (via Mangum) or locally under uvicorn.
"""

import os
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from api.exceptions import register_exception_handlers
from api.middleware.correlation import CORRELATION_ID_HEADER, CorrelationIdMiddleware
from api.routes.booking import router as booking_router
from api.routes.health import router as health_router
from api.routes.tenant_listing import router as tenant_listing_router
from staybook import __version__
from staybook.utils.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)


def _allowed_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:4200")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


app = FastAPI(
    title="Staybook Reservation API",
    description="REST API for listing availability, search and bookings",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[CORRELATION_ID_HEADER],
)
app.add_middleware(CorrelationIdMiddleware)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

# Include routers under /api prefix
# This matches CloudFront routing: /api/* → API Gateway
app.include_router(health_router, prefix="/api")
app.include_router(booking_router, prefix="/api")
app.include_router(tenant_listing_router, prefix="/api")


@app.get("/api/ping")
async def ping() -> dict[str, Any]:
    """Root health check endpoint at /api/ping."""
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": "staybook-api",
    }


# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int = 8080, reload: bool = True) -> None:
    """Run the FastAPI server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: 8080)
        reload: Enable hot reload for development (default: True)
    """
    import uvicorn

    if reload:
        # Use string reference for reload mode (uvicorn requirement)
        uvicorn.run(
            "api.main:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=["api/src", "staybook/src"],
        )
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
