"""API routes package.

Routers are organized by domain:

- health: Health check endpoint
- booking: Reservation lifecycle and availability
- tenant_listing: Availability-aware search and category browsing

All routers are registered in main.py with /api prefix.
"""

from api.routes.booking import router as booking_router
from api.routes.health import router as health_router
from api.routes.tenant_listing import router as tenant_listing_router

__all__ = [
    "booking_router",
    "health_router",
    "tenant_listing_router",
]
