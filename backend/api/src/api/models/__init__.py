"""API-specific request/response models.

Domain models (DateInterval, ListingCard, BookedListing, Page, SearchQuery)
are in staybook.models and are reused here as request bodies and response
schemas.

Modules:
- common: Validation error format
- bookings: Booking request bodies
"""

from api.models.bookings import NewBookingRequest
from api.models.common import ValidationErrorResponse

__all__ = ["NewBookingRequest", "ValidationErrorResponse"]
