"""Domain models for the reservation engine."""

from .enums import Authority, BookingCategory, CancellationKind
from .errors import (
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    BookingError,
    ErrorCode,
    ListingLookupError,
    ToolError,
)
from .interval import DateInterval, utc_key
from .listing import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    Listing,
    ListingCard,
    ListingDescription,
    ListingDetail,
    ListingForBooking,
    ListingInfos,
    Page,
    PageRequest,
    Picture,
    SearchQuery,
    ValueField,
)
from .outcome import Outcome
from .principal import (
    Cancellation,
    LandlordCancellation,
    Principal,
    TenantCancellation,
    cancellation_for,
)
from .reservation import BookedListing, Reservation

__all__ = [
    # Enums
    "Authority",
    "BookingCategory",
    "CancellationKind",
    # Errors
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
    "BookingError",
    "ErrorCode",
    "ListingLookupError",
    "Outcome",
    "ToolError",
    # Intervals
    "DateInterval",
    "utc_key",
    # Listings
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "Listing",
    "ListingCard",
    "ListingDescription",
    "ListingDetail",
    "ListingForBooking",
    "ListingInfos",
    "Page",
    "PageRequest",
    "Picture",
    "SearchQuery",
    "ValueField",
    # Principal
    "Cancellation",
    "LandlordCancellation",
    "Principal",
    "TenantCancellation",
    "cancellation_for",
    # Reservations
    "BookedListing",
    "Reservation",
]
