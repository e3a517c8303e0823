"""Booking endpoints.

Provides REST endpoints for:
- POST /booking/create - Reserve a listing (JWT required)
- GET /booking/check-availability - Reserved intervals of a listing (public)
- GET /booking/get-booked-listing - Caller's own reservations (JWT required)
- DELETE /booking/cancel - Cancel as tenant or landlord (JWT required)
- GET /booking/get-booked-listing-for-landlord - Reservations on the
  caller's listings (JWT + ROLE_LANDLORD required)
"""

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_booking_service
from api.exceptions import unwrap
from api.models.bookings import NewBookingRequest
from api.security import get_principal, require_landlord
from staybook.models import BookedListing, DateInterval, Principal, cancellation_for
from staybook.services.booking import BookingService

router = APIRouter(prefix="/booking", tags=["booking"])


@router.post(
    "/create",
    summary="Create a booking",
    description="""
Reserve a listing for the given period.

**Requires JWT authentication.**

The total price is the number of whole nights times the listing's nightly
price at the time of booking. Fails with 400 if the period is empty or
reversed, the listing does not exist, or the period overlaps an existing
booking. A booking ending when another starts is not an overlap.
""",
    response_model=bool,
)
def create_booking(
    body: NewBookingRequest,
    principal: Principal = Depends(get_principal),
    bookings: BookingService = Depends(get_booking_service),
) -> bool:
    unwrap(bookings.create(principal, body.listing_public_id, body.interval))
    return True


@router.get(
    "/check-availability",
    summary="Reserved periods of a listing",
    description="Every booked period of a listing, past ones included. Public.",
    response_model=list[DateInterval],
)
def check_availability(
    listing_public_id: str = Query(..., alias="listingPublicId", min_length=1),
    bookings: BookingService = Depends(get_booking_service),
) -> list[DateInterval]:
    return unwrap(bookings.check_availability(listing_public_id)) or []


@router.get(
    "/get-booked-listing",
    summary="My bookings",
    description="Bookings made by the caller, with their listing's cover and location.",
    response_model=list[BookedListing],
)
def get_booked_listing(
    principal: Principal = Depends(get_principal),
    bookings: BookingService = Depends(get_booking_service),
) -> list[BookedListing]:
    return unwrap(bookings.list_for_requester(principal)) or []


@router.delete(
    "/cancel",
    summary="Cancel a booking",
    description="""
Cancel a booking.

With `byLandlord=true` and the landlord role, cancels a booking on a listing
the caller owns. Otherwise cancels only a booking the caller made. Returns
the cancelled booking's public id; 400 if nothing matched.
""",
    response_model=str,
)
def cancel_booking(
    booking_public_id: str = Query(..., alias="bookingPublicId", min_length=1),
    listing_public_id: str = Query(..., alias="listingPublicId", min_length=1),
    by_landlord: bool = Query(False, alias="byLandlord"),
    principal: Principal = Depends(get_principal),
    bookings: BookingService = Depends(get_booking_service),
) -> str:
    cancellation = cancellation_for(
        principal, booking_public_id, listing_public_id, by_landlord
    )
    cancelled_id = unwrap(bookings.cancel(cancellation))
    return cancelled_id or booking_public_id


@router.get(
    "/get-booked-listing-for-landlord",
    summary="Bookings on my listings",
    description="Bookings on every listing the caller owns. Requires ROLE_LANDLORD.",
    response_model=list[BookedListing],
)
def get_booked_listing_for_landlord(
    principal: Principal = Depends(require_landlord),
    bookings: BookingService = Depends(get_booking_service),
) -> list[BookedListing]:
    return unwrap(bookings.list_for_landlord_listings(principal)) or []
