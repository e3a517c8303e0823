"""Search coordinator: catalog filtering plus availability exclusion."""

from typing import TYPE_CHECKING

from staybook.models import (
    BookingCategory,
    ErrorCode,
    ListingCard,
    ListingDetail,
    Outcome,
    Page,
    PageRequest,
    SearchQuery,
)
from staybook.services.dynamodb import UPSTREAM_ERRORS
from staybook.utils.logging import get_logger, log_booking_operation

if TYPE_CHECKING:
    from .availability import AvailabilityService
    from .catalog import ListingCatalog

logger = get_logger(__name__)


class SearchService:
    """Finds listings that match structural filters and are free for a period."""

    def __init__(
        self,
        availability: "AvailabilityService",
        catalog: "ListingCatalog",
    ) -> None:
        self.availability = availability
        self.catalog = catalog

    def search(
        self, query: SearchQuery, page_request: PageRequest
    ) -> Outcome[Page[ListingCard]]:
        """Return one page of matching listings without a conflicting reservation.

        Exclusion runs on the page the catalog returns, so the page can come
        back shorter than requested. The reported total is the number of
        survivors on this page, not a global count.

        Args:
            query: Location, structural filters and the interval to keep free
            page_request: Catalog page to filter

        Returns:
            Outcome with the filtered page, or INVALID_INTERVAL or
            UPSTREAM_UNAVAILABLE
        """
        if not query.dates.is_well_formed:
            return Outcome.failure(
                ErrorCode.INVALID_INTERVAL,
                details={
                    "start_date": query.dates.start_date.isoformat(),
                    "end_date": query.dates.end_date.isoformat(),
                },
            )

        try:
            candidates = self.catalog.search(query.location, query.infos, page_request)
            conflicted = self.availability.listings_with_conflict(
                [card.public_id for card in candidates.content], query.dates
            )
        except UPSTREAM_ERRORS as e:
            log_booking_operation(
                logger,
                "upstream_unavailable",
                error=f"{type(e).__name__}: {e}",
                failed_operation="search",
            )
            return Outcome.failure(
                ErrorCode.UPSTREAM_UNAVAILABLE, details={"operation": "search"}
            )

        survivors = [
            card for card in candidates.content if card.public_id not in conflicted
        ]
        log_booking_operation(
            logger,
            "search_filtered",
            location=query.location,
            candidates=len(candidates.content),
            excluded=len(conflicted),
        )
        return Outcome.success(
            Page[ListingCard].of(survivors, page_request, len(survivors))
        )

    def get_all_by_category(
        self, category: BookingCategory, page_request: PageRequest
    ) -> Outcome[Page[ListingCard]]:
        """Catalog pass-through; no availability filtering is applied."""
        try:
            return Outcome.success(
                self.catalog.get_all_by_category(category, page_request)
            )
        except UPSTREAM_ERRORS as e:
            log_booking_operation(
                logger,
                "upstream_unavailable",
                error=f"{type(e).__name__}: {e}",
                failed_operation="get_all_by_category",
            )
            return Outcome.failure(
                ErrorCode.UPSTREAM_UNAVAILABLE,
                details={"operation": "get_all_by_category"},
            )

    def get_one(self, listing_public_id: str) -> Outcome[ListingDetail]:
        """Full listing as shown to a tenant before booking.

        Returns:
            Outcome with the listing, or LISTING_NOT_FOUND or
            UPSTREAM_UNAVAILABLE
        """
        try:
            detail = self.catalog.get_one(listing_public_id)
        except UPSTREAM_ERRORS as e:
            log_booking_operation(
                logger,
                "upstream_unavailable",
                error=f"{type(e).__name__}: {e}",
                failed_operation="get_one",
                listing_id=listing_public_id,
            )
            return Outcome.failure(
                ErrorCode.UPSTREAM_UNAVAILABLE, details={"operation": "get_one"}
            )
        if detail is None:
            return Outcome.failure(
                ErrorCode.LISTING_NOT_FOUND,
                details={"listing_public_id": listing_public_id},
            )
        return Outcome.success(detail)
