"""Listing catalog adapter.

The engine only reads the catalog: it needs a listing's nightly price,
its owner, and a display card. Catalog management (creating, editing and
deleting listings, storing pictures) lives elsewhere; `put_listing` exists
so environments and tests can be seeded.
"""

from decimal import Decimal
from typing import Any, Protocol

from boto3.dynamodb.conditions import Attr, Key

from staybook.models import (
    BookingCategory,
    Listing,
    ListingCard,
    ListingDetail,
    ListingForBooking,
    ListingInfos,
    Page,
    PageRequest,
)
from staybook.services.dynamodb import DynamoDBService

LISTINGS_TABLE = "listings"
LANDLORD_INDEX = "landlord_public_id-index"
CATEGORY_INDEX = "booking_category-index"


class ListingCatalog(Protocol):
    """Read operations the reservation engine needs from the catalog."""

    def get_for_booking(self, listing_public_id: str) -> ListingForBooking | None: ...

    def get_owned(
        self, listing_public_id: str, landlord_public_id: str
    ) -> ListingCard | None: ...

    def get_one(self, listing_public_id: str) -> ListingDetail | None: ...

    def get_cards(self, listing_public_ids: list[str]) -> list[ListingCard]: ...

    def get_all_for_landlord(self, landlord_public_id: str) -> list[ListingCard]: ...

    def search(
        self, location: str, infos: ListingInfos, page_request: PageRequest
    ) -> Page[ListingCard]: ...

    def get_all_by_category(
        self, category: BookingCategory, page_request: PageRequest
    ) -> Page[ListingCard]: ...


def _plain(value: Any) -> Any:
    """Turn DynamoDB Decimals back into ints, recursively."""
    if isinstance(value, Decimal):
        return int(value)
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


def listing_to_item(listing: Listing) -> dict[str, Any]:
    """Convert a listing to a DynamoDB item."""
    return listing.model_dump(mode="json")


def listing_from_item(item: dict[str, Any]) -> Listing:
    """Build a listing from a DynamoDB item."""
    return Listing.model_validate(_plain(item))


def _sorted(listings: list[Listing]) -> list[Listing]:
    # Scans and index queries come back in no useful order; paging needs one
    return sorted(listings, key=lambda listing: listing.public_id)


class DynamoDBListingCatalog:
    """Catalog backed by the `listings` table.

    Key: public_id. GSIs on landlord_public_id and booking_category.
    """

    def __init__(self, db: DynamoDBService) -> None:
        self.db = db

    def _get(self, listing_public_id: str) -> Listing | None:
        item = self.db.get_item(LISTINGS_TABLE, {"public_id": listing_public_id})
        return listing_from_item(item) if item else None

    def put_listing(self, listing: Listing) -> None:
        """Store or replace a listing."""
        self.db.put_item(LISTINGS_TABLE, listing_to_item(listing))

    def get_for_booking(self, listing_public_id: str) -> ListingForBooking | None:
        """Resolve a listing for Create: existence, price and owner."""
        listing = self._get(listing_public_id)
        if listing is None:
            return None
        return ListingForBooking(
            public_id=listing.public_id,
            price=listing.price,
            landlord_public_id=listing.landlord_public_id,
        )

    def get_owned(
        self, listing_public_id: str, landlord_public_id: str
    ) -> ListingCard | None:
        """Return the listing's card only if the landlord owns it."""
        listing = self._get(listing_public_id)
        if listing is None or listing.landlord_public_id != landlord_public_id:
            return None
        return listing.to_card()

    def get_one(self, listing_public_id: str) -> ListingDetail | None:
        listing = self._get(listing_public_id)
        return listing.to_detail() if listing else None

    def get_cards(self, listing_public_ids: list[str]) -> list[ListingCard]:
        """Cards for the given listings; unknown ids are left out."""
        unique_ids = list(dict.fromkeys(listing_public_ids))
        items = self.db.batch_get(
            LISTINGS_TABLE, [{"public_id": lid} for lid in unique_ids]
        )
        return [listing_from_item(item).to_card() for item in items]

    def get_all_for_landlord(self, landlord_public_id: str) -> list[ListingCard]:
        items = self.db.query_by_gsi(
            table=LISTINGS_TABLE,
            index_name=LANDLORD_INDEX,
            partition_key_name="landlord_public_id",
            partition_key_value=landlord_public_id,
        )
        return [listing.to_card() for listing in _sorted([listing_from_item(i) for i in items])]

    def search(
        self, location: str, infos: ListingInfos, page_request: PageRequest
    ) -> Page[ListingCard]:
        """Listings matching location and exact room/guest counts, paged.

        Args:
            location: Exact location string
            infos: Guests, bedrooms, beds and baths to match
            page_request: Page to return

        Returns:
            Page whose total counts every matching listing
        """
        condition = (
            Attr("location").eq(location)
            & Attr("bathrooms").eq(infos.baths.value)
            & Attr("bedrooms").eq(infos.bedrooms.value)
            & Attr("guests").eq(infos.guests.value)
            & Attr("beds").eq(infos.beds.value)
        )
        listings = _sorted([listing_from_item(i) for i in self.db.scan(LISTINGS_TABLE, condition)])
        cards = [listing.to_card() for listing in listings]
        return Page[ListingCard].from_items(cards, page_request)

    def get_all_by_category(
        self, category: BookingCategory, page_request: PageRequest
    ) -> Page[ListingCard]:
        """Listings with a cover picture, in one category or in all of them."""
        if category == BookingCategory.ALL:
            items = self.db.scan(LISTINGS_TABLE)
        else:
            items = self.db.query(
                LISTINGS_TABLE,
                Key("booking_category").eq(category.value),
                index_name=CATEGORY_INDEX,
            )
        listings = [
            listing
            for listing in _sorted([listing_from_item(i) for i in items])
            if listing.cover is not None
        ]
        cards = [listing.to_card() for listing in listings]
        return Page[ListingCard].from_items(cards, page_request)
