"""Unit tests for the search coordinator."""

from typing import Any, Callable
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from staybook.models import (
    BookingCategory,
    DateInterval,
    ErrorCode,
    ListingCard,
    ListingInfos,
    Page,
    PageRequest,
    Principal,
    SearchQuery,
    ValueField,
)
from staybook.services.search import SearchService

SEASIDE = "listing-seaside"
LOFT = "listing-loft"
CABIN = "listing-cabin"


def _lisbon_query(interval: DateInterval) -> SearchQuery:
    return SearchQuery(
        dates=interval,
        location="Lisbon, Portugal",
        infos=ListingInfos(
            guests=ValueField(value=2),
            bedrooms=ValueField(value=1),
            beds=ValueField(value=1),
            baths=ValueField(value=1),
        ),
    )


@pytest.fixture
def seaside_booked(
    seeded_catalog: Any,
    bookings: Any,
    tenant: Principal,
    make_interval: Callable[..., DateInterval],
) -> None:
    assert bookings.create(tenant, SEASIDE, make_interval((2024, 1, 1), (2024, 1, 4))).ok


class TestSearch:
    """Tests for SearchService.search."""

    def test_overlapping_interval_excludes_booked_listing(
        self,
        seaside_booked: None,
        searches: SearchService,
        make_interval: Callable[..., DateInterval],
    ) -> None:
        page = searches.search(
            _lisbon_query(make_interval((2024, 1, 2), (2024, 1, 5))), PageRequest()
        ).value

        assert [card.public_id for card in page.content] == [LOFT]
        assert page.total_elements == 1
        assert page.total_pages == 1

    def test_disjoint_interval_includes_booked_listing(
        self,
        seaside_booked: None,
        searches: SearchService,
        make_interval: Callable[..., DateInterval],
    ) -> None:
        page = searches.search(
            _lisbon_query(make_interval((2024, 1, 4), (2024, 1, 8))), PageRequest()
        ).value

        assert [card.public_id for card in page.content] == [LOFT, SEASIDE]
        assert page.total_elements == 2

    def test_structural_filters_apply(
        self,
        seeded_catalog: Any,
        searches: SearchService,
        make_interval: Callable[..., DateInterval],
    ) -> None:
        query = _lisbon_query(make_interval((2024, 1, 1), (2024, 1, 2)))
        query.infos.guests.value = 4

        page = searches.search(query, PageRequest()).value

        assert page.content == []
        assert page.total_elements == 0

    def test_total_counts_survivors_on_the_page_only(
        self,
        seaside_booked: None,
        searches: SearchService,
        make_interval: Callable[..., DateInterval],
    ) -> None:
        """With one listing per page, the page holding the booked listing is empty."""
        query = _lisbon_query(make_interval((2024, 1, 2), (2024, 1, 3)))

        first = searches.search(query, PageRequest(page=0, size=1)).value
        second = searches.search(query, PageRequest(page=1, size=1)).value

        assert [card.public_id for card in first.content] == [LOFT]
        assert first.total_elements == 1
        assert second.content == []
        assert second.total_elements == 0
        assert second.number == 1

    def test_invalid_dates(
        self, searches: SearchService, make_interval: Callable[..., DateInterval]
    ) -> None:
        outcome = searches.search(
            _lisbon_query(make_interval((2024, 1, 5), (2024, 1, 2))), PageRequest()
        )

        assert outcome.error.error_code == ErrorCode.INVALID_INTERVAL

    def test_conflict_check_gets_page_ids(
        self, make_interval: Callable[..., DateInterval]
    ) -> None:
        """Exclusion runs on exactly the ids the catalog returned."""
        cards = [
            ListingCard(
                public_id=f"listing-{i}",
                price=ValueField(value=50),
                location="Lisbon, Portugal",
                booking_category=BookingCategory.ROOMS,
            )
            for i in range(3)
        ]
        catalog = MagicMock()
        catalog.search.return_value = Page[ListingCard].of(cards, PageRequest(), 3)
        availability = MagicMock()
        availability.listings_with_conflict.return_value = {"listing-1"}
        interval = make_interval((2024, 1, 1), (2024, 1, 2))

        page = SearchService(availability=availability, catalog=catalog).search(
            _lisbon_query(interval), PageRequest()
        ).value

        availability.listings_with_conflict.assert_called_once_with(
            ["listing-0", "listing-1", "listing-2"], interval
        )
        assert [c.public_id for c in page.content] == ["listing-0", "listing-2"]

    def test_store_failure(
        self,
        seeded_catalog: Any,
        searches: SearchService,
        make_interval: Callable[..., DateInterval],
    ) -> None:
        error = ClientError(
            {"Error": {"Code": "InternalServerError", "Message": "boom"}}, "Scan"
        )
        with patch.object(seeded_catalog, "search", side_effect=error):
            outcome = searches.search(
                _lisbon_query(make_interval((2024, 1, 1), (2024, 1, 2))), PageRequest()
            )

        assert outcome.error.error_code == ErrorCode.UPSTREAM_UNAVAILABLE


class TestGetAllByCategory:
    """Category browsing is a catalog pass-through."""

    def test_specific_category(
        self, seaside_booked: None, searches: SearchService
    ) -> None:
        """Booked listings are not excluded here."""
        page = searches.get_all_by_category(BookingCategory.BEACH, PageRequest()).value

        assert [card.public_id for card in page.content] == [SEASIDE]

    def test_all_lists_listings_with_a_cover(
        self, seeded_catalog: Any, searches: SearchService
    ) -> None:
        page = searches.get_all_by_category(BookingCategory.ALL, PageRequest()).value

        assert [card.public_id for card in page.content] == [LOFT, SEASIDE]
        assert page.total_elements == 2

    def test_store_failure(self, seeded_catalog: Any, searches: SearchService) -> None:
        error = ClientError(
            {"Error": {"Code": "InternalServerError", "Message": "boom"}}, "Query"
        )
        with patch.object(seeded_catalog, "get_all_by_category", side_effect=error):
            outcome = searches.get_all_by_category(BookingCategory.ALL, PageRequest())

        assert outcome.error.error_code == ErrorCode.UPSTREAM_UNAVAILABLE


class TestGetOne:
    """Listing detail lookup."""

    def test_known_listing(self, seeded_catalog: Any, searches: SearchService) -> None:
        detail = searches.get_one(SEASIDE).value

        assert detail.public_id == SEASIDE
        assert detail.description.description == "Two minutes from the beach."
        assert detail.booking_category == BookingCategory.BEACH

    def test_unknown_listing(self, seeded_catalog: Any, searches: SearchService) -> None:
        outcome = searches.get_one("listing-unknown")

        assert outcome.error.error_code == ErrorCode.LISTING_NOT_FOUND
        assert outcome.error.details == {"listing_public_id": "listing-unknown"}

    def test_store_failure(self, seeded_catalog: Any, searches: SearchService) -> None:
        error = ClientError(
            {"Error": {"Code": "InternalServerError", "Message": "boom"}}, "GetItem"
        )
        with patch.object(seeded_catalog, "get_one", side_effect=error):
            outcome = searches.get_one(SEASIDE)

        assert outcome.error.error_code == ErrorCode.UPSTREAM_UNAVAILABLE
        assert outcome.error.details == {"operation": "get_one"}
