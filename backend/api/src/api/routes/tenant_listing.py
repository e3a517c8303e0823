"""Tenant-facing listing endpoints.

Provides REST endpoints for:
- POST /tenant-listing/search - Listings matching filters and free for a period
- GET /tenant-listing/get-all-by-category - Listings of one category (or ALL)
- GET /tenant-listing/get-one - One listing in full

All are public. The two list endpoints are paginated with zero-based `page`
and `size` parameters.
"""

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_search_service
from api.exceptions import unwrap
from staybook.models import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    BookingCategory,
    ListingCard,
    ListingDetail,
    Page,
    PageRequest,
    SearchQuery,
)
from staybook.services.search import SearchService

router = APIRouter(prefix="/tenant-listing", tags=["tenant-listing"])


def get_page_request(
    page: int = Query(0, ge=0, description="Zero-based page number"),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
) -> PageRequest:
    return PageRequest(page=page, size=size)


@router.post(
    "/search",
    summary="Search available listings",
    description="""
Listings in a location with exactly the requested guests, bedrooms, beds
and baths, minus those with a booking overlapping `dates`.

Availability is filtered per page, so a page can hold fewer than `size`
listings and `totalElements` counts only the listings on this page.
""",
    response_model=Page[ListingCard],
)
def search(
    query: SearchQuery,
    page_request: PageRequest = Depends(get_page_request),
    searches: SearchService = Depends(get_search_service),
) -> Page[ListingCard]:
    result = unwrap(searches.search(query, page_request))
    return result or Page[ListingCard].of([], page_request, 0)


@router.get(
    "/get-all-by-category",
    summary="Listings by category",
    description="Listings with a cover picture in a category; `ALL` returns every category.",
    response_model=Page[ListingCard],
)
def get_all_by_category(
    category: BookingCategory = Query(..., description="Booking category or ALL"),
    page_request: PageRequest = Depends(get_page_request),
    searches: SearchService = Depends(get_search_service),
) -> Page[ListingCard]:
    result = unwrap(searches.get_all_by_category(category, page_request))
    return result or Page[ListingCard].of([], page_request, 0)


@router.get(
    "/get-one",
    summary="Listing detail",
    description="Description, pictures, room counts, price and owner of one listing.",
    response_model=ListingDetail,
)
def get_one(
    public_id: str = Query(..., alias="publicId", min_length=1),
    searches: SearchService = Depends(get_search_service),
) -> ListingDetail | None:
    return unwrap(searches.get_one(public_id))
