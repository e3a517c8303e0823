"""FastAPI dependency injection providers for engine services.

Services are lazily instantiated and cached with @lru_cache, so one
instance of each is shared across requests in a warm Lambda container.

Usage in routes:
    from api.dependencies import get_booking_service

    @router.post("/booking/create")
    def create(bookings: BookingService = Depends(get_booking_service)):
        ...

Service Dependency Graph:
    DynamoDBService (singleton via get_dynamodb_service)
        ├── DynamoDBListingCatalog
        ├── AvailabilityService
        ├── BookingService (db, availability, catalog)
        └── SearchService (availability, catalog)

Testing:
    Use reset_services() to clear cached instances between tests.
"""

from functools import lru_cache

from staybook.services.availability import AvailabilityService
from staybook.services.booking import BookingService
from staybook.services.catalog import DynamoDBListingCatalog
from staybook.services.dynamodb import get_dynamodb_service, reset_dynamodb_service
from staybook.services.search import SearchService


@lru_cache
def get_listing_catalog() -> DynamoDBListingCatalog:
    """Get cached listing catalog backed by the listings table."""
    return DynamoDBListingCatalog(db=get_dynamodb_service())


@lru_cache
def get_availability_service() -> AvailabilityService:
    """Get cached AvailabilityService instance."""
    return AvailabilityService(db=get_dynamodb_service())


@lru_cache
def get_booking_service() -> BookingService:
    """Get cached BookingService instance.

    Returns:
        BookingService configured with all required dependencies.
    """
    return BookingService(
        db=get_dynamodb_service(),
        availability=get_availability_service(),
        catalog=get_listing_catalog(),
    )


@lru_cache
def get_search_service() -> SearchService:
    """Get cached SearchService instance."""
    return SearchService(
        availability=get_availability_service(),
        catalog=get_listing_catalog(),
    )


def reset_services() -> None:
    """Clear all cached service instances.

    Call this in test fixtures to ensure clean state between tests.
    Also resets the underlying DynamoDB singleton.
    """
    get_listing_catalog.cache_clear()
    get_availability_service.cache_clear()
    get_booking_service.cache_clear()
    get_search_service.cache_clear()

    reset_dynamodb_service()
