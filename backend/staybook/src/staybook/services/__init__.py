"""Reservation engine services."""

from .availability import AvailabilityService
from .booking import BookingService
from .catalog import DynamoDBListingCatalog, ListingCatalog
from .dynamodb import (
    UPSTREAM_ERRORS,
    DynamoDBService,
    get_dynamodb_service,
    reset_dynamodb_service,
)
from .search import SearchService

__all__ = [
    "AvailabilityService",
    "BookingService",
    "DynamoDBListingCatalog",
    "DynamoDBService",
    "ListingCatalog",
    "SearchService",
    "UPSTREAM_ERRORS",
    "get_dynamodb_service",
    "reset_dynamodb_service",
]
