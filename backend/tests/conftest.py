"""Pytest configuration and fixtures for Staybook backend tests.

This module provides reusable fixtures for testing:
- DynamoDB mocking with moto
- Engine services wired against the mocked tables
- Sample listings and principals
"""

import os
from datetime import UTC, datetime
from typing import Any, Callable, Generator

import boto3
import pytest
from moto import mock_aws

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
os.environ.setdefault("DYNAMODB_TABLE_PREFIX", "test-staybook")

# Only set fake credentials for moto if no real credentials are present
if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from staybook.models import (  # noqa: E402
    Authority,
    BookingCategory,
    DateInterval,
    Listing,
    Picture,
    Principal,
)

TABLE_PREFIX = os.environ["DYNAMODB_TABLE_PREFIX"]

LANDLORD_ID = "landlord-0001"
OTHER_LANDLORD_ID = "landlord-0002"
TENANT_ID = "tenant-0001"
OTHER_TENANT_ID = "tenant-0002"

SEASIDE_ID = "listing-seaside"
CABIN_ID = "listing-cabin"
LOFT_ID = "listing-loft"


# === DynamoDB Fixtures ===


@pytest.fixture(autouse=True)
def reset_service_singletons() -> Generator[None, None, None]:
    """Reset cached services and the DynamoDB singleton around each test.

    Tests using mock_aws then get fresh boto3 clients created inside the
    mock context.
    """
    from api.dependencies import reset_services

    reset_services()
    yield
    reset_services()


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS Credentials for moto."""
    if not os.environ.get("AWS_PROFILE"):
        os.environ["AWS_ACCESS_KEY_ID"] = "testing"
        os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
        os.environ["AWS_SECURITY_TOKEN"] = "testing"
        os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "eu-west-1"


@pytest.fixture
def dynamodb_client(aws_credentials: None) -> Generator[Any, None, None]:
    """Create a mocked DynamoDB client."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name="eu-west-1")
        yield client


def _gsi(name: str, attribute: str) -> dict[str, Any]:
    return {
        "IndexName": name,
        "KeySchema": [{"AttributeName": attribute, "KeyType": "HASH"}],
        "Projection": {"ProjectionType": "ALL"},
    }


@pytest.fixture
def create_tables(dynamodb_client: Any) -> None:
    """Create all required DynamoDB tables for testing."""
    tables = [
        {
            "TableName": f"{TABLE_PREFIX}-reservations",
            "KeySchema": [
                {"AttributeName": "listing_public_id", "KeyType": "HASH"},
                {"AttributeName": "slot", "KeyType": "RANGE"},
            ],
            "AttributeDefinitions": [
                {"AttributeName": "listing_public_id", "AttributeType": "S"},
                {"AttributeName": "slot", "AttributeType": "S"},
                {"AttributeName": "tenant_public_id", "AttributeType": "S"},
            ],
            "GlobalSecondaryIndexes": [
                _gsi("tenant_public_id-index", "tenant_public_id"),
            ],
            "BillingMode": "PAY_PER_REQUEST",
        },
        {
            "TableName": f"{TABLE_PREFIX}-listing-locks",
            "KeySchema": [{"AttributeName": "listing_public_id", "KeyType": "HASH"}],
            "AttributeDefinitions": [
                {"AttributeName": "listing_public_id", "AttributeType": "S"},
            ],
            "BillingMode": "PAY_PER_REQUEST",
        },
        {
            "TableName": f"{TABLE_PREFIX}-sequences",
            "KeySchema": [{"AttributeName": "name", "KeyType": "HASH"}],
            "AttributeDefinitions": [
                {"AttributeName": "name", "AttributeType": "S"},
            ],
            "BillingMode": "PAY_PER_REQUEST",
        },
        {
            "TableName": f"{TABLE_PREFIX}-listings",
            "KeySchema": [{"AttributeName": "public_id", "KeyType": "HASH"}],
            "AttributeDefinitions": [
                {"AttributeName": "public_id", "AttributeType": "S"},
                {"AttributeName": "landlord_public_id", "AttributeType": "S"},
                {"AttributeName": "booking_category", "AttributeType": "S"},
            ],
            "GlobalSecondaryIndexes": [
                _gsi("landlord_public_id-index", "landlord_public_id"),
                _gsi("booking_category-index", "booking_category"),
            ],
            "BillingMode": "PAY_PER_REQUEST",
        },
    ]

    for table_config in tables:
        dynamodb_client.create_table(**table_config)


# === Service Fixtures ===


@pytest.fixture
def db(create_tables: None) -> Any:
    """DynamoDBService bound to the mocked tables."""
    from staybook.services.dynamodb import get_dynamodb_service

    return get_dynamodb_service()


@pytest.fixture
def catalog(db: Any) -> Any:
    from staybook.services.catalog import DynamoDBListingCatalog

    return DynamoDBListingCatalog(db=db)


@pytest.fixture
def availability(db: Any) -> Any:
    from staybook.services.availability import AvailabilityService

    return AvailabilityService(db=db)


@pytest.fixture
def bookings(db: Any, availability: Any, catalog: Any) -> Any:
    from staybook.services.booking import BookingService

    return BookingService(db=db, availability=availability, catalog=catalog)


@pytest.fixture
def searches(availability: Any, catalog: Any) -> Any:
    from staybook.services.search import SearchService

    return SearchService(availability=availability, catalog=catalog)


# === Sample Data Fixtures ===


def _cover(name: str) -> Picture:
    return Picture(file=f"{name}-base64", file_content_type="image/jpeg", is_cover=True)


@pytest.fixture
def sample_listings() -> list[Listing]:
    """Three listings: two in Lisbon with identical layouts, one elsewhere."""
    return [
        Listing(
            public_id=SEASIDE_ID,
            landlord_public_id=LANDLORD_ID,
            title="Seaside flat",
            description="Two minutes from the beach.",
            location="Lisbon, Portugal",
            price=100,
            guests=2,
            bedrooms=1,
            beds=1,
            bathrooms=1,
            booking_category=BookingCategory.BEACH,
            pictures=[_cover("seaside")],
        ),
        Listing(
            public_id=LOFT_ID,
            landlord_public_id=LANDLORD_ID,
            title="City loft",
            location="Lisbon, Portugal",
            price=80,
            guests=2,
            bedrooms=1,
            beds=1,
            bathrooms=1,
            booking_category=BookingCategory.ROOMS,
            pictures=[
                Picture(file="loft-side", file_content_type="image/png", is_cover=False),
                _cover("loft"),
            ],
        ),
        Listing(
            public_id=CABIN_ID,
            landlord_public_id=OTHER_LANDLORD_ID,
            title="Ski cabin",
            location="Chamonix, France",
            price=150,
            guests=4,
            bedrooms=2,
            beds=3,
            bathrooms=1,
            booking_category=BookingCategory.SKIING,
            pictures=[],
        ),
    ]


@pytest.fixture
def seeded_catalog(catalog: Any, sample_listings: list[Listing]) -> Any:
    """Catalog with the sample listings stored."""
    for listing in sample_listings:
        catalog.put_listing(listing)
    return catalog


@pytest.fixture
def tenant() -> Principal:
    return Principal(public_id=TENANT_ID, authorities=frozenset({Authority.TENANT}))


@pytest.fixture
def other_tenant() -> Principal:
    return Principal(public_id=OTHER_TENANT_ID, authorities=frozenset({Authority.TENANT}))


@pytest.fixture
def landlord() -> Principal:
    return Principal(
        public_id=LANDLORD_ID,
        authorities=frozenset({Authority.TENANT, Authority.LANDLORD}),
    )


@pytest.fixture
def other_landlord() -> Principal:
    return Principal(
        public_id=OTHER_LANDLORD_ID,
        authorities=frozenset({Authority.TENANT, Authority.LANDLORD}),
    )


@pytest.fixture
def make_interval() -> Callable[..., DateInterval]:
    """Build a UTC interval from (year, month, day[, hour]) tuples."""

    def _make(start: tuple[int, ...], end: tuple[int, ...]) -> DateInterval:
        return DateInterval(
            start_date=datetime(*start, tzinfo=UTC),
            end_date=datetime(*end, tzinfo=UTC),
        )

    return _make
