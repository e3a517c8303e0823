"""API models for booking endpoints."""

from pydantic import AwareDatetime, ConfigDict, Field

from staybook.models import DateInterval
from staybook.models.base import CamelModel


class NewBookingRequest(CamelModel):
    """Request to reserve a listing.

    The tenant is not part of the body; it is the authenticated caller.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "startDate": "2024-01-01T14:00:00Z",
                    "endDate": "2024-01-04T10:00:00Z",
                    "listingPublicId": "3f1c2b9e-5d4a-4c3b-9f8e-7a6b5c4d3e2f",
                }
            ]
        },
    )

    start_date: AwareDatetime = Field(..., description="Start instant with UTC offset")
    end_date: AwareDatetime = Field(..., description="End instant with UTC offset")
    listing_public_id: str = Field(..., min_length=1, description="Listing to reserve")

    @property
    def interval(self) -> DateInterval:
        return DateInterval(start_date=self.start_date, end_date=self.end_date)
