"""Reservation entity and the read models built from it."""

import datetime as dt
from typing import Any

from pydantic import AwareDatetime, BaseModel, Field

from .base import CamelModel
from .interval import DateInterval, utc_key
from .listing import Picture, ValueField

TRAVELER_COUNT_DEFAULT = 1


class Reservation(BaseModel):
    """A stored reservation.

    `id` is the internal sequential key and never leaves the engine;
    `public_id` is the only identifier exposed to callers.
    """

    id: int
    public_id: str
    listing_public_id: str
    tenant_public_id: str
    start_date: AwareDatetime
    end_date: AwareDatetime
    total_price: int = Field(..., ge=0)
    traveler_count: int = TRAVELER_COUNT_DEFAULT
    created_at: AwareDatetime
    updated_at: AwareDatetime

    @property
    def interval(self) -> DateInterval:
        return DateInterval(start_date=self.start_date, end_date=self.end_date)

    @property
    def slot(self) -> str:
        """Sort key within the listing partition: start instant, then id."""
        return f"{utc_key(self.start_date)}#{self.public_id}"

    def to_item(self) -> dict[str, Any]:
        """Convert to a DynamoDB item."""
        return {
            "listing_public_id": self.listing_public_id,
            "slot": self.slot,
            "id": self.id,
            "public_id": self.public_id,
            "tenant_public_id": self.tenant_public_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "end_utc": utc_key(self.end_date),
            "total_price": self.total_price,
            "traveler_count": self.traveler_count,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "Reservation":
        """Build from a DynamoDB item (numbers arrive as Decimal)."""
        return cls(
            id=int(item["id"]),
            public_id=item["public_id"],
            listing_public_id=item["listing_public_id"],
            tenant_public_id=item["tenant_public_id"],
            start_date=dt.datetime.fromisoformat(item["start_date"]),
            end_date=dt.datetime.fromisoformat(item["end_date"]),
            total_price=int(item["total_price"]),
            traveler_count=int(item.get("traveler_count", TRAVELER_COUNT_DEFAULT)),
            created_at=dt.datetime.fromisoformat(item["created_at"]),
            updated_at=dt.datetime.fromisoformat(item["updated_at"]),
        )


class BookedListing(CamelModel):
    """A reservation joined with the display data of its listing."""

    cover: Picture | None = None
    location: str
    dates: DateInterval
    total_price: ValueField
    booking_public_id: str
    listing_public_id: str
