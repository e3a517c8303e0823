"""Listing projections consumed from the catalog, and paging types."""

import math
from typing import Generic, TypeVar

from pydantic import Field

from .base import CamelModel
from .enums import BookingCategory
from .interval import DateInterval

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class ValueField(CamelModel):
    """Single-value wrapper kept for wire compatibility ({"value": n})."""

    value: int = Field(..., ge=0)


class Picture(CamelModel):
    """Listing picture as stored by the catalog."""

    file: str = Field(..., description="Base64-encoded image content")
    file_content_type: str = Field(..., examples=["image/jpeg"])
    is_cover: bool = False


class ListingCard(CamelModel):
    """Display projection of a listing."""

    public_id: str
    price: ValueField
    location: str
    cover: Picture | None = None
    booking_category: BookingCategory


class ListingForBooking(CamelModel):
    """What Create needs from the catalog: existence and a price snapshot."""

    public_id: str
    price: int = Field(..., ge=0, description="Nightly price in the smallest currency unit")
    landlord_public_id: str


class Listing(CamelModel):
    """Full catalog record, used to seed the catalog table."""

    public_id: str
    landlord_public_id: str
    title: str = ""
    description: str = ""
    location: str
    price: int = Field(..., ge=0)
    guests: int = Field(..., ge=0)
    bedrooms: int = Field(..., ge=0)
    beds: int = Field(..., ge=0)
    bathrooms: int = Field(..., ge=0)
    booking_category: BookingCategory
    pictures: list[Picture] = Field(default_factory=list)

    @property
    def cover(self) -> Picture | None:
        for picture in self.pictures:
            if picture.is_cover:
                return picture
        return None

    def to_card(self) -> ListingCard:
        return ListingCard(
            public_id=self.public_id,
            price=ValueField(value=self.price),
            location=self.location,
            cover=self.cover,
            booking_category=self.booking_category,
        )

    def to_detail(self) -> "ListingDetail":
        return ListingDetail(
            public_id=self.public_id,
            description=ListingDescription(title=self.title, description=self.description),
            pictures=self.pictures,
            infos=ListingInfos(
                guests=ValueField(value=self.guests),
                bedrooms=ValueField(value=self.bedrooms),
                beds=ValueField(value=self.beds),
                baths=ValueField(value=self.bathrooms),
            ),
            price=ValueField(value=self.price),
            booking_category=self.booking_category,
            location=self.location,
            landlord_public_id=self.landlord_public_id,
        )


class ListingInfos(CamelModel):
    """Guest and room counts; search matches each one exactly."""

    guests: ValueField
    bedrooms: ValueField
    beds: ValueField
    baths: ValueField


class ListingDescription(CamelModel):
    title: str
    description: str


class ListingDetail(CamelModel):
    """Everything a tenant sees on a listing page before booking it."""

    public_id: str
    description: ListingDescription
    pictures: list[Picture]
    infos: ListingInfos
    price: ValueField
    booking_category: BookingCategory
    location: str
    landlord_public_id: str


class SearchQuery(CamelModel):
    """Search request: structural filters plus the interval to keep free."""

    dates: DateInterval
    infos: ListingInfos
    location: str = Field(..., min_length=1)


class PageRequest(CamelModel):
    """Zero-based page selection."""

    page: int = Field(default=0, ge=0)
    size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return self.page * self.size


class Page(CamelModel, Generic[T]):
    """One page of results and the totals reported with it."""

    content: list[T]
    number: int
    size: int
    total_elements: int
    total_pages: int

    @classmethod
    def of(cls, content: list[T], page_request: PageRequest, total_elements: int) -> "Page[T]":
        """Build a page, deriving total_pages from the element count."""
        return cls(
            content=content,
            number=page_request.page,
            size=page_request.size,
            total_elements=total_elements,
            total_pages=math.ceil(total_elements / page_request.size),
        )

    @classmethod
    def from_items(cls, items: list[T], page_request: PageRequest) -> "Page[T]":
        """Cut one page out of a complete, ordered result list."""
        chunk = items[page_request.offset : page_request.offset + page_request.size]
        return cls.of(chunk, page_request, len(items))
