"""Caller identity and the cancellation requests built from it."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .enums import Authority, CancellationKind


class Principal(BaseModel):
    """The authenticated caller, passed explicitly into engine operations."""

    model_config = ConfigDict(frozen=True)

    public_id: str = Field(..., min_length=1)
    authorities: frozenset[Authority] = frozenset()

    def has_authority(self, authority: Authority) -> bool:
        return authority in self.authorities

    @property
    def is_landlord(self) -> bool:
        return self.has_authority(Authority.LANDLORD)


class TenantCancellation(BaseModel):
    """Cancel one's own reservation as the tenant who made it."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[CancellationKind.TENANT] = CancellationKind.TENANT
    booking_public_id: str
    listing_public_id: str
    tenant_public_id: str


class LandlordCancellation(BaseModel):
    """Cancel a reservation on a listing the caller owns."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[CancellationKind.LANDLORD] = CancellationKind.LANDLORD
    booking_public_id: str
    listing_public_id: str
    landlord_public_id: str


Cancellation = Annotated[
    Union[TenantCancellation, LandlordCancellation],
    Field(discriminator="kind"),
]


def cancellation_for(
    principal: Principal,
    booking_public_id: str,
    listing_public_id: str,
    by_landlord: bool,
) -> Cancellation:
    """Pick the cancellation path for a caller.

    The landlord path is taken only when it is requested and the caller
    holds the landlord authority. Everyone else cancels as a tenant, which
    only ever matches reservations they made themselves.

    Args:
        principal: Authenticated caller
        booking_public_id: Reservation to cancel
        listing_public_id: Listing the reservation belongs to
        by_landlord: Whether the caller asks to act as landlord

    Returns:
        The cancellation variant to hand to BookingService.cancel
    """
    if by_landlord and principal.is_landlord:
        return LandlordCancellation(
            booking_public_id=booking_public_id,
            listing_public_id=listing_public_id,
            landlord_public_id=principal.public_id,
        )
    return TenantCancellation(
        booking_public_id=booking_public_id,
        listing_public_id=listing_public_id,
        tenant_public_id=principal.public_id,
    )
