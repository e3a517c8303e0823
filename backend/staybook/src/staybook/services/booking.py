"""Reservation lifecycle: create, read and cancel reservations.

Every public operation takes the caller's Principal explicitly and returns
an Outcome. Store and catalog failures are reported as
UPSTREAM_UNAVAILABLE; they are not retried here.
"""

import datetime as dt
import os
import uuid
from typing import TYPE_CHECKING, Any

from boto3.dynamodb.conditions import Attr, Key

from staybook.models import (
    BookedListing,
    Cancellation,
    DateInterval,
    ErrorCode,
    LandlordCancellation,
    ListingCard,
    ListingLookupError,
    Outcome,
    Principal,
    Reservation,
    TenantCancellation,
    ValueField,
)
from staybook.services.dynamodb import UPSTREAM_ERRORS, serialize_item
from staybook.utils.logging import get_logger, log_booking_operation

if TYPE_CHECKING:
    from .availability import AvailabilityService
    from .catalog import ListingCatalog
    from .dynamodb import DynamoDBService

logger = get_logger(__name__)

LOCKS_TABLE = "listing-locks"
RESERVATION_SEQUENCE = "reservation"
TENANT_INDEX = "tenant_public_id-index"


def _max_attempts() -> int:
    return max(1, int(os.getenv("STAYBOOK_CREATE_MAX_ATTEMPTS", "3")))


def _upstream_failure(operation: str, error: Exception, **context: Any) -> Outcome[Any]:
    log_booking_operation(
        logger,
        "upstream_unavailable",
        error=f"{type(error).__name__}: {error}",
        failed_operation=operation,
        **context,
    )
    return Outcome.failure(
        ErrorCode.UPSTREAM_UNAVAILABLE,
        details={"operation": operation},
    )


class BookingService:
    """Creates, lists and cancels reservations.

    Create closes the check-then-insert race with a per-listing version
    item in the `listing-locks` table: the version read before the conflict
    check must still be current when the reservation is written, and the
    insert and the version bump commit in one transaction. A concurrent
    commit on the same listing cancels the transaction and Create checks
    again.
    """

    TABLE = "reservations"

    def __init__(
        self,
        db: "DynamoDBService",
        availability: "AvailabilityService",
        catalog: "ListingCatalog",
    ) -> None:
        """Initialize booking service.

        Args:
            db: DynamoDB service instance
            availability: Availability index over the reservations table
            catalog: Listing catalog for prices, ownership and cards
        """
        self.db = db
        self.availability = availability
        self.catalog = catalog

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(
        self,
        principal: Principal,
        listing_public_id: str,
        interval: DateInterval,
    ) -> Outcome[Reservation]:
        """Reserve a listing for an interval.

        Args:
            principal: The tenant making the reservation
            listing_public_id: Listing to reserve
            interval: Requested interval

        Returns:
            Outcome with the stored reservation, or INVALID_INTERVAL,
            LISTING_NOT_FOUND, INTERVAL_CONFLICT or UPSTREAM_UNAVAILABLE.
        """
        if not interval.is_well_formed:
            return Outcome.failure(
                ErrorCode.INVALID_INTERVAL,
                details={
                    "start_date": interval.start_date.isoformat(),
                    "end_date": interval.end_date.isoformat(),
                },
            )

        try:
            return self._create(principal, listing_public_id, interval)
        except UPSTREAM_ERRORS as e:
            return _upstream_failure(
                "create", e, listing_id=listing_public_id, principal_id=principal.public_id
            )

    def _create(
        self,
        principal: Principal,
        listing_public_id: str,
        interval: DateInterval,
    ) -> Outcome[Reservation]:
        listing = self.catalog.get_for_booking(listing_public_id)
        if listing is None:
            log_booking_operation(
                logger,
                "booking_rejected",
                listing_id=listing_public_id,
                principal_id=principal.public_id,
                reason="listing_not_found",
            )
            return Outcome.failure(
                ErrorCode.LISTING_NOT_FOUND,
                details={"listing_public_id": listing_public_id},
            )

        reservation: Reservation | None = None
        attempts = _max_attempts()
        for attempt in range(1, attempts + 1):
            version = self._lock_version(listing_public_id)

            if self.availability.conflicts_exist(listing_public_id, interval):
                log_booking_operation(
                    logger,
                    "booking_conflict",
                    listing_id=listing_public_id,
                    principal_id=principal.public_id,
                    attempt=attempt,
                )
                return Outcome.failure(
                    ErrorCode.INTERVAL_CONFLICT,
                    details={"listing_public_id": listing_public_id},
                )

            if reservation is None:
                reservation = self._new_reservation(
                    principal, listing_public_id, interval, listing.price
                )

            if self._commit(reservation, version):
                log_booking_operation(
                    logger,
                    "booking_created",
                    booking_id=reservation.public_id,
                    listing_id=listing_public_id,
                    principal_id=principal.public_id,
                    nights=interval.nights(),
                    total_price=reservation.total_price,
                )
                return Outcome.success(reservation)

            logger.info(
                "Concurrent write on listing %s, retrying (attempt %d/%d)",
                listing_public_id,
                attempt,
                attempts,
            )

        log_booking_operation(
            logger,
            "booking_conflict",
            listing_id=listing_public_id,
            principal_id=principal.public_id,
            reason="concurrent_modification",
        )
        return Outcome.failure(
            ErrorCode.INTERVAL_CONFLICT,
            details={"reason": "concurrent_modification"},
        )

    def _new_reservation(
        self,
        principal: Principal,
        listing_public_id: str,
        interval: DateInterval,
        nightly_price: int,
    ) -> Reservation:
        now = dt.datetime.now(dt.UTC)
        return Reservation(
            id=self.db.next_sequence(RESERVATION_SEQUENCE),
            public_id=str(uuid.uuid4()),
            listing_public_id=listing_public_id,
            tenant_public_id=principal.public_id,
            start_date=interval.start_date,
            end_date=interval.end_date,
            total_price=interval.nights() * nightly_price,
            created_at=now,
            updated_at=now,
        )

    def _lock_version(self, listing_public_id: str) -> int | None:
        item = self.db.get_item(
            LOCKS_TABLE,
            {"listing_public_id": listing_public_id},
            consistent_read=True,
        )
        if not item or "version" not in item:
            return None
        return int(item["version"])

    def _commit(self, reservation: Reservation, expected_version: int | None) -> bool:
        """Write the reservation and bump the listing version atomically.

        Returns:
            False if another write on the listing got there first
        """
        if expected_version is None:
            lock_condition = "attribute_not_exists(#v)"
            lock_values: dict[str, Any] = {":next": 1}
        else:
            lock_condition = "#v = :expected"
            lock_values = {":next": expected_version + 1, ":expected": expected_version}
        lock_values[":now"] = reservation.created_at.isoformat()

        transact_items: list[dict[str, Any]] = [
            {
                "Put": {
                    "TableName": self.db.table_name(self.TABLE),
                    "Item": serialize_item(reservation.to_item()),
                    "ConditionExpression": "attribute_not_exists(slot)",
                }
            },
            {
                "Update": {
                    "TableName": self.db.table_name(LOCKS_TABLE),
                    "Key": serialize_item({"listing_public_id": reservation.listing_public_id}),
                    "UpdateExpression": "SET #v = :next, updated_at = :now",
                    "ConditionExpression": lock_condition,
                    "ExpressionAttributeNames": {"#v": "version"},
                    "ExpressionAttributeValues": serialize_item(lock_values),
                }
            },
        ]
        return self.db.transact_write(transact_items)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def check_availability(self, listing_public_id: str) -> Outcome[list[DateInterval]]:
        """Every reserved interval on a listing, past reservations included."""
        try:
            return Outcome.success(self.availability.reserved_intervals(listing_public_id))
        except UPSTREAM_ERRORS as e:
            return _upstream_failure("check_availability", e, listing_id=listing_public_id)

    def list_for_requester(self, principal: Principal) -> Outcome[list[BookedListing]]:
        """Reservations made by the caller, joined with their listing cards.

        Raises:
            ListingLookupError: If a reservation's listing is missing from
                the catalog
        """
        try:
            items = self.db.query_by_gsi(
                table=self.TABLE,
                index_name=TENANT_INDEX,
                partition_key_name="tenant_public_id",
                partition_key_value=principal.public_id,
            )
            reservations = [Reservation.from_item(item) for item in items]
            cards = self.catalog.get_cards(
                [r.listing_public_id for r in reservations]
            )
        except UPSTREAM_ERRORS as e:
            return _upstream_failure(
                "list_for_requester", e, principal_id=principal.public_id
            )
        return Outcome.success(self._join(reservations, cards))

    def list_for_landlord_listings(
        self, principal: Principal
    ) -> Outcome[list[BookedListing]]:
        """Reservations on every listing the caller owns.

        Raises:
            ListingLookupError: If a reservation's listing is missing from
                the catalog
        """
        try:
            cards = self.catalog.get_all_for_landlord(principal.public_id)
            reservations: list[Reservation] = []
            for card in cards:
                reservations.extend(self._reservations_on(card.public_id))
        except UPSTREAM_ERRORS as e:
            return _upstream_failure(
                "list_for_landlord_listings", e, principal_id=principal.public_id
            )
        return Outcome.success(self._join(reservations, cards))

    def _reservations_on(self, listing_public_id: str) -> list[Reservation]:
        items = self.db.query(
            self.TABLE,
            Key("listing_public_id").eq(listing_public_id),
            consistent_read=True,
        )
        return [Reservation.from_item(item) for item in items]

    @staticmethod
    def _join(
        reservations: list[Reservation], cards: list[ListingCard]
    ) -> list[BookedListing]:
        cards_by_id = {card.public_id: card for card in cards}
        booked: list[BookedListing] = []
        for reservation in sorted(reservations, key=lambda r: r.start_date):
            card = cards_by_id.get(reservation.listing_public_id)
            if card is None:
                raise ListingLookupError(reservation.listing_public_id)
            booked.append(
                BookedListing(
                    cover=card.cover,
                    location=card.location,
                    dates=reservation.interval,
                    total_price=ValueField(value=reservation.total_price),
                    booking_public_id=reservation.public_id,
                    listing_public_id=reservation.listing_public_id,
                )
            )
        return booked

    # ------------------------------------------------------------------
    # Cancel
    # ------------------------------------------------------------------

    def cancel(self, cancellation: Cancellation) -> Outcome[str]:
        """Delete a reservation through the tenant or the landlord path.

        Either path reports RESERVATION_NOT_FOUND when nothing was deleted,
        whether the reservation is absent or belongs to someone else.

        Args:
            cancellation: Variant built by cancellation_for

        Returns:
            Outcome with the cancelled reservation's public ID
        """
        try:
            if isinstance(cancellation, LandlordCancellation):
                deleted = self._cancel_as_landlord(cancellation)
                actor = cancellation.landlord_public_id
            else:
                deleted = self._cancel_as_tenant(cancellation)
                actor = cancellation.tenant_public_id
        except UPSTREAM_ERRORS as e:
            return _upstream_failure(
                "cancel", e, booking_id=cancellation.booking_public_id
            )

        if deleted is None:
            log_booking_operation(
                logger,
                "booking_cancel_rejected",
                booking_id=cancellation.booking_public_id,
                principal_id=actor,
                path=cancellation.kind.value,
            )
            return Outcome.failure(
                ErrorCode.RESERVATION_NOT_FOUND,
                details={"booking_public_id": cancellation.booking_public_id},
            )

        log_booking_operation(
            logger,
            "booking_cancelled",
            booking_id=deleted.public_id,
            listing_id=deleted.listing_public_id,
            principal_id=actor,
            path=cancellation.kind.value,
        )
        return Outcome.success(deleted.public_id)

    def _find_on_listing(
        self, listing_public_id: str, booking_public_id: str
    ) -> dict[str, Any] | None:
        # Base-table read: a secondary index may not yet show a fresh booking
        items = self.db.query(
            self.TABLE,
            Key("listing_public_id").eq(listing_public_id),
            filter_expression=Attr("public_id").eq(booking_public_id),
            consistent_read=True,
        )
        return items[0] if items else None

    def _delete(self, item: dict[str, Any], condition: Any) -> Reservation | None:
        old = self.db.delete_item(
            self.TABLE,
            {"listing_public_id": item["listing_public_id"], "slot": item["slot"]},
            condition_expression=condition,
        )
        return Reservation.from_item(old) if old else None

    def _cancel_as_tenant(self, cancellation: TenantCancellation) -> Reservation | None:
        item = self._find_on_listing(
            cancellation.listing_public_id, cancellation.booking_public_id
        )
        if item is None:
            return None
        return self._delete(
            item,
            Attr("public_id").eq(cancellation.booking_public_id)
            & Attr("tenant_public_id").eq(cancellation.tenant_public_id),
        )

    def _cancel_as_landlord(
        self, cancellation: LandlordCancellation
    ) -> Reservation | None:
        owned = self.catalog.get_owned(
            cancellation.listing_public_id, cancellation.landlord_public_id
        )
        if owned is None:
            return None
        item = self._find_on_listing(owned.public_id, cancellation.booking_public_id)
        if item is None:
            return None
        return self._delete(
            item,
            Attr("public_id").eq(cancellation.booking_public_id)
            & Attr("listing_public_id").eq(owned.public_id),
        )
