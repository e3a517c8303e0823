"""Availability index over stored reservations."""

from typing import TYPE_CHECKING, Any

from boto3.dynamodb.conditions import Attr, Key

from staybook.models import DateInterval, Reservation, utc_key

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService


class AvailabilityService:
    """Answers which intervals are taken on which listings.

    Reservations are partitioned by listing and sorted by start instant
    (sort key `slot`), with the end instant copied into `end_utc`. An
    overlap with [start, end) is then one query per listing: slot < end
    on the key, end_utc > start as a filter. Every read is strongly
    consistent so a check sees all reservations committed before it.
    """

    TABLE = "reservations"

    def __init__(self, db: "DynamoDBService") -> None:
        """Initialize availability service.

        Args:
            db: DynamoDB service instance
        """
        self.db = db

    def conflicts_exist(self, listing_public_id: str, interval: DateInterval) -> bool:
        """True if at least one reservation on the listing overlaps the interval."""
        return bool(self._overlapping_items(listing_public_id, interval))

    def reserved_intervals(self, listing_public_id: str) -> list[DateInterval]:
        """All reserved intervals on a listing, past ones included.

        Args:
            listing_public_id: Listing to inspect

        Returns:
            Intervals ordered by start
        """
        items = self.db.query(
            self.TABLE,
            Key("listing_public_id").eq(listing_public_id),
            consistent_read=True,
        )
        return [Reservation.from_item(item).interval for item in items]

    def listings_with_conflict(
        self, listing_public_ids: list[str], interval: DateInterval
    ) -> set[str]:
        """Subset of listings that have a reservation overlapping the interval.

        A listing missing from the result is free for the interval; nothing
        is implied about whether it exists.

        Args:
            listing_public_ids: Listings to check
            interval: Candidate interval, start < end

        Returns:
            Public IDs of listings with at least one overlap
        """
        return {
            listing_id
            for listing_id in dict.fromkeys(listing_public_ids)
            if self.conflicts_exist(listing_id, interval)
        }

    def _overlapping_items(
        self, listing_public_id: str, interval: DateInterval
    ) -> list[dict[str, Any]]:
        if not interval.is_well_formed:
            raise ValueError("interval start must be before its end")
        # A slot starting exactly at interval end sorts after utc_key(end)
        # because of its "#<id>" suffix, so back-to-back stays legal.
        key_condition = Key("listing_public_id").eq(listing_public_id) & Key("slot").lt(
            utc_key(interval.end_date)
        )
        return self.db.query(
            self.TABLE,
            key_condition,
            filter_expression=Attr("end_utc").gt(utc_key(interval.start_date)),
            consistent_read=True,
        )
