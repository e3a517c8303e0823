"""Unit tests for the availability index (moto-backed)."""

from typing import Any, Callable

import pytest

from staybook.models import DateInterval, Principal

SEASIDE = "listing-seaside"
LOFT = "listing-loft"
CABIN = "listing-cabin"


@pytest.fixture
def booked(
    seeded_catalog: Any,
    bookings: Any,
    tenant: Principal,
    make_interval: Callable[..., DateInterval],
) -> Any:
    """Seaside booked 2024-01-01 -> 2024-01-04 and 2024-01-10 -> 2024-01-12."""
    for start, end in [((2024, 1, 1), (2024, 1, 4)), ((2024, 1, 10), (2024, 1, 12))]:
        outcome = bookings.create(tenant, SEASIDE, make_interval(start, end))
        assert outcome.ok, outcome.error
    return bookings


class TestConflictsExist:
    """Tests for AvailabilityService.conflicts_exist."""

    def test_no_reservations_means_no_conflict(
        self, availability: Any, make_interval: Callable[..., DateInterval]
    ) -> None:
        assert availability.conflicts_exist(SEASIDE, make_interval((2024, 1, 1), (2024, 1, 4))) is False

    @pytest.mark.parametrize(
        "start,end",
        [
            ((2024, 1, 3), (2024, 1, 5)),  # straddles the end
            ((2023, 12, 30), (2024, 1, 2)),  # straddles the start
            ((2024, 1, 2), (2024, 1, 3)),  # inside
            ((2023, 12, 1), (2024, 2, 1)),  # covers both reservations
            ((2024, 1, 3, 23), (2024, 1, 4)),  # last hour only
        ],
    )
    def test_overlapping_intervals_conflict(
        self,
        booked: Any,
        availability: Any,
        make_interval: Callable[..., DateInterval],
        start: tuple[int, ...],
        end: tuple[int, ...],
    ) -> None:
        assert availability.conflicts_exist(SEASIDE, make_interval(start, end)) is True

    @pytest.mark.parametrize(
        "start,end",
        [
            ((2024, 1, 4), (2024, 1, 6)),  # starts when the first ends
            ((2023, 12, 28), (2024, 1, 1)),  # ends when the first starts
            ((2024, 1, 4), (2024, 1, 10)),  # fills the gap exactly
            ((2024, 1, 12), (2024, 1, 20)),
        ],
    )
    def test_adjacent_or_disjoint_intervals_are_free(
        self,
        booked: Any,
        availability: Any,
        make_interval: Callable[..., DateInterval],
        start: tuple[int, ...],
        end: tuple[int, ...],
    ) -> None:
        assert availability.conflicts_exist(SEASIDE, make_interval(start, end)) is False

    def test_other_listings_are_not_affected(
        self, booked: Any, availability: Any, make_interval: Callable[..., DateInterval]
    ) -> None:
        assert availability.conflicts_exist(LOFT, make_interval((2024, 1, 1), (2024, 1, 4))) is False

    def test_malformed_interval_raises(
        self, availability: Any, make_interval: Callable[..., DateInterval]
    ) -> None:
        with pytest.raises(ValueError):
            availability.conflicts_exist(SEASIDE, make_interval((2024, 1, 4), (2024, 1, 1)))


class TestReservedIntervals:
    """Tests for AvailabilityService.reserved_intervals."""

    def test_returns_every_interval_in_start_order(
        self, booked: Any, availability: Any, make_interval: Callable[..., DateInterval]
    ) -> None:
        intervals = availability.reserved_intervals(SEASIDE)

        assert intervals == [
            make_interval((2024, 1, 1), (2024, 1, 4)),
            make_interval((2024, 1, 10), (2024, 1, 12)),
        ]

    def test_unknown_listing_has_no_intervals(self, availability: Any) -> None:
        assert availability.reserved_intervals("listing-unknown") == []

    def test_intervals_agree_with_overlap_rule(
        self, booked: Any, availability: Any, make_interval: Callable[..., DateInterval]
    ) -> None:
        candidate = make_interval((2024, 1, 3), (2024, 1, 11))
        hits = [iv for iv in availability.reserved_intervals(SEASIDE) if iv.overlaps(candidate)]

        assert len(hits) == 2
        assert availability.conflicts_exist(SEASIDE, candidate)


class TestListingsWithConflict:
    """Tests for the batch form used by search."""

    def test_returns_only_conflicting_listings(
        self,
        booked: Any,
        bookings: Any,
        availability: Any,
        other_tenant: Principal,
        make_interval: Callable[..., DateInterval],
    ) -> None:
        assert bookings.create(
            other_tenant, CABIN, make_interval((2024, 1, 20), (2024, 1, 25))
        ).ok

        conflicted = availability.listings_with_conflict(
            [SEASIDE, LOFT, CABIN, "listing-unknown"],
            make_interval((2024, 1, 2), (2024, 1, 3)),
        )

        assert conflicted == {SEASIDE}

    def test_empty_input(
        self, availability: Any, make_interval: Callable[..., DateInterval]
    ) -> None:
        assert availability.listings_with_conflict([], make_interval((2024, 1, 1), (2024, 1, 2))) == set()

    def test_duplicate_ids_are_checked_once(
        self, booked: Any, availability: Any, make_interval: Callable[..., DateInterval]
    ) -> None:
        conflicted = availability.listings_with_conflict(
            [SEASIDE, SEASIDE], make_interval((2024, 1, 1), (2024, 1, 2))
        )

        assert conflicted == {SEASIDE}
