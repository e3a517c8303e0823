"""Date interval model and the overlap rule shared by every component."""

import datetime as dt

from pydantic import AwareDatetime, Field

from .base import CamelModel

# Fixed-width UTC rendering after the 4-digit year; lexical order of keys
# equals time order
UTC_KEY_FORMAT = "%m-%dT%H:%M:%S.%fZ"


def utc_key(moment: dt.datetime) -> str:
    """Render an aware datetime as a sortable UTC string.

    Args:
        moment: Timezone-aware datetime

    Returns:
        e.g. "2024-01-01T00:00:00.000000Z"
    """
    if moment.tzinfo is None:
        raise ValueError("utc_key requires a timezone-aware datetime")
    utc = moment.astimezone(dt.UTC)
    # strftime("%Y") does not zero-pad years below 1000 on every platform
    return f"{utc.year:04d}-{utc.strftime(UTC_KEY_FORMAT)}"


class DateInterval(CamelModel):
    """A span of time between two timezone-aware instants.

    Intervals are half-open: the end instant is not part of the interval,
    so an interval ending exactly when another starts does not overlap it.
    Construction does not require start < end; Create reports a malformed
    interval as INVALID_INTERVAL instead of failing to parse it.
    """

    start_date: AwareDatetime = Field(
        ...,
        description="Start instant (ISO 8601 with offset)",
        examples=["2024-01-01T14:00:00+01:00"],
    )
    end_date: AwareDatetime = Field(
        ...,
        description="End instant (ISO 8601 with offset)",
        examples=["2024-01-04T10:00:00+01:00"],
    )

    @property
    def is_well_formed(self) -> bool:
        return self.start_date < self.end_date

    def overlaps(self, other: "DateInterval") -> bool:
        """Check whether two intervals share at least one instant.

        Args:
            other: Interval to compare against

        Returns:
            True unless one interval ends at or before the other starts

        Raises:
            ValueError: If either interval has start >= end
        """
        if not (self.is_well_formed and other.is_well_formed):
            raise ValueError("overlap is only defined for intervals with start < end")
        return not (
            self.end_date <= other.start_date or self.start_date >= other.end_date
        )

    def nights(self) -> int:
        """Whole days between start and end, partial days dropped."""
        return (self.end_date - self.start_date).days
