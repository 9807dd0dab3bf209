"""
Common Value Objects

Value objects used across multiple apps:
- DateRange: Represents a stay (check-in inclusive, check-out exclusive)
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start_date (inclusive) to end_date (exclusive).
    Used for booking periods and availability checks.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must be before end date ({self.end_date})")

    @classmethod
    def for_stay(cls, checkin_date: date, number_of_days: int) -> 'DateRange':
        """Build the range covering ``number_of_days`` nights from ``checkin_date``"""
        return cls(checkin_date, checkin_date + timedelta(days=number_of_days))

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        Note: end_date is exclusive, so adjacent ranges don't overlap.

        Examples:
            - DateRange(25, 28) overlaps with DateRange(27, 30) -> True
            - DateRange(25, 28) overlaps with DateRange(28, 31) -> False (adjacent)
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        # start1 < end2 AND end1 > start2
        return (self.start_date < other.end_date and
                self.end_date > other.start_date)

    def contains(self, check_date: date) -> bool:
        """start_date is inclusive, end_date is exclusive"""
        return self.start_date <= check_date < self.end_date

    def nights(self) -> Iterator[date]:
        """Yield every occupied night (the date the guest sleeps there)"""
        current = self.start_date
        while current < self.end_date:
            yield current
            current += timedelta(days=1)

    def __len__(self) -> int:
        """Number of nights in this range"""
        return (self.end_date - self.start_date).days

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
