"""
Domain models for dates, times of day and intervals.
"""

from dataclasses import dataclass

from pendulum import DateTime


@dataclass(frozen=True)
class TimeOfDay:
    """
    A wall-clock time of day with minute precision.
    """
    hour: int
    minute: int

    def __post_init__(self):
        if not 0 <= self.hour <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"Minute must be between 0 and 59, got {self.minute}")

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class TimeOfDayRange:
    """
    A daily time window such as 09:00-18:00.

    Ordering is not enforced here; use ``is_valid_time_range`` to reject
    inverted or empty windows.
    """
    start: TimeOfDay
    end: TimeOfDay

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


@dataclass(frozen=True)
class DateParts:
    """Month/day as typed by a user, with the year only when it was given."""
    month: int
    day: int
    year: int | None = None

    @property
    def has_year(self) -> bool:
        return self.year is not None


@dataclass(frozen=True)
class DateRange:
    """
    An inclusive range of days, both ends anchored to start-of-day.

    Invariant: start_date must not be after end_date.
    """
    start_date: DateTime
    end_date: DateTime

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValueError(
                f"Start date {self.start_date} must not be after end date {self.end_date}"
            )

    def __str__(self) -> str:
        return f"{self.start_date.format('YYYY-MM-DD')} - {self.end_date.format('YYYY-MM-DD')}"


@dataclass(frozen=True)
class Interval:
    """
    A half-open interval [start, end).

    Degenerate intervals (end <= start) can be constructed; the interval
    algebra drops them instead of failing.
    """
    start: DateTime
    end: DateTime

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def is_empty(self) -> bool:
        return self.end <= self.start

    def overlaps(self, other: "Interval") -> bool:
        """Check if this interval overlaps with another."""
        return self.start < other.end and self.end > other.start

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"
