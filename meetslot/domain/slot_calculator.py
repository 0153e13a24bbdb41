"""
Core business logic for calculating available time slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

from dataclasses import dataclass
from typing import Iterable, List

from pendulum import DateTime

from .intervals import (
    build_free_intervals,
    day_window,
    find_first_available_slot,
    format_intervals_short,
    merge_busy_intervals,
)
from .models import Interval, TimeOfDayRange


@dataclass
class DayAvailability:
    """
    Availability of all participants on a single day.
    """
    day: DateTime
    window: Interval
    busy: List[Interval]
    free: List[Interval]  # Only gaps long enough for the meeting

    def format_display(self) -> str:
        """
        Format the day for display.
        Format: M/D (Ddd) followed by one line per free interval
        """
        label = self.day.format("M/D (ddd)")
        return f"{label}\n{format_intervals_short(self.free)}"


class SlotCalculator:
    """
    Calculates availability from the combined busy times of all participants.

    Algorithm per day:
    1. Apply the daily time window to the day
    2. Clip and merge all busy intervals inside that window
    3. Take the complement to get free intervals
    4. Keep the free intervals that fit the meeting duration
    """

    def daily_availability(
        self,
        days: Iterable[DateTime],
        time_range: TimeOfDayRange,
        duration_minutes: int,
        busy: List[Interval]
    ) -> List[DayAvailability]:
        """
        Build the availability grid for each day.

        Args:
            days: Start-of-day instants, in the order to report them
            time_range: Daily window, e.g. 09:00-18:00
            duration_minutes: Minimum length of a usable free interval
            busy: Busy intervals of all participants, unordered

        Returns:
            One DayAvailability per day whose window is not empty
        """
        result: List[DayAvailability] = []

        for day in days:
            window = day_window(day, time_range)
            if window.is_empty():
                continue

            merged = merge_busy_intervals(busy, window.start, window.end)
            free = [
                interval
                for interval in build_free_intervals(window.start, window.end, merged)
                if interval.duration_minutes() >= duration_minutes
            ]
            result.append(DayAvailability(day=day, window=window, busy=merged, free=free))

        return result

    def first_available(
        self,
        days: Iterable[DateTime],
        time_range: TimeOfDayRange,
        duration_minutes: int,
        busy: List[Interval]
    ) -> DateTime | None:
        """Earliest start at which every participant is free long enough."""
        return find_first_available_slot(days, time_range, duration_minutes, busy)
