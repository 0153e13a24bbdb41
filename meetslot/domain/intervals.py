"""
Interval algebra over busy periods.

Pure functions: merging busy intervals inside a window, deriving the free
complement, walking calendar days and searching for the earliest slot that
fits a duration. No I/O and no clock access.
"""

from typing import Iterable, Iterator, List

import pendulum
from pendulum import DateTime

from .models import Interval, TimeOfDayRange
from .parsing import at_time_of_day

NO_INTERVALS = "none"


def _clamp(interval: Interval, range_start: DateTime, range_end: DateTime) -> Interval:
    return Interval(
        start=max(interval.start, range_start),
        end=min(interval.end, range_end)
    )


def merge_busy_intervals(
    intervals: Iterable[Interval],
    range_start: DateTime,
    range_end: DateTime
) -> List[Interval]:
    """
    Clip busy intervals to [range_start, range_end) and merge them.

    Intervals that are empty after clipping are dropped. The result is sorted,
    non-overlapping, and never contains two intervals that touch.

    Example: [10:00-11:00, 11:00-12:00, 11:30-13:00] -> [10:00-13:00]
    """
    clamped = (_clamp(interval, range_start, range_end) for interval in intervals)
    ordered = sorted(
        (interval for interval in clamped if not interval.is_empty()),
        key=lambda interval: interval.start
    )
    merged: List[Interval] = []
    for interval in ordered:
        if merged and interval.start <= merged[-1].end:
            # Overlapping or touching: no usable gap, extend the current block
            last = merged[-1]
            merged[-1] = Interval(start=last.start, end=max(last.end, interval.end))
        else:
            merged.append(interval)

    return merged


def build_free_intervals(
    range_start: DateTime,
    range_end: DateTime,
    merged_busy: List[Interval]
) -> List[Interval]:
    """
    Complement of ``merged_busy`` inside [range_start, range_end).

    ``merged_busy`` must come from ``merge_busy_intervals`` for the same range.
    Together the two lists partition the range.

    Example:
    Range: 09:00 - 18:00
    Busy: [10:00-11:00, 11:30-12:30]
    Result: [09:00-10:00, 11:00-11:30, 12:30-18:00]
    """
    if not merged_busy:
        return [Interval(start=range_start, end=range_end)]

    free: List[Interval] = []
    cursor = range_start

    for busy in merged_busy:
        if busy.start > cursor:
            free.append(Interval(start=cursor, end=busy.start))
        cursor = max(cursor, busy.end)

    if cursor < range_end:
        free.append(Interval(start=cursor, end=range_end))

    return free


def iter_days(start_date: DateTime, end_date: DateTime) -> Iterator[DateTime]:
    """
    Yield each day from start_date to end_date inclusive, as start-of-day.

    Steps by calendar day rather than 24 hours so DST changes don't shift
    the days.
    """
    current = start_date.start_of("day")
    last = end_date.start_of("day")

    while current <= last:
        yield current
        current = current.add(days=1)


def list_days(start_date: DateTime, end_date: DateTime) -> List[DateTime]:
    return list(iter_days(start_date, end_date))


def day_window(day: DateTime, time_range: TimeOfDayRange) -> Interval:
    """The time-of-day window applied to one day; may be empty for bad ranges."""
    return Interval(
        start=at_time_of_day(day, time_range.start),
        end=at_time_of_day(day, time_range.end)
    )


def find_first_available_slot(
    days: Iterable[DateTime],
    time_range: TimeOfDayRange,
    duration_minutes: int,
    busy: List[Interval]
) -> DateTime | None:
    """
    Return the start of the earliest free interval of at least
    ``duration_minutes`` within the daily window, or None.

    Days are searched in the given order and the search stops at the first
    match, so ``days`` may be a lazy iterator.
    """
    for day in days:
        window = day_window(day, time_range)
        if window.is_empty():
            continue

        merged = merge_busy_intervals(busy, window.start, window.end)
        for interval in build_free_intervals(window.start, window.end, merged):
            if interval.duration_minutes() >= duration_minutes:
                return interval.start

    return None


def format_intervals_short(intervals: List[Interval], empty: str = NO_INTERVALS) -> str:
    """Render intervals as ``HH:MM - HH:MM`` lines, or ``empty`` if there are none."""
    if not intervals:
        return empty

    return "\n".join(
        f"{interval.start.format('HH:mm')} - {interval.end.format('HH:mm')}"
        for interval in intervals
    )


def parse_busy_interval(start_text: str, end_text: str, timezone: str) -> Interval | None:
    """
    Normalize a calendar event's start/end into an Interval in ``timezone``.

    Accepts either ISO timestamps (converted into ``timezone``) or plain
    ``YYYY-MM-DD`` dates for whole-day events, which are busy from the start
    date's midnight up to the end date's midnight as supplied. Returns None
    if either side can't be parsed.
    """
    try:
        start = pendulum.parse(start_text, tz=timezone)
        end = pendulum.parse(end_text, tz=timezone)
    except ValueError:
        return None

    if not isinstance(start, DateTime) or not isinstance(end, DateTime):
        return None

    return Interval(start=start.in_timezone(timezone), end=end.in_timezone(timezone))
