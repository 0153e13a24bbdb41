"""
Parsers for the short date, time and duration expressions users type.

Every parser returns ``None`` when the text does not match its grammar; none
of them raise for malformed input. Dates are resolved against a caller
supplied reference instant, never against the system clock.
"""

import re

import pendulum
from pendulum import DateTime

from .models import DateParts, DateRange, TimeOfDay, TimeOfDayRange

_YMD_PATTERN = re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})", re.ASCII)
_MD_PATTERN = re.compile(r"(\d{1,2})[/-](\d{1,2})", re.ASCII)
_COMPACT_RANGE_PATTERN = re.compile(r"(\d{1,2}[/-]\d{1,2})-(\d{1,2}[/-]\d{1,2})", re.ASCII)
_TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})", re.ASCII)
_TIME_RANGE_PATTERN = re.compile(r"(\d{1,2}:\d{2})-(\d{1,2}:\d{2})", re.ASCII)
_MINUTES_PATTERN = re.compile(r"(\d+)", re.ASCII)
_UNIT_DURATION_PATTERN = re.compile(r"(\d+)([mh])", re.ASCII | re.IGNORECASE)

RANGE_SEPARATORS = ("~", "..")


def parse_date_parts(text: str) -> DateParts | None:
    """
    Split ``YYYY-M-D``, ``M/D`` or ``M-D`` into its parts.

    Only the first form carries a year. Calendar validity is not checked here.
    """
    text = text.strip()

    match = _YMD_PATTERN.fullmatch(text)
    if match:
        return DateParts(
            year=int(match.group(1)),
            month=int(match.group(2)),
            day=int(match.group(3)),
        )

    match = _MD_PATTERN.fullmatch(text)
    if match:
        return DateParts(month=int(match.group(1)), day=int(match.group(2)))

    return None


def _start_of_day(year: int, month: int, day: int, tz) -> DateTime | None:
    """Midnight of the given calendar date in ``tz``, or None if no such date exists."""
    try:
        return pendulum.datetime(year, month, day, tz=tz)
    except ValueError:
        return None


def resolve_year(parts: DateParts, default_year: int, not_before: DateTime) -> int:
    """
    Decide which year a typed date refers to.

    An explicit year always wins. Otherwise ``default_year`` is assumed, and
    if that puts the date strictly before ``not_before`` the next year is
    meant instead ("1/5" typed in December is next January). A date equal to
    ``not_before`` stays in ``default_year``. Dates that do not exist in
    ``default_year`` (e.g. 2/30) are never rolled over.
    """
    if parts.year is not None:
        return parts.year

    candidate = _start_of_day(default_year, parts.month, parts.day, not_before.tz)
    if candidate is not None and candidate < not_before:
        return default_year + 1
    return default_year


def parse_date(text: str, reference: DateTime) -> DateTime | None:
    """
    Parse a single date into a start-of-day instant in the reference's zone.

    Dates typed without a year resolve to their next occurrence on or after
    the reference day.
    """
    parts = parse_date_parts(text)
    if parts is None:
        return None

    year = resolve_year(parts, reference.year, reference.start_of("day"))
    return _start_of_day(year, parts.month, parts.day, reference.tz)


def _split_range(text: str) -> tuple[str, str] | None:
    for separator in RANGE_SEPARATORS:
        if separator in text:
            # Tokens past the second one are ignored
            parts = text.split(separator)
            return parts[0], parts[1]

    # A bare "-" is only a separator between two month/day tokens; otherwise
    # it belongs to the single-date syntax.
    match = _COMPACT_RANGE_PATTERN.fullmatch(text)
    if match:
        return match.group(1), match.group(2)

    return None


def parse_date_range(text: str, reference: DateTime) -> DateRange | None:
    """
    Parse ``start~end``, ``start..end`` or compact ``M/D-M/D`` into a DateRange.

    The start resolves like ``parse_date``. An end without a year takes the
    resolved start year and rolls into the following year if it would
    otherwise precede the start ("12/30~1/3"). Text without a separator is a
    one-day range.
    """
    text = text.strip()
    tokens = _split_range(text)

    if tokens is None:
        single = parse_date(text, reference)
        if single is None:
            return None
        return DateRange(start_date=single, end_date=single)

    start_parts = parse_date_parts(tokens[0])
    end_parts = parse_date_parts(tokens[1])
    if start_parts is None or end_parts is None:
        return None

    start_year = resolve_year(start_parts, reference.year, reference.start_of("day"))
    start_date = _start_of_day(start_year, start_parts.month, start_parts.day, reference.tz)
    if start_date is None:
        return None

    end_year = resolve_year(end_parts, start_year, start_date)
    end_date = _start_of_day(end_year, end_parts.month, end_parts.day, reference.tz)
    if end_date is None or end_date < start_date:
        return None

    return DateRange(start_date=start_date, end_date=end_date)


def parse_time(text: str) -> TimeOfDay | None:
    """Parse ``H:MM`` or ``HH:MM`` (24-hour clock)."""
    match = _TIME_PATTERN.fullmatch(text.strip())
    if not match:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return TimeOfDay(hour=hour, minute=minute)


def parse_time_range(text: str) -> TimeOfDayRange | None:
    """
    Parse ``<time>-<time>``.

    An inverted range still parses; check it with ``is_valid_time_range``.
    """
    match = _TIME_RANGE_PATTERN.fullmatch(text.strip())
    if not match:
        return None

    start = parse_time(match.group(1))
    end = parse_time(match.group(2))
    if start is None or end is None:
        return None
    return TimeOfDayRange(start=start, end=end)


def is_valid_time_range(time_range: TimeOfDayRange) -> bool:
    """True if the window ends strictly after it starts on the same day."""
    start, end = time_range.start, time_range.end
    return (end.hour, end.minute) > (start.hour, start.minute)


def parse_duration(text: str) -> int | None:
    """
    Parse a duration into minutes: ``45``, ``30m`` or ``2h``.

    Fractions and combined forms like ``1h30m`` are not accepted.
    """
    text = text.strip()

    match = _MINUTES_PATTERN.fullmatch(text)
    if match:
        return int(match.group(1))

    match = _UNIT_DURATION_PATTERN.fullmatch(text)
    if not match:
        return None

    value = int(match.group(1))
    if match.group(2).lower() == "h":
        return value * 60
    return value


def format_time_of_day(time_of_day: TimeOfDay) -> str:
    return f"{time_of_day.hour:02d}:{time_of_day.minute:02d}"


def format_time_range(time_range: TimeOfDayRange) -> str:
    return f"{format_time_of_day(time_range.start)}-{format_time_of_day(time_range.end)}"


def at_time_of_day(day: DateTime, time_of_day: TimeOfDay) -> DateTime:
    """Apply a wall-clock time of day to the date of ``day``."""
    return day.set(
        hour=time_of_day.hour,
        minute=time_of_day.minute,
        second=0,
        microsecond=0
    )
