"""
Application services for finding shared meeting time.

The service turns typed search input into a validated request, gathers busy
times for every participant through a calendar client adapter, and hands the
actual availability calculation to the domain-level ``SlotCalculator``. The
calendar dependency is a simple protocol so tests can plug in a stub.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterator, List, Protocol, Sequence

from pendulum import DateTime

from ..domain.exceptions import InputValidationError
from ..domain.intervals import iter_days
from ..domain.models import DateRange, Interval, TimeOfDayRange
from ..domain.parsing import (
    at_time_of_day,
    format_time_range,
    is_valid_time_range,
    parse_date,
    parse_date_range,
    parse_duration,
    parse_time,
    parse_time_range,
)
from ..domain.slot_calculator import DayAvailability, SlotCalculator

logger = logging.getLogger(__name__)


class CalendarClientProtocol(Protocol):
    """Protocol describing the calendar client behaviour needed by the service."""

    async def get_busy(
        self,
        email: str,
        start_time: DateTime,
        end_time: DateTime,
        timezone: str,
    ) -> List[Interval]:
        """Return busy intervals of one participant."""


@dataclass(frozen=True)
class SearchRequest:
    """A validated search: which days, which hours, how long."""

    date_range: DateRange
    time_range: TimeOfDayRange
    duration_minutes: int

    def window(self) -> Interval:
        """From the first day's opening to the last day's closing time."""
        return Interval(
            start=at_time_of_day(self.date_range.start_date, self.time_range.start),
            end=at_time_of_day(self.date_range.end_date, self.time_range.end),
        )

    def days(self) -> Iterator[DateTime]:
        return iter_days(self.date_range.start_date, self.date_range.end_date)


@dataclass
class AvailabilityReport:
    """Per-day free intervals for a search request."""

    request: SearchRequest
    days: List[DayAvailability]

    def header(self) -> str:
        date_range = self.request.date_range
        return (
            f"Free time ({date_range.start_date.format('M/D')}-"
            f"{date_range.end_date.format('M/D')} "
            f"{format_time_range(self.request.time_range)})"
        )

    def format_display(self) -> str:
        return "\n".join([self.header()] + [day.format_display() for day in self.days])


class AvailabilityService:
    """
    Orchestrates input parsing, busy-time retrieval and slot calculation.
    """

    def __init__(
        self,
        calendar_client: CalendarClientProtocol,
        slot_calculator: SlotCalculator,
        timezone: str,
    ) -> None:
        self._calendar_client = calendar_client
        self._slot_calculator = slot_calculator
        self._timezone = timezone

    @staticmethod
    def parse_request(
        *,
        date_range_text: str,
        time_range_text: str,
        duration_text: str,
        reference: DateTime,
    ) -> SearchRequest:
        """
        Turn typed input into a SearchRequest.

        Raises:
            InputValidationError: If any field fails to parse or the
                combination can't describe a non-empty search window.
        """
        date_range = parse_date_range(date_range_text, reference)
        if date_range is None:
            raise InputValidationError(f"Invalid date range: '{date_range_text}'")

        time_range = parse_time_range(time_range_text)
        if time_range is None:
            raise InputValidationError(f"Invalid time range: '{time_range_text}'")
        if not is_valid_time_range(time_range):
            raise InputValidationError(
                f"Time range must end after it starts: '{time_range_text}'"
            )

        duration_minutes = parse_duration(duration_text)
        if duration_minutes is None or duration_minutes <= 0:
            raise InputValidationError(f"Invalid duration: '{duration_text}'")

        request = SearchRequest(
            date_range=date_range,
            time_range=time_range,
            duration_minutes=duration_minutes,
        )
        if request.window().is_empty():
            raise InputValidationError("The search window is empty.")

        return request

    @staticmethod
    def resolve_manual_start(date_text: str, time_text: str, reference: DateTime) -> DateTime:
        """
        Combine a typed date and time into a start instant in the reference's zone.

        Raises:
            InputValidationError: If the date or time doesn't parse.
        """
        day = parse_date(date_text, reference)
        time_of_day = parse_time(time_text)
        if day is None or time_of_day is None:
            raise InputValidationError(
                f"Invalid date/time: '{date_text}' '{time_text}'"
            )
        return at_time_of_day(day, time_of_day)

    async def collect_busy(
        self,
        *,
        participants: Sequence[str],
        window_start: DateTime,
        window_end: DateTime,
    ) -> List[Interval]:
        """
        Fetch busy intervals for all participants concurrently.

        Waits for every participant before returning the combined list.
        """
        results = await asyncio.gather(
            *(
                self._calendar_client.get_busy(
                    email=participant,
                    start_time=window_start,
                    end_time=window_end,
                    timezone=self._timezone,
                )
                for participant in participants
            )
        )

        busy = [interval for intervals in results for interval in intervals]
        logger.info(
            "Collected %d busy intervals from %d participant(s)",
            len(busy),
            len(participants),
        )
        return busy

    async def availability(
        self,
        *,
        participants: Sequence[str],
        request: SearchRequest,
    ) -> AvailabilityReport:
        """Retrieve busy data and compute the per-day availability grid."""
        window = request.window()
        busy = await self.collect_busy(
            participants=participants,
            window_start=window.start,
            window_end=window.end,
        )

        days = self._slot_calculator.daily_availability(
            request.days(),
            request.time_range,
            request.duration_minutes,
            busy,
        )
        return AvailabilityReport(request=request, days=days)

    async def find_first_slot(
        self,
        *,
        participants: Sequence[str],
        request: SearchRequest,
    ) -> DateTime | None:
        """Retrieve busy data and return the earliest fitting start, or None."""
        window = request.window()
        busy = await self.collect_busy(
            participants=participants,
            window_start=window.start,
            window_end=window.end,
        )

        slot = self._slot_calculator.first_available(
            request.days(),
            request.time_range,
            request.duration_minutes,
            busy,
        )
        if slot is None:
            logger.info("No slot of %d minutes found", request.duration_minutes)
        return slot
