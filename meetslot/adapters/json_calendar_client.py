"""
Calendar client backed by a JSON file of busy events.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from pendulum import DateTime

from ..config import AppConfig
from ..domain.exceptions import CalendarDataError
from ..domain.intervals import parse_busy_interval
from ..domain.models import Interval

logger = logging.getLogger(__name__)


class JsonCalendarClient:
    """
    Client that serves busy times from a JSON export of calendar events.

    Each event is an object with ``calendarId``, ``start`` and ``end``.
    ``start``/``end`` are either ISO timestamps or plain ``YYYY-MM-DD`` dates
    for whole-day events.
    """

    def __init__(self, events_file: Path, config: AppConfig | None = None):
        """
        Initialize the client.

        Args:
            events_file: Path to the JSON event list
            config: Optional AppConfig for email -> calendar_id mapping

        Raises:
            CalendarDataError: If the file is missing or not a JSON list
        """
        self.events_file = events_file
        self.config = config
        self.calendar_events = self._load_calendar_data()

    def _load_calendar_data(self) -> List[Dict[str, Any]]:
        """Load calendar events from the JSON file."""
        try:
            with open(self.events_file, "r", encoding="utf-8") as f:
                events = json.load(f)
        except OSError as exc:
            raise CalendarDataError(f"Cannot read events file {self.events_file}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise CalendarDataError(f"Invalid JSON in {self.events_file}: {exc}") from exc

        if not isinstance(events, list):
            raise CalendarDataError(f"Events file {self.events_file} must contain a list")

        logger.debug("Loaded %d events from %s", len(events), self.events_file)
        return events

    def _get_calendar_id_for_email(self, email: str) -> str:
        """Map email to calendar_id using config."""
        if self.config:
            colleague = self.config.find_colleague(email)
            if colleague and colleague.calendar_id:
                return colleague.calendar_id

        # Fallback: use email as calendar_id
        return email

    async def get_busy(
        self,
        email: str,
        start_time: DateTime,
        end_time: DateTime,
        timezone: str
    ) -> List[Interval]:
        """
        Busy intervals of one participant overlapping the time window.

        Args:
            email: Participant email address
            start_time: Start of the time window
            end_time: End of the time window
            timezone: IANA timezone the intervals are anchored to

        Returns:
            List of busy Interval objects, in file order
        """
        calendar_id = self._get_calendar_id_for_email(email)
        window = Interval(start=start_time, end=end_time)
        busy: List[Interval] = []

        for event in self.calendar_events:
            if not isinstance(event, dict) or event.get("calendarId") != calendar_id:
                continue

            start_text = event.get("start")
            end_text = event.get("end")
            if not isinstance(start_text, str) or not isinstance(end_text, str):
                logger.warning("Skipping event without start/end: %r", event)
                continue

            interval = parse_busy_interval(start_text, end_text, timezone)
            if interval is None:
                logger.warning("Skipping unparseable event: %r", event)
                continue

            if interval.overlaps(window):
                busy.append(interval)

        logger.debug("%s: %d busy intervals", email, len(busy))
        return busy
