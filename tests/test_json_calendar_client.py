"""
Tests for the JSON-backed calendar client.
"""

import asyncio
import json
import logging

import pendulum
import pytest

from meetslot.adapters.json_calendar_client import JsonCalendarClient
from meetslot.config import AppConfig
from meetslot.domain.exceptions import CalendarDataError

TZ = "Europe/Berlin"
WINDOW_START = pendulum.datetime(2025, 12, 30, 9, 0, tz=TZ)
WINDOW_END = pendulum.datetime(2025, 12, 31, 18, 0, tz=TZ)

EVENTS = [
    {"calendarId": "alice-work", "start": "2025-12-30T10:00:00+01:00", "end": "2025-12-30T11:00:00+01:00"},
    {"calendarId": "alice-work", "start": "2025-12-29T10:00:00+01:00", "end": "2025-12-29T11:00:00+01:00"},
    {"calendarId": "bob@example.com", "start": "2025-12-31", "end": "2026-01-01"},
    {"calendarId": "bob@example.com", "start": "not a date", "end": "2025-12-30T12:00:00"},
    {"calendarId": "bob@example.com", "start": "2025-12-30T12:00:00"},
]


@pytest.fixture
def events_file(tmp_path):
    path = tmp_path / "events.json"
    path.write_text(json.dumps(EVENTS), encoding="utf-8")
    return path


@pytest.fixture
def config():
    return AppConfig(
        timezone=TZ,
        colleagues=[
            {"name": "alice", "email": "alice@example.com", "calendar_id": "alice-work"},
            {"name": "bob", "email": "bob@example.com"},
        ],
    )


def _get_busy(client, email):
    return asyncio.run(client.get_busy(email, WINDOW_START, WINDOW_END, TZ))


class TestJsonCalendarClient:
    """Tests for JsonCalendarClient."""

    def test_maps_email_to_calendar_id(self, events_file, config):
        """Events are looked up by the colleague's calendar_id."""
        busy = _get_busy(JsonCalendarClient(events_file, config=config), "alice@example.com")

        assert len(busy) == 1
        assert busy[0].start == pendulum.datetime(2025, 12, 30, 10, 0, tz=TZ)

    def test_without_config_uses_email(self, events_file):
        """Without config the email is the calendar id."""
        client = JsonCalendarClient(events_file)

        assert _get_busy(client, "alice@example.com") == []
        assert len(_get_busy(client, "bob@example.com")) == 1

    def test_whole_day_event_and_skipped_events(self, events_file, config, caplog):
        """Whole-day events are busy all day; broken events are logged and skipped."""
        client = JsonCalendarClient(events_file, config=config)

        with caplog.at_level(logging.WARNING):
            busy = _get_busy(client, "bob@example.com")

        assert len(busy) == 1
        assert busy[0].start == pendulum.datetime(2025, 12, 31, tz=TZ)
        assert busy[0].end == pendulum.datetime(2026, 1, 1, tz=TZ)
        assert "Skipping unparseable event" in caplog.text
        assert "Skipping event without start/end" in caplog.text

    def test_missing_file(self, tmp_path):
        """A missing file raises CalendarDataError."""
        with pytest.raises(CalendarDataError, match="Cannot read"):
            JsonCalendarClient(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        """Broken JSON raises CalendarDataError."""
        path = tmp_path / "events.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(CalendarDataError, match="Invalid JSON"):
            JsonCalendarClient(path)

    def test_root_must_be_list(self, tmp_path):
        """An object at the root is rejected."""
        path = tmp_path / "events.json"
        path.write_text(json.dumps({"events": []}), encoding="utf-8")

        with pytest.raises(CalendarDataError, match="must contain a list"):
            JsonCalendarClient(path)
