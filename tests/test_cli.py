"""
Tests for the Typer command line interface.
"""

import json

import pytest
from typer.testing import CliRunner

from meetslot import __version__
from meetslot.cli.app import app

runner = CliRunner()

EVENTS = [
    {"calendarId": "alice-work", "start": "2025-12-30T10:00:00+01:00", "end": "2025-12-30T11:00:00+01:00"},
    {"calendarId": "bob@example.com", "start": "2025-12-30T11:30:00+01:00", "end": "2025-12-30T12:30:00+01:00"},
    {"calendarId": "bob@example.com", "start": "2025-12-31", "end": "2026-01-01"},
]

CONFIG = """\
timezone: Europe/Berlin
defaults:
  duration: 30m
  time_range: "09:00-18:00"
events_file: events.json
colleagues:
  - name: alice
    email: alice@example.com
    calendar_id: alice-work
  - name: bob
    email: bob@example.com
"""


@pytest.fixture
def config_path(tmp_path):
    (tmp_path / "events.json").write_text(json.dumps(EVENTS), encoding="utf-8")
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG, encoding="utf-8")
    return path


class TestFreeCommand:
    """Tests for `meetslot free`."""

    def test_shows_free_time_per_day(self, config_path):
        """Each day lists the common free intervals."""
        result = runner.invoke(
            app, ["free", "alice", "bob", "--dates", "2025-12-30..2025-12-31", "--config", str(config_path)]
        )

        assert result.exit_code == 0, result.output
        assert "Free time (12/30-12/31 09:00-18:00)" in result.output
        assert "12/30 (Tue)" in result.output
        assert "09:00 - 10:00" in result.output
        assert "11:00 - 11:30" in result.output
        assert "12:30 - 18:00" in result.output
        assert "12/31 (Wed)\nnone" in result.output

    def test_defaults_to_all_colleagues(self, config_path):
        """Without participants every configured colleague is included."""
        result = runner.invoke(
            app, ["free", "--dates", "2025-12-31", "--config", str(config_path)]
        )

        assert result.exit_code == 0, result.output
        assert "alice@example.com, bob@example.com" in result.output
        assert "none" in result.output

    def test_invalid_date_range(self, config_path):
        """Bad input exits with code 1 and a message."""
        result = runner.invoke(
            app, ["free", "alice", "--dates", "someday", "--config", str(config_path)]
        )

        assert result.exit_code == 1
        assert "Invalid date range" in result.output

    def test_inverted_hours(self, config_path):
        """Overnight windows are rejected."""
        result = runner.invoke(
            app, ["free", "alice", "--dates", "2025-12-30", "--hours", "18:00-09:00", "--config", str(config_path)]
        )

        assert result.exit_code == 1
        assert "must end after it starts" in result.output

    def test_unknown_participant(self, config_path):
        """Unknown aliases are reported."""
        result = runner.invoke(
            app, ["free", "carol", "--dates", "2025-12-30", "--config", str(config_path)]
        )

        assert result.exit_code == 1
        assert "carol" in result.output

    def test_missing_config(self, tmp_path):
        """A missing config file is reported."""
        result = runner.invoke(
            app, ["free", "--dates", "2025-12-30", "--config", str(tmp_path / "missing.yaml")]
        )

        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestFirstCommand:
    """Tests for `meetslot first`."""

    def test_earliest_slot(self, config_path):
        """90 minutes first fit after Bob's meeting."""
        result = runner.invoke(
            app,
            ["first", "alice", "bob", "--dates", "2025-12-30..2025-12-31", "--duration", "90", "--config", str(config_path)],
        )

        assert result.exit_code == 0, result.output
        assert "Tue 2025-12-30 12:30 - 14:00" in result.output

    def test_no_slot(self, config_path):
        """A fully booked period is not an error."""
        result = runner.invoke(
            app, ["first", "bob", "--dates", "2025-12-31", "--config", str(config_path)]
        )

        assert result.exit_code == 0, result.output
        assert "No free slot found" in result.output


class TestOtherCommands:
    """Tests for the helper commands."""

    def test_at(self, config_path):
        """A typed date and time resolve to start and end in the configured zone."""
        result = runner.invoke(
            app, ["at", "2025-12-30", "9:30", "--duration", "1h", "--config", str(config_path)]
        )

        assert result.exit_code == 0, result.output
        assert "2025-12-30T09:30:00+01:00" in result.output
        assert "2025-12-30T10:30:00+01:00" in result.output

    def test_at_invalid_time(self, config_path):
        """A malformed time exits with code 1."""
        result = runner.invoke(
            app, ["at", "2025-12-30", "9:5", "--config", str(config_path)]
        )

        assert result.exit_code == 1
        assert "Invalid date/time" in result.output

    def test_at_duration_too_long(self, config_path):
        """A duration past the calendar's end is reported, not raised."""
        result = runner.invoke(
            app, ["at", "2025-12-30", "9:30", "--duration", "999999999999h", "--config", str(config_path)]
        )

        assert result.exit_code == 1
        assert "Duration is too long" in result.output
        assert not isinstance(result.exception, OverflowError)

    def test_colleagues(self, config_path):
        """Configured colleagues are listed."""
        result = runner.invoke(app, ["colleagues", "--config", str(config_path)])

        assert result.exit_code == 0, result.output
        assert "alice@example.com" in result.output
        assert "alice-work" in result.output

    def test_version(self):
        """The package version is printed."""
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output
