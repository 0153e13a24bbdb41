"""
Exception hierarchy for the meetslot application.

The parsing and interval functions never raise for malformed text; these
errors are raised by the service and adapter layers.
"""


class MeetslotError(Exception):
    """Base class for all application-level errors."""


class InputValidationError(MeetslotError):
    """Raised when user input cannot be turned into a valid search request."""


class CalendarDataError(MeetslotError):
    """Raised when calendar data cannot be read."""
