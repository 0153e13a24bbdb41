"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import DateParts, DateRange, Interval, TimeOfDay, TimeOfDayRange
from .slot_calculator import DayAvailability, SlotCalculator

__all__ = [
    "DateParts",
    "DateRange",
    "Interval",
    "TimeOfDay",
    "TimeOfDayRange",
    "DayAvailability",
    "SlotCalculator",
]
