"""
Adapters layer - Calendar data sources.
"""

from .json_calendar_client import JsonCalendarClient

__all__ = ["JsonCalendarClient"]
