"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import (
    AvailabilityReport,
    AvailabilityService,
    CalendarClientProtocol,
    SearchRequest,
)

__all__ = [
    "AvailabilityReport",
    "AvailabilityService",
    "CalendarClientProtocol",
    "SearchRequest",
]
