"""
Pydantic schemas for the business layer and API request/response validation.
"""
from groupcal.schemas.calendar import (
    Calendar,
    CalendarCreate,
    CalendarUpdate,
    CalendarResponse,
    CalendarCount,
)

__all__ = [
    "Calendar",
    "CalendarCreate",
    "CalendarUpdate",
    "CalendarResponse",
    "CalendarCount",
]
