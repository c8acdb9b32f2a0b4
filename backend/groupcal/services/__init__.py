"""
Business layer services for groupcal.
"""
from groupcal.services.calendar import CalendarManager

__all__ = [
    "CalendarManager",
]
