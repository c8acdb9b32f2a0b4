"""
SQLAlchemy models for groupcal.
"""
from groupcal.models.calendar import CalendarRecord

__all__ = [
    "CalendarRecord",
]
