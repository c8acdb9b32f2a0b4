"""
Persistence of calendar metadata.
"""
from groupcal.stores.calendar import CalendarStore

__all__ = ["CalendarStore"]
