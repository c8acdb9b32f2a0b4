"""
API routers for groupcal.
"""
from groupcal.api import calendar

__all__ = [
    "calendar",
]
