"""Abstract base classes for calendar backends."""

from abc import ABC, abstractmethod
from enum import IntFlag

from groupcal.schemas.calendar import Calendar


class Capability(IntFlag):
    """Calendar-level actions a backend may implement."""

    CREATE_CALENDAR = 1
    UPDATE_CALENDAR = 2
    DELETE_CALENDAR = 4


class CalendarBackendAPI(ABC):
    """Operations a backend performs on the calendars it stores."""

    @abstractmethod
    def create_calendar(self, calendar: Calendar) -> None:
        """
        Create the calendar on the backend.

        The backend may rewrite ``calendar.private_uri`` when the provisional
        one is already taken on its side.

        Raises:
            BackendError: If creating the calendar fails
            CacheOutDatedError: If the backend state is newer than the local cache
        """

    @abstractmethod
    def update_calendar(self, calendar: Calendar) -> None:
        """
        Push changed calendar properties to the backend.

        Raises:
            BackendError: If updating the calendar fails
            CacheOutDatedError: If the backend state is newer than the local cache
        """

    @abstractmethod
    def delete_calendar(self, private_uri: str, user_id: str) -> None:
        """
        Delete a calendar and everything stored in it.

        Args:
            private_uri: Backend-side URI of the calendar
            user_id: Owner of the calendar

        Raises:
            BackendError: If deleting the calendar fails
            CacheOutDatedError: If the backend state is newer than the local cache
        """


class CalendarBackend(ABC):
    """A pluggable storage provider for calendar data."""

    name: str
    capabilities: Capability = Capability(0)

    @property
    @abstractmethod
    def api(self) -> CalendarBackendAPI:
        """The API used to act on calendars stored by this backend."""

    def supports(self, action: Capability) -> bool:
        return (self.capabilities & action) == action

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
