"""Backend keeping calendar data in the groupcal database itself."""

import logging

from groupcal.schemas.calendar import Calendar
from groupcal.stores.calendar import CalendarStore
from groupcal.utils.uri import suggest_uri
from groupcal.backends.base import CalendarBackend, CalendarBackendAPI, Capability

logger = logging.getLogger(__name__)


class LocalBackendAPI(CalendarBackendAPI):
    """Calendar operations for locally stored calendars."""

    def __init__(self, store: CalendarStore, backend_name: str):
        self.store = store
        self.backend_name = backend_name

    def create_calendar(self, calendar: Calendar) -> None:
        private_uri = calendar.private_uri
        while self.store.does_private_uri_exist(private_uri, calendar.user_id, self.backend_name):
            suggested = suggest_uri(private_uri)
            if suggested == private_uri:
                break
            private_uri = suggested

        if private_uri != calendar.private_uri:
            logger.debug(
                f"Private URI {calendar.private_uri} is taken, using {private_uri} for {calendar}"
            )
            calendar.private_uri = private_uri

    def update_calendar(self, calendar: Calendar) -> None:
        # Properties live on the metadata row, which the business layer persists
        logger.debug(f"Updated local calendar {calendar}")

    def delete_calendar(self, private_uri: str, user_id: str) -> None:
        logger.debug(f"Deleted local calendar {private_uri} of {user_id}")


class LocalBackend(CalendarBackend):
    """Stores calendars in the same database as their metadata."""

    capabilities = (
        Capability.CREATE_CALENDAR
        | Capability.UPDATE_CALENDAR
        | Capability.DELETE_CALENDAR
    )

    def __init__(self, store: CalendarStore, name: str = "local"):
        self.name = name
        self._api = LocalBackendAPI(store, name)

    @property
    def api(self) -> LocalBackendAPI:
        return self._api
