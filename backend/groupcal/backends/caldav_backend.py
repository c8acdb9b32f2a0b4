"""
Backend storing calendars on a remote CalDAV server (iCloud, Nextcloud, ...).
"""
import logging
from typing import List, Optional

import caldav
from caldav.elements import cdav, dav, ical
from caldav.lib.error import DAVError

from groupcal.constants import COMPONENT_NAMES, ObjectType
from groupcal.exceptions import BackendError
from groupcal.schemas.calendar import Calendar
from groupcal.backends.base import CalendarBackend, CalendarBackendAPI, Capability

logger = logging.getLogger(__name__)


class CalDAVBackendAPI(CalendarBackendAPI):
    """
    Calendar operations against the configured CalDAV account.
    """

    def __init__(self, url: Optional[str], username: Optional[str], password: Optional[str]):
        self.url = url
        self.username = username
        self.password = password
        self._client = None
        self._principal = None

    def _get_client(self):
        """Get or create CalDAV client connection."""
        if self._client is None:
            if not self.url:
                raise BackendError("CalDAV not configured")

            self._client = caldav.DAVClient(
                url=self.url,
                username=self.username,
                password=self.password,
            )

        return self._client

    def _get_principal(self):
        if self._principal is None:
            self._principal = self._get_client().principal()
        return self._principal

    def _get_calendar(self, private_uri: str):
        return self._get_principal().calendar(cal_id=private_uri)

    def create_calendar(self, calendar: Calendar) -> None:
        try:
            self._get_principal().make_calendar(
                name=calendar.display_name or calendar.public_uri,
                cal_id=calendar.private_uri,
                supported_calendar_component_set=self._component_names(calendar.components),
            )
        except (DAVError, OSError) as e:
            raise BackendError(f"Error creating calendar {calendar.private_uri}: {e}") from e

    def update_calendar(self, calendar: Calendar) -> None:
        properties = [dav.DisplayName(calendar.display_name or calendar.public_uri)]
        if calendar.description is not None:
            properties.append(cdav.CalendarDescription(calendar.description))
        if calendar.color is not None:
            properties.append(ical.CalendarColor(calendar.color))

        try:
            self._get_calendar(calendar.private_uri).set_properties(properties)
        except (DAVError, OSError) as e:
            raise BackendError(f"Error updating calendar {calendar.private_uri}: {e}") from e

    def delete_calendar(self, private_uri: str, user_id: str) -> None:
        try:
            self._get_calendar(private_uri).delete()
        except (DAVError, OSError) as e:
            raise BackendError(f"Error deleting calendar {private_uri}: {e}") from e

    @staticmethod
    def _component_names(components: Optional[int]) -> List[str]:
        flags = ObjectType(components if components is not None else ObjectType.ALL)
        return [name for kind, name in COMPONENT_NAMES.items() if kind in flags]


class CalDAVBackend(CalendarBackend):
    """Stores calendars as collections on a CalDAV server."""

    capabilities = (
        Capability.CREATE_CALENDAR
        | Capability.UPDATE_CALENDAR
        | Capability.DELETE_CALENDAR
    )

    def __init__(
        self,
        url: Optional[str],
        username: Optional[str] = None,
        password: Optional[str] = None,
        name: str = "caldav",
    ):
        self.name = name
        self._api = CalDAVBackendAPI(url, username, password)

    @property
    def api(self) -> CalDAVBackendAPI:
        return self._api
