"""
Calendar business layer: creating, updating and deleting calendars across storage backends.
"""
import logging
from typing import Callable, Iterable, List, Optional

from fastapi import status

from groupcal.backends.base import Capability
from groupcal.backends.registry import BackendRegistry
from groupcal.constants import ObjectType, Permissions
from groupcal.exceptions import (
    BackendError,
    BusinessLayerError,
    CacheOutDatedError,
    DoesNotExistError,
    DuplicateRecordError,
    MultipleObjectsReturnedError,
)
from groupcal.schemas.calendar import Calendar
from groupcal.stores.calendar import CalendarStore
from groupcal.utils.uri import slugify, suggest_uri


class CalendarManager:
    """
    Lifecycle of calendar metadata on behalf of the calendar backends.

    Every mutation goes to the owning backend first and to the record store
    second. A backend failure therefore never leaves a stray row, while a
    store failure after a successful backend call is logged and reported.
    """

    def __init__(
        self,
        store: CalendarStore,
        backends: BackendRegistry,
        user_id: str,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.backends = backends
        self.user_id = user_id
        self.logger = logger or logging.getLogger(__name__)

    def find_all(
        self,
        user_id: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        active_backends_only: bool = True,
    ) -> List[Calendar]:
        """
        Find all calendars of a user.

        Args:
            user_id: Owner of the calendars
            limit: Maximum number of calendars
            offset: Number of calendars to skip
            active_backends_only: Leave out calendars on disabled backends

        Returns:
            Calendars ordered by their display order
        """
        try:
            calendars = self.store.find_all(user_id, limit, offset)

            if active_backends_only:
                active_backends = self.backends.enabled()
                calendars = [c for c in calendars if c.backend in active_backends]

            return calendars
        except BackendError as ex:
            raise BusinessLayerError(str(ex), ex.status_code, ex) from ex

    def count(self, user_id: str, active_backends_only: bool = True) -> int:
        """Get the number of calendars of a user."""
        try:
            if not active_backends_only:
                return self.store.count(user_id)
            return len(self.find_all(user_id, active_backends_only=True))
        except DoesNotExistError as ex:
            raise BusinessLayerError(str(ex), cause=ex) from ex

    def find_all_on_backend(
        self,
        backend: str,
        user_id: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Calendar]:
        """Find all calendars of a user stored on a certain backend."""
        try:
            return self.store.find_all_on_backend(backend, user_id, limit, offset)
        except (DoesNotExistError, BackendError) as ex:
            raise BusinessLayerError(str(ex), cause=ex) from ex

    def count_on_backend(self, backend: str, user_id: str) -> int:
        try:
            return self.store.count_on_backend(backend, user_id)
        except DoesNotExistError as ex:
            raise BusinessLayerError(str(ex), cause=ex) from ex

    def find(self, public_uri: str, user_id: str) -> Calendar:
        """
        Find a calendar by its public URI.

        Raises:
            BusinessLayerError: If no or several calendars match, or the
                calendar's backend is disabled
        """
        return self._find_one(self.store.find, public_uri, user_id)

    def find_by_id(self, calendar_id: int, user_id: str) -> Calendar:
        """Find a calendar by its id, with the same checks as :meth:`find`."""
        return self._find_one(self.store.find_by_id, calendar_id, user_id)

    def exists(self, public_uri: str, user_id: str) -> bool:
        return self.store.does_exist(public_uri, user_id)

    def allows(self, cruds: Permissions, public_uri: str, user_id: str) -> bool:
        return self.store.does_allow(cruds, public_uri, user_id)

    def supports(self, component: ObjectType, public_uri: str, user_id: str) -> bool:
        return self.store.does_support(component, public_uri, user_id)

    def create(self, calendar: Calendar) -> Calendar:
        """
        Create a new calendar on its backend and store its metadata.

        Args:
            calendar: Fully specified calendar

        Returns:
            The created calendar, with its id assigned and the private URI
            chosen by the backend

        Raises:
            BusinessLayerError: If the calendar is invalid, already exists,
                or its backend is disabled, lacks create support or fails
        """
        try:
            self.check_is_valid(calendar)
            self.check_backend_enabled(calendar.backend)
            self.check_calendar_does_not_exist(calendar.public_uri, calendar.user_id)
            self.check_backend_supports(calendar.backend, Capability.CREATE_CALENDAR)

            api = self.backends.find(calendar.backend).api
            api.create_calendar(calendar)

            try:
                self.store.insert(calendar)
            except DuplicateRecordError as ex:
                self.logger.warning(f"Calendar {calendar} was created on its backend but not stored: {ex}")
                raise BusinessLayerError(
                    "Calendar already exists", status.HTTP_409_CONFLICT, ex
                ) from ex

            return calendar
        except BackendError as ex:
            self.logger.debug(str(ex))
            raise BusinessLayerError(str(ex), ex.status_code, ex) from ex
        except CacheOutDatedError as ex:
            # TODO: refresh the cached calendar list from the backend before failing
            self.logger.debug(str(ex))
            raise BusinessLayerError(str(ex), cause=ex) from ex

    def create_from_request(self, calendar: Calendar) -> Calendar:
        """
        Fill in defaults for a partially specified calendar, then create it.

        Owner and user default to the caller, the backend to the default
        backend, and the public URI to a free slug of the display name.
        """
        if calendar.user_id is None:
            calendar.user_id = self.user_id
        if calendar.owner_id is None:
            calendar.owner_id = self.user_id
        if calendar.backend is None:
            try:
                calendar.backend = self.backends.default().name
            except BackendError as ex:
                raise BusinessLayerError(str(ex), cause=ex) from ex
        if calendar.public_uri is None and calendar.display_name:
            calendar.public_uri = self._suggest_public_uri(calendar.display_name, calendar.user_id)
        # Provisional, backends rewrite it when it is taken on their side
        if calendar.public_uri is not None:
            calendar.private_uri = calendar.public_uri
        if calendar.components is None:
            calendar.components = int(ObjectType.ALL)
        if calendar.cruds is None:
            calendar.cruds = int(Permissions.ALL)
        if calendar.ctag is None:
            calendar.ctag = 0
        if calendar.enabled is None:
            calendar.enabled = True
        if calendar.order is None:
            calendar.order = 0

        return self.create(calendar)

    def create_collection(self, calendars: Iterable[Calendar]) -> List[Calendar]:
        """Create each calendar, skipping those that fail."""
        return self._create_each(calendars, self.create)

    def create_collection_from_request(self, calendars: Iterable[Calendar]) -> List[Calendar]:
        """Create each calendar from a request, skipping those that fail."""
        return self._create_each(calendars, self.create_from_request)

    def update(self, new_calendar: Calendar, old_public_uri: str, old_user_id: str) -> Calendar:
        """
        Update a calendar.

        Changing the user (transfer) or the backend (move, or merge when the
        target URI is taken) is not supported yet and always fails.

        Args:
            new_calendar: Complete new state of the calendar
            old_public_uri: Public URI of the stored calendar
            old_user_id: User of the stored calendar

        Returns:
            The updated calendar

        Raises:
            BusinessLayerError: If the calendar does not exist, a backend is
                disabled, the new state is invalid or the backend fails
        """
        try:
            old_calendar = self.find(old_public_uri, old_user_id)

            self.check_backend_enabled(new_calendar.backend)
            self.check_backend_enabled(old_calendar.backend)
            self.check_is_valid(new_calendar)
            new_calendar.id = old_calendar.id

            if self._does_need_transfer(new_calendar, old_calendar):
                return self._transfer(new_calendar, old_calendar)
            elif self._does_need_move(new_calendar, old_calendar):
                return self._move(new_calendar, old_calendar)
            elif self._does_need_merge(new_calendar, old_calendar):
                return self._merge(new_calendar, old_calendar)
            else:
                return self._update_properties(new_calendar)
        except BackendError as ex:
            self.logger.debug(str(ex))
            raise BusinessLayerError(str(ex), ex.status_code, ex) from ex
        except CacheOutDatedError as ex:
            self.logger.debug(str(ex))
            raise BusinessLayerError(str(ex), cause=ex) from ex

    def update_from_request(
        self, new_calendar: Calendar, old_public_uri: str, old_user_id: str
    ) -> Calendar:
        """Replace a calendar (PUT), keeping its read-only properties."""
        old_calendar = self.find(old_public_uri, old_user_id)
        return self._update_from_prior(new_calendar, old_calendar, patch=False)

    def update_from_request_by_id(
        self, new_calendar: Calendar, old_calendar_id: int, old_user_id: str
    ) -> Calendar:
        old_calendar = self.find_by_id(old_calendar_id, old_user_id)
        return self._update_from_prior(new_calendar, old_calendar, patch=False)

    def patch_from_request(
        self, new_calendar: Calendar, old_public_uri: str, old_user_id: str
    ) -> Calendar:
        """Change only the fields set on ``new_calendar`` (PATCH)."""
        old_calendar = self.find(old_public_uri, old_user_id)
        return self._update_from_prior(new_calendar, old_calendar, patch=True)

    def patch_from_request_by_id(
        self, new_calendar: Calendar, old_calendar_id: int, old_user_id: str
    ) -> Calendar:
        old_calendar = self.find_by_id(old_calendar_id, old_user_id)
        return self._update_from_prior(new_calendar, old_calendar, patch=True)

    def reset_read_only_properties(self, new_calendar: Calendar, old_calendar: Calendar) -> None:
        if new_calendar.user_id is None:
            new_calendar.user_id = old_calendar.user_id
        if new_calendar.owner_id is None:
            new_calendar.owner_id = old_calendar.owner_id
        if new_calendar.cruds is None:
            new_calendar.cruds = old_calendar.cruds
        if new_calendar.ctag is None:
            # Takes the prior cruds, not the prior ctag; see DESIGN.md open questions
            new_calendar.ctag = old_calendar.cruds

    def touch(self, public_uri: str, user_id: str) -> Calendar:
        """Bump a calendar's ctag so sync clients refetch it."""
        calendar = self.find(public_uri, user_id)
        calendar.touch()
        return self.update(calendar, public_uri, user_id)

    def delete(self, calendar: Calendar) -> None:
        """
        Delete a calendar on its backend, then its metadata row.

        The row is kept when the backend fails. A store failure after the
        backend deleted the calendar is not rolled back.
        """
        try:
            self.check_backend_enabled(calendar.backend)
            self.check_backend_supports(calendar.backend, Capability.DELETE_CALENDAR)

            api = self.backends.find(calendar.backend).api
            api.delete_calendar(calendar.private_uri, calendar.user_id)
            self.store.delete(calendar)
        except BackendError as ex:
            self.logger.debug(str(ex))
            raise BusinessLayerError(str(ex), ex.status_code, ex) from ex
        except CacheOutDatedError as ex:
            # TODO: refresh the cached calendar list from the backend before failing
            self.logger.debug(str(ex))
            raise BusinessLayerError(str(ex), cause=ex) from ex
        except DoesNotExistError as ex:
            raise BusinessLayerError(
                "No matching calendar entry found", status.HTTP_404_NOT_FOUND, ex
            ) from ex

    def check_is_valid(self, calendar: Calendar) -> None:
        if not calendar.is_valid():
            raise BusinessLayerError(
                f"Calendar {calendar} is not valid", status.HTTP_422_UNPROCESSABLE_ENTITY
            )

    def check_backend_enabled(self, backend: Optional[str]) -> None:
        if not self.backends.exists(backend):
            raise BusinessLayerError(
                f"Backend '{backend}' does not exist", status.HTTP_400_BAD_REQUEST
            )
        if not self.backends.is_enabled(backend):
            raise BusinessLayerError(
                f"Backend '{backend}' is disabled", status.HTTP_400_BAD_REQUEST
            )

    def check_backend_supports(self, backend: str, action: Capability) -> None:
        if not self.does_backend_support(backend, action):
            raise BusinessLayerError(
                f"Backend '{backend}' does not support {action.name}",
                status.HTTP_400_BAD_REQUEST,
            )

    def check_calendar_does_not_exist(self, public_uri: str, user_id: str) -> None:
        if self.exists(public_uri, user_id):
            raise BusinessLayerError("Calendar already exists", status.HTTP_409_CONFLICT)

    def does_backend_support(self, backend: str, action: Capability) -> bool:
        return self.backends.find(backend).supports(action)

    def _find_one(self, lookup: Callable[..., Calendar], key, user_id: str) -> Calendar:
        try:
            calendar = lookup(key, user_id)
        except DoesNotExistError as ex:
            raise BusinessLayerError(
                "No matching calendar entry found", status.HTTP_404_NOT_FOUND, ex
            ) from ex
        except MultipleObjectsReturnedError as ex:
            raise BusinessLayerError(
                "Multiple matching calendar entries found",
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                ex,
            ) from ex

        self.check_backend_enabled(calendar.backend)
        return calendar

    def _suggest_public_uri(self, display_name: str, user_id: str) -> str:
        uri = slugify(display_name.lower())

        while self.exists(uri, user_id):
            suggested = suggest_uri(uri)
            if suggested == uri:
                break
            uri = suggested

        return uri

    def _create_each(
        self,
        calendars: Iterable[Calendar],
        create: Callable[[Calendar], Calendar],
    ) -> List[Calendar]:
        created = []
        for calendar in calendars:
            try:
                created.append(create(calendar))
            except BusinessLayerError as ex:
                self.logger.debug(ex.message)
        return created

    def _update_from_prior(
        self, new_calendar: Calendar, old_calendar: Calendar, patch: bool
    ) -> Calendar:
        new_calendar.id = old_calendar.id
        new_calendar.private_uri = old_calendar.private_uri

        self.reset_read_only_properties(new_calendar, old_calendar)

        if patch and new_calendar.contains_unset_fields():
            new_calendar = old_calendar.overwrite_with(new_calendar)

        return self.update(new_calendar, old_calendar.public_uri, old_calendar.user_id)

    def _update_properties(self, calendar: Calendar) -> Calendar:
        backend = self.backends.find(calendar.backend)

        if backend.supports(Capability.UPDATE_CALENDAR):
            backend.api.update_calendar(calendar)

        try:
            self.store.update(calendar)
        except DoesNotExistError as ex:
            raise BusinessLayerError(
                "No matching calendar entry found", status.HTTP_404_NOT_FOUND, ex
            ) from ex
        except DuplicateRecordError as ex:
            raise BusinessLayerError(
                "Calendar already exists", status.HTTP_409_CONFLICT, ex
            ) from ex

        return calendar

    def _does_need_transfer(self, new_calendar: Calendar, old_calendar: Calendar) -> bool:
        return new_calendar.user_id != old_calendar.user_id

    def _does_need_move(self, new_calendar: Calendar, old_calendar: Calendar) -> bool:
        return (
            new_calendar.backend != old_calendar.backend
            and not self.exists(new_calendar.public_uri, new_calendar.user_id)
        )

    def _does_need_merge(self, new_calendar: Calendar, old_calendar: Calendar) -> bool:
        return (
            new_calendar.backend != old_calendar.backend
            and self.exists(new_calendar.public_uri, new_calendar.user_id)
        )

    # Transfer, move and merge need background jobs copying calendar data
    # between users or backends, which do not exist yet.

    def _transfer(self, new_calendar: Calendar, old_calendar: Calendar) -> Calendar:
        self.logger.debug(f"Couldn't transfer {old_calendar} to {new_calendar}")
        raise BusinessLayerError("Transferring calendars not supported yet")

    def _move(self, new_calendar: Calendar, old_calendar: Calendar) -> Calendar:
        self.logger.debug(f"Couldn't move {old_calendar} to {new_calendar}")
        raise BusinessLayerError("Moving calendars not supported yet")

    def _merge(self, new_calendar: Calendar, old_calendar: Calendar) -> Calendar:
        self.logger.debug(f"Couldn't merge {old_calendar} into {new_calendar}")
        raise BusinessLayerError("Merging calendars not supported yet")
