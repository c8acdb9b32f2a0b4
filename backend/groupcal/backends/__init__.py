"""
Pluggable storage backends for calendar data.
"""
from groupcal.backends.base import CalendarBackend, CalendarBackendAPI, Capability
from groupcal.backends.caldav_backend import CalDAVBackend
from groupcal.backends.local import LocalBackend
from groupcal.backends.registry import BackendRegistry
from groupcal.config import Settings
from groupcal.stores.calendar import CalendarStore


def build_registry(settings: Settings, store: CalendarStore) -> BackendRegistry:
    """Register the local backend, plus CalDAV when an account is configured."""
    registry = BackendRegistry(enabled=settings.enabled_backends)
    registry.register(LocalBackend(store))

    if settings.caldav_url:
        registry.register(
            CalDAVBackend(
                url=settings.caldav_url,
                username=settings.caldav_username,
                password=settings.caldav_password,
            )
        )

    return registry


__all__ = [
    "CalendarBackend",
    "CalendarBackendAPI",
    "Capability",
    "CalDAVBackend",
    "LocalBackend",
    "BackendRegistry",
    "build_registry",
]
