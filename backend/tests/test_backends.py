from unittest.mock import MagicMock, patch

import pytest
from caldav.lib.error import DAVError

from groupcal.backends import BackendRegistry, CalDAVBackend, LocalBackend, build_registry
from groupcal.backends.base import Capability
from groupcal.config import Settings
from groupcal.constants import ObjectType
from groupcal.exceptions import BackendError, BackendNotFoundError

from conftest import RecordingBackend


class TestBackendRegistry:

    def test_enabled_only_lists_registered_backends(self):
        registry = BackendRegistry(enabled=["local", "ghost"])
        registry.register(RecordingBackend("local"))
        registry.register(RecordingBackend("remote"))

        assert registry.enabled() == {"local"}
        assert registry.is_enabled("local")
        assert not registry.is_enabled("remote")
        assert not registry.is_enabled("ghost")

    def test_find(self):
        registry = BackendRegistry()
        backend = RecordingBackend("local")
        registry.register(backend)

        assert registry.find("local") is backend
        with pytest.raises(BackendNotFoundError):
            registry.find("ghost")

    def test_default_is_first_registered(self):
        registry = BackendRegistry()
        registry.register(RecordingBackend("remote"))
        registry.register(RecordingBackend("local"))

        assert registry.default().name == "remote"
        assert [b.name for b in registry.all()] == ["remote", "local"]

    def test_default_without_backends(self):
        with pytest.raises(BackendNotFoundError):
            BackendRegistry().default()

    def test_supports(self):
        backend = RecordingBackend("readonly", capabilities=Capability.CREATE_CALENDAR)

        assert backend.supports(Capability.CREATE_CALENDAR)
        assert not backend.supports(Capability.DELETE_CALENDAR)


class TestBuildRegistry:

    def test_local_only(self, store):
        registry = build_registry(Settings(enabled_backends=["local"], caldav_url=None), store)

        assert [b.name for b in registry.all()] == ["local"]
        assert registry.default().name == "local"
        assert registry.enabled() == {"local"}

    def test_with_caldav(self, store):
        settings = Settings(
            enabled_backends=["local", "caldav"],
            caldav_url="https://dav.example.com",
            caldav_username="alice",
            caldav_password="secret",
        )

        registry = build_registry(settings, store)

        assert [b.name for b in registry.all()] == ["local", "caldav"]
        assert isinstance(registry.find("caldav"), CalDAVBackend)
        assert registry.enabled() == {"local", "caldav"}


class TestLocalBackend:

    def test_keeps_free_private_uri(self, store, make_calendar):
        calendar = make_calendar()

        LocalBackend(store).api.create_calendar(calendar)

        assert calendar.private_uri == "work"

    def test_rewrites_taken_private_uri(self, store, stored_calendar, make_calendar):
        stored_calendar(public_uri="old-work", private_uri="work")
        stored_calendar(public_uri="older-work", private_uri="work-1")
        calendar = make_calendar()

        LocalBackend(store).api.create_calendar(calendar)

        assert calendar.public_uri == "work"
        assert calendar.private_uri == "work-2"

    def test_supports_all_calendar_actions(self, store):
        backend = LocalBackend(store)

        for action in Capability:
            assert backend.supports(action)


class TestCalDAVBackend:

    @pytest.fixture
    def dav_client(self):
        with patch("groupcal.backends.caldav_backend.caldav.DAVClient") as client_class:
            yield client_class

    @pytest.fixture
    def backend(self):
        return CalDAVBackend("https://dav.example.com", "alice", "secret")

    def test_create_calendar(self, dav_client, backend, make_calendar):
        principal = dav_client.return_value.principal.return_value

        backend.api.create_calendar(make_calendar(components=int(ObjectType.EVENT | ObjectType.TODO)))

        dav_client.assert_called_once_with(
            url="https://dav.example.com", username="alice", password="secret"
        )
        principal.make_calendar.assert_called_once_with(
            name="Work",
            cal_id="work",
            supported_calendar_component_set=["VEVENT", "VTODO"],
        )

    def test_update_calendar(self, dav_client, backend, make_calendar):
        principal = dav_client.return_value.principal.return_value
        remote_calendar = principal.calendar.return_value

        backend.api.update_calendar(make_calendar(display_name="Office", color="#112233"))

        principal.calendar.assert_called_once_with(cal_id="work")
        properties = remote_calendar.set_properties.call_args.args[0]
        assert len(properties) == 2

    def test_delete_calendar(self, dav_client, backend):
        principal = dav_client.return_value.principal.return_value

        backend.api.delete_calendar("work", "alice")

        principal.calendar.assert_called_once_with(cal_id="work")
        principal.calendar.return_value.delete.assert_called_once_with()

    def test_dav_errors_become_backend_errors(self, dav_client, backend):
        principal = dav_client.return_value.principal.return_value
        principal.calendar.return_value.delete.side_effect = DAVError("gone")

        with pytest.raises(BackendError):
            backend.api.delete_calendar("work", "alice")

    def test_not_configured(self, make_calendar):
        backend = CalDAVBackend(url=None)

        with pytest.raises(BackendError, match="not configured"):
            backend.api.create_calendar(make_calendar())
