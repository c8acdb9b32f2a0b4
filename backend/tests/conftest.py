"""
Pytest configuration and shared fixtures for groupcal tests
"""
import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import groupcal.models  # noqa: F401
from groupcal.api import calendar as calendar_api
from groupcal.api.deps import get_calendar_manager, get_current_user_id
from groupcal.backends import BackendRegistry, LocalBackend
from groupcal.backends.base import CalendarBackend, CalendarBackendAPI, Capability
from groupcal.constants import ObjectType, Permissions
from groupcal.database import Base
from groupcal.schemas.calendar import Calendar
from groupcal.services.calendar import CalendarManager
from groupcal.stores.calendar import CalendarStore

ALL_CAPABILITIES = (
    Capability.CREATE_CALENDAR | Capability.UPDATE_CALENDAR | Capability.DELETE_CALENDAR
)


class RecordingBackendAPI(CalendarBackendAPI):
    """Backend API that remembers its calls and can be told to fail."""

    def __init__(self):
        self.calls = []
        self.fail_with = None
        self.rewrite_private_uri = None

    def _call(self, *call):
        self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    def create_calendar(self, calendar):
        self._call("create", calendar.private_uri, calendar.user_id)
        if self.rewrite_private_uri:
            calendar.private_uri = self.rewrite_private_uri

    def update_calendar(self, calendar):
        self._call("update", calendar.private_uri, calendar.user_id)

    def delete_calendar(self, private_uri, user_id):
        self._call("delete", private_uri, user_id)


class RecordingBackend(CalendarBackend):
    def __init__(self, name, capabilities=ALL_CAPABILITIES):
        self.name = name
        self.capabilities = capabilities
        self._api = RecordingBackendAPI()

    @property
    def api(self):
        return self._api


@pytest.fixture
def engine():
    """In-memory database shared by every session of a test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return CalendarStore(db)


@pytest.fixture
def local_backend():
    return RecordingBackend("local")


@pytest.fixture
def remote_backend():
    return RecordingBackend("remote")


@pytest.fixture
def archive_backend():
    """Registered but disabled backend"""
    return RecordingBackend("archive")


@pytest.fixture
def registry(local_backend, remote_backend, archive_backend):
    registry = BackendRegistry(enabled=["local", "remote"])
    registry.register(local_backend)
    registry.register(remote_backend)
    registry.register(archive_backend)
    return registry


@pytest.fixture
def manager(store, registry):
    return CalendarManager(store, registry, "alice")


@pytest.fixture
def make_calendar():
    """Factory for fully specified calendars"""
    def create(**overrides):
        fields = {
            "user_id": "alice",
            "owner_id": "alice",
            "backend": "local",
            "public_uri": "work",
            "private_uri": "work",
            "display_name": "Work",
            "components": int(ObjectType.ALL),
            "cruds": int(Permissions.ALL),
            "ctag": 0,
            "enabled": True,
            "order": 0,
        }
        fields.update(overrides)
        return Calendar(**fields)
    return create


@pytest.fixture
def stored_calendar(store, make_calendar):
    """Calendar 'work' of alice on the local backend, inserted directly into the store"""
    def create(**overrides):
        return store.insert(make_calendar(**overrides))
    return create


@pytest.fixture
def api_registry(store):
    registry = BackendRegistry(enabled=["local"])
    registry.register(LocalBackend(store))
    registry.register(RecordingBackend("archive"))
    return registry


@pytest.fixture
def client(store, api_registry):
    """Test client for the calendar endpoints, backed by the test database"""
    app = FastAPI()
    app.include_router(calendar_api.router, prefix="/api/calendars")

    def override_manager(user_id: str = Depends(get_current_user_id)):
        return CalendarManager(store, api_registry, user_id)

    app.dependency_overrides[get_calendar_manager] = override_manager
    return TestClient(app)


@pytest.fixture
def api_headers():
    """Helper function to create API headers"""
    def create_headers(user_id):
        return {"x-user-id": user_id}
    return create_headers
