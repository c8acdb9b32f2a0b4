"""
Calendar schemas: the business-layer entity and the HTTP request/response bodies.
"""
import re
from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict

from groupcal.constants import ObjectType, Permissions

_URI = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9._-]*$")
_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}([0-9A-Fa-f]{2})?$")


class Calendar(BaseModel):
    """
    Metadata of one calendar. Fields left as ``None`` are unset, which the
    business layer fills from defaults or from the stored record.
    """

    model_config = ConfigDict(from_attributes=True, validate_assignment=True)

    id: Optional[int] = None
    user_id: Optional[str] = None
    owner_id: Optional[str] = None
    backend: Optional[str] = None
    public_uri: Optional[str] = None
    private_uri: Optional[str] = None
    display_name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    components: Optional[int] = None
    cruds: Optional[int] = None
    ctag: Optional[int] = None
    enabled: Optional[bool] = None
    order: Optional[int] = None
    last_modified: Optional[datetime] = None

    def __str__(self) -> str:
        return f"{self.user_id}/{self.public_uri} on {self.backend}"

    def contains_unset_fields(self) -> bool:
        return any(getattr(self, name) is None for name in type(self).model_fields)

    def overwrite_with(self, other: "Calendar") -> "Calendar":
        """Return a copy of this calendar with every field set on ``other`` applied."""
        return self.model_copy(update=other.model_dump(exclude_none=True))

    def touch(self) -> None:
        """Mark the calendar as modified so sync clients pick up the change."""
        self.ctag = (self.ctag or 0) + 1
        self.last_modified = datetime.now(timezone.utc)

    def is_valid(self) -> bool:
        for value in (self.user_id, self.owner_id, self.backend, self.public_uri, self.private_uri):
            if not value:
                return False
        if not _URI.match(self.public_uri) or not _URI.match(self.private_uri):
            return False
        if self.cruds is None or not 0 <= self.cruds <= Permissions.ALL:
            return False
        if self.components is None or not 0 < self.components <= ObjectType.ALL:
            return False
        if self.ctag is None or self.ctag < 0:
            return False
        if self.order is None or self.order < 0:
            return False
        if self.enabled is None:
            return False
        if self.color is not None and not _COLOR.match(self.color):
            return False
        return True


class CalendarCreate(BaseModel):
    user_id: Optional[str] = None
    owner_id: Optional[str] = None
    backend: Optional[str] = None
    public_uri: Optional[str] = None
    display_name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None  # '#RRGGBB' or '#RRGGBBAA'
    components: Optional[int] = None  # ObjectType bitmask
    cruds: Optional[int] = None  # Permissions bitmask
    ctag: Optional[int] = None
    enabled: Optional[bool] = None
    order: Optional[int] = None

    def to_calendar(self) -> Calendar:
        return Calendar(**self.model_dump(exclude_unset=True))


class CalendarUpdate(CalendarCreate):
    """Full (PUT) or partial (PATCH) replacement of a calendar's fields."""
    pass


class CalendarResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    owner_id: str
    backend: str
    public_uri: str
    private_uri: str
    display_name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    components: int
    cruds: int
    ctag: int
    enabled: bool
    order: int
    last_modified: Optional[datetime] = None


class CalendarCount(BaseModel):
    count: int
