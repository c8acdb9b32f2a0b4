"""
Record store for calendar metadata rows.
"""
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from groupcal.exceptions import (
    DoesNotExistError,
    DuplicateRecordError,
    MultipleObjectsReturnedError,
)
from groupcal.models.calendar import CalendarRecord
from groupcal.schemas.calendar import Calendar

# Columns a caller may write; id and the timestamps are owned by the store
_WRITABLE = (
    "user_id",
    "owner_id",
    "backend",
    "public_uri",
    "private_uri",
    "display_name",
    "description",
    "color",
    "components",
    "cruds",
    "ctag",
    "enabled",
    "order",
    "last_modified",
)


class CalendarStore:
    """Persists calendar metadata independently of the backend holding the data."""

    def __init__(self, db: Session):
        self.db = db

    def find_all(
        self,
        user_id: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Calendar]:
        query = (
            select(CalendarRecord)
            .where(CalendarRecord.user_id == user_id)
            .order_by(CalendarRecord.order, CalendarRecord.id)
        )
        return self._page(query, limit, offset)

    def find_all_on_backend(
        self,
        backend: str,
        user_id: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Calendar]:
        query = (
            select(CalendarRecord)
            .where(
                CalendarRecord.backend == backend,
                CalendarRecord.user_id == user_id,
            )
            .order_by(CalendarRecord.order, CalendarRecord.id)
        )
        return self._page(query, limit, offset)

    def count(self, user_id: str) -> int:
        return self._count(CalendarRecord.user_id == user_id)

    def count_on_backend(self, backend: str, user_id: str) -> int:
        return self._count(
            CalendarRecord.backend == backend,
            CalendarRecord.user_id == user_id,
        )

    def find(self, public_uri: str, user_id: str) -> Calendar:
        return self._one(
            CalendarRecord.public_uri == public_uri,
            CalendarRecord.user_id == user_id,
        )

    def find_by_id(self, calendar_id: int, user_id: str) -> Calendar:
        return self._one(
            CalendarRecord.id == calendar_id,
            CalendarRecord.user_id == user_id,
        )

    def does_exist(self, public_uri: str, user_id: str) -> bool:
        return self._exists(
            CalendarRecord.public_uri == public_uri,
            CalendarRecord.user_id == user_id,
        )

    def does_private_uri_exist(self, private_uri: str, user_id: str, backend: str) -> bool:
        return self._exists(
            CalendarRecord.private_uri == private_uri,
            CalendarRecord.user_id == user_id,
            CalendarRecord.backend == backend,
        )

    def does_allow(self, cruds: int, public_uri: str, user_id: str) -> bool:
        """Whether the calendar grants every permission bit in ``cruds``."""
        granted = self._scalar(
            CalendarRecord.cruds,
            CalendarRecord.public_uri == public_uri,
            CalendarRecord.user_id == user_id,
        )
        return granted is not None and (granted & cruds) == cruds

    def does_support(self, component: int, public_uri: str, user_id: str) -> bool:
        """Whether the calendar can store every component kind in ``component``."""
        supported = self._scalar(
            CalendarRecord.components,
            CalendarRecord.public_uri == public_uri,
            CalendarRecord.user_id == user_id,
        )
        return supported is not None and (supported & component) == component

    def insert(self, calendar: Calendar) -> Calendar:
        record = CalendarRecord(**{name: getattr(calendar, name) for name in _WRITABLE})
        self.db.add(record)
        self._commit()
        self.db.refresh(record)

        calendar.id = record.id
        return calendar

    def update(self, calendar: Calendar) -> Calendar:
        record = self._record(calendar)
        for name in _WRITABLE:
            setattr(record, name, getattr(calendar, name))
        self._commit()
        return calendar

    def delete(self, calendar: Calendar) -> None:
        record = self._record(calendar)
        self.db.delete(record)
        self.db.commit()

    def _page(self, query, limit: Optional[int], offset: Optional[int]) -> List[Calendar]:
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        result = self.db.execute(query)
        return [Calendar.model_validate(record) for record in result.scalars().all()]

    def _count(self, *criteria) -> int:
        result = self.db.execute(
            select(func.count()).select_from(CalendarRecord).where(*criteria)
        )
        count = result.scalar_one_or_none()
        if count is None:
            raise DoesNotExistError("Could not count calendars")
        return count

    def _one(self, *criteria) -> Calendar:
        result = self.db.execute(select(CalendarRecord).where(*criteria))
        records = result.scalars().all()

        if not records:
            raise DoesNotExistError("No matching calendar found")
        if len(records) > 1:
            raise MultipleObjectsReturnedError("Multiple matching calendars found")

        return Calendar.model_validate(records[0])

    def _exists(self, *criteria) -> bool:
        result = self.db.execute(select(CalendarRecord.id).where(*criteria).limit(1))
        return result.first() is not None

    def _scalar(self, column, *criteria):
        result = self.db.execute(select(column).where(*criteria).limit(1))
        return result.scalar_one_or_none()

    def _record(self, calendar: Calendar) -> CalendarRecord:
        record = self.db.get(CalendarRecord, calendar.id) if calendar.id is not None else None
        if record is None or record.user_id != calendar.user_id:
            raise DoesNotExistError(f"Calendar {calendar} is not stored")
        return record

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as ex:
            self.db.rollback()
            raise DuplicateRecordError(str(ex.orig)) from ex
