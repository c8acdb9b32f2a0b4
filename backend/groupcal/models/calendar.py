"""
Calendar model for storing calendar metadata rows.
The calendar data itself lives on the backend named in ``backend``.
"""
from datetime import datetime
from typing import Optional
from sqlalchemy import Boolean, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from groupcal.database import Base


class CalendarRecord(Base):
    __tablename__ = "calendars"
    __table_args__ = (
        UniqueConstraint("public_uri", "user_id", name="uq_calendars_public_uri_user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False)

    # Backend owning the calendar data, and the URIs on either side of it
    backend: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    public_uri: Mapped[str] = mapped_column(String(255), nullable=False)
    private_uri: Mapped[str] = mapped_column(String(255), nullable=False)

    display_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    color: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    # Bitmasks, see groupcal.constants
    components: Mapped[int] = mapped_column(Integer, nullable=False, default=7)
    cruds: Mapped[int] = mapped_column(Integer, nullable=False, default=31)

    ctag: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_modified: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
