"""SQLAlchemy models for halls, bookings and user accounts.

Cross-references between tables are plain string columns; there are no
foreign keys, so deleting a hall or a user leaves its bookings untouched.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime, Enum as SqlEnum, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base
from .slots import LIVE_STATUSES, BookingStatus, Slot

_LIVE_STATUS_CLAUSE = "status IN ({})".format(", ".join(f"'{s.value}'" for s in sorted(LIVE_STATUSES)))


def _new_id() -> str:
    return uuid4().hex


class RoleEnum(str, Enum):
    ADMIN = "admin"
    FACULTY = "faculty"


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
    role: Mapped[RoleEnum] = mapped_column(SqlEnum(RoleEnum), default=RoleEnum.FACULTY)
    name: Mapped[Optional[str]] = mapped_column(String(100), default=None)
    email: Mapped[Optional[str]] = mapped_column(String(255), default=None)
    department: Mapped[Optional[str]] = mapped_column(String(100), default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    @property
    def display_name(self) -> str:
        return self.name or self.username

    @property
    def is_admin(self) -> bool:
        return self.role == RoleEnum.ADMIN


class Hall(Base):
    __tablename__ = "halls"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(100))
    capacity: Mapped[str] = mapped_column(String(50))
    location: Mapped[Optional[str]] = mapped_column(String(255), default=None)
    amenities: Mapped[Optional[str]] = mapped_column(Text, default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_slot", "hall_id", "booking_date", "period"),
        # at most one live booking per slot, enforced by the store
        Index(
            "uq_bookings_live_slot",
            "hall_id",
            "booking_date",
            "period",
            unique=True,
            sqlite_where=text(_LIVE_STATUS_CLAUSE),
            postgresql_where=text(_LIVE_STATUS_CLAUSE),
        ),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    hall_id: Mapped[str] = mapped_column(String(32))
    user_id: Mapped[str] = mapped_column(String(32), index=True)
    faculty_name: Mapped[Optional[str]] = mapped_column(String(100), default=None)
    booking_reason: Mapped[str] = mapped_column(Text)
    booking_date: Mapped[str] = mapped_column(String(10))
    period: Mapped[int] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String(20), default=BookingStatus.PENDING.value)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, default=None)

    @property
    def slot(self) -> Slot:
        return Slot(self.hall_id, self.booking_date, self.period)
