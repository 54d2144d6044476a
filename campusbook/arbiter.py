"""Booking creation with at most one live booking per slot.

The existence query gives callers a fast, readable refusal. Two requests
that pass it concurrently still cannot both commit: the partial unique
index ``uq_bookings_live_slot`` rejects the second insert, which is reported
as the same :class:`ConflictError`.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .exceptions import ConflictError, ValidationError
from .models import Booking, User
from .notifier import ChangeNotifier
from .schemas import BookingCreate
from .slots import FIRST_PERIOD, LAST_PERIOD, LIVE_STATUSES, BookingStatus, Slot, is_live, is_valid_period

logger = logging.getLogger(__name__)


def parse_booking_date(value: str) -> str:
    try:
        parsed = date.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError("bookingDate must be a calendar date in YYYY-MM-DD format") from exc
    if parsed.isoformat() != value:
        raise ValidationError("bookingDate must be a calendar date in YYYY-MM-DD format")
    return value


def validate_request(booking_in: BookingCreate) -> tuple[Slot, str]:
    """Return the requested slot and the stripped reason, or raise ValidationError."""
    hall_id = (booking_in.hall_id or "").strip()
    reason = (booking_in.booking_reason or "").strip()
    booking_date = (booking_in.booking_date or "").strip()
    if not hall_id or not reason or not booking_date or booking_in.period is None:
        raise ValidationError("hallId, bookingReason, bookingDate, period required")
    if not is_valid_period(booking_in.period):
        raise ValidationError(f"period must be between {FIRST_PERIOD} and {LAST_PERIOD}")
    return Slot(hall_id, parse_booking_date(booking_date), booking_in.period), reason


def find_live_booking(db: Session, slot: Slot) -> Optional[Booking]:
    return (
        db.query(Booking)
        .filter(
            Booking.hall_id == slot.hall_id,
            Booking.booking_date == slot.booking_date,
            Booking.period == slot.period,
            Booking.status.in_([status.value for status in LIVE_STATUSES]),
        )
        .first()
    )


def ensure_slot_free(db: Session, slot: Slot) -> None:
    if find_live_booking(db, slot) is not None:
        logger.info("Refused booking for occupied slot %s", slot)
        raise ConflictError()


def insert_booking(db: Session, slot: Slot, reason: str, requester: User) -> Booking:
    booking = Booking(
        hall_id=slot.hall_id,
        user_id=requester.id,
        faculty_name=requester.display_name,
        booking_reason=reason,
        booking_date=slot.booking_date,
        period=slot.period,
        status=BookingStatus.PENDING.value,
    )
    db.add(booking)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Slot %s taken by a concurrent request", slot)
        raise ConflictError() from exc
    db.refresh(booking)
    return booking


def create_booking(db: Session, booking_in: BookingCreate, requester: User, notifier: ChangeNotifier) -> Booking:
    slot, reason = validate_request(booking_in)
    ensure_slot_free(db, slot)
    booking = insert_booking(db, slot, reason, requester)
    logger.info("Booking %s created by %s for %s", booking.id, requester.username, slot)
    notifier.booking_created(booking)
    return booking


def live_bookings_for_day(db: Session, hall_id: str, booking_date: str) -> dict[int, Booking]:
    """Map each occupied period of a hall on one date to the booking holding it."""
    bookings = db.query(Booking).filter(Booking.hall_id == hall_id, Booking.booking_date == booking_date).all()
    return {booking.period: booking for booking in bookings if is_live(booking.status)}
