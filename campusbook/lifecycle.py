"""Booking status transitions.

``rejected`` and ``cancelled`` are terminal. Admins may re-decide a booking
that is still live (approve an accepted booking, reject an accepted one),
but nothing leaves a terminal state and nothing returns to ``pending``.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from .exceptions import AuthorizationError, NotFoundError, ValidationError
from .models import Booking, User
from .notifier import ChangeNotifier
from .schemas import BookingStatusUpdate
from .slots import BookingStatus

logger = logging.getLogger(__name__)

_ADMIN_DECISIONS = {BookingStatus.ACCEPTED, BookingStatus.REJECTED, BookingStatus.CANCELLED}

BOOKING_TRANSITIONS = {
    BookingStatus.PENDING: _ADMIN_DECISIONS,
    BookingStatus.ACCEPTED: _ADMIN_DECISIONS,
    BookingStatus.BOOKED: _ADMIN_DECISIONS,
    BookingStatus.REJECTED: set(),
    BookingStatus.CANCELLED: set(),
}


def assert_booking_transition(current: str, target: BookingStatus) -> None:
    try:
        allowed = BOOKING_TRANSITIONS[BookingStatus(current)]
    except ValueError:
        allowed = set()
    if target not in allowed:
        raise ValidationError(f"Invalid booking transition: {current} → {target.value}")


def parse_target_status(value: Optional[str]) -> BookingStatus:
    if not value:
        raise ValidationError("status is required")
    try:
        target = BookingStatus(value)
    except ValueError as exc:
        allowed = ", ".join(status.value for status in BookingStatus)
        raise ValidationError(f"status must be one of: {allowed}") from exc
    if target is BookingStatus.BOOKED:
        return BookingStatus.ACCEPTED
    return target


def get_booking(db: Session, booking_id: str) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        raise NotFoundError("Booking")
    return booking


def update_status(
    db: Session,
    booking_id: str,
    update: BookingStatusUpdate,
    actor: User,
    notifier: ChangeNotifier,
) -> Booking:
    """Approve, reject or cancel a booking on behalf of an administrator."""
    target = parse_target_status(update.status)
    if target is BookingStatus.CANCELLED:
        return cancel_booking(db, booking_id, actor, notifier)

    booking = get_booking(db, booking_id)
    reason = (update.rejection_reason or "").strip()
    if target is BookingStatus.REJECTED and not reason:
        raise ValidationError("rejectionReason is required when rejecting a booking")
    assert_booking_transition(booking.status, target)

    previous = booking.status
    booking.status = target.value
    booking.rejection_reason = reason if target is BookingStatus.REJECTED else None
    booking.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(booking)

    logger.info("Booking %s moved %s → %s by %s", booking.id, previous, booking.status, actor.username)
    notifier.booking_updated(booking)
    return booking


def cancel_booking(db: Session, booking_id: str, actor: User, notifier: ChangeNotifier) -> Booking:
    """Cancel a live booking. Repeating the cancel is a no-op."""
    booking = get_booking(db, booking_id)
    if not actor.is_admin and booking.user_id != actor.id:
        raise AuthorizationError()
    if booking.status == BookingStatus.CANCELLED:
        return booking
    assert_booking_transition(booking.status, BookingStatus.CANCELLED)

    booking.status = BookingStatus.CANCELLED.value
    booking.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(booking)

    logger.info("Booking %s cancelled by %s", booking.id, actor.username)
    notifier.booking_cancelled(booking.id)
    return booking
