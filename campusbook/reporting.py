"""Read-only booking enumeration for tabular export."""
from __future__ import annotations

import csv
import io
from typing import Any, Iterator

from sqlalchemy.orm import Session

from .models import Booking, Hall
from .slots import format_period

EXPORT_COLUMNS = [
    "Hall Name",
    "Faculty Name",
    "Booking Reason",
    "Date",
    "Period",
    "Status",
    "Rejection Reason",
    "Created At",
]


def iter_bookings_with_hall(db: Session) -> Iterator[tuple[Booking, str]]:
    """Yield every booking, newest first, with its hall name.

    Bookings whose hall was deleted fall back to the raw hall id.
    """
    hall_names = dict(db.query(Hall.id, Hall.name).all())
    for booking in db.query(Booking).order_by(Booking.created_at.desc()).all():
        yield booking, hall_names.get(booking.hall_id, booking.hall_id)


def export_rows(db: Session) -> list[dict[str, Any]]:
    return [
        {
            "Hall Name": hall_name,
            "Faculty Name": booking.faculty_name or "—",
            "Booking Reason": booking.booking_reason,
            "Date": booking.booking_date,
            "Period": format_period(booking.period),
            "Status": booking.status,
            "Rejection Reason": booking.rejection_reason or "—",
            "Created At": booking.created_at.isoformat() if booking.created_at else "",
        }
        for booking, hall_name in iter_bookings_with_hall(db)
    ]


def export_bookings_csv(db: Session) -> str:
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=EXPORT_COLUMNS)
    writer.writeheader()
    writer.writerows(export_rows(db))
    return output.getvalue()
