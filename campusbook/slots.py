"""The period catalog and the slot-occupancy rule.

A slot is one (hall, date, period) triple. Whether a booking occupies its
slot is decided by :func:`is_live` and nothing else; the conflict check, the
availability view and the partial unique index on ``bookings`` all derive
from :data:`LIVE_STATUSES`.
"""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple


class BookingStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    BOOKED = "booked"  # legacy alias of ACCEPTED
    REJECTED = "rejected"
    CANCELLED = "cancelled"


LIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.ACCEPTED, BookingStatus.BOOKED})
TERMINAL_STATUSES = frozenset({BookingStatus.REJECTED, BookingStatus.CANCELLED})

FIRST_PERIOD = 1
LAST_PERIOD = 8

PERIODS: Mapping[int, str] = MappingProxyType(
    {
        1: "9:00 – 9:50",
        2: "9:50 – 10:40",
        3: "10:55 – 11:45",
        4: "11:45 – 12:35",
        5: "01:30 – 02:15",
        6: "02:15 – 03:00",
        7: "03:15 – 04:00",
        8: "04:00 – 04:45",
    }
)


class Slot(NamedTuple):
    hall_id: str
    booking_date: str
    period: int


def is_live(status: str | BookingStatus) -> bool:
    """Return True when a booking in ``status`` occupies its slot."""
    try:
        return BookingStatus(status) in LIVE_STATUSES
    except ValueError:
        return False


def is_valid_period(period: object) -> bool:
    # bool is an int subclass; True must not pass as period 1
    if isinstance(period, bool) or not isinstance(period, int):
        return False
    return FIRST_PERIOD <= period <= LAST_PERIOD


def format_period(period: int) -> str:
    return f"Period {period} ({PERIODS.get(period, '')})"
