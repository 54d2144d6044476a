from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from .. import arbiter, lifecycle
from ..database import get_db
from ..dependencies import get_current_user, require_admin
from ..exceptions import AuthorizationError
from ..models import Booking, User
from ..notifier import ChangeNotifier, get_notifier
from ..rate_limit import ADMIN_WRITE_LIMIT, BOOKING_WRITE_LIMIT, limiter
from ..reporting import export_bookings_csv
from ..schemas import BookingCreate, BookingRead, BookingStatusUpdate

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.get("/export/csv")
def export_bookings(db: Session = Depends(get_db), _: User = Depends(require_admin)) -> PlainTextResponse:
    return PlainTextResponse(
        content=export_bookings_csv(db),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=bookings.csv"},
    )


@router.get("", response_model=List[BookingRead])
def list_bookings(
    hall_id: Optional[str] = Query(None, alias="hallId"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> List[Booking]:
    query = db.query(Booking)
    if hall_id:
        query = query.filter(Booking.hall_id == hall_id)
    if not current_user.is_admin:
        query = query.filter(Booking.user_id == current_user.id)
    return query.order_by(Booking.created_at.desc()).all()


@router.post("", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
@limiter.limit(BOOKING_WRITE_LIMIT)
def create_booking(
    request: Request,
    booking_in: BookingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: ChangeNotifier = Depends(get_notifier),
) -> Booking:
    return arbiter.create_booking(db, booking_in, current_user, notifier)


@router.get("/{booking_id}", response_model=BookingRead)
def get_booking(
    booking_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Booking:
    booking = lifecycle.get_booking(db, booking_id)
    if not current_user.is_admin and booking.user_id != current_user.id:
        raise AuthorizationError()
    return booking


@router.patch("/{booking_id}", response_model=BookingRead)
@limiter.limit(ADMIN_WRITE_LIMIT)
def update_booking_status(
    request: Request,
    booking_id: str,
    update: BookingStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
    notifier: ChangeNotifier = Depends(get_notifier),
) -> Booking:
    return lifecycle.update_status(db, booking_id, update, admin, notifier)


@router.delete("/{booking_id}", response_model=BookingRead)
@limiter.limit(BOOKING_WRITE_LIMIT)
def cancel_booking(
    request: Request,
    booking_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: ChangeNotifier = Depends(get_notifier),
) -> Booking:
    return lifecycle.cancel_booking(db, booking_id, current_user, notifier)
