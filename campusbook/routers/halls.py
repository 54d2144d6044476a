from typing import List

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from ..arbiter import live_bookings_for_day, parse_booking_date
from ..database import get_db
from ..dependencies import get_current_user, require_admin
from ..exceptions import NotFoundError
from ..models import Hall, User
from ..notifier import ChangeNotifier, get_notifier
from ..rate_limit import ADMIN_WRITE_LIMIT, READ_LIMIT, limiter
from ..schemas import HallAvailability, HallCreate, HallRead, SlotAvailability
from ..slots import PERIODS

router = APIRouter(prefix="/api/halls", tags=["halls"])


def _get_hall(db: Session, hall_id: str) -> Hall:
    hall = db.query(Hall).filter(Hall.id == hall_id).first()
    if not hall:
        raise NotFoundError("Hall")
    return hall


@router.get("", response_model=List[HallRead])
def list_halls(db: Session = Depends(get_db), _: User = Depends(get_current_user)) -> List[Hall]:
    return db.query(Hall).order_by(Hall.created_at.desc()).all()


@router.post("", response_model=HallRead, status_code=status.HTTP_201_CREATED)
@limiter.limit(ADMIN_WRITE_LIMIT)
def create_hall(
    request: Request,
    hall_in: HallCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
    notifier: ChangeNotifier = Depends(get_notifier),
) -> Hall:
    hall = Hall(**hall_in.model_dump())
    db.add(hall)
    db.commit()
    db.refresh(hall)
    notifier.hall_created(hall)
    return hall


@router.get("/{hall_id}", response_model=HallRead)
def get_hall(hall_id: str, db: Session = Depends(get_db), _: User = Depends(get_current_user)) -> Hall:
    return _get_hall(db, hall_id)


@router.delete("/{hall_id}")
@limiter.limit(ADMIN_WRITE_LIMIT)
def delete_hall(
    request: Request,
    hall_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
    notifier: ChangeNotifier = Depends(get_notifier),
) -> dict[str, str]:
    hall = _get_hall(db, hall_id)
    # hard delete; bookings referencing the hall are kept as history
    db.delete(hall)
    db.commit()
    notifier.hall_deleted(hall_id)
    return {"message": "Hall deleted"}


@router.get("/{hall_id}/availability", response_model=HallAvailability)
@limiter.limit(READ_LIMIT)
def hall_availability(
    request: Request,
    hall_id: str,
    booking_date: str = Query(..., alias="date"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> HallAvailability:
    _get_hall(db, hall_id)
    booking_date = parse_booking_date(booking_date)
    occupied = live_bookings_for_day(db, hall_id, booking_date)

    slots = []
    for period, time_range in PERIODS.items():
        booking = occupied.get(period)
        mine = booking is not None and booking.user_id == current_user.id
        slots.append(
            SlotAvailability(
                period=period,
                time_range=time_range,
                available=booking is None,
                status=booking.status if booking else None,
                mine=mine,
                # other people's bookings stay anonymous to faculty
                booking_id=booking.id if booking and (mine or current_user.is_admin) else None,
            )
        )
    return HallAvailability(hall_id=hall_id, booking_date=booking_date, slots=slots)
