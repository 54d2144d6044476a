"""Faculty account management, restricted to administrators."""
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from .. import auth
from ..database import get_db
from ..dependencies import require_admin
from ..exceptions import ConflictError, NotFoundError
from ..models import User
from ..rate_limit import ADMIN_WRITE_LIMIT, limiter
from ..schemas import UserCreate, UserRead

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=List[UserRead])
def list_users(db: Session = Depends(get_db), _: User = Depends(require_admin)) -> List[User]:
    return db.query(User).order_by(User.created_at.desc()).all()


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
@limiter.limit(ADMIN_WRITE_LIMIT)
def create_user(
    request: Request,
    user_in: UserCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> User:
    if db.query(User).filter(User.username == user_in.username).first():
        raise ConflictError("Username already taken")
    user = User(
        username=user_in.username,
        hashed_password=auth.get_password_hash(user_in.password),
        role=user_in.role,
        name=user_in.name,
        email=user_in.email,
        department=user_in.department,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@router.delete("/{user_id}")
@limiter.limit(ADMIN_WRITE_LIMIT)
def delete_user(
    request: Request,
    user_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> dict[str, str]:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User")
    # bookings keep their user id and name snapshot
    db.delete(user)
    db.commit()
    return {"message": "User deleted"}
