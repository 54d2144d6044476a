"""Reusable FastAPI dependencies for auth and database access."""
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from .auth import decode_token
from .database import get_db
from .exceptions import AuthenticationError, AuthorizationError
from .models import RoleEnum, User

oauth_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_current_user(token: Optional[str] = Depends(oauth_scheme), db: Session = Depends(get_db)) -> User:
    if not token:
        raise AuthenticationError()
    payload = decode_token(token)
    user_id: str | None = payload.get("sub")
    if user_id is None:
        raise AuthenticationError()
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        # account deleted after the token was issued
        raise AuthenticationError()
    return user


def allow_roles(*roles: RoleEnum) -> Callable[[User], User]:
    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise AuthorizationError()
        return current_user

    return dependency


require_admin = allow_roles(RoleEnum.ADMIN)
