"""Password hashing, JWT handling, and helper utilities."""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from .config import get_settings
from .exceptions import AuthenticationError
from .models import RoleEnum, User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
settings = get_settings()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_user_token(user: User) -> str:
    return create_access_token({"sub": user.id, "username": user.username, "role": user.role.value})


def decode_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise AuthenticationError() from exc


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    user: Optional[User] = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


def seed_admin(db: Session) -> Optional[User]:
    """Create the default administrator when no admin account exists."""
    if db.query(User).filter(User.role == RoleEnum.ADMIN).first() is not None:
        return None
    admin = User(
        username=settings.seed_admin_username,
        hashed_password=get_password_hash(settings.seed_admin_password),
        role=RoleEnum.ADMIN,
        name="Administrator",
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Default admin created: %s", admin.username)
    return admin
