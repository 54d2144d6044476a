"""Engine, session factory and the request-scoped session dependency."""
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from .config import get_settings

# backends that honour the partial unique index guarding live slots
SUPPORTED_DIALECTS = frozenset({"sqlite", "postgresql"})

settings = get_settings()

connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
engine = create_engine(settings.database_url, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


def ensure_supported_backend(database_url: str) -> None:
    """Refuse databases that would turn the live-slot index into a full unique index."""
    dialect = make_url(database_url).get_backend_name()
    if dialect not in SUPPORTED_DIALECTS:
        supported = ", ".join(sorted(SUPPORTED_DIALECTS))
        raise RuntimeError(f"Unsupported database backend '{dialect}'; expected one of: {supported}")


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
