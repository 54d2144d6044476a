import os
import tempfile
from typing import Callable, Generator, Optional

import pytest
from fastapi.testclient import TestClient

_TEST_DIR = tempfile.mkdtemp(prefix="campusbook-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TEST_DIR}/test.db")
os.environ.setdefault("RATE_LIMITING_ENABLED", "false")
os.environ.setdefault("LOG_DIR", os.path.join(_TEST_DIR, "logs"))

from campusbook.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from campusbook.auth import create_user_token, get_password_hash  # noqa: E402
from campusbook.database import Base, SessionLocal, engine  # noqa: E402
from campusbook.main import app  # noqa: E402
from campusbook.models import RoleEnum, User  # noqa: E402
from campusbook.notifier import ChangeNotifier  # noqa: E402
from campusbook.schemas import ChangeEvent  # noqa: E402

TEST_PASSWORD = "Passw0rd!"


@pytest.fixture(autouse=True, scope="function")
def _create_test_database() -> Generator[None, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session) -> Callable[..., User]:
    def _make(username: str, role: RoleEnum = RoleEnum.FACULTY, name: Optional[str] = None) -> User:
        user = User(
            username=username,
            hashed_password=get_password_hash(TEST_PASSWORD),
            role=role,
            name=name,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture()
def admin(make_user) -> User:
    return make_user("registrar", role=RoleEnum.ADMIN, name="Registrar")


@pytest.fixture()
def faculty(make_user) -> User:
    return make_user("asharma", name="Dr. A. Sharma")


@pytest.fixture()
def other_faculty(make_user) -> User:
    return make_user("bkumar")


@pytest.fixture()
def admin_headers(admin) -> dict[str, str]:
    return bearer(admin)


@pytest.fixture()
def faculty_headers(faculty) -> dict[str, str]:
    return bearer(faculty)


@pytest.fixture()
def other_headers(other_faculty) -> dict[str, str]:
    return bearer(other_faculty)


@pytest.fixture()
def hall(client, admin_headers) -> dict:
    response = client.post(
        "/api/halls",
        json={"name": "Auditorium", "capacity": "200", "location": "Main Block", "amenities": "projector,mic"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture()
def recorded_events() -> list[ChangeEvent]:
    return []


@pytest.fixture()
def recording_notifier(recorded_events) -> ChangeNotifier:
    recorder = ChangeNotifier()
    recorder.subscribe(recorded_events.append)
    return recorder


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    return bearer
