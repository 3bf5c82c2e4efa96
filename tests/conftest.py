"""
Shared fixtures: in-memory SQLite, a frozen clock, service factories and
an API client authenticated with tokens signed by the test secret.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from uuid import uuid4

import jwt
import pytest
import pytz
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from guesthouse.api import deps
from guesthouse.config.settings import Settings
from guesthouse.db.base import Base
from guesthouse.db.init_db import import_models
from guesthouse.db.session import get_db
from guesthouse.main import create_app
from guesthouse.models.base.enums import BedType, RoomType, UserRole
from guesthouse.schemas.room import Bed, RoomCreate
from guesthouse.services.booking import RoomAssignmentService, RoomRequestService
from guesthouse.services.mess import FoodPassCategoryService, FoodPassService
from guesthouse.services.room import RoomCategoryService, RoomService
from guesthouse.utils.datetime_utils import Clock

TEST_SECRET = "test-secret-key"
TIMEZONE = "Asia/Kolkata"
IST = pytz.timezone(TIMEZONE)

# 2024-06-01 09:00 in the facility's timezone
START = IST.localize(datetime(2024, 6, 1, 9, 0))


class FrozenClock(Clock):
    """Clock whose "now" only moves when a test moves it."""

    def __init__(self, timezone: str, current: datetime):
        super().__init__(timezone, now_func=lambda: self.current)
        self.current = current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


class FakeGuestDirectory:
    def __init__(self):
        self.profiles: Dict[str, Dict[str, Any]] = {}
        self.fail = False

    def add(self, user_id: str, name: str) -> None:
        self.profiles[user_id] = {"id": user_id, "name": name, "phone_number": None, "role": "USER"}

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        if self.fail:
            raise ConnectionError("directory unavailable")
        return self.profiles.get(user_id)


def new_uuid() -> str:
    return str(uuid4())


def local(year: int, month: int, day: int, hour: int = 12) -> datetime:
    return IST.localize(datetime(year, month, day, hour, 0))


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        JWT_SECRET_KEY=TEST_SECRET,
        TIMEZONE=TIMEZONE,
        ENVIRONMENT="test",
        LOG_FORMAT="console",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    import_models()
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(TIMEZONE, START)


@pytest.fixture
def directory() -> FakeGuestDirectory:
    return FakeGuestDirectory()


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------

@pytest.fixture
def room_service(db, settings, clock) -> RoomService:
    return RoomService(db, settings, clock)


@pytest.fixture
def room_category_service(db, settings, clock) -> RoomCategoryService:
    return RoomCategoryService(db, settings, clock)


@pytest.fixture
def food_pass_service(db, settings, clock) -> FoodPassService:
    return FoodPassService(db, settings, clock)


@pytest.fixture
def food_pass_category_service(db, settings, clock) -> FoodPassCategoryService:
    return FoodPassCategoryService(db, settings, clock)


@pytest.fixture
def assignment_service(db, settings, clock) -> RoomAssignmentService:
    return RoomAssignmentService(db, settings, clock)


@pytest.fixture
def request_service(db, settings, clock, directory) -> RoomRequestService:
    return RoomRequestService(db, settings, clock, guest_directory=directory)


@pytest.fixture
def make_room(room_service):
    """Create a room and return it; fails the test if creation fails."""

    def _make(room_number: str = "101", building: str = "A", **overrides):
        data = {
            "room_number": room_number,
            "building": building,
            "floor": 1,
            "room_type": RoomType.SARJU,
            "beds": [Bed(type=BedType.DOUBLE, quantity=1)],
        }
        data.update(overrides)
        result = room_service.create(RoomCreate(**data))
        assert result.is_success, result.error
        return result.data

    return _make


@pytest.fixture
def staff_id() -> str:
    return new_uuid()


@pytest.fixture
def guest_id() -> str:
    return new_uuid()


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------

def make_token(user_id: str, role: UserRole, secret: str = TEST_SECRET, **claims) -> str:
    payload = {"sub": user_id, "role": role.value}
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_header(user_id: str, role: UserRole) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, role)}"}


@pytest.fixture
def app(settings, session_factory, clock, directory):
    app = create_app(settings, create_tables=False)

    def override_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[deps.get_app_settings] = lambda: settings
    app.dependency_overrides[deps.get_clock] = lambda: clock
    app.dependency_overrides[deps.get_guest_directory] = lambda: directory
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def staff_headers(staff_id) -> Dict[str, str]:
    return auth_header(staff_id, UserRole.STAFF)


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return auth_header(new_uuid(), UserRole.SUPER_ADMIN)


@pytest.fixture
def guest_headers(guest_id) -> Dict[str, str]:
    return auth_header(guest_id, UserRole.USER)
