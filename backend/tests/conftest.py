# backend/tests/conftest.py
"""
Shared fixtures.

- In-memory SQLite (StaticPool) with the real schema, partial unique indexes included
- FixedClock pinned to Wednesday 2025-05-28 09:30 Asia/Karachi
  (ISO week: Monday 2025-05-26 .. Sunday 2025-06-01)
- TestClient with get_db / get_clock overridden; Redis disabled
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("REDIS_URL", None)

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import get_db
from app.main import app
from app.models.generated import Base, Bookings, Resources
from app.services.slots import LocalClock, SettingsRepository, get_clock

TZ = "Asia/Karachi"
NOW = datetime(2025, 5, 28, 9, 30)
TODAY = "2025-05-28"
YESTERDAY = "2025-05-27"
TOMORROW = "2025-05-29"


class FixedClock(LocalClock):
    """LocalClock whose "now" is set by the test."""

    def __init__(self, now: datetime = NOW):
        super().__init__(TZ)
        self.set(now)

    def set(self, now: datetime) -> None:
        self.current = now.replace(tzinfo=self.tz)

    def now(self) -> datetime:
        return self.current


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _fk_on(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def repo(db):
    return SettingsRepository(db)


@pytest.fixture
def make_resource(db):
    def _make(name="Study Room 1", type="study_room", location="Library", status="available"):
        obj = Resources(name=name, type=type, location=location, status=status)
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj
    return _make


@pytest.fixture
def add_booking(db):
    """Insert a booking row directly, bypassing admission control."""
    def _add(user_id, resource, date, slot, status="active"):
        obj = Bookings(
            user_id=user_id,
            resource_id=resource.id,
            date=date,
            slot=slot,
            status=status,
        )
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj
    return _add


@pytest.fixture
def client(session_factory, clock):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()


def resident(user_id="u1"):
    return {"X-User-Id": user_id}


def admin(user_id="admin"):
    return {"X-User-Id": user_id, "X-User-Role": "admin"}
