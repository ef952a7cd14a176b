import os
import tempfile
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.api.deps import get_cache, get_db, get_leaderboard_service
from app.core.database import Base
from app.models.event import Event
from app.models.leaderboard_entry import LeaderboardEntry
from app.models.profile import Profile
from app.services.ephemeral_cache import EphemeralCache
from app.services.leaderboard_service import LeaderboardService
from main import app


class FakeClock:
    """Manually advanced time source for cache expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session")
def test_db():
    db_fd, db_path = tempfile.mkstemp(suffix=".db")
    engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    engine.dispose()
    os.close(db_fd)
    os.unlink(db_path)

@pytest.fixture
def db_session(test_db):
    session = test_db()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

@pytest.fixture
def db_cleanup(db_session):
    for model in [LeaderboardEntry, Event, Profile]:
        db_session.query(model).delete()
    db_session.commit()

@pytest.fixture
def fake_clock():
    return FakeClock()

@pytest.fixture
def cache():
    return EphemeralCache(default_ttl=60.0)

@pytest.fixture
def leaderboard_service(cache):
    return LeaderboardService(cache=cache)

@pytest.fixture
def make_event(db_session):
    def _make_event(title="Spring Hackathon", starts_in=timedelta(hours=-1), duration=timedelta(days=1)):
        start = datetime.now(timezone.utc) + starts_in
        event = Event(title=title, description="", start_date=start, end_date=start + duration)
        db_session.add(event)
        db_session.commit()
        return event.id
    return _make_event

@pytest.fixture
def make_profile(db_session):
    def _make_profile(username=None, full_name=None, avatar_url=None):
        profile = Profile(
            username=username or f"hacker_{uuid.uuid4().hex[:8]}",
            full_name=full_name,
            avatar_url=avatar_url
        )
        db_session.add(profile)
        db_session.commit()
        return profile.id
    return _make_profile

@pytest.fixture
def client(db_session, cache, leaderboard_service):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_leaderboard_service] = lambda: leaderboard_service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
