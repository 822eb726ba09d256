"""Pytest configuration and fixtures for sitegrades tests."""

import os

# keep the module-level engine off any real database
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("DB_CREATE_SCHEMA", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from sitegrades.main import app
from sitegrades.services.database import get_db, init_db
from sitegrades.services.notifier import Notifier, get_notifier
from sitegrades.services.site_store import SiteStore


@pytest.fixture
def engine():
    """In-memory SQLite database shared by every session of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return SiteStore(db)


@pytest.fixture
def fresh_store(session_factory):
    """Build stores on new sessions, so reads do not hit another session's identity map."""
    sessions = []

    def _make():
        session = session_factory()
        sessions.append(session)
        return SiteStore(session)

    yield _make
    for session in sessions:
        session.close()


class RecordingNotifier(Notifier):
    """Notifier that records the domains it was asked about instead of posting."""

    def __init__(self):
        super().__init__(slack_url="", discord_url="")
        self.notified = []

    def notify_unknown_domain(self, domain, requested_at=None):
        self.notified.append(domain)


@pytest.fixture
def recording_notifier():
    return RecordingNotifier()


@pytest.fixture
def client(session_factory, recording_notifier):
    """TestClient whose requests use the test database and a recording notifier."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: recording_notifier
    yield TestClient(app)
    app.dependency_overrides.clear()
