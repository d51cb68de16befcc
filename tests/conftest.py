"""
Pytest configuration and fixtures.
"""

import os

# Set test environment before the application reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SOLVE_API_KEY"] = "test-key"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from datetime import datetime
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fixapp.core.ratelimit import limiter
from fixapp.db.base import Base
from fixapp.db.session import get_db, init_db, make_engine
from fixapp.models.issue import IssueCategory


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory database per test."""
    eng = make_engine("sqlite://", poolclass=StaticPool)
    init_db(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture(scope="function")
def db(engine):
    """Database session bound to the test engine."""
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def client(engine):
    """API client whose requests all hit the test database."""
    from fixapp.main import app

    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def _get_db():
        session = Session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture
def sample_issue_data():
    """Valid issue payload."""
    return {
        "category": IssueCategory.pothole,
        "description": "Deep pothole outside number 12",
        "latitude": -34.1833,
        "longitude": 22.1333,
    }


@pytest.fixture
def fixed_now():
    """A Wednesday in the middle of ISO week 29."""
    return datetime(2026, 7, 15, 12, 0, 0)
