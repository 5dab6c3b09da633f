"""
Pytest configuration and shared fixtures for testing.

Provides reusable test fixtures:
- settings: Default payroll settings (8h ordinary, 06:00-21:00 day window)
- holiday_calendar: Fresh Colombian holiday cache
- test_db: In-memory SQLite database for isolated testing
- test_client: FastAPI TestClient for API integration tests
"""

import os
import sys
import tempfile
from pathlib import Path

# Keep the app from touching ./nomina.db and ./logs during tests
os.environ.setdefault("NOMINA_DATABASE_URL", "sqlite://")
os.environ.setdefault("NOMINA_LOG_DIR", tempfile.mkdtemp(prefix="nomina-logs-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from nomina.core.holiday_calendar import HolidayCalendar
from nomina.core.models import PayrollSettings
from nomina.database.database import Base, get_db
from nomina.main import app
from nomina.routes.shared import get_holiday_calendar, get_settings


@pytest.fixture
def settings():
    """Default payroll settings, independent of the data file."""
    return PayrollSettings()


@pytest.fixture
def holiday_calendar(settings):
    return HolidayCalendar.from_settings(settings)


@pytest.fixture(scope="function")
def test_db():
    """
    Create an in-memory SQLite database for testing.

    StaticPool keeps a single connection so the TestClient worker thread
    sees the same database as the fixture.

    Yields:
        SQLAlchemy Session: Database session for test use
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def test_client(test_db, settings, holiday_calendar):
    """
    Create FastAPI TestClient with test database and settings overrides.

    Yields:
        TestClient: FastAPI test client for API testing
    """

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_holiday_calendar] = lambda: holiday_calendar

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def period(test_client):
    """A first-quincena period of March 2025 for employee E1, with transport."""
    response = test_client.post(
        "/api/periods",
        json={"employee_id": "E1", "start_date": "2025-03-01", "transport_enabled": True},
    )
    assert response.status_code == 201
    return response.json()
