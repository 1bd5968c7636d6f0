"""Pytest fixtures and configuration for tasktrack tests."""

import os

# Keep the app's module-level engine off the working directory.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import datetime, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from tasktrack.database.database import Base
from tasktrack.database.repository import TaskRepository
from tasktrack.models.task import Task, TaskPriority, RecurrenceType
from tasktrack.models.task_factory import IdAllocator


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    from tasktrack.database import models  # noqa: F401

    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def task_repository(db_session: Session):
    """Create a TaskRepository instance for testing."""
    return TaskRepository(db_session)


@pytest.fixture
def fixed_now():
    """A fixed 'now' for time-dependent tests (Friday 2024-03-15 12:00 UTC)."""
    return datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def id_allocator():
    """Deterministic id source starting at 1_000_000."""
    return IdAllocator(clock=lambda: 1000.0)


@pytest.fixture
def sample_task_base():
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    return {
        "id": 1,
        "title": "Test Task",
        "completed": False,
        "category": None,
        "priority": TaskPriority.LOW,
        "due_date": None,
        "recurrence": RecurrenceType.NONE,
        "last_completed": None,
        "next_due_date": None,
        "subtasks": [],
    }


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def make_task(sample_task_base):
    """Factory for tasks with unique ids and overridden fields."""
    counter = {"next": 100}

    def _make(**overrides) -> Task:
        counter["next"] += 1
        return Task(**{**sample_task_base, "id": counter["next"], **overrides})

    return _make


@pytest.fixture
def test_client(db_session: Session):
    """Create a FastAPI test client with overridden database dependency."""
    from tasktrack.api.app import app
    from tasktrack.database.database import get_db

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
