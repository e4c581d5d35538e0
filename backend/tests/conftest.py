"""
NeuroNotes Backend: Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── user_id / make_note: Owner id and ORM note factory
    ├── note_payload: JSON body of one note, as the notes API returns it
    └── test_client: HTTPX AsyncClient for API endpoint testing
"""

import os

# Override settings BEFORE any neuronotes import; `settings` is read once
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["AI_GATEWAY_API_KEY"] = "test-key-not-real"
os.environ["AUTH_URL"] = "http://auth.test"
os.environ["AUTH_ANON_KEY"] = "test-anon-key"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RETRY_MIN_WAIT"] = "0"
os.environ["RETRY_MAX_WAIT"] = "0"

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_note(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
            result = await note_service.get_note(mock_db_session, user_id, note_id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def user_id():
    return uuid4()


@pytest.fixture
def make_note(user_id):
    """Builds unsaved ORM notes; later calls get older created_at values."""
    from neuronotes.models.note import Note

    base = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        created = base - timedelta(minutes=counter["n"])
        fields = {
            "id": uuid4(),
            "user_id": user_id,
            "title": "Untitled Note",
            "content": "",
            "tags": [],
            "favorite": False,
            "created_at": created,
            "updated_at": created,
        }
        fields.update(overrides)
        return Note(**fields)

    return _make


@pytest.fixture
def note_payload(user_id):
    """Factory for note JSON as returned by the notes API."""

    def _payload(**overrides):
        body = {
            "id": str(uuid4()),
            "user_id": str(user_id),
            "title": "Untitled Note",
            "content": "",
            "tags": [],
            "favorite": False,
            "created_at": "2025-01-15T12:00:00Z",
            "updated_at": "2025-01-15T12:00:00Z",
        }
        body.update(overrides)
        return body

    return _payload


@pytest_asyncio.fixture
async def test_client():
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from neuronotes.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
