"""
Pytest fixtures for an in-memory MongoDB, the HTTP client and sample events.

mongomock-motor stands in for a real server; every test gets a fresh
database with the production indexes applied.
"""

import os
from typing import AsyncGenerator

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/devevents_test")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from devevents.main import app
from devevents.db.connection import ensure_indexes, get_database
from devevents.models.event import Event
from devevents.services import event_service


def make_event_payload(**overrides) -> dict:
    payload = {
        "title": "Next.js Conf 2026",
        "description": "The annual conference for the Next.js community.",
        "overview": "Two days of talks on rendering, routing and data fetching.",
        "image": "/images/event1.png",
        "venue": "Moscone Center",
        "location": "San Francisco, CA",
        "date": "2026-10-25",
        "time": "09:00 AM",
        "mode": "hybrid",
        "audience": "Frontend developers",
        "agenda": ["Keynote", "Workshops"],
        "organizer": "Vercel",
        "tags": ["nextjs", "react"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def event_payload() -> dict:
    return make_event_payload()


@pytest_asyncio.fixture(scope="function")
async def db():
    """Fresh in-memory database per test, with indexes."""
    database = AsyncMongoMockClient()["devevents_test"]
    await ensure_indexes(database)
    return database


@pytest_asyncio.fixture(scope="function")
async def client(db) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the database dependency with the mock database."""

    async def override_get_database():
        return db

    app.dependency_overrides[get_database] = override_get_database

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_event(db, event_payload) -> Event:
    """A persisted event."""
    return await event_service.create_event(db, event_payload)
