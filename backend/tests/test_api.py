"""
Tests for the HTTP surface: status codes and error mapping.
"""

import pytest
from bson import ObjectId
from httpx import AsyncClient

from devevents.core.errors import DatabaseConnectionError
from devevents.db.connection import get_database
from devevents.main import app

from conftest import make_event_payload


@pytest.mark.asyncio
async def test_create_event_then_book(client: AsyncClient):
    """End to end: 'My Talk!!' gets slug 'my-talk'; booking email is lowercased."""
    response = await client.post(
        "/api/v1/events/",
        json=make_event_payload(title="My Talk!!", date="2026-05-01", time="10:00"),
    )
    assert response.status_code == 201
    event = response.json()
    assert event["slug"] == "my-talk"
    assert "createdAt" in event

    response = await client.post(
        "/api/v1/bookings/",
        json={"eventId": event["_id"], "email": "A@B.com"},
    )
    assert response.status_code == 201
    booking = response.json()
    assert booking["email"] == "a@b.com"
    assert booking["eventId"] == event["_id"]

    response = await client.get(f"/api/v1/bookings/{booking['_id']}")
    assert response.status_code == 200

    response = await client.get(f"/api/v1/bookings/events/{event['_id']}")
    assert [b["_id"] for b in response.json()] == [booking["_id"]]


@pytest.mark.asyncio
async def test_get_event_by_slug(client: AsyncClient, test_event):
    response = await client.get(f"/api/v1/events/{test_event.slug}")
    assert response.status_code == 200
    assert response.json()["_id"] == test_event.id


@pytest.mark.asyncio
async def test_get_event_not_found(client: AsyncClient):
    response = await client.get("/api/v1/events/does-not-exist")
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_invalid_date_returns_422(client: AsyncClient):
    response = await client.post("/api/v1/events/", json=make_event_payload(date="2024-02-30"))
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "date"


@pytest.mark.asyncio
async def test_booking_missing_event_returns_422(client: AsyncClient):
    response = await client.post(
        "/api/v1/bookings/",
        json={"eventId": str(ObjectId()), "email": "a@b.com"},
    )
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "EVENT_REFERENCE_NOT_FOUND"


@pytest.mark.asyncio
async def test_patch_event(client: AsyncClient, test_event):
    response = await client.patch(
        f"/api/v1/events/{test_event.id}",
        json={"title": "Next.js Conf Europe"},
    )
    assert response.status_code == 200
    assert response.json()["slug"] == "next-js-conf-europe"


@pytest.mark.asyncio
async def test_delete_event(client: AsyncClient, test_event):
    response = await client.delete(f"/api/v1/events/{test_event.id}")
    assert response.status_code == 204

    response = await client.delete(f"/api/v1/events/{test_event.id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_database_unavailable_returns_503(client: AsyncClient):
    async def unavailable():
        raise DatabaseConnectionError("Database connection error: no servers")

    app.dependency_overrides[get_database] = unavailable

    response = await client.get("/api/v1/events/")
    assert response.status_code == 503
    assert response.json()["detail"]["code"] == "DATABASE_UNAVAILABLE"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_request_id_echoed(client: AsyncClient):
    response = await client.get("/", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


@pytest.mark.asyncio
async def test_bad_email_returns_domain_error_shape(client: AsyncClient, test_event):
    response = await client.post(
        "/api/v1/bookings/",
        json={"eventId": test_event.id, "email": "not-an-email"},
    )
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["code"] == "VALIDATION_ERROR"
    assert detail["field"] == "email"


@pytest.mark.asyncio
async def test_missing_body_field_returns_domain_error_shape(client: AsyncClient):
    payload = make_event_payload()
    del payload["venue"]

    response = await client.post("/api/v1/events/", json=payload)
    assert response.status_code == 422
    assert response.json()["detail"] == {
        "code": "VALIDATION_ERROR",
        "message": "Field required",
        "field": "venue",
    }


@pytest.mark.asyncio
async def test_patch_blank_audience_returns_422(client: AsyncClient, test_event):
    response = await client.patch(
        f"/api/v1/events/{test_event.id}",
        json={"audience": "   "},
    )
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "audience"
