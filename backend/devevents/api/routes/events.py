"""
Event endpoints.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from devevents.db.connection import get_database
from devevents.models.event import Event
from devevents.schemas.event import EventCreate, EventUpdate
from devevents.services import event_service

router = APIRouter(prefix="/events", tags=["Events"])


@router.post("/", response_model=Event, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventCreate,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Create an event. The slug is derived from the title."""
    return await event_service.create_event(db, event_data)


@router.get("/", response_model=list[Event])
async def list_events_endpoint(
    limit: int = Query(50, ge=1, le=100),
    skip: int = Query(0, ge=0),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await event_service.list_events(db, limit=limit, skip=skip)


@router.get("/{id_or_slug}", response_model=Event)
async def get_event_endpoint(
    id_or_slug: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Get a single event by ObjectId or slug."""
    return await event_service.get_event(db, id_or_slug)


@router.patch("/{event_id}", response_model=Event)
async def update_event_endpoint(
    event_id: str,
    changes: EventUpdate,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await event_service.update_event(db, event_id, changes)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event_endpoint(
    event_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Delete an event. Its bookings are not removed."""
    await event_service.delete_event(db, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
