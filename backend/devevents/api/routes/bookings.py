"""
Booking endpoints. A booking can only be created for an existing event.
"""

from fastapi import APIRouter, Depends, Response, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from devevents.db.connection import get_database
from devevents.models.booking import Booking
from devevents.schemas.booking import BookingCreate, BookingUpdate
from devevents.services import booking_service

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=Booking, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(
    booking_data: BookingCreate,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Book a spot at an event.

    Returns 422 if the referenced event does not exist. The email is stored
    trimmed and lowercased.
    """
    return await booking_service.create_booking(db, booking_data)


@router.get("/events/{event_id}", response_model=list[Booking])
async def list_event_bookings_endpoint(
    event_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await booking_service.list_bookings_for_event(db, event_id)


@router.get("/{booking_id}", response_model=Booking)
async def get_booking_endpoint(
    booking_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await booking_service.get_booking(db, booking_id)


@router.patch("/{booking_id}", response_model=Booking)
async def update_booking_endpoint(
    booking_id: str,
    changes: BookingUpdate,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await booking_service.update_booking(db, booking_id, changes)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking_endpoint(
    booking_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    await booking_service.delete_booking(db, booking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
