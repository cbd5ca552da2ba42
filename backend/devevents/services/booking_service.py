"""
Booking service.

REFERENTIAL INTEGRITY
=====================

A booking points at an event by ObjectId. MongoDB has no foreign keys, so
before a booking is inserted, or its eventId changed, the service reads the
events collection (ensure_event_exists) and only issues the write once that
read has come back positive.

What this does NOT cover:
  - An event deleted between the check and the insert. There is no
    multi-document transaction; the window is accepted.
  - Bookings left behind when an event is deleted later. No cascade.
"""

from datetime import datetime, timezone
from typing import Any, Mapping, Union

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument

from devevents.core.errors import NotFoundError, ValidationError
from devevents.core.logging import get_logger
from devevents.core.metrics import record_write
from devevents.models.booking import COLLECTION, Booking
from devevents.schemas.booking import BookingCreate, BookingUpdate
from devevents.services.validators import ensure_event_exists, parse_payload, to_object_id

logger = get_logger(__name__)


async def create_booking(
    db: AsyncIOMotorDatabase,
    draft: Union[BookingCreate, Mapping[str, Any]],
) -> Booking:
    """Insert a booking after confirming its event exists."""
    booking_data = parse_payload(BookingCreate, draft, COLLECTION)
    event_oid = to_object_id(booking_data.event_id, "eventId")

    await ensure_event_exists(db, event_oid)

    now = datetime.now(timezone.utc)
    document = {
        "eventId": event_oid,
        "email": booking_data.email,
        "createdAt": now,
        "updatedAt": now,
    }
    result = await db[COLLECTION].insert_one(document)
    document["_id"] = result.inserted_id

    record_write(COLLECTION, "insert")
    logger.info(
        "booking_created",
        booking_id=str(result.inserted_id),
        event_id=str(event_oid),
    )
    return Booking.from_document(document)


async def update_booking(
    db: AsyncIOMotorDatabase,
    booking_id: Union[str, ObjectId],
    changes: Union[BookingUpdate, Mapping[str, Any]],
) -> Booking:
    """Update email and/or eventId; a new eventId is checked like an insert."""
    oid = to_object_id(booking_id)
    update_data = parse_payload(BookingUpdate, changes, COLLECTION)
    requested = update_data.model_dump(by_alias=True, exclude_unset=True)
    for name, value in requested.items():
        if value is None:
            raise ValidationError(name, f"{name} is required")
    if "eventId" in requested:
        requested["eventId"] = to_object_id(requested["eventId"], "eventId")

    existing = await db[COLLECTION].find_one({"_id": oid})
    if existing is None:
        raise NotFoundError("Booking", str(booking_id))

    changed = {name: value for name, value in requested.items() if existing.get(name) != value}
    if not changed:
        return Booking.from_document(existing)

    if "eventId" in changed:
        await ensure_event_exists(db, changed["eventId"])

    document = await db[COLLECTION].find_one_and_update(
        {"_id": oid},
        {"$set": {**changed, "updatedAt": datetime.now(timezone.utc)}},
        return_document=ReturnDocument.AFTER,
    )
    if document is None:
        raise NotFoundError("Booking", str(booking_id))

    record_write(COLLECTION, "update")
    logger.info("booking_updated", booking_id=str(oid), fields=sorted(changed))
    return Booking.from_document(document)


async def get_booking(db: AsyncIOMotorDatabase, booking_id: Union[str, ObjectId]) -> Booking:
    """Get a single booking by ID."""
    oid = to_object_id(booking_id)
    document = await db[COLLECTION].find_one({"_id": oid})
    if document is None:
        raise NotFoundError("Booking", str(booking_id))
    return Booking.from_document(document)


async def list_bookings_for_event(
    db: AsyncIOMotorDatabase,
    event_id: Union[str, ObjectId],
) -> list[Booking]:
    """All bookings for an event, oldest first. Uses ix_bookings_event_id."""
    event_oid = to_object_id(event_id, "eventId")
    cursor = db[COLLECTION].find({"eventId": event_oid}).sort("createdAt", ASCENDING)
    return [Booking.from_document(document) async for document in cursor]


async def delete_booking(db: AsyncIOMotorDatabase, booking_id: Union[str, ObjectId]) -> None:
    oid = to_object_id(booking_id)
    result = await db[COLLECTION].delete_one({"_id": oid})
    if result.deleted_count == 0:
        raise NotFoundError("Booking", str(booking_id))

    record_write(COLLECTION, "delete")
    logger.info("booking_deleted", booking_id=str(oid))
