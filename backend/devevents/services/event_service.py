"""
Event service handling CRUD operations.

Every write runs validate_event() first and then issues exactly one
document operation (insert_one / find_one_and_update), so a rejected
event is never partially stored.
"""

from datetime import datetime, timezone
from typing import Any, Mapping, Union

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from devevents.core.errors import NotFoundError, ValidationError
from devevents.core.logging import get_logger
from devevents.core.metrics import record_validation_failure, record_write
from devevents.models.event import COLLECTION, Event
from devevents.schemas.event import EventCreate, EventUpdate
from devevents.services.validators import parse_payload, to_object_id, validate_event

logger = get_logger(__name__)


def _duplicate_slug(slug: str) -> ValidationError:
    record_validation_failure(COLLECTION, "slug")
    logger.warning("event_slug_conflict", slug=slug)
    return ValidationError("slug", f"An event with slug '{slug}' already exists")


async def create_event(
    db: AsyncIOMotorDatabase,
    draft: Union[EventCreate, Mapping[str, Any]],
) -> Event:
    """Validate a new event, derive its slug and insert it."""
    event_data = parse_payload(EventCreate, draft, COLLECTION)
    fields = validate_event(event_data.model_dump(mode="json"), changed=(), is_new=True)

    now = datetime.now(timezone.utc)
    document = {**fields, "createdAt": now, "updatedAt": now}
    try:
        result = await db[COLLECTION].insert_one(document)
    except DuplicateKeyError:
        raise _duplicate_slug(fields["slug"]) from None
    document["_id"] = result.inserted_id

    record_write(COLLECTION, "insert")
    logger.info("event_created", event_id=str(result.inserted_id), slug=fields["slug"])
    return Event.from_document(document)


async def update_event(
    db: AsyncIOMotorDatabase,
    event_id: Union[str, ObjectId],
    changes: Union[EventUpdate, Mapping[str, Any]],
) -> Event:
    """
    Apply a partial update.
    Only fields whose value differs from the stored document are re-validated.
    """
    oid = to_object_id(event_id)
    update_data = parse_payload(EventUpdate, changes, COLLECTION)
    requested = update_data.model_dump(mode="json", exclude_unset=True)
    for name, value in requested.items():
        if value is None:
            raise ValidationError(name, f"{name} is required")

    existing = await db[COLLECTION].find_one({"_id": oid})
    if existing is None:
        raise NotFoundError("Event", str(event_id))

    changed = {name for name, value in requested.items() if existing.get(name) != value}
    if not changed:
        return Event.from_document(existing)

    merged = validate_event({**existing, **requested}, changed=changed, is_new=False)
    update_fields = {name: merged[name] for name in changed}
    if merged.get("slug") != existing.get("slug"):
        update_fields["slug"] = merged["slug"]
    update_fields["updatedAt"] = datetime.now(timezone.utc)

    try:
        document = await db[COLLECTION].find_one_and_update(
            {"_id": oid},
            {"$set": update_fields},
            return_document=ReturnDocument.AFTER,
        )
    except DuplicateKeyError:
        raise _duplicate_slug(merged["slug"]) from None
    if document is None:
        raise NotFoundError("Event", str(event_id))

    record_write(COLLECTION, "update")
    logger.info("event_updated", event_id=str(oid), fields=sorted(changed))
    return Event.from_document(document)


async def get_event(db: AsyncIOMotorDatabase, id_or_slug: str) -> Event:
    """Get a single event by ObjectId or, failing that, by slug."""
    document = None
    if ObjectId.is_valid(id_or_slug):
        document = await db[COLLECTION].find_one({"_id": ObjectId(id_or_slug)})
    if document is None:
        document = await db[COLLECTION].find_one({"slug": id_or_slug})

    if document is None:
        raise NotFoundError("Event", id_or_slug)
    return Event.from_document(document)


async def list_events(
    db: AsyncIOMotorDatabase,
    limit: int = 50,
    skip: int = 0,
) -> list[Event]:
    """List events, newest first."""
    cursor = db[COLLECTION].find().sort("createdAt", DESCENDING).skip(skip).limit(limit)
    return [Event.from_document(document) async for document in cursor]


async def delete_event(db: AsyncIOMotorDatabase, event_id: Union[str, ObjectId]) -> None:
    """Delete an event. Bookings referencing it are left untouched."""
    oid = to_object_id(event_id)
    result = await db[COLLECTION].delete_one({"_id": oid})
    if result.deleted_count == 0:
        raise NotFoundError("Event", str(event_id))

    record_write(COLLECTION, "delete")
    logger.info("event_deleted", event_id=str(oid))
