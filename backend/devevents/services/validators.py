"""
Pre-persist validation for events and bookings.

These run explicitly inside the service write path, before the single
document operation is issued. Nothing here writes to the database.

Update semantics:
  Callers pass the merged document plus the set of fields that actually
  changed. Steps that depend on a field only run when that field changed or
  the document is new, so re-saving an event with the same title keeps its
  slug untouched.
"""

from datetime import date
from typing import Any, Iterable, Mapping, Type, TypeVar

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from slugify import slugify

from devevents.core.errors import (
    EventReferenceNotFoundError,
    InvalidIdError,
    ValidationError,
)
from devevents.core.logging import get_logger
from devevents.core.metrics import record_validation_failure
from devevents.models import event as event_model
from devevents.schemas.event import ISO_DATE_PATTERN

logger = get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _reject(collection: str, field: str, message: str) -> ValidationError:
    record_validation_failure(collection, field)
    logger.warning("validation_failed", collection=collection, field=field, reason=message)
    return ValidationError(field, message)


def parse_payload(schema: Type[SchemaT], data: Any, collection: str) -> SchemaT:
    """Coerce a mapping into `schema`, reporting the first bad field as a ValidationError."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "__root__"
        raise _reject(collection, field, first["msg"]) from exc


def to_object_id(value: Any, field: str = "_id") -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as exc:
        raise InvalidIdError(field, str(value)) from exc


def derive_slug(title: str) -> str:
    """Lowercase, ASCII-only, dash-separated slug; 'My Talk!!' -> 'my-talk'."""
    return slugify(title.strip())


def validate_event(
    fields: Mapping[str, Any],
    changed: Iterable[str],
    is_new: bool,
) -> dict:
    """
    Validate an event document before it is written.

    Returns a copy of `fields` with `slug` (re)derived when the title changed.
    Raises ValidationError naming the first offending field.
    """
    changed = set(changed)
    document = dict(fields)

    def touched(name: str) -> bool:
        return is_new or name in changed

    if touched("title"):
        slug = derive_slug(document.get("title") or "")
        if not slug:
            raise _reject(
                event_model.COLLECTION,
                "title",
                "Title must contain at least one letter or digit",
            )
        document["slug"] = slug

    if touched("date"):
        value = document.get("date") or ""
        if not ISO_DATE_PATTERN.fullmatch(value):
            raise _reject(
                event_model.COLLECTION, "date", "Date must be in ISO format (YYYY-MM-DD)"
            )
        try:
            date.fromisoformat(value)
        except ValueError:
            raise _reject(event_model.COLLECTION, "date", "Invalid date value") from None

    if touched("time"):
        if not (document.get("time") or "").strip():
            raise _reject(event_model.COLLECTION, "time", "Time cannot be empty")

    for name in event_model.REQUIRED_TEXT_FIELDS:
        if not touched(name):
            continue
        value = document.get(name)
        if not isinstance(value, str) or not value.strip():
            raise _reject(event_model.COLLECTION, name, f"{name} cannot be empty")

    return document


async def ensure_event_exists(db: AsyncIOMotorDatabase, event_id: ObjectId) -> None:
    """Fail unless an event with `event_id` exists. Read-only."""
    found = await db[event_model.COLLECTION].find_one({"_id": event_id}, {"_id": 1})
    if found is None:
        record_validation_failure("bookings", "eventId")
        logger.warning("booking_event_missing", event_id=str(event_id))
        raise EventReferenceNotFoundError(str(event_id))
