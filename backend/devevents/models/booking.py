"""
Booking document stored in the `bookings` collection.

Key design decisions:
- `eventId` is a non-owning ObjectId reference to an Event, indexed
  (ix_bookings_event_id) for per-event listings
- Deleting an event leaves its bookings in place
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

COLLECTION = "bookings"


class Booking(BaseModel):
    id: str = Field(alias="_id")
    event_id: str
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("id", "event_id", mode="before")
    @classmethod
    def _stringify_object_id(cls, v):
        return str(v)

    @classmethod
    def from_document(cls, document: dict) -> "Booking":
        return cls.model_validate(document)

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, event={self.event_id}, email={self.email})>"
