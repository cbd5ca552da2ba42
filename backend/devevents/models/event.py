"""
Event document stored in the `events` collection.

Key design decisions:
- `slug` is derived from `title` and carries a unique index (uq_events_slug)
- `date` stays a YYYY-MM-DD string; `time` is free-form ("10:00", "09:00 AM")
- Stored keys are camelCase (`createdAt`, `updatedAt`); attributes are snake_case
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

COLLECTION = "events"

# Text fields that may never be blank once trimmed
REQUIRED_TEXT_FIELDS = (
    "title",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "organizer",
)


class EventMode(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    HYBRID = "hybrid"


class Event(BaseModel):
    id: str = Field(alias="_id")
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: EventMode
    audience: str
    agenda: list[str] = Field(default_factory=list)
    organizer: str
    tags: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_object_id(cls, v):
        return str(v)

    @classmethod
    def from_document(cls, document: dict) -> "Event":
        return cls.model_validate(document)

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, slug={self.slug}, date={self.date})>"
