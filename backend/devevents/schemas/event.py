"""
Pydantic schemas for event-related request validation.
"""

import re
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from devevents.models.event import EventMode

# Checked on the raw input: `date` is not trimmed, so " 2026-10-25 " fails
ISO_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def _check_date_format(value):
    if isinstance(value, str) and not ISO_DATE_PATTERN.fullmatch(value):
        raise ValueError("Date must be in ISO format (YYYY-MM-DD)")
    return value


class EventCreate(BaseModel):
    title: str = Field(..., min_length=3)
    description: str = Field(..., min_length=10)
    overview: str = Field(..., min_length=10)
    image: str
    venue: str
    location: str
    date: str = Field(..., examples=["2026-10-25"])
    time: str = Field(..., examples=["09:00 AM"])
    mode: EventMode
    audience: str = Field(..., min_length=1)
    agenda: list[str] = Field(default_factory=list)
    organizer: str
    tags: list[str] = Field(default_factory=list)

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    @field_validator("date", mode="before")
    @classmethod
    def _raw_date_format(cls, v):
        return _check_date_format(v)


class EventUpdate(BaseModel):
    """Partial update; only fields present in the payload are applied."""

    title: Optional[str] = Field(None, min_length=3)
    description: Optional[str] = Field(None, min_length=10)
    overview: Optional[str] = Field(None, min_length=10)
    image: Optional[str] = None
    venue: Optional[str] = None
    location: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    mode: Optional[EventMode] = None
    audience: Optional[str] = Field(None, min_length=1)
    agenda: Optional[list[str]] = None
    organizer: Optional[str] = None
    tags: Optional[list[str]] = None

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    @field_validator("date", mode="before")
    @classmethod
    def _raw_date_format(cls, v):
        return _check_date_format(v)
