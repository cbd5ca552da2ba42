"""
Pydantic schemas for booking-related request validation.
"""

import re
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Deliberately loose: local@domain.tld with no whitespace or extra '@'
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Please provide a valid email address")
    return value


class BookingCreate(BaseModel):
    event_id: str = Field(..., alias="eventId")
    email: str

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        return normalize_email(v)


class BookingUpdate(BaseModel):
    event_id: Optional[str] = Field(None, alias="eventId")
    email: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return normalize_email(v) if v is not None else v
