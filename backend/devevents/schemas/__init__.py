from devevents.schemas.event import EventCreate, EventUpdate
from devevents.schemas.booking import BookingCreate, BookingUpdate

__all__ = [
    "EventCreate", "EventUpdate",
    "BookingCreate", "BookingUpdate",
]
