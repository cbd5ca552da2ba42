"""Domain error codes and exceptions raised by the persistence core."""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Domain error codes."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    DATABASE_UNAVAILABLE = "DATABASE_UNAVAILABLE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    EVENT_REFERENCE_NOT_FOUND = "EVENT_REFERENCE_NOT_FOUND"
    INVALID_ID = "INVALID_ID"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str, code: Optional[ErrorCode] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict:
        return {"code": self.code.value, "message": self.message}


class ConfigurationError(DomainError):
    """Raised at startup when required configuration is missing."""

    code = ErrorCode.CONFIGURATION_ERROR


class DatabaseConnectionError(DomainError):
    """Raised when a connection attempt to MongoDB fails."""

    code = ErrorCode.DATABASE_UNAVAILABLE


class ValidationError(DomainError):
    """Raised when a document fails validation before persistence."""

    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, field: str, message: str) -> None:
        DomainError.__init__(self, message)
        self.field = field

    def to_dict(self) -> dict:
        return {**super().to_dict(), "field": self.field}


class NotFoundError(DomainError):
    """Raised when a document is not found."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, entity: str, identifier: str) -> None:
        DomainError.__init__(self, f"{entity} {identifier} not found")
        self.entity = entity
        self.identifier = identifier


class EventReferenceNotFoundError(ValidationError, NotFoundError):
    """Raised when a booking references an event that does not exist."""

    code = ErrorCode.EVENT_REFERENCE_NOT_FOUND

    def __init__(self, event_id: str) -> None:
        ValidationError.__init__(
            self, "eventId", f"Event with ID {event_id} does not exist"
        )
        self.entity = "Event"
        self.identifier = event_id


class InvalidIdError(ValidationError):
    """Raised when an identifier is not a valid ObjectId."""

    code = ErrorCode.INVALID_ID

    def __init__(self, field: str, value: str) -> None:
        super().__init__(field, f"Invalid ID format: {value!r}")
