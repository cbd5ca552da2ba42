"""
Maps domain errors to HTTP responses.

  ValidationError (incl. EventReferenceNotFoundError, InvalidIdError) -> 422
  RequestValidationError (FastAPI body/query parsing)                -> 422
  NotFoundError                                                      -> 404
  DatabaseConnectionError                                            -> 503

Every 4xx body has the same shape: {"detail": {"code", "message", ["field"]}}.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from devevents.core.errors import (
    DatabaseConnectionError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from devevents.core.logging import get_logger
from devevents.core.metrics import record_validation_failure

logger = get_logger(__name__)

# Leading loc entries naming where FastAPI found the value, not the field
_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def _error_response(status_code: int, exc: DomainError) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": exc.to_dict()})


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first schema error as a domain ValidationError."""
    errors = exc.errors()
    first = errors[0] if errors else {"loc": (), "msg": "Invalid request"}
    loc = list(first.get("loc", ()))
    if loc and loc[0] in _REQUEST_LOCATIONS:
        loc = loc[1:]
    field = ".".join(str(part) for part in loc) or "__root__"

    record_validation_failure("request", field)
    logger.warning("request_validation_failed", field=field, reason=first["msg"])
    return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, ValidationError(field, first["msg"]))


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(status.HTTP_404_NOT_FOUND, exc)


async def connection_error_handler(request: Request, exc: DatabaseConnectionError) -> JSONResponse:
    logger.error("database_unavailable", error=exc.message)
    return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, exc)


def register_exception_handlers(app: FastAPI) -> None:
    # Starlette resolves handlers along the exception's MRO, so
    # EventReferenceNotFoundError(ValidationError, NotFoundError) lands on 422.
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(DatabaseConnectionError, connection_error_handler)
