"""Maps domain exceptions onto JSON error responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from gradeup.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    DatabaseError,
    GradeUpException,
    InvalidStateError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from gradeup.schemas.common import format_validation_errors

logger = logging.getLogger(__name__)

# Checked in order; subclasses resolve through isinstance.
STATUS_CODES: tuple[tuple[type[GradeUpException], int], ...] = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ValidationError, 400),
    (InvalidStateError, 400),
    (ConflictError, 409),
    (UpstreamError, 502),
    (DatabaseError, 502),
    (ConfigurationError, 500),
)


def status_for(exc: GradeUpException) -> int:
    for exc_type, status_code in STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return 500


def _validation_response(fields: dict[str, list[str]], message: str = "Validation failed") -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message, "fields": fields})


async def handle_domain_error(request: Request, exc: GradeUpException) -> JSONResponse:
    if isinstance(exc, ValidationError):
        return _validation_response(exc.fields, str(exc) or "Validation failed")
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(
            "api.error %s: %s",
            type(exc).__name__,
            exc,
            extra={"event": "api.error"},
        )
        message = str(exc) if isinstance(exc, (UpstreamError, DatabaseError)) else "Internal server error"
        return JSONResponse(status_code=status_code, content={"error": message})
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _validation_response(format_validation_errors(exc.errors()))


async def handle_model_validation(request: Request, exc: PydanticValidationError) -> JSONResponse:
    return _validation_response(format_validation_errors(exc.errors()))


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("api.unhandled_error: %s", exc, extra={"event": "api.unhandled_error"})
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GradeUpException, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(PydanticValidationError, handle_model_validation)
    app.add_exception_handler(Exception, handle_unexpected)
