"""
Exception handlers.

Every SparkTasksError reaching the API is rendered as the same JSON body,
{"error": code, "message": ..., "details": {...}}, with the status picked
from the exception's family. Request bodies and parameters FastAPI rejects
use the same body with the VALIDATION_ERROR code.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DecodingError,
    ExternalServiceError,
    NotFoundError,
    SparkTasksError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Checked in order; the first matching family wins
_STATUS_BY_FAMILY: list[tuple[type[SparkTasksError], int]] = [
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (DecodingError, status.HTTP_502_BAD_GATEWAY),
    (ExternalServiceError, status.HTTP_502_BAD_GATEWAY),
]


def status_for(error: SparkTasksError) -> int:
    """HTTP status for an error, 500 for families without a mapping."""
    for family, status_code in _STATUS_BY_FAMILY:
        if isinstance(error, family):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_sparktasks_error(request: Request, exc: SparkTasksError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.code}")

    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=status_code, content=exc.to_dict(), headers=headers)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} rejected: invalid request")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": {"errors": jsonable_encoder(exc.errors())},
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SparkTasksError, handle_sparktasks_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
