"""Translate tracker errors into HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from tracker.errors import (
    DatabaseError,
    ErrorCode,
    InvalidInputError,
    TrackerError,
    summarize_validation_errors,
)

logger = logging.getLogger(__name__)

HTTP_STATUS = {
    ErrorCode.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_COLOR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NO_UPDATE_FIELDS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.USER_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.DB_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.HASH_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(error: TrackerError) -> JSONResponse:
    return JSONResponse(
        status_code=HTTP_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content=error.to_dict(),
    )


async def tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
    if HTTP_STATUS.get(exc.code, 500) >= 500:
        logger.error(f"{exc.code.value} on {request.method} {request.url.path}: {exc.message}")
    return error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        InvalidInputError(details=summarize_validation_errors(exc.errors()))
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"Database error on {request.method} {request.url.path}")
    return error_response(DatabaseError())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(TrackerError())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TrackerError, tracker_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
