"""
Error taxonomy and the FastAPI handlers that turn it into JSON responses.

Every failure leaves the service as ``{"message": ...}``; validation failures
also carry an ``errors`` list with one entry per violated rule.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

# Status used by the public API for rejected input
HTTP_411_INPUT_ERROR = status.HTTP_411_LENGTH_REQUIRED


class AppError(Exception):
    """Base class for errors that map to a client-visible response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message}


class ValidationError(AppError):
    status_code = HTTP_411_INPUT_ERROR
    message = "Error in inputs"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, status_code)
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "errors": self.errors}


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "You are not logged in"


class OwnershipError(AppError):
    # Deliberately the same response whether the row is foreign or missing
    status_code = status.HTTP_403_FORBIDDEN
    message = "You don't own this content or it doesn't exist"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class IntegrityError(AppError):
    """A reference points at a row that no longer exists."""

    status_code = HTTP_411_INPUT_ERROR
    message = "Referenced record is missing"


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Server error"


def _format_validation_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    return [
        {
            "loc": [str(part) for part in err.get("loc", ()) if part != "body"],
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, IntegrityError):
        logger.error(
            f"Referential integrity fault on {request.method} {request.url.path}: {exc.message}"
        )
    elif exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    error = ValidationError(errors=_format_validation_errors(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        f"Store failure on {request.method} {request.url.path}: {exc.__class__.__name__}",
        exc_info=exc,
    )
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        f"Unhandled error on {request.method} {request.url.path}", exc_info=exc
    )
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
