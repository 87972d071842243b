"""
Error taxonomy and the JSON error envelope.

Every error leaves the API as ``{"message": ..., "error"?: ..., "code"?: ...}``
with the HTTP status carrying the category.
"""
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from evaltrack.core.logging_config import get_logger

logger = get_logger(__name__)


class EvalTrackError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "An internal server error occurred"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None,
                 code: Optional[str] = None, headers: Optional[dict] = None):
        self.message = message or self.default_message
        self.error = error
        self.code = code
        super().__init__(status_code=self.status_code, detail=self.message, headers=headers)


class ValidationError(EvalTrackError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class InvalidReference(ValidationError):
    """A foreign key in the payload points at a record that does not exist"""
    default_message = "Invalid reference"


class AuthenticationRequired(EvalTrackError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class AuthorizationDenied(EvalTrackError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(EvalTrackError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(EvalTrackError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class UpstreamStoreError(EvalTrackError):
    default_message = "Database error"


def error_body(message: str, error: Optional[str] = None, code: Optional[str] = None) -> dict:
    body = {"message": message}
    if error is not None:
        body["error"] = error
    if code is not None:
        body["code"] = code
    return body


def classify_integrity_error(exc: IntegrityError) -> EvalTrackError:
    """Map a driver-level constraint failure onto the taxonomy."""
    text = str(getattr(exc, "orig", exc)).lower()
    pgcode = getattr(getattr(exc, "orig", None), "pgcode", None)
    if pgcode == "23505" or "unique" in text:
        return Conflict("A record with these values already exists", error=str(exc.orig), code="UNIQUE_VIOLATION")
    if pgcode == "23503" or "foreign key" in text:
        return InvalidReference("Invalid reference to a related record", error=str(exc.orig), code="FOREIGN_KEY_VIOLATION")
    return UpstreamStoreError(error=str(exc.orig), code="INTEGRITY_ERROR")


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if isinstance(exc, EvalTrackError):
            content = error_body(exc.message, exc.error, exc.code)
        else:
            content = error_body(str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid value for '{field}': {first.get('msg')}" if field else "Invalid request payload"
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(message, error=str(errors), code="VALIDATION_ERROR"),
        )

    @app.exception_handler(IntegrityError)
    async def integrity_exception_handler(request: Request, exc: IntegrityError):
        mapped = classify_integrity_error(exc)
        logger.warning(f"Integrity error on {request.method} {request.url.path}: {mapped.code}")
        return JSONResponse(status_code=mapped.status_code, content=error_body(mapped.message, mapped.error, mapped.code))

    @app.exception_handler(SQLAlchemyError)
    async def store_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Database error", error=str(exc), code="STORE_ERROR"),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("An internal server error occurred", error=str(exc)),
        )
