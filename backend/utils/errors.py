# backend/utils/errors.py
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from schemas.response import error_response

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base error translated into the uniform error envelope."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthorized(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"


class NotFound(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class MethodNotAllowed(APIError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    default_message = "Method not allowed"


class Conflict(APIError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class UnsupportedMediaType(APIError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    default_message = "Unsupported media type"


class InternalError(APIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"


class NotImplementedYet(APIError):
    status_code = status.HTTP_501_NOT_IMPLEMENTED
    default_message = "Not implemented"


def _first_validation_message(exc: RequestValidationError) -> tuple:
    errors = exc.errors()
    if not errors:
        return "Invalid request", None
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Invalid JSON format", first.get("msg")
    if first.get("type") == "missing":
        fields = [str(e["loc"][-1]) for e in errors if e.get("type") == "missing"]
        return "Missing required fields", f"{', '.join(fields)} required"
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    return "Validation failed", f"{field}: {first.get('msg')}" if field else first.get("msg")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        return error_response(exc.status_code, exc.message, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message, detail = _first_validation_message(exc)
        return error_response(status.HTTP_400_BAD_REQUEST, message, detail)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            error = NotFound("Endpoint not found", "The requested endpoint does not exist")
        elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            error = MethodNotAllowed(detail=f"{request.method} is not allowed for this endpoint")
        else:
            return error_response(exc.status_code, str(exc.detail), None)
        return error_response(error.status_code, error.message, error.detail)

    # Unexpected store failures surface as 500 with the underlying message
    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Store operation failed on %s %s", request.method, request.url.path)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database operation failed", str(exc))

    # Last resort; Starlette runs this outside the middleware stack
    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.default_message, str(exc))
