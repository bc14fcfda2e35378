"""Exception handlers for the FastAPI application.

Every error leaves the API as `{"error": {"message", "status_code", "details"}}`.
Range and prerequisite failures keep their field-level details so clients
can point the user at the offending input.
"""

from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import AppException, InputRangeError, MissingPrerequisiteError
from core.logger import get_logger

logger = get_logger("core.error_handlers")


def create_error_response(
    message: str,
    status_code: int = 500,
    details: Optional[dict] = None,
    request_id: Optional[str] = None,
) -> JSONResponse:
    """Build the uniform error body.

    Args:
        message: Error message.
        status_code: HTTP status code.
        details: Optional error details dictionary.
        request_id: Echoed from the `X-Request-ID` header when present.
    """
    error_body = {"error": {"message": message, "status_code": status_code}}
    if details:
        error_body["error"]["details"] = details
    if request_id:
        error_body["error"]["request_id"] = request_id
    return JSONResponse(status_code=status_code, content=error_body)


def _request_id(request: Request) -> Optional[str]:
    return request.headers.get("x-request-id")


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle domain exceptions.

    Input errors are the caller's fault and log at INFO; everything else
    logs at WARNING.
    """
    level = logger.info if isinstance(exc, (InputRangeError, MissingPrerequisiteError)) else logger.warning
    level("%s: %s [%s %s]", type(exc).__name__, exc.message, request.method, request.url.path)
    return create_error_response(exc.message, exc.status_code, exc.details, _request_id(request))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request-body schema errors (wrong types, unknown enum values)."""
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.info("Request validation failed on %s %s: %s", request.method, request.url.path, errors)
    return create_error_response(
        "Validation error",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        {"validation_errors": errors},
        _request_id(request),
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return create_error_response(
        "A database error occurred",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"type": "database_error"},
        _request_id(request),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return create_error_response(
        "An internal server error occurred",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"type": "internal_error"},
        _request_id(request),
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    logger.info("Exception handlers registered")
