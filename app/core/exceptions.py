"""
Domain error taxonomy and global exception handling for the application.
Every error carries an HTTP status hint and a message that is safe to return
to the caller. Responses use the envelope ``{message, error, errors?}``.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base class for all application exceptions."""

    error = "Internal server error"

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ResourceNotFoundError(AppError):
    """The requested resource does not exist (or is not in the requested state)."""

    error = "Resource not found"

    def __init__(self, resource_name: str = "resource", details: Optional[Dict[str, Any]] = None):
        self.resource_name = resource_name
        super().__init__(f"The {resource_name} was not found", status.HTTP_404_NOT_FOUND, details)


class EmailAlreadyTakenError(AppError):
    """The email address belongs to another account, active or soft-deleted."""

    error = "Email already taken"

    def __init__(self, email: str):
        self.email = email
        super().__init__(
            f"The email {email} is already taken",
            status.HTTP_409_CONFLICT,
            {"email": email},
        )


class BadRequestError(AppError):
    """Malformed input or a request the current resource state does not allow."""

    error = "Bad request"

    def __init__(self, message: str = "The request data is not valid", errors: Optional[List[Any]] = None):
        self.errors = errors
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class UnauthorizedError(AppError):
    """Authentication failure error."""

    error = "Unauthorized"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class ForbiddenError(AppError):
    """Authorization failure error."""

    error = "Forbidden"

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class ResourceNotModifiedError(AppError):
    """A write that was expected to touch exactly one row did not."""

    error = "Internal server error"

    def __init__(self, message: str):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


class InternalServerError(AppError):
    """Catch-all for unexpected storage failures."""

    error = "Internal server error"

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


class PoolExhaustedError(AppError):
    """No database connection became available within the pool timeout."""

    error = "Service unavailable"

    def __init__(self, message: str = "The service is busy, please try again later"):
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)


@contextmanager
def storage_errors(message: str, log=None) -> Iterator[None]:
    """Translate raw storage failures raised inside the block.

    Domain errors pass through unchanged. ``SQLAlchemyError`` is logged with
    full detail and re-raised as ``InternalServerError(message)`` so driver
    text never reaches the caller.
    """
    try:
        yield
    except AppError:
        raise
    except SQLAlchemyError as exc:
        (log or logger).error(message, error=str(exc), error_type=exc.__class__.__name__, exc_info=True)
        raise InternalServerError(message) from exc


def error_body(exc: AppError) -> Dict[str, Any]:
    body: Dict[str, Any] = {"message": exc.message, "error": exc.error}
    errors = getattr(exc, "errors", None)
    if errors:
        body["errors"] = errors
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render a domain error with the status it carries."""
    logger.info(
        "Request rejected",
        path=request.url.path,
        status_code=exc.status_code,
        error=exc.error,
    )
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render pydantic request validation failures as a bad request."""
    errors = [
        {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(BadRequestError(errors=errors)),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""

    if isinstance(exc, AppError):
        return await app_error_handler(request, exc)

    logger.exception("Unexpected error occurred", path=request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "message": "An unexpected error occurred. Please try again later.",
            "error": "Internal server error",
        },
    )


def setup_exception_handlers(app) -> None:
    """Register the error envelope handlers on the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
