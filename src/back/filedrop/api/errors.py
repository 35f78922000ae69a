"""Typed error hierarchy for file operations and its HTTP mapping.

Every error carries the HTTP status it maps to plus structured context
(operation, storage_name) for logging. Messages are safe to show to the
client: they never include filesystem paths or exception text from the OS.
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..observability.logging import get_logger

logger = get_logger(__name__)


class FileDropError(Exception):
    """Base error for all file operations."""

    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        storage_name: str | None = None,
    ):
        self.message = message
        self.operation = operation
        self.storage_name = storage_name
        super().__init__(message)

    def __repr__(self) -> str:
        parts = [f"{type(self).__name__}({self.args[0]!r}"]
        if self.operation:
            parts.append(f"operation={self.operation!r}")
        if self.storage_name:
            parts.append(f"storage_name={self.storage_name!r}")
        return ", ".join(parts) + ")"


class InvalidInputError(FileDropError):
    """A required field is missing or malformed."""

    status_code = 400


class FileNotFound(FileDropError):
    """The referenced storage name does not exist."""

    status_code = 404


class NameConflictError(FileDropError):
    """The target storage name is already taken."""

    status_code = 409


class StorageIOError(FileDropError):
    """Disk or permission failure while touching the storage root."""

    status_code = 500


def error_body(message: str) -> dict:
    return {'success': False, 'message': message}


async def _handle_filedrop_error(request: Request, exc: FileDropError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        'file_operation_failed',
        operation=exc.operation,
        storage_name=exc.storage_name,
        status=exc.status_code,
        error=exc.message,
        exc_info=exc.status_code >= 500,
    )
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unmatched routes and wrong methods get the same body shape as handler failures
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, 'headers', None),
    )


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning('request_validation_failed', path=request.url.path, errors=exc.errors())
    return JSONResponse(status_code=400, content=error_body('Invalid request'))


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    # Runs outside RequestIdMiddleware, after its context var was reset
    rid = getattr(request.state, 'request_id', None)
    log = logger.bind(request_id=rid) if rid else logger
    log.error('unhandled_exception', path=request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=error_body('Internal server error'),
        headers={'X-Request-ID': rid} if rid else None,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Render every handler failure as ``{success: false, message}``.

    Args:
        app: FastAPI application
    """
    app.add_exception_handler(FileDropError, _handle_filedrop_error)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)
