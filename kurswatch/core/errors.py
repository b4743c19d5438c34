"""Domain exceptions and FastAPI error handlers.

The three failure kinds of the refresh pipeline are kept apart on purpose:
FetchError is transient (retried next tick), CorruptDataError is raised by the
store on load, PersistError means the file and memory have diverged.
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger("kurswatch.errors")


class KursWatchError(Exception):
    """Base class for all application errors."""


class FetchError(KursWatchError):
    """Provider could not deliver usable rates (network, HTTP status, payload)."""


class HttpError(FetchError):
    pass


class CorruptDataError(KursWatchError):
    """Persisted history exists but cannot be parsed."""


class PersistError(KursWatchError):
    """History could not be written to disk."""


def http_error_handler(request: Request, exc):  # type: ignore
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        detail = exc.detail
        if detail == "Not Found":
            detail = f"No route for {request.method} {request.url.path}"
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "not_found", "detail": detail},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "http_error", "detail": exc.detail},
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=422,
        content={
            "error": "validation_error",
            "detail": exc.errors(),
        },
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
