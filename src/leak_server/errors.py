"""Global exception handlers — map SDK exceptions to HTTP status codes.

SDK errors derive from ``IntakeError`` and carry a client-safe
``user_message``; their status comes from the exception class.  Plain
``ValueError`` (session or lead not found) is mapped by keyword.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from leak_intake.errors import (
    AnalysisInProgress,
    IntakeError,
    NotificationDeliveryError,
    UnsupportedMediaType,
    ValidationError,
)

logger = logging.getLogger(__name__)

# --- SDK exception classes and their HTTP status codes ---
# Checked in order; first isinstance match wins (subclasses first).
_INTAKE_ERROR_STATUS: list[tuple[type[IntakeError], int]] = [
    (UnsupportedMediaType, 415),
    (ValidationError, 422),
    (AnalysisInProgress, 409),
    (NotificationDeliveryError, 502),
]

# --- Keyword patterns in ValueError messages and their HTTP status codes ---
_VALUE_ERROR_PATTERNS: list[tuple[str, int]] = [
    ("already exists", 409),
    ("not found", 404),
]

# --- Client-safe messages keyed by HTTP status code ---
# Internal details (user_id, lead ids) stay in the server log.
_SAFE_MESSAGES: dict[int, str] = {
    404: "Resource not found",
    409: "Resource already exists",
    400: "Invalid request",
}


async def intake_error_handler(request: Request, exc: IntakeError) -> JSONResponse:
    """Map an SDK ``IntakeError`` to its status with the user-facing message."""
    status = 500
    for exc_cls, code in _INTAKE_ERROR_STATUS:
        if isinstance(exc, exc_cls):
            status = code
            break

    logger.warning("%s [%d] at %s: %s", type(exc).__name__, status, request.url, exc)
    return JSONResponse(status_code=status, content={"detail": exc.user_message})


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Map ``ValueError`` to 404/409/400 by message keyword.

    The raw exception message is logged server-side but never sent to the
    client.
    """
    msg = str(exc)
    status = 400
    for pattern, code in _VALUE_ERROR_PATTERNS:
        if pattern in msg.lower():
            status = code
            break

    logger.warning("ValueError [%d] at %s: %s", status, request.url, msg)
    safe_detail = _SAFE_MESSAGES.get(status, "Invalid request")
    return JSONResponse(status_code=status, content={"detail": safe_detail})


async def key_error_handler(request: Request, exc: KeyError) -> JSONResponse:
    """Map ``KeyError`` (e.g. unknown flow name) to 404."""
    logger.warning("KeyError at %s: %s", request.url, exc)
    return JSONResponse(status_code=404, content={"detail": "Resource not found"})


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions — log full traceback, return 500."""
    logger.exception("Unhandled exception at %s", request.url)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )
