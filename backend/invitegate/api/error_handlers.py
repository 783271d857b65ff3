"""Error Handlers — global exception handlers for the InviteGate API.

Invariants:
    - InviteGateError → its own envelope and http_status
    - RequestValidationError → 400 VALIDATION_ERROR with one detail per field
    - Exception (catch-all) → 500 INTERNAL_ERROR, traceback logged, never returned
    - Every envelope has the same top-level shape: {"error": {code, message, ...}}

Design Decisions:
    - Three-layer handler: domain (InviteGateError), validation (Pydantic), catch-all (Exception)
    - 4xx domain errors log at WARNING, upstream/internal failures at ERROR
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from invitegate.core.errors import ErrorCategory, ErrorSeverity, InviteGateError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InviteGateError, handle_invitegate_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_invitegate_error(request: Request, exc: InviteGateError) -> JSONResponse:
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level,
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "method": request.method,
            "status_code": exc.http_status,
            "identity": exc.context.identity,
            "invite_code": exc.context.invite_code,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [_field_detail(e) for e in exc.errors()]
    logger.warning(
        f"Rejected {request.method} {request.url.path}: "
        + ", ".join(f"{d['field']} ({d['type']})" for d in details),
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    body = _envelope(
        "VALIDATION_ERROR", "Invalid request data",
        ErrorCategory.VALIDATION, ErrorSeverity.ERROR,
    )
    body["error"]["details"] = details
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: the client only ever sees a generic message."""
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "Server error",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def _envelope(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }


def _field_detail(error: dict) -> dict:
    # drop the "body"/"query" root so clients see the field they sent
    loc = [str(part) for part in error["loc"]]
    if len(loc) > 1 and loc[0] in ("body", "query", "path"):
        loc = loc[1:]
    return {"field": ".".join(loc), "message": error["msg"], "type": error["type"]}
