"""Error Handlers — map onboarding exceptions onto the JSON error envelope.

Invariants:
    - StorageError keeps its operation code at every status; the body adds whether
      a retry can help (backend outages only) and the failing field path of
      unreadable stored data
    - Rejected caller input (4xx) is logged at WARNING, outages (5xx) at ERROR
    - Request schema failures → 400 VALIDATION_ERROR with one entry per bad field
    - Anything else → 500 INTERNAL_ERROR without exception details

Design Decisions:
    - StorageError gets its own handler: Starlette dispatches on the most specific
      class in the MRO, so OnboardingError stays the fallback for config and 404 errors
    - The body is the error's own to_response() envelope plus extras, so clients that
      only read code and message are unaffected
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from onboarding.core.errors import (
    DeserializationError, ErrorCategory, ErrorSeverity, OnboardingError,
    RecordValidationError, StorageError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Install the onboarding exception handlers on `app`."""
    app.add_exception_handler(StorageError, handle_storage_error)
    app.add_exception_handler(OnboardingError, handle_onboarding_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


# ─── Storage ─────────────────────────────────────────────────────

def _codec_failure(exc: StorageError) -> DeserializationError | None:
    """The codec failure behind `exc`, whether raised directly or as the cause."""
    for candidate in (exc, exc.original_error):
        if isinstance(candidate, DeserializationError):
            return candidate
    return None


def storage_error_body(exc: StorageError) -> dict:
    body = exc.to_response()
    error = body["error"]
    codec_failure = _codec_failure(exc)
    # Only backend outages can clear on their own
    error["retryable"] = not exc.is_caller_error and codec_failure is None
    if codec_failure is not None and codec_failure.field:
        error["field"] = codec_failure.field
    return body


async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
    cause = type(exc.original_error).__name__ if exc.original_error else None
    log = logger.warning if exc.is_caller_error else logger.error
    log(
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "store": exc.context.store,
            "key": exc.context.key,
            "cause": cause,
            "status": exc.http_status,
            "path": request.url.path,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=storage_error_body(exc))


# ─── Domain ──────────────────────────────────────────────────────

async def handle_onboarding_error(request: Request, exc: OnboardingError) -> JSONResponse:
    """Config, not-found and request-payload errors."""
    body = exc.to_response()
    if isinstance(exc, RecordValidationError):
        body["error"]["field"] = exc.field
    log = logger.warning if exc.http_status < 500 else logger.error
    log(
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code, "status": exc.http_status, "path": request.url.path,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=body)


# ─── Request Validation ──────────────────────────────────────────

async def handle_request_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Rejected request body on {request.url.path}",
        extra={"fields": [d["field"] for d in details], "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.ERROR.value,
                "details": details,
            },
        },
    )


# ─── Fallback ────────────────────────────────────────────────────

async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )
