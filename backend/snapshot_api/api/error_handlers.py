"""Error Handlers — global exception handlers for the snapshot API.

Invariants:
    - SnapshotApiError → {"error": message} with the error's http_status
    - RequestValidationError → 400 with "Invalid request: ..." plus field details
    - An unparseable JSON body with no credential held answers 401, the same
      as a well-formed body (the credential gate comes before the body)
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (SnapshotApiError), validation (Pydantic), catch-all (Exception)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from snapshot_api.api.dependencies import get_credential_store
from snapshot_api.core.errors import (
    ErrorSeverity, NotLoggedInError, SnapshotApiError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_snapshot_api_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_snapshot_api_error_handler(app: FastAPI) -> None:

    @app.exception_handler(SnapshotApiError)
    async def snapshot_api_error_handler(
        request: Request, exc: SnapshotApiError,
    ):
        """Handle all domain/upstream errors."""
        return _snapshot_api_error_response(request, exc)


def _snapshot_api_error_response(
    request: Request, exc: SnapshotApiError,
) -> JSONResponse:
    level = (
        logging.ERROR if exc.http_status >= 500 else logging.WARNING
    )
    logger.log(
        level,
        f"{type(exc).__name__}: {exc.message}",
        extra={**exc.log_extra(), "path": request.url.path},
    )
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(),
    )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors (malformed JSON, missing fields, bad query)."""
        if _is_json_decode_error(exc) and not _has_credential(request):
            return _snapshot_api_error_response(request, NotLoggedInError())
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all; never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "An unexpected error occurred",
                "severity": ErrorSeverity.CRITICAL.value,
            },
        )


def _is_json_decode_error(exc: RequestValidationError) -> bool:
    return any(e["type"] == "json_invalid" for e in exc.errors())


def _has_credential(request: Request) -> bool:
    """Consult the same store the route dependencies would (overrides included)."""
    provider = request.app.dependency_overrides.get(
        get_credential_store, get_credential_store,
    )
    return provider().get() is not None


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    summary = "; ".join(f"{d['field']}: {d['message']}" for d in details)
    return {"error": f"Invalid request: {summary}", "details": details}
